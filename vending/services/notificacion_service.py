"""Recordatorios de recolección y resumen del tablero.

Para cada máquina activa se toma como referencia la última recolección
(o, si nunca se recolectó, la fecha de instalación) y se compara con los
días estimados entre visitas:

- ``porcentaje = dias_transcurridos / dias_estimados × 100`` (sin tope,
  un valor > 100 indica cuánto se atrasó la visita)
- prioridad ``alta`` desde 100%, ``media`` desde 75%, si no ``baja``
- solo se notifica desde 50%
"""
from __future__ import annotations

import datetime
from typing import Dict, Iterable, List

from vending.constants import (
    DASHBOARD_TOP_MACHINES,
    DEFAULT_DIAS_RECOLECCION,
    PRIORITY_ORDER,
    REMINDER_HIGH_PERCENT,
    REMINDER_MEDIUM_PERCENT,
    REMINDER_MIN_PERCENT,
)
from vending.enums import Prioridad, TipoMaquina
from vending.schemas.vending_schemas import Lugar, Maquina, NotificacionRecoleccion
from vending.services.lugar_service import LugarService
from vending.services.maquina_service import MaquinaService
from vending.services.recoleccion_service import RecoleccionService
from vending.utils.calculations import round_money
from vending.utils.dates import days_between, parse_iso, utc_now


def prioridad_para(porcentaje: float) -> Prioridad:
    if porcentaje >= REMINDER_HIGH_PERCENT:
        return Prioridad.alta
    if porcentaje >= REMINDER_MEDIUM_PERCENT:
        return Prioridad.media
    return Prioridad.baja


def fecha_referencia(maquina: Maquina) -> datetime.datetime | None:
    return parse_iso(maquina.fecha_ultima_recoleccion) or parse_iso(maquina.fecha_instalacion)


def progreso_maquina(maquina: Maquina, now: datetime.datetime | None = None) -> dict | None:
    """Días transcurridos, estimados, restantes y porcentaje del ciclo."""
    referencia = fecha_referencia(maquina)
    if referencia is None:
        return None
    now = now or utc_now()
    dias = max(days_between(referencia, now), 0)
    estimados = maquina.dias_recoleccion_estimados or DEFAULT_DIAS_RECOLECCION
    porcentaje = dias / estimados * 100
    return {
        "dias_transcurridos": dias,
        "dias_estimados": estimados,
        "dias_restantes": estimados - dias,
        "porcentaje": round_money(porcentaje),
        "prioridad": prioridad_para(porcentaje),
    }


def _ubicacion(maquina: Maquina, lugares: Dict[str, Lugar]) -> str:
    lugar = lugares.get(maquina.lugar_id)
    if lugar is None:
        return ""
    return lugar.nombre or lugar.direccion


def calcular_notificaciones(
    maquinas: Iterable[Maquina],
    lugares: Dict[str, Lugar],
    now: datetime.datetime | None = None,
) -> List[NotificacionRecoleccion]:
    now = now or utc_now()
    notificaciones = []
    for maquina in maquinas:
        if not maquina.activa:
            continue
        progreso = progreso_maquina(maquina, now)
        if progreso is None or progreso["porcentaje"] < REMINDER_MIN_PERCENT:
            continue
        notificaciones.append(
            NotificacionRecoleccion(
                maquina_id=maquina.id,
                maquina_nombre=maquina.nombre,
                ubicacion=_ubicacion(maquina, lugares),
                dias_desde_ultima_recoleccion=progreso["dias_transcurridos"],
                dias_estimados=progreso["dias_estimados"],
                porcentaje=progreso["porcentaje"],
                prioridad=progreso["prioridad"],
            )
        )
    notificaciones.sort(
        key=lambda n: (PRIORITY_ORDER[n.prioridad.value], n.dias_desde_ultima_recoleccion),
        reverse=True,
    )
    return notificaciones


def get_notificaciones(
    user_id: str,
    now: datetime.datetime | None = None,
) -> List[NotificacionRecoleccion]:
    lugares = {lugar.id: lugar for lugar in LugarService.list_lugares(user_id)}
    return calcular_notificaciones(MaquinaService.list_maquinas(user_id), lugares, now)


def resumen_dashboard(user_id: str, now: datetime.datetime | None = None) -> dict:
    """
    Datos del tablero principal.

    Retorna:
        Dict con conteos de máquinas, recordatorios pendientes, ingresos
        del mes, ingresos de los últimos 7 días por día y las máquinas
        más próximas a recolección.
    """
    now = now or utc_now()
    maquinas = MaquinaService.list_maquinas(user_id)
    lugares = {lugar.id: lugar for lugar in LugarService.list_lugares(user_id)}
    recolecciones = RecoleccionService.list_recolecciones(user_id)
    notificaciones = calcular_notificaciones(maquinas, lugares, now)

    ingresos_mes = 0.0
    recolecciones_mes = 0
    hoy = now.date()
    por_dia = {hoy - datetime.timedelta(days=offset): 0.0 for offset in range(6, -1, -1)}
    for recoleccion in recolecciones:
        fecha = parse_iso(recoleccion.fecha)
        if fecha is None:
            continue
        netos = recoleccion.ingresos_netos or 0.0
        if fecha.year == now.year and fecha.month == now.month:
            ingresos_mes += netos
            recolecciones_mes += 1
        if fecha.date() in por_dia:
            por_dia[fecha.date()] += netos

    proximas = []
    for maquina in maquinas:
        if not maquina.activa:
            continue
        progreso = progreso_maquina(maquina, now)
        if progreso is None:
            continue
        proximas.append(
            {
                "maquina_id": maquina.id,
                "nombre": maquina.nombre,
                "ubicacion": _ubicacion(maquina, lugares),
                "porcentaje": progreso["porcentaje"],
                "dias_restantes": progreso["dias_restantes"],
                "prioridad": progreso["prioridad"].value,
            }
        )
    proximas.sort(key=lambda item: item["porcentaje"], reverse=True)

    return {
        "total_maquinas": len(maquinas),
        "maquinas_activas": sum(1 for m in maquinas if m.activa),
        "pelucheras": sum(1 for m in maquinas if m.tipo == TipoMaquina.peluchera),
        "chicleras": sum(1 for m in maquinas if m.tipo == TipoMaquina.chiclera),
        "total_lugares": len(lugares),
        "pendientes": len(notificaciones),
        "urgentes": sum(1 for n in notificaciones if n.prioridad == Prioridad.alta),
        "ingresos_mes": round_money(ingresos_mes),
        "recolecciones_mes": recolecciones_mes,
        "ingresos_semana": [
            {"fecha": dia.isoformat(), "ingresos": round_money(total)}
            for dia, total in por_dia.items()
        ],
        "proximas": proximas[:DASHBOARD_TOP_MACHINES],
    }
