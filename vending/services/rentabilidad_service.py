"""Servicio de Rentabilidad.

Calcula, para cada máquina y período, ingresos, costos y margen a partir
de las recolecciones y los costos de insumos. No se persiste: se recalcula
en cada consulta.

Costos de una máquina en el período:

- Costos de recolección: suma de los costos ad-hoc de cada visita.
- Costos de productos: por cada línea vendida, cantidad × costo unitario
  de los insumos relacionados con ese compartimento. Un insumo sin
  productos relacionados aplica a todas las máquinas de su tipo.
"""
from __future__ import annotations

import datetime
from typing import Iterable, List

from openpyxl.workbook import Workbook

from vending.constants import DEFAULT_REPORT_DAYS
from vending.schemas.vending_schemas import (
    CostoInsumo,
    Maquina,
    Periodo,
    Recoleccion,
    Rentabilidad,
)
from vending.services.costo_service import CostoService
from vending.services.errors import ServiceError
from vending.services.maquina_service import MaquinaService
from vending.services.recoleccion_service import RecoleccionService
from vending.utils.calculations import round_money
from vending.utils.dates import parse_iso, parse_range_end, to_iso, utc_now
from vending.utils.exports import (
    INTEGER_FORMAT,
    MONEY_FORMAT,
    PERCENT_FORMAT,
    add_data_rows,
    auto_adjust_column_widths,
    create_excel_workbook,
    style_header_row,
)

REPORT_COLUMNS = [
    "Máquina",
    "Tipo",
    "Recolecciones",
    "Ingresos netos",
    "Costos de recolección",
    "Costos de productos",
    "Costos totales",
    "Ganancia neta",
    "Margen %",
]
REPORT_FORMATS = {
    3: INTEGER_FORMAT,
    4: MONEY_FORMAT,
    5: MONEY_FORMAT,
    6: MONEY_FORMAT,
    7: MONEY_FORMAT,
    8: MONEY_FORMAT,
    9: PERCENT_FORMAT,
}


def resolver_periodo(
    inicio: str | None,
    fin: str | None,
    now: datetime.datetime | None = None,
) -> tuple[datetime.datetime, datetime.datetime]:
    """
    Convierte los parámetros ``inicio``/``fin`` en un rango de fechas.

    Por defecto: últimos 30 días hasta ahora. Sin ``inicio`` el período son
    los 30 días previos a ``fin``. Un ``fin`` sin hora incluye todo ese día.
    """
    now = now or utc_now()
    fecha_fin = parse_range_end(fin) if fin else now
    if fecha_fin is None:
        raise ServiceError("Fecha fin inválida")
    if inicio:
        fecha_inicio = parse_iso(inicio)
        if fecha_inicio is None:
            raise ServiceError("Fecha inicio inválida")
    else:
        fecha_inicio = fecha_fin - datetime.timedelta(days=DEFAULT_REPORT_DAYS)
    if fecha_inicio > fecha_fin:
        raise ServiceError("La fecha de inicio debe ser anterior a la fecha fin")
    return fecha_inicio, fecha_fin


def costos_relacionados(
    costos: Iterable[CostoInsumo],
    maquina: Maquina,
    compartimento_id: str,
) -> List[CostoInsumo]:
    relacionados = []
    for costo in costos:
        if not costo.productos_relacionados:
            if costo.tipo_maquina == maquina.tipo:
                relacionados.append(costo)
        elif costo.relacionado_con(maquina.id, compartimento_id):
            relacionados.append(costo)
    return relacionados


def costo_unitario_promedio(relacionados: List[CostoInsumo]) -> float:
    """
    Costo por pieza de un conjunto de insumos.

    Se prefiere el promedio de ``costoPorUnidad``; si ninguno lo tiene,
    ``Σ costoTotal / Σ cantidad`` (0 si no hay cantidad).
    """
    por_unidad = [c.costo_por_unidad for c in relacionados if c.costo_por_unidad]
    if por_unidad:
        return sum(por_unidad) / len(por_unidad)
    total = sum(c.costo_total for c in relacionados)
    cantidad = sum(c.cantidad for c in relacionados)
    return total / cantidad if cantidad > 0 else 0.0


def calcular_rentabilidad(
    maquina: Maquina,
    recolecciones: Iterable[Recoleccion],
    costos: List[CostoInsumo],
    fecha_inicio: datetime.datetime,
    fecha_fin: datetime.datetime,
) -> Rentabilidad:
    en_periodo = []
    for recoleccion in recolecciones:
        if recoleccion.maquina_id != maquina.id:
            continue
        fecha = parse_iso(recoleccion.fecha)
        if fecha is not None and fecha_inicio <= fecha <= fecha_fin:
            en_periodo.append(recoleccion)

    ingresos = sum(
        r.ingresos_netos if r.ingresos_netos is not None else r.ingresos for r in en_periodo
    )
    costos_recoleccion = sum(r.total_costos for r in en_periodo)

    costos_productos = 0.0
    for recoleccion in en_periodo:
        for venta in recoleccion.productos_vendidos:
            relacionados = costos_relacionados(costos, maquina, venta.compartimento_id)
            if relacionados:
                costos_productos += venta.cantidad * costo_unitario_promedio(relacionados)

    costos_totales = costos_recoleccion + costos_productos
    ganancia = ingresos - costos_totales
    margen = (ganancia / ingresos) * 100 if ingresos > 0 else 0.0

    return Rentabilidad(
        maquina_id=maquina.id,
        maquina_nombre=maquina.nombre,
        periodo=Periodo(inicio=to_iso(fecha_inicio), fin=to_iso(fecha_fin)),
        ingresos_totales=round_money(ingresos),
        costos_recoleccion=round_money(costos_recoleccion),
        costos_productos=round_money(costos_productos),
        costos_totales=round_money(costos_totales),
        ganancia_neta=round_money(ganancia),
        margen_ganancia=round_money(margen),
        recolecciones=len(en_periodo),
    )


def calcular_rentabilidades(
    user_id: str,
    maquina_id: str | None = None,
    inicio: str | None = None,
    fin: str | None = None,
) -> List[Rentabilidad]:
    """Rentabilidad por máquina del usuario (o de una sola) en el período."""
    fecha_inicio, fecha_fin = resolver_periodo(inicio, fin)

    maquinas = MaquinaService.list_maquinas(user_id)
    if maquina_id:
        maquinas = [m for m in maquinas if m.id == maquina_id]
    if not maquinas:
        return []

    recolecciones = RecoleccionService.list_recolecciones(user_id)
    costos = CostoService.list_costos(user_id)
    return [
        calcular_rentabilidad(maquina, recolecciones, costos, fecha_inicio, fecha_fin)
        for maquina in maquinas
    ]


def resumen_rentabilidad(rentabilidades: List[Rentabilidad]) -> dict:
    ingresos = sum(r.ingresos_totales for r in rentabilidades)
    costos = sum(r.costos_totales for r in rentabilidades)
    ganancia = ingresos - costos
    return {
        "ingresos_totales": round_money(ingresos),
        "costos_totales": round_money(costos),
        "ganancia_neta": round_money(ganancia),
        "margen_ganancia": round_money((ganancia / ingresos) * 100) if ingresos > 0 else 0.0,
        "recolecciones": sum(r.recolecciones for r in rentabilidades),
    }


def build_rentabilidad_workbook(
    rentabilidades: List[Rentabilidad],
    tipos: dict[str, str] | None = None,
) -> Workbook:
    """Reporte de rentabilidad en Excel (una fila por máquina más totales)."""
    tipos = tipos or {}
    workbook, sheet = create_excel_workbook("Rentabilidad")

    if rentabilidades:
        periodo = rentabilidades[0].periodo
        sheet.cell(row=1, column=1, value="Período")
        sheet.cell(row=1, column=2, value=f"{periodo.inicio[:10]} al {periodo.fin[:10]}")

    style_header_row(sheet, 3, REPORT_COLUMNS)
    rows = [
        [
            r.maquina_nombre or r.maquina_id,
            tipos.get(r.maquina_id, ""),
            r.recolecciones,
            r.ingresos_totales,
            r.costos_recoleccion,
            r.costos_productos,
            r.costos_totales,
            r.ganancia_neta,
            r.margen_ganancia,
        ]
        for r in rentabilidades
    ]
    next_row = add_data_rows(sheet, rows, start_row=4, number_formats=REPORT_FORMATS)

    resumen = resumen_rentabilidad(rentabilidades)
    add_data_rows(
        sheet,
        [[
            "TOTAL",
            "",
            resumen["recolecciones"],
            resumen["ingresos_totales"],
            round_money(sum(r.costos_recoleccion for r in rentabilidades)),
            round_money(sum(r.costos_productos for r in rentabilidades)),
            resumen["costos_totales"],
            resumen["ganancia_neta"],
            resumen["margen_ganancia"],
        ]],
        start_row=next_row,
        number_formats=REPORT_FORMATS,
        total=True,
    )
    auto_adjust_column_widths(sheet)
    return workbook
