"""Estado de Recolecciones - Registro de visitas a las máquinas.

Una recolección guarda lo recaudado, la comisión del local, lo vendido
por compartimento, los costos de la visita y los rellenos. Al guardarla
el servicio actualiza la fecha de última recolección y el stock.
"""
import reflex as rx
from pydantic import ValidationError

from vending.enums import TipoMaquina
from vending.schemas.vending_schemas import Maquina, Recoleccion
from vending.services.errors import ServiceError
from vending.services.maquina_service import MaquinaService
from vending.services.recoleccion_service import RecoleccionService
from vending.utils.calculations import (
    calcular_ingresos_netos,
    completar_linea_venta,
    espacio_disponible,
    round_money,
)
from vending.utils.dates import format_date_display, get_today_str, now_iso
from vending.utils.formatting import parse_float_safe, parse_int_safe
from vending.utils.logger import get_logger
from .mixin_state import MixinState, require_login
from .types import CostoRecoleccionForm, LineaVentaForm, RecoleccionRow

logger = get_logger("RecoleccionesState")


class RecoleccionesState(MixinState):
    recolecciones: list[RecoleccionRow] = []
    recoleccion_filter_maquina: str = ""
    recoleccion_maquina_options: list[dict] = []
    show_recoleccion_modal: bool = False
    recoleccion_form: dict = {}
    recoleccion_maquina_tipo: str = ""
    lineas_venta_form: list[LineaVentaForm] = []
    costos_recoleccion_form: list[CostoRecoleccionForm] = []

    def _empty_recoleccion_form(self) -> dict:
        return {
            "maquina_id": "",
            "fecha": get_today_str(),
            "ingresos": "",
            "comision_local": "",
            "notas": "",
            "turnos_realizados": "",
            "peluches_sacados": "",
            "precio_por_turno": "",
        }

    def _lineas_para(self, maquina: Maquina) -> list[LineaVentaForm]:
        return [
            {
                "compartimento_id": comp.id,
                "producto_nombre": comp.nombre_producto,
                "precio": "" if comp.precio_venta is None else str(comp.precio_venta),
                "stock": f"{comp.cantidad_actual:g}/{comp.capacidad}",
                "cantidad": "",
                "ingresos": "",
                "relleno": "",
            }
            for comp in maquina.compartimentos
        ]

    def _ingresos_lineas(self) -> float:
        total = 0.0
        for linea in self.lineas_venta_form:
            _, ingresos = completar_linea_venta(
                parse_float_safe(linea.get("cantidad")),
                parse_float_safe(linea.get("ingresos")),
                parse_float_safe(linea.get("precio")),
            )
            total += ingresos
        return round_money(total)

    def _ingresos_form(self) -> float:
        manual = str((self.recoleccion_form or {}).get("ingresos") or "").strip()
        if manual:
            return parse_float_safe(manual)
        return self._ingresos_lineas()

    def _fecha_form(self) -> str:
        fecha = (self.recoleccion_form or {}).get("fecha") or ""
        if not fecha or fecha == get_today_str():
            return now_iso()
        return fecha

    def _recoleccion_from_form(self, maquina: Maquina) -> Recoleccion:
        form = self.recoleccion_form or self._empty_recoleccion_form()
        productos = []
        rellenos = []
        for linea in self.lineas_venta_form:
            cantidad, ingresos = completar_linea_venta(
                parse_float_safe(linea.get("cantidad")),
                parse_float_safe(linea.get("ingresos")),
                parse_float_safe(linea.get("precio")),
            )
            if cantidad > 0 or ingresos > 0:
                productos.append(
                    {
                        "compartimentoId": linea["compartimento_id"],
                        "cantidad": cantidad,
                        "productoNombre": linea.get("producto_nombre", ""),
                        "ingresos": ingresos,
                    }
                )
            relleno = parse_float_safe(linea.get("relleno"))
            if relleno > 0:
                comp = maquina.compartimento(linea["compartimento_id"])
                maximo = espacio_disponible(comp.capacidad, comp.cantidad_actual) if comp else 0
                if relleno > maximo:
                    raise ServiceError(
                        f"No puedes rellenar más de {maximo:g} unidades en {linea.get('producto_nombre', '')}"
                    )
                rellenos.append({"compartimentoId": linea["compartimento_id"], "cantidad": relleno})

        costos = [
            {"concepto": item.get("concepto", ""), "monto": parse_float_safe(item.get("monto"))}
            for item in self.costos_recoleccion_form
            if (item.get("concepto") or "").strip()
        ]

        data = {
            "maquinaId": maquina.id,
            "fecha": self._fecha_form(),
            "ingresos": self._ingresos_form(),
            "productosVendidos": productos,
            "costos": costos,
            "rellenos": rellenos,
            "notas": form.get("notas") or None,
        }
        comision = str(form.get("comision_local") or "").strip()
        if comision:
            data["comisionLocal"] = parse_float_safe(comision)
        if maquina.tipo == TipoMaquina.peluchera:
            for campo, clave in (
                ("turnos_realizados", "turnosRealizados"),
                ("peluches_sacados", "peluchesSacados"),
            ):
                valor = str(form.get(campo) or "").strip()
                if valor:
                    data[clave] = parse_int_safe(valor)
            precio_turno = str(form.get("precio_por_turno") or "").strip()
            if precio_turno:
                data["precioPorTurno"] = parse_float_safe(precio_turno)
        return Recoleccion.model_validate(data)

    def _build_recoleccion_rows(self, recolecciones: list[Recoleccion], nombres: dict[str, str]) -> list[RecoleccionRow]:
        rows: list[RecoleccionRow] = []
        for recoleccion in sorted(recolecciones, key=lambda r: r.fecha, reverse=True):
            rows.append(
                {
                    "id": recoleccion.id,
                    "maquina_id": recoleccion.maquina_id,
                    "maquina_nombre": nombres.get(recoleccion.maquina_id, recoleccion.maquina_id),
                    "fecha": format_date_display(recoleccion.fecha),
                    "ingresos": round_money(recoleccion.ingresos),
                    "comision_local": recoleccion.comision_local or 0.0,
                    "ingresos_netos": round_money(recoleccion.ingresos_netos),
                    "costos": round_money(recoleccion.total_costos),
                    "tasa_conversion": (
                        f"{recoleccion.tasa_conversion:.1f}%"
                        if recoleccion.tasa_conversion is not None
                        else "-"
                    ),
                    "notas": recoleccion.notas or "",
                }
            )
        return rows

    @rx.var
    def ingresos_netos_preview(self) -> float:
        comision = parse_float_safe((self.recoleccion_form or {}).get("comision_local"))
        return calcular_ingresos_netos(self._ingresos_form(), comision)

    @rx.var
    def ingresos_lineas_total(self) -> float:
        return self._ingresos_lineas()

    @rx.event
    def load_recolecciones(self):
        user_id = self._user_id()
        if not user_id:
            self.recolecciones = []
            self.recoleccion_maquina_options = []
            return
        maquinas = MaquinaService.list_maquinas(user_id)
        nombres = {m.id: m.nombre for m in maquinas}
        self.recoleccion_maquina_options = [
            {"id": m.id, "nombre": m.nombre} for m in sorted(maquinas, key=lambda m: m.nombre.lower())
        ]
        recolecciones = RecoleccionService.list_recolecciones(
            user_id, self.recoleccion_filter_maquina or None
        )
        self.recolecciones = self._build_recoleccion_rows(recolecciones, nombres)

    @rx.event
    def set_recoleccion_filter_maquina(self, value: str):
        self.recoleccion_filter_maquina = "" if value in (None, "todas") else value
        self.load_recolecciones()

    @rx.event
    def open_recoleccion_modal(self, maquina_id: str | None = None):
        self.load_recolecciones()
        self.recoleccion_form = self._empty_recoleccion_form()
        self.lineas_venta_form = []
        self.costos_recoleccion_form = []
        self.recoleccion_maquina_tipo = ""
        self.show_recoleccion_modal = True
        if maquina_id:
            self.select_recoleccion_maquina(maquina_id)

    @rx.event
    def close_recoleccion_modal(self):
        self.show_recoleccion_modal = False
        self.recoleccion_form = self._empty_recoleccion_form()
        self.lineas_venta_form = []
        self.costos_recoleccion_form = []

    @rx.event
    def select_recoleccion_maquina(self, maquina_id: str):
        maquina = MaquinaService.get_maquina(self._user_id(), maquina_id) if maquina_id else None
        self.recoleccion_form = {**self.recoleccion_form, "maquina_id": maquina_id or ""}
        if maquina is None:
            self.lineas_venta_form = []
            self.recoleccion_maquina_tipo = ""
            return
        self.lineas_venta_form = self._lineas_para(maquina)
        self.recoleccion_maquina_tipo = maquina.tipo.value

    @rx.event
    def update_recoleccion_field(self, field: str, value: str):
        self.recoleccion_form = {**self.recoleccion_form, field: value or ""}

    @rx.event
    def update_linea_venta(self, index: int, field: str, value: str):
        if 0 <= index < len(self.lineas_venta_form):
            rows = list(self.lineas_venta_form)
            rows[index] = {**rows[index], field: value or ""}
            self.lineas_venta_form = rows

    @rx.event
    def add_costo_recoleccion(self):
        self.costos_recoleccion_form = [
            *self.costos_recoleccion_form,
            {"concepto": "", "monto": ""},
        ]

    @rx.event
    def update_costo_recoleccion(self, index: int, field: str, value: str):
        if 0 <= index < len(self.costos_recoleccion_form):
            rows = list(self.costos_recoleccion_form)
            rows[index] = {**rows[index], field: value or ""}
            self.costos_recoleccion_form = rows

    @rx.event
    def remove_costo_recoleccion(self, index: int):
        self.costos_recoleccion_form = [
            item for i, item in enumerate(self.costos_recoleccion_form) if i != index
        ]

    @rx.event
    @require_login()
    def save_recoleccion(self):
        user_id = self._user_id()
        maquina_id = (self.recoleccion_form or {}).get("maquina_id")
        if not maquina_id:
            return rx.toast("Seleccione una máquina.", duration=3000)
        maquina = MaquinaService.get_maquina(user_id, maquina_id)
        if maquina is None:
            return rx.toast("Máquina no encontrada", duration=3000)
        try:
            recoleccion = self._recoleccion_from_form(maquina)
            RecoleccionService.save_recoleccion(user_id, recoleccion)
        except (ValidationError, ServiceError) as exc:
            return rx.toast(self._error_message(exc), duration=3000)
        self.show_recoleccion_modal = False
        self.recoleccion_form = self._empty_recoleccion_form()
        self.lineas_venta_form = []
        self.costos_recoleccion_form = []
        self.load_recolecciones()
        return rx.toast(
            f"Recolección registrada: {self._format_currency(recoleccion.ingresos_netos)} netos.",
            duration=3000,
        )

    @rx.event
    @require_login()
    def download_comprobante(self, recoleccion_id: str):
        try:
            pdf = RecoleccionService.build_comprobante(self._user_id(), recoleccion_id)
        except ServiceError as exc:
            return rx.toast(str(exc), duration=3000)
        return rx.download(data=pdf, filename=f"comprobante_{recoleccion_id}.pdf")
