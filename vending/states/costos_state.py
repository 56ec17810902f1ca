"""Estado de Costos - Registro de compras de insumos.

El formulario muestra en vivo el costo por unidad de compra y el costo
por pieza (según kg, cajas o bolsas) y permite relacionar la compra con
compartimentos concretos para atribuir el costo en la rentabilidad.
"""
import reflex as rx
from pydantic import ValidationError

from vending.enums import TipoMaquina, UnidadCompra
from vending.schemas.vending_schemas import CostoInsumo
from vending.services.costo_service import CostoService
from vending.services.errors import ServiceError
from vending.services.maquina_service import MaquinaService
from vending.utils.calculations import derivar_costos, round_money
from vending.utils.dates import format_date_display, get_today_str, now_iso
from vending.utils.formatting import parse_float_safe
from .mixin_state import MixinState, require_login
from .types import CostoRow

RELACION_SEPARATOR = "::"


class CostosState(MixinState):
    costos: list[CostoRow] = []
    costo_filter_tipo: str = "todos"
    show_costo_modal: bool = False
    costo_form: dict = {}
    costo_relacionados: list[str] = []
    costo_relacion_options: list[dict] = []

    def _empty_costo_form(self) -> dict:
        return {
            "fecha": get_today_str(),
            "tipo_maquina": TipoMaquina.chiclera.value,
            "concepto": "",
            "cantidad": "",
            "unidad": UnidadCompra.kg.value,
            "costo_total": "",
            "unidades_por_kg": "",
            "kg_por_caja": "",
            "unidades_por_bolsas": "",
            "proveedor": "",
            "notas": "",
        }

    def _optional_float(self, value) -> float | None:
        text = str(value or "").strip()
        return parse_float_safe(text) if text else None

    def _preview_costos(self) -> dict:
        form = self.costo_form or self._empty_costo_form()
        try:
            costo_unitario, costo_por_unidad = derivar_costos(
                form.get("unidad", ""),
                parse_float_safe(form.get("cantidad")),
                parse_float_safe(form.get("costo_total")),
                unidades_por_kg=self._optional_float(form.get("unidades_por_kg")),
                kg_por_caja=self._optional_float(form.get("kg_por_caja")),
                unidades_por_bolsas=self._optional_float(form.get("unidades_por_bolsas")),
            )
        except ValueError as exc:
            return {"valido": False, "mensaje": str(exc), "costo_unitario": "", "costo_por_unidad": ""}
        return {
            "valido": True,
            "mensaje": "",
            "costo_unitario": f"{costo_unitario:.4f}".rstrip("0").rstrip("."),
            "costo_por_unidad": f"{costo_por_unidad:.4f}".rstrip("0").rstrip("."),
        }

    def _relacionados_from_selection(self) -> list[dict]:
        nombres = {opt["value"]: opt["nombre"] for opt in self.costo_relacion_options}
        relacionados = []
        for value in self.costo_relacionados:
            maquina_id, _, compartimento_id = value.partition(RELACION_SEPARATOR)
            if maquina_id and compartimento_id:
                relacionados.append(
                    {
                        "maquinaId": maquina_id,
                        "compartimentoId": compartimento_id,
                        "nombre": nombres.get(value),
                    }
                )
        return relacionados

    def _costo_from_form(self) -> CostoInsumo:
        form = self.costo_form or self._empty_costo_form()
        fecha = form.get("fecha") or ""
        data = {
            "fecha": now_iso() if not fecha or fecha == get_today_str() else fecha,
            "tipoMaquina": form.get("tipo_maquina"),
            "concepto": form.get("concepto", ""),
            "cantidad": parse_float_safe(form.get("cantidad")),
            "unidad": form.get("unidad"),
            "costoTotal": parse_float_safe(form.get("costo_total")),
            "unidadesPorKg": self._optional_float(form.get("unidades_por_kg")),
            "kgPorCaja": self._optional_float(form.get("kg_por_caja")),
            "unidadesPorBolsas": self._optional_float(form.get("unidades_por_bolsas")),
            "proveedor": form.get("proveedor") or None,
            "notas": form.get("notas") or None,
            "productosRelacionados": self._relacionados_from_selection(),
        }
        return CostoInsumo.model_validate(data)

    def _build_costo_rows(self, costos: list[CostoInsumo]) -> list[CostoRow]:
        rows: list[CostoRow] = []
        for costo in sorted(costos, key=lambda c: c.fecha, reverse=True):
            rows.append(
                {
                    "id": costo.id,
                    "fecha": format_date_display(costo.fecha),
                    "tipo_maquina": costo.tipo_maquina.value,
                    "concepto": costo.concepto,
                    "cantidad": costo.cantidad,
                    "unidad": costo.unidad.value,
                    "costo_total": round_money(costo.costo_total),
                    "costo_unitario": costo.costo_unitario or 0.0,
                    "costo_por_unidad": costo.costo_por_unidad or 0.0,
                    "proveedor": costo.proveedor or "",
                    "relacionados": len(costo.productos_relacionados),
                }
            )
        return rows

    def _load_relacion_options(self, tipo: str):
        opciones = []
        for maquina in MaquinaService.list_maquinas(self._user_id()):
            if maquina.tipo.value != tipo:
                continue
            for comp in maquina.compartimentos:
                nombre = f"{maquina.nombre} · {comp.nombre_producto}"
                opciones.append(
                    {
                        "value": f"{maquina.id}{RELACION_SEPARATOR}{comp.id}",
                        "nombre": nombre,
                    }
                )
        self.costo_relacion_options = opciones
        validos = {opt["value"] for opt in opciones}
        self.costo_relacionados = [v for v in self.costo_relacionados if v in validos]

    @rx.var
    def costo_preview(self) -> dict:
        return self._preview_costos()

    @rx.var
    def costos_total_periodo(self) -> float:
        return round_money(sum(row["costo_total"] for row in self.costos))

    @rx.event
    def load_costos(self):
        user_id = self._user_id()
        if not user_id:
            self.costos = []
            return
        tipo = self.costo_filter_tipo if self.costo_filter_tipo in ("peluchera", "chiclera") else None
        self.costos = self._build_costo_rows(CostoService.list_costos(user_id, tipo))

    @rx.event
    def set_costo_filter_tipo(self, value: str):
        self.costo_filter_tipo = value or "todos"
        self.load_costos()

    @rx.event
    def open_costo_modal(self):
        self.costo_form = self._empty_costo_form()
        self.costo_relacionados = []
        self._load_relacion_options(self.costo_form["tipo_maquina"])
        self.show_costo_modal = True

    @rx.event
    def close_costo_modal(self):
        self.show_costo_modal = False
        self.costo_form = self._empty_costo_form()
        self.costo_relacionados = []

    @rx.event
    def update_costo_field(self, field: str, value: str):
        self.costo_form = {**self.costo_form, field: value or ""}
        if field == "tipo_maquina":
            self._load_relacion_options(value)

    @rx.event
    def toggle_costo_relacionado(self, value: str):
        if value in self.costo_relacionados:
            self.costo_relacionados = [v for v in self.costo_relacionados if v != value]
        else:
            self.costo_relacionados = [*self.costo_relacionados, value]

    @rx.event
    @require_login()
    def save_costo(self):
        try:
            costo = self._costo_from_form()
            CostoService.save_costo(self._user_id(), costo)
        except (ValidationError, ServiceError) as exc:
            return rx.toast(self._error_message(exc), duration=3000)
        self.show_costo_modal = False
        self.costo_form = self._empty_costo_form()
        self.costo_relacionados = []
        self.load_costos()
        return rx.toast("Costo registrado.", duration=2500)
