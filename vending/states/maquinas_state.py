"""Estado de Máquinas - Alta, edición y seguimiento de máquinas.

Funcionalidades principales:
- Listado con filtro por tipo y estado del ciclo de recolección
- Crear máquinas (los compartimentos por defecto los arma el servicio)
- Editar datos generales y compartimentos (producto, precio, capacidad, stock)
- Activar/desactivar y eliminar (borra también sus recolecciones)
"""
import reflex as rx
from pydantic import ValidationError

from vending.constants import DEFAULT_DIAS_RECOLECCION, DEFAULT_MACHINE_COLOR
from vending.enums import TipoMaquina
from vending.schemas.vending_schemas import Compartimento, Lugar, Maquina
from vending.services.errors import ServiceError
from vending.services.lugar_service import LugarService
from vending.services.maquina_service import MaquinaService, build_default_compartimentos
from vending.services.notificacion_service import progreso_maquina
from vending.utils.dates import format_date_display, get_today_str, utc_now
from vending.utils.formatting import parse_float_safe, parse_int_safe
from vending.utils.logger import get_logger
from .mixin_state import MixinState, require_login
from .types import CompartimentoForm, MaquinaRow

logger = get_logger("MaquinasState")

TIPO_LABELS = {"peluchera": "Peluchera", "chiclera": "Chiclera"}


class MaquinasState(MixinState):
    maquinas: list[MaquinaRow] = []
    maquina_filter_tipo: str = "todas"
    show_maquina_modal: bool = False
    maquina_form: dict = {}
    compartimentos_form: list[CompartimentoForm] = []

    def _empty_maquina_form(self) -> dict:
        return {
            "id": "",
            "nombre": "",
            "color": DEFAULT_MACHINE_COLOR,
            "tipo": TipoMaquina.peluchera.value,
            "tipo_chiclera": "individual",
            "tipo_producto_chiclera": "granel",
            "lugar_id": "",
            "costo_maquina": "0",
            "fecha_instalacion": get_today_str(),
            "dias_recoleccion_estimados": str(DEFAULT_DIAS_RECOLECCION),
            "activa": True,
            "notas": "",
        }

    def _stock_resumen(self, maquina: Maquina) -> str:
        partes = [
            f"{comp.nombre_producto}: {comp.cantidad_actual:g}/{comp.capacidad}"
            for comp in maquina.compartimentos
        ]
        return " · ".join(partes)

    def _build_maquina_row(self, maquina: Maquina, lugares: dict[str, Lugar], now) -> MaquinaRow:
        progreso = progreso_maquina(maquina, now) or {}
        lugar = lugares.get(maquina.lugar_id)
        if maquina.tipo == TipoMaquina.chiclera:
            detalle = f"{maquina.tipo_chiclera.value} · {maquina.tipo_producto_chiclera.value}"
        else:
            detalle = ""
        prioridad = progreso.get("prioridad")
        return {
            "id": maquina.id,
            "nombre": maquina.nombre,
            "color": maquina.color,
            "tipo": TIPO_LABELS.get(maquina.tipo.value, maquina.tipo.value),
            "detalle_tipo": detalle,
            "lugar_id": maquina.lugar_id,
            "lugar_nombre": lugar.nombre if lugar else "Sin lugar",
            "activa": maquina.activa,
            "estado": "Activa" if maquina.activa else "Inactiva",
            "dias_estimados": maquina.dias_recoleccion_estimados,
            "porcentaje": progreso.get("porcentaje", 0.0),
            "prioridad": prioridad.value if prioridad else "baja",
            "dias_restantes": progreso.get("dias_restantes", 0),
            "ultima_recoleccion": format_date_display(maquina.fecha_ultima_recoleccion) or "Nunca",
            "stock_resumen": self._stock_resumen(maquina),
        }

    def _build_maquina_rows(self, maquinas: list[Maquina], lugares: dict[str, Lugar], now=None) -> list[MaquinaRow]:
        now = now or utc_now()
        rows = []
        for maquina in maquinas:
            if self.maquina_filter_tipo in ("peluchera", "chiclera") and maquina.tipo.value != self.maquina_filter_tipo:
                continue
            rows.append(self._build_maquina_row(maquina, lugares, now))
        rows.sort(key=lambda row: row["nombre"].lower())
        return rows

    def _compartimentos_to_form(self, maquina: Maquina) -> list[CompartimentoForm]:
        return [
            {
                "id": comp.id,
                "capacidad": str(comp.capacidad),
                "cantidad_actual": f"{comp.cantidad_actual:g}",
                "cantidad_cargada": f"{comp.cantidad_actual:g}",
                "tipo_producto": comp.tipo_producto or "",
                "precio_venta": "" if comp.precio_venta is None else str(comp.precio_venta),
            }
            for comp in maquina.compartimentos
        ]

    def _compartimentos_from_form(self, anteriores: list[Compartimento]) -> list[Compartimento]:
        por_id = {comp.id: comp for comp in anteriores}
        resultado = []
        for item in self.compartimentos_form:
            previo = por_id.get(item["id"])
            precio = str(item.get("precio_venta") or "").strip()
            stock = str(item.get("cantidad_actual") or "").strip()
            # Stock sin tocar en el formulario: se conserva el guardado.
            if previo is not None and stock == item.get("cantidad_cargada"):
                cantidad = previo.cantidad_actual
            else:
                cantidad = parse_float_safe(stock)
            resultado.append(
                Compartimento(
                    id=item["id"],
                    capacidad=parse_int_safe(item.get("capacidad"), previo.capacidad if previo else 1),
                    cantidad_actual=cantidad,
                    tipo_producto=item.get("tipo_producto") or None,
                    tipo_granel_bola=previo.tipo_granel_bola if previo else None,
                    precio_venta=parse_float_safe(precio) if precio else None,
                )
            )
        return resultado

    def _merge_edicion(self, editada: Maquina, actual: Maquina) -> Maquina:
        """Edición del formulario sobre el documento vigente de la máquina."""
        editada.fecha_ultima_recoleccion = actual.fecha_ultima_recoleccion
        editada.imagen = actual.imagen
        if editada.tipo != actual.tipo or editada.tipo_chiclera != actual.tipo_chiclera:
            editada.compartimentos = build_default_compartimentos(editada)
        else:
            editada.compartimentos = self._compartimentos_from_form(actual.compartimentos)
        return editada

    def _maquina_from_form(self) -> Maquina:
        form = self.maquina_form or self._empty_maquina_form()
        tipo = form.get("tipo") or TipoMaquina.peluchera.value
        data = {
            "id": form.get("id") or "",
            "nombre": form.get("nombre", ""),
            "color": form.get("color"),
            "tipo": tipo,
            "lugarId": form.get("lugar_id", ""),
            "costoMaquina": parse_float_safe(form.get("costo_maquina")),
            "fechaInstalacion": form.get("fecha_instalacion") or get_today_str(),
            "diasRecoleccionEstimados": parse_int_safe(
                form.get("dias_recoleccion_estimados"), DEFAULT_DIAS_RECOLECCION
            ),
            "activa": bool(form.get("activa", True)),
            "notas": form.get("notas") or None,
        }
        if tipo == TipoMaquina.chiclera.value:
            data["tipoChiclera"] = form.get("tipo_chiclera") or None
            data["tipoProductoChiclera"] = form.get("tipo_producto_chiclera") or None
        return Maquina.model_validate(data)

    @rx.event
    def load_maquinas(self):
        user_id = self._user_id()
        if not user_id:
            self.maquinas = []
            return
        lugares = {lugar.id: lugar for lugar in LugarService.list_lugares(user_id)}
        self.maquinas = self._build_maquina_rows(MaquinaService.list_maquinas(user_id), lugares)

    @rx.event
    def set_maquina_filter_tipo(self, value: str):
        self.maquina_filter_tipo = value or "todas"
        self.load_maquinas()

    @rx.event
    def open_maquina_modal(self, maquina_id: str | None = None):
        self.maquina_form = self._empty_maquina_form()
        self.compartimentos_form = []
        if maquina_id:
            maquina = MaquinaService.get_maquina(self._user_id(), maquina_id)
            if maquina is not None:
                self.maquina_form.update(
                    {
                        "id": maquina.id,
                        "nombre": maquina.nombre,
                        "color": maquina.color,
                        "tipo": maquina.tipo.value,
                        "tipo_chiclera": maquina.tipo_chiclera.value if maquina.tipo_chiclera else "individual",
                        "tipo_producto_chiclera": (
                            maquina.tipo_producto_chiclera.value if maquina.tipo_producto_chiclera else "granel"
                        ),
                        "lugar_id": maquina.lugar_id,
                        "costo_maquina": str(maquina.costo_maquina),
                        "fecha_instalacion": maquina.fecha_instalacion[:10],
                        "dias_recoleccion_estimados": str(maquina.dias_recoleccion_estimados),
                        "activa": maquina.activa,
                        "notas": maquina.notas or "",
                    }
                )
                self.compartimentos_form = self._compartimentos_to_form(maquina)
        self.show_maquina_modal = True

    @rx.event
    def close_maquina_modal(self):
        self.show_maquina_modal = False
        self.maquina_form = self._empty_maquina_form()
        self.compartimentos_form = []

    @rx.event
    def update_maquina_field(self, field: str, value):
        self.maquina_form = {**self.maquina_form, field: value}

    @rx.event
    def update_compartimento_field(self, index: int, field: str, value: str):
        if 0 <= index < len(self.compartimentos_form):
            rows = list(self.compartimentos_form)
            rows[index] = {**rows[index], field: value or ""}
            self.compartimentos_form = rows

    @rx.event
    @require_login()
    def save_maquina(self):
        user_id = self._user_id()
        try:
            maquina = self._maquina_from_form()
            if maquina.id:
                MaquinaService.update_maquina(user_id, maquina, merge=self._merge_edicion)
            else:
                MaquinaService.create_maquina(user_id, maquina)
        except (ValidationError, ServiceError) as exc:
            return rx.toast(self._error_message(exc), duration=3000)
        self.show_maquina_modal = False
        self.maquina_form = self._empty_maquina_form()
        self.compartimentos_form = []
        self.load_maquinas()
        return rx.toast("Máquina guardada.", duration=2500)

    @rx.event
    @require_login()
    def toggle_maquina_activa(self, maquina_id: str):
        try:
            MaquinaService.toggle_activa(self._user_id(), maquina_id)
        except ServiceError as exc:
            return rx.toast(str(exc), duration=3000)
        self.load_maquinas()

    @rx.event
    @require_login()
    def delete_maquina(self, maquina_id: str):
        try:
            eliminadas = MaquinaService.delete_maquina(self._user_id(), maquina_id)
        except ServiceError as exc:
            return rx.toast(str(exc), duration=3000)
        self.load_maquinas()
        if eliminadas:
            return rx.toast(
                f"Máquina eliminada junto con {eliminadas} recolección(es).", duration=3000
            )
        return rx.toast("Máquina eliminada.", duration=2500)
