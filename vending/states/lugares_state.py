"""Estado de Lugares - Gestión de ubicaciones donde se instalan máquinas.

Funcionalidades principales:
- Listado con búsqueda por nombre o dirección
- Crear y editar lugares (coordenadas y enlace de Google Maps opcionales)
- Eliminar lugares sin máquinas asignadas
"""
import reflex as rx
from pydantic import ValidationError

from vending.schemas.vending_schemas import Lugar
from vending.services.errors import ServiceError
from vending.services.lugar_service import LugarService
from vending.services.maquina_service import MaquinaService
from vending.utils.formatting import parse_float_safe
from vending.utils.logger import get_logger
from .mixin_state import MixinState, require_login
from .types import LugarRow

logger = get_logger("LugaresState")


class LugaresState(MixinState):
    lugares: list[LugarRow] = []
    lugar_search: str = ""
    show_lugar_modal: bool = False
    lugar_form: dict = {}

    def _empty_lugar_form(self) -> dict:
        return {
            "id": "",
            "nombre": "",
            "direccion": "",
            "lat": "",
            "lng": "",
            "google_maps_url": "",
            "notas": "",
            "fecha_creacion": "",
        }

    def _lugar_from_form(self) -> Lugar:
        form = self.lugar_form or self._empty_lugar_form()
        data = {
            "id": form.get("id") or "",
            "nombre": form.get("nombre", ""),
            "direccion": form.get("direccion", ""),
            "googleMapsUrl": form.get("google_maps_url") or None,
            "notas": form.get("notas") or None,
            "fechaCreacion": form.get("fecha_creacion") or None,
        }
        lat = str(form.get("lat") or "").strip()
        lng = str(form.get("lng") or "").strip()
        if lat and lng:
            data["coordenadas"] = {"lat": parse_float_safe(lat), "lng": parse_float_safe(lng)}
        return Lugar.model_validate(data)

    def _build_lugar_rows(self, lugares: list[Lugar], maquinas_por_lugar: dict) -> list[LugarRow]:
        term = (self.lugar_search or "").strip().lower()
        rows: list[LugarRow] = []
        for lugar in lugares:
            nombre = lugar.nombre
            if term and term not in nombre.lower() and term not in lugar.direccion.lower():
                continue
            rows.append(
                {
                    "id": lugar.id,
                    "nombre": nombre,
                    "direccion": lugar.direccion,
                    "google_maps_url": lugar.google_maps_url or "",
                    "notas": lugar.notas or "",
                    "maquinas": maquinas_por_lugar.get(lugar.id, 0),
                }
            )
        rows.sort(key=lambda row: row["nombre"].lower())
        return rows

    @rx.var
    def lugar_options(self) -> list[dict]:
        return [{"id": row["id"], "nombre": row["nombre"]} for row in self.lugares]

    @rx.event
    def load_lugares(self):
        user_id = self._user_id()
        if not user_id:
            self.lugares = []
            return
        conteo: dict[str, int] = {}
        for maquina in MaquinaService.list_maquinas(user_id):
            conteo[maquina.lugar_id] = conteo.get(maquina.lugar_id, 0) + 1
        self.lugares = self._build_lugar_rows(LugarService.list_lugares(user_id), conteo)

    @rx.event
    def set_lugar_search(self, value: str):
        self.lugar_search = value or ""
        self.load_lugares()

    @rx.event
    def open_lugar_modal(self, lugar_id: str | None = None):
        self.lugar_form = self._empty_lugar_form()
        if lugar_id:
            lugar = LugarService.get_lugar(self._user_id(), lugar_id)
            if lugar is not None:
                self.lugar_form.update(
                    {
                        "id": lugar.id,
                        "nombre": lugar.nombre,
                        "direccion": lugar.direccion,
                        "lat": str(lugar.coordenadas.lat) if lugar.coordenadas else "",
                        "lng": str(lugar.coordenadas.lng) if lugar.coordenadas else "",
                        "google_maps_url": lugar.google_maps_url or "",
                        "notas": lugar.notas or "",
                        "fecha_creacion": lugar.fecha_creacion,
                    }
                )
        self.show_lugar_modal = True

    @rx.event
    def close_lugar_modal(self):
        self.show_lugar_modal = False
        self.lugar_form = self._empty_lugar_form()

    @rx.event
    def update_lugar_field(self, field: str, value: str):
        self.lugar_form = {**self.lugar_form, field: value or ""}

    @rx.event
    @require_login()
    def save_lugar(self):
        try:
            lugar = self._lugar_from_form()
        except ValidationError as exc:
            return rx.toast(self._error_message(exc), duration=3000)
        user_id = self._user_id()
        try:
            if lugar.id:
                LugarService.update_lugar(user_id, lugar)
            else:
                LugarService.save_lugar(user_id, lugar)
        except ServiceError as exc:
            return rx.toast(str(exc), duration=3000)
        self.show_lugar_modal = False
        self.lugar_form = self._empty_lugar_form()
        self.load_lugares()
        return rx.toast("Lugar guardado.", duration=2500)

    @rx.event
    @require_login()
    def delete_lugar(self, lugar_id: str):
        try:
            LugarService.delete_lugar(self._user_id(), lugar_id)
        except ServiceError as exc:
            return rx.toast(str(exc), duration=3500)
        self.load_lugares()
        return rx.toast("Lugar eliminado.", duration=2500)
