"""Estado de Rentabilidad - Reporte por máquina y período con exportación a Excel."""
import datetime

import reflex as rx

from vending.constants import DEFAULT_REPORT_DAYS
from vending.schemas.vending_schemas import Rentabilidad
from vending.services import rentabilidad_service
from vending.services.errors import ServiceError
from vending.services.maquina_service import MaquinaService
from vending.utils.dates import get_today_str
from vending.utils.exports import workbook_to_bytes
from vending.utils.logger import get_logger
from .mixin_state import MixinState, require_login
from .types import RentabilidadRow

logger = get_logger("RentabilidadState")


def _default_inicio() -> str:
    return (datetime.date.today() - datetime.timedelta(days=DEFAULT_REPORT_DAYS)).isoformat()


class RentabilidadState(MixinState):
    rent_inicio: str = ""
    rent_fin: str = ""
    rent_maquina_id: str = ""
    rent_maquina_options: list[dict] = []
    rentabilidades: list[RentabilidadRow] = []
    rent_resumen: dict = {}
    rent_error: str = ""

    def _rent_rows(self, rentabilidades: list[Rentabilidad]) -> list[RentabilidadRow]:
        rows: list[RentabilidadRow] = [
            {
                "maquina_id": r.maquina_id,
                "maquina_nombre": r.maquina_nombre or r.maquina_id,
                "recolecciones": r.recolecciones,
                "ingresos_totales": r.ingresos_totales,
                "costos_recoleccion": r.costos_recoleccion,
                "costos_productos": r.costos_productos,
                "costos_totales": r.costos_totales,
                "ganancia_neta": r.ganancia_neta,
                "margen_ganancia": r.margen_ganancia,
            }
            for r in rentabilidades
        ]
        rows.sort(key=lambda row: row["ganancia_neta"], reverse=True)
        return rows

    def _periodo(self) -> tuple[str, str]:
        return self.rent_inicio or _default_inicio(), self.rent_fin or get_today_str()

    def _calcular(self) -> list[Rentabilidad]:
        inicio, fin = self._periodo()
        return rentabilidad_service.calcular_rentabilidades(
            self._user_id(), self.rent_maquina_id or None, inicio, fin
        )

    @rx.event
    def load_rentabilidad(self):
        if not self._user_id():
            self.rentabilidades = []
            self.rent_resumen = {}
            return
        if not self.rent_inicio:
            self.rent_inicio = _default_inicio()
        if not self.rent_fin:
            self.rent_fin = get_today_str()
        self.rent_maquina_options = [
            {"id": m.id, "nombre": m.nombre}
            for m in MaquinaService.list_maquinas(self._user_id())
        ]
        try:
            rentabilidades = self._calcular()
        except ServiceError as exc:
            self.rent_error = str(exc)
            self.rentabilidades = []
            self.rent_resumen = {}
            return
        self.rent_error = ""
        self.rentabilidades = self._rent_rows(rentabilidades)
        self.rent_resumen = rentabilidad_service.resumen_rentabilidad(rentabilidades)

    @rx.event
    def set_rent_inicio(self, value: str):
        self.rent_inicio = value or ""
        self.load_rentabilidad()

    @rx.event
    def set_rent_fin(self, value: str):
        self.rent_fin = value or ""
        self.load_rentabilidad()

    @rx.event
    def set_rent_maquina_id(self, value: str):
        self.rent_maquina_id = "" if value in (None, "todas") else value
        self.load_rentabilidad()

    @rx.event
    @require_login()
    def export_rentabilidad(self):
        try:
            rentabilidades = self._calcular()
        except ServiceError as exc:
            return rx.toast(str(exc), duration=3000)
        if not rentabilidades:
            return rx.toast("No hay datos para exportar.", duration=3000)
        tipos = {m.id: m.tipo.value for m in MaquinaService.list_maquinas(self._user_id())}
        workbook = rentabilidad_service.build_rentabilidad_workbook(rentabilidades, tipos)
        inicio, fin = self._periodo()
        return rx.download(
            data=workbook_to_bytes(workbook),
            filename=f"rentabilidad_{inicio}_{fin}.xlsx",
        )
