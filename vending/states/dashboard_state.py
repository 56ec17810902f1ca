"""Estado del Tablero - Resumen general y recordatorios de recolección."""
import reflex as rx

from vending.services import notificacion_service, push_service
from vending.utils.logger import get_logger
from .mixin_state import MixinState, require_login
from .types import NotificacionRow

logger = get_logger("DashboardState")


class DashboardState(MixinState):
    dashboard_data: dict = {}
    notificaciones: list[NotificacionRow] = []
    farcaster_fid: str = ""

    def _empty_dashboard(self) -> dict:
        return {
            "total_maquinas": 0,
            "maquinas_activas": 0,
            "pelucheras": 0,
            "chicleras": 0,
            "total_lugares": 0,
            "pendientes": 0,
            "urgentes": 0,
            "ingresos_mes": 0.0,
            "recolecciones_mes": 0,
            "ingresos_semana": [],
            "proximas": [],
        }

    @rx.event
    def load_dashboard(self):
        user_id = self._user_id()
        if not user_id:
            self.dashboard_data = self._empty_dashboard()
            self.notificaciones = []
            return
        self.dashboard_data = notificacion_service.resumen_dashboard(user_id)
        self.notificaciones = [
            n.model_dump(mode="json") for n in notificacion_service.get_notificaciones(user_id)
        ]

    @rx.event
    def set_farcaster_fid(self, value: str):
        self.farcaster_fid = (value or "").strip()

    @rx.event
    @require_login()
    def send_push_reminders(self):
        notificaciones = notificacion_service.get_notificaciones(self._user_id())
        resultado = push_service.enviar_recordatorios(self.farcaster_fid, notificaciones)
        logger.info("Recordatorios push: %s", resultado["mensaje"])
        return rx.toast(resultado["mensaje"], duration=3500)
