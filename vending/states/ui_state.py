import reflex as rx
from typing import List

from vending.utils.kv import StorageUnavailableError, get_kv, get_storage_status
from .mixin_state import MixinState
from .types import NavigationItem

ROUTE_TO_PAGE = {
    "/": "Tablero",
    "/tablero": "Tablero",
    "/maquinas": "Maquinas",
    "/lugares": "Lugares",
    "/recolecciones": "Recolecciones",
    "/costos": "Costos",
    "/rentabilidad": "Rentabilidad",
}

PAGE_TO_ROUTE = {page: route for route, page in ROUTE_TO_PAGE.items() if route != "/"}


class UIState(MixinState):
    sidebar_open: bool = True
    current_page: str = "Tablero"

    @rx.event
    def sync_page_from_route(self):
        """Sincroniza current_page basándose en la ruta actual."""
        route = self.router.url.path
        self.current_page = ROUTE_TO_PAGE.get(route, "Tablero")

    @rx.var
    def navigation_items(self) -> List[NavigationItem]:
        return [
            {"label": "Tablero", "icon": "layout-dashboard", "page": "Tablero"},
            {"label": "Máquinas", "icon": "joystick", "page": "Maquinas"},
            {"label": "Lugares", "icon": "map-pin", "page": "Lugares"},
            {"label": "Recolecciones", "icon": "hand-coins", "page": "Recolecciones"},
            {"label": "Costos", "icon": "receipt", "page": "Costos"},
            {"label": "Rentabilidad", "icon": "chart-line", "page": "Rentabilidad"},
        ]

    @rx.var
    def storage_warning(self) -> str:
        try:
            get_kv()
        except StorageUnavailableError:
            return "Almacenamiento no disponible. Configure REDIS_URL."
        return get_storage_status()["warning"] or ""

    @rx.event
    def toggle_sidebar(self):
        self.sidebar_open = not self.sidebar_open

    @rx.event
    def set_page(self, page: str):
        if page not in PAGE_TO_ROUTE:
            return rx.toast("Módulo no disponible.", duration=3000)
        self.current_page = page
