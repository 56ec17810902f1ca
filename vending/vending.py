import reflex as rx

from vending.api import create_api
from vending.components.sidebar import sidebar
from vending.pages.costos import costos_page
from vending.pages.dashboard import dashboard_page
from vending.pages.login import login_page
from vending.pages.lugares import lugares_page
from vending.pages.maquinas import maquinas_page
from vending.pages.recolecciones import recolecciones_page
from vending.pages.rentabilidad import rentabilidad_page
from vending.state import State


def storage_banner() -> rx.Component:
    return rx.cond(
        State.storage_warning != "",
        rx.el.div(
            rx.icon("triangle-alert", class_name="h-5 w-5 text-amber-600"),
            rx.el.p(State.storage_warning, class_name="text-sm text-amber-800"),
            class_name="flex items-center gap-3 bg-amber-50 border border-amber-200 px-4 py-3 rounded-lg shadow-sm",
        ),
        rx.fragment(),
    )


def _toast_provider() -> rx.Component:
    return rx.toast.provider(
        position="bottom-center",
        close_button=True,
        rich_colors=True,
        toast_options=rx.toast.options(
            duration=4000,
            style={
                "background": "#111827",
                "color": "white",
                "fontSize": "16px",
                "padding": "16px 24px",
                "borderRadius": "14px",
                "boxShadow": "0 25px 60px rgba(15,23,42,0.35)",
                "textAlign": "center",
            },
        ),
    )


def index() -> rx.Component:
    return rx.cond(
        State.is_authenticated,
        rx.el.main(
            _toast_provider(),
            rx.el.div(
                sidebar(),
                rx.el.div(
                    rx.el.div(
                        storage_banner(),
                        rx.match(
                            State.current_page,
                            ("Tablero", dashboard_page()),
                            ("Maquinas", maquinas_page()),
                            ("Lugares", lugares_page()),
                            ("Recolecciones", recolecciones_page()),
                            ("Costos", costos_page()),
                            ("Rentabilidad", rentabilidad_page()),
                            rx.el.div("Página no encontrada"),
                        ),
                        class_name="w-full max-w-7xl mx-auto flex flex-col gap-4 p-4 sm:p-6",
                    ),
                    class_name="flex-1 h-screen overflow-y-auto",
                ),
                class_name="flex min-h-screen w-full bg-gray-100",
            ),
            class_name="font-['Inter']",
        ),
        rx.fragment(_toast_provider(), login_page()),
    )


app = rx.App(
    theme=rx.theme(appearance="light"),
    api_transformer=create_api(),
    head_components=[
        rx.el.link(rel="preconnect", href="https://fonts.googleapis.com"),
        rx.el.link(rel="preconnect", href="https://fonts.gstatic.com", cross_origin=""),
        rx.el.link(
            href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap",
            rel="stylesheet",
        ),
    ],
)
app.add_page(index, title="Gestión Vending", on_load=State.sync_page_from_route)
