import reflex as rx

from vending.components.ui import (
    BUTTON_STYLES,
    CARD_STYLES,
    CELL_STYLE,
    INPUT_STYLES,
    TABLE_ROW_STYLE,
    data_table,
    empty_state,
    page_header,
    prioridad_badge,
    progress_bar,
    stat_card,
)
from vending.state import State


def notificacion_row(item: rx.Var[dict]) -> rx.Component:
    return rx.el.tr(
        rx.el.td(item["maquina_nombre"], class_name=f"{CELL_STYLE} font-medium text-gray-900"),
        rx.el.td(item["ubicacion"], class_name=CELL_STYLE),
        rx.el.td(
            item["dias_desde_ultima_recoleccion"].to_string(),
            " / ",
            item["dias_estimados"].to_string(),
            " días",
            class_name=CELL_STYLE,
        ),
        rx.el.td(item["porcentaje"].to_string(), "%", class_name=f"{CELL_STYLE} text-right"),
        rx.el.td(prioridad_badge(item["prioridad"]), class_name=f"{CELL_STYLE} text-center"),
        rx.el.td(
            rx.el.button(
                rx.icon("hand-coins", class_name="h-4 w-4"),
                "Recolectar",
                on_click=[
                    State.set_page("Recolecciones"),
                    State.open_recoleccion_modal(item["maquina_id"]),
                ],
                class_name=BUTTON_STYLES["ghost"],
            ),
            class_name=f"{CELL_STYLE} text-center",
        ),
        class_name=TABLE_ROW_STYLE,
    )


def proxima_card(item: rx.Var[dict]) -> rx.Component:
    return rx.el.div(
        rx.el.div(
            rx.el.div(
                rx.el.p(item["nombre"], class_name="font-semibold text-gray-800"),
                rx.el.p(item["ubicacion"], class_name="text-xs text-gray-500"),
                class_name="flex flex-col",
            ),
            prioridad_badge(item["prioridad"]),
            class_name="flex items-start justify-between gap-2",
        ),
        progress_bar(item["porcentaje"].to(float)),
        rx.el.p(
            rx.cond(
                item["dias_restantes"].to(int) >= 0,
                item["dias_restantes"].to_string() + " día(s) para la próxima visita",
                "Atrasada " + (item["dias_restantes"].to(int) * -1).to_string() + " día(s)",
            ),
            class_name="text-xs text-gray-600",
        ),
        class_name=f"{CARD_STYLES['bordered']} flex flex-col gap-3",
    )


def semana_bar(dia: rx.Var[dict]) -> rx.Component:
    return rx.el.div(
        rx.el.span(dia["fecha"], class_name="text-xs text-gray-500 w-24"),
        rx.el.span("$", dia["ingresos"].to_string(), class_name="text-sm font-medium text-gray-800"),
        class_name="flex items-center justify-between border-b py-1",
    )


def push_section() -> rx.Component:
    return rx.el.div(
        rx.el.div(
            rx.el.h3("Recordatorios push", class_name="text-lg font-semibold text-gray-800"),
            rx.el.p(
                "Envía a Farcaster las máquinas con recolección urgente.",
                class_name="text-sm text-gray-600",
            ),
            class_name="flex flex-col gap-1",
        ),
        rx.el.div(
            rx.el.input(
                placeholder="FID de Farcaster",
                value=State.farcaster_fid,
                on_change=State.set_farcaster_fid,
                class_name=INPUT_STYLES["default"],
            ),
            rx.el.button(
                rx.icon("bell-ring", class_name="h-4 w-4"),
                "Enviar",
                on_click=State.send_push_reminders,
                class_name=BUTTON_STYLES["primary"],
            ),
            class_name="flex flex-col sm:flex-row gap-3",
        ),
        class_name=f"{CARD_STYLES['default']} flex flex-col gap-4",
    )


def dashboard_page() -> rx.Component:
    return rx.el.div(
        page_header("Tablero", "Resumen de tus máquinas y próximas recolecciones."),
        rx.el.div(
            stat_card("joystick", "Máquinas activas", State.dashboard_data["maquinas_activas"].to_string(), "text-indigo-600"),
            stat_card("map-pin", "Lugares", State.dashboard_data["total_lugares"].to_string(), "text-sky-600"),
            stat_card("bell", "Recolecciones pendientes", State.dashboard_data["pendientes"].to_string(), "text-amber-600"),
            stat_card("wallet", "Ingresos netos del mes", "$" + State.dashboard_data["ingresos_mes"].to_string(), "text-emerald-600"),
            class_name="grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-4 gap-4",
        ),
        rx.el.div(
            rx.el.div(
                rx.el.h3("Próximas recolecciones", class_name="text-lg font-semibold text-gray-800"),
                rx.cond(
                    State.dashboard_data["proximas"].to(list).length() > 0,
                    rx.el.div(
                        rx.foreach(State.dashboard_data["proximas"].to(list[dict]), proxima_card),
                        class_name="grid grid-cols-1 md:grid-cols-2 gap-3",
                    ),
                    empty_state("Aún no hay máquinas registradas."),
                ),
                class_name=f"{CARD_STYLES['default']} flex flex-col gap-4 lg:col-span-2",
            ),
            rx.el.div(
                rx.el.h3("Últimos 7 días", class_name="text-lg font-semibold text-gray-800"),
                rx.foreach(State.dashboard_data["ingresos_semana"].to(list[dict]), semana_bar),
                class_name=f"{CARD_STYLES['default']} flex flex-col gap-2",
            ),
            class_name="grid grid-cols-1 lg:grid-cols-3 gap-4",
        ),
        rx.el.h3("Recordatorios de recolección", class_name="text-lg font-semibold text-gray-800"),
        data_table(
            headers=[
                ("Máquina", "text-left"),
                ("Ubicación", "text-left"),
                ("Días", "text-left"),
                ("Progreso", "text-right"),
                ("Prioridad", "text-center"),
                ("", "text-center"),
            ],
            rows=rx.foreach(State.notificaciones, notificacion_row),
            empty_message="No hay máquinas que necesiten recolección.",
            has_data=State.notificaciones.length() > 0,
        ),
        push_section(),
        on_mount=State.load_dashboard,
        class_name="flex flex-col gap-6 w-full",
    )
