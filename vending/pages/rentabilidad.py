import reflex as rx

from vending.components.ui import (
    CARD_STYLES,
    CELL_STYLE,
    INPUT_STYLES,
    TABLE_ROW_STYLE,
    action_button,
    data_table,
    form_field,
    page_header,
    stat_card,
)
from vending.state import State


def rentabilidad_row(item: rx.Var[dict]) -> rx.Component:
    return rx.el.tr(
        rx.el.td(item["maquina_nombre"], class_name=f"{CELL_STYLE} font-medium text-gray-900"),
        rx.el.td(item["recolecciones"].to_string(), class_name=f"{CELL_STYLE} text-center"),
        rx.el.td("$", item["ingresos_totales"].to_string(), class_name=f"{CELL_STYLE} text-right"),
        rx.el.td("$", item["costos_recoleccion"].to_string(), class_name=f"{CELL_STYLE} text-right"),
        rx.el.td("$", item["costos_productos"].to_string(), class_name=f"{CELL_STYLE} text-right"),
        rx.el.td(
            "$",
            item["ganancia_neta"].to_string(),
            class_name=rx.cond(
                item["ganancia_neta"] >= 0,
                f"{CELL_STYLE} text-right font-semibold text-emerald-700",
                f"{CELL_STYLE} text-right font-semibold text-red-600",
            ),
        ),
        rx.el.td(item["margen_ganancia"].to_string(), "%", class_name=f"{CELL_STYLE} text-right"),
        class_name=TABLE_ROW_STYLE,
    )


def filtros() -> rx.Component:
    return rx.el.div(
        form_field(
            "Desde",
            rx.el.input(
                type="date",
                value=State.rent_inicio,
                on_change=State.set_rent_inicio,
                class_name=INPUT_STYLES["default"],
            ),
        ),
        form_field(
            "Hasta",
            rx.el.input(
                type="date",
                value=State.rent_fin,
                on_change=State.set_rent_fin,
                class_name=INPUT_STYLES["default"],
            ),
        ),
        form_field(
            "Máquina",
            rx.el.select(
                rx.el.option("Todas", value="todas"),
                rx.foreach(
                    State.rent_maquina_options,
                    lambda m: rx.el.option(m["nombre"], value=m["id"]),
                ),
                value=rx.cond(State.rent_maquina_id == "", "todas", State.rent_maquina_id),
                on_change=State.set_rent_maquina_id,
                class_name=INPUT_STYLES["default"],
            ),
        ),
        rx.el.div(
            action_button("Exportar Excel", State.export_rentabilidad, variant="success", icon="file-spreadsheet"),
            class_name="flex items-end",
        ),
        class_name=f"{CARD_STYLES['default']} grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-4 gap-4",
    )


def rentabilidad_page() -> rx.Component:
    return rx.el.div(
        page_header("Rentabilidad", "Ingresos netos frente a costos por máquina."),
        filtros(),
        rx.cond(
            State.rent_error != "",
            rx.el.p(State.rent_error, class_name="text-sm text-red-600"),
            rx.fragment(),
        ),
        rx.el.div(
            stat_card("wallet", "Ingresos netos", "$" + State.rent_resumen["ingresos_totales"].to_string(), "text-emerald-600"),
            stat_card("receipt", "Costos", "$" + State.rent_resumen["costos_totales"].to_string(), "text-red-500"),
            stat_card("trending-up", "Ganancia neta", "$" + State.rent_resumen["ganancia_neta"].to_string(), "text-indigo-600"),
            stat_card("percent", "Margen", State.rent_resumen["margen_ganancia"].to_string() + "%", "text-amber-600"),
            class_name="grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-4 gap-4",
        ),
        data_table(
            headers=[
                ("Máquina", "text-left"),
                ("Recolecciones", "text-center"),
                ("Ingresos netos", "text-right"),
                ("Costos recolección", "text-right"),
                ("Costos productos", "text-right"),
                ("Ganancia", "text-right"),
                ("Margen", "text-right"),
            ],
            rows=rx.foreach(State.rentabilidades, rentabilidad_row),
            empty_message="Sin datos para el período seleccionado.",
            has_data=State.rentabilidades.length() > 0,
        ),
        on_mount=State.load_rentabilidad,
        class_name="flex flex-col gap-6 w-full",
    )
