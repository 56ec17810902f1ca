import reflex as rx

from vending.components.ui import (
    BUTTON_STYLES,
    CELL_STYLE,
    INPUT_STYLES,
    TABLE_ROW_STYLE,
    action_button,
    data_table,
    form_field,
    icon_button,
    modal_container,
    modal_footer,
    page_header,
    text_field,
)
from vending.state import State


def recoleccion_row(item: rx.Var[dict]) -> rx.Component:
    return rx.el.tr(
        rx.el.td(item["fecha"], class_name=CELL_STYLE),
        rx.el.td(item["maquina_nombre"], class_name=f"{CELL_STYLE} font-medium text-gray-900"),
        rx.el.td("$", item["ingresos"].to_string(), class_name=f"{CELL_STYLE} text-right"),
        rx.el.td(item["comision_local"].to_string(), "%", class_name=f"{CELL_STYLE} text-right"),
        rx.el.td(
            "$",
            item["ingresos_netos"].to_string(),
            class_name=f"{CELL_STYLE} text-right font-semibold text-emerald-700",
        ),
        rx.el.td("$", item["costos"].to_string(), class_name=f"{CELL_STYLE} text-right"),
        rx.el.td(item["tasa_conversion"], class_name=f"{CELL_STYLE} text-right"),
        rx.el.td(item["notas"], class_name=f"{CELL_STYLE} text-xs text-gray-600"),
        rx.el.td(
            icon_button(
                "file-text",
                lambda _: State.download_comprobante(item["id"]),
                "icon_primary",
                "Comprobante",
            ),
            class_name=f"{CELL_STYLE} text-center",
        ),
        class_name=TABLE_ROW_STYLE,
    )


def linea_venta_row(linea: rx.Var[dict], index: rx.Var[int]) -> rx.Component:
    def _input(field: str, placeholder: str = "0") -> rx.Component:
        return rx.el.td(
            rx.el.input(
                type="number",
                step="any",
                min="0",
                value=linea[field],
                placeholder=placeholder,
                on_change=lambda v: State.update_linea_venta(index, field, v),
                class_name=INPUT_STYLES["small"],
            ),
            class_name="py-2 px-2",
        )

    return rx.el.tr(
        rx.el.td(
            rx.el.div(
                rx.el.span(linea["producto_nombre"], class_name="font-medium"),
                rx.el.span(
                    "Stock ",
                    linea["stock"],
                    rx.cond(linea["precio"] != "", " · $" + linea["precio"], ""),
                    class_name="text-xs text-gray-500",
                ),
                class_name="flex flex-col",
            ),
            class_name="py-2 px-2",
        ),
        _input("cantidad"),
        _input("ingresos"),
        _input("relleno"),
        class_name="border-b",
    )


def costo_recoleccion_row(costo: rx.Var[dict], index: rx.Var[int]) -> rx.Component:
    return rx.el.div(
        rx.el.input(
            value=costo["concepto"],
            placeholder="Concepto (ej: transporte)",
            on_change=lambda v: State.update_costo_recoleccion(index, "concepto", v),
            class_name=INPUT_STYLES["default"],
        ),
        rx.el.input(
            type="number",
            step="any",
            min="0",
            value=costo["monto"],
            placeholder="0.00",
            on_change=lambda v: State.update_costo_recoleccion(index, "monto", v),
            class_name="w-32 p-2 border rounded-md",
        ),
        icon_button("x", lambda _: State.remove_costo_recoleccion(index), "icon_danger", "Quitar"),
        class_name="flex items-center gap-2",
    )


def peluchera_fields() -> rx.Component:
    form = State.recoleccion_form
    return rx.cond(
        State.recoleccion_maquina_tipo == "peluchera",
        rx.el.div(
            text_field("Turnos realizados", form["turnos_realizados"], lambda v: State.update_recoleccion_field("turnos_realizados", v), "0", "number"),
            text_field("Peluches sacados", form["peluches_sacados"], lambda v: State.update_recoleccion_field("peluches_sacados", v), "0", "number"),
            text_field("Precio por turno", form["precio_por_turno"], lambda v: State.update_recoleccion_field("precio_por_turno", v), "0.00", "number"),
            class_name="grid grid-cols-1 md:grid-cols-3 gap-4",
        ),
        rx.fragment(),
    )


def recoleccion_form_modal() -> rx.Component:
    form = State.recoleccion_form
    return modal_container(
        is_open=State.show_recoleccion_modal,
        on_close=State.close_recoleccion_modal,
        title="Registrar Recolección",
        description="Indica lo recaudado, lo vendido por compartimento y los rellenos.",
        children=[
            rx.el.div(
                form_field(
                    "Máquina",
                    rx.el.select(
                        rx.el.option("Seleccione una máquina", value=""),
                        rx.foreach(
                            State.recoleccion_maquina_options,
                            lambda m: rx.el.option(m["nombre"], value=m["id"]),
                        ),
                        value=form["maquina_id"],
                        on_change=State.select_recoleccion_maquina,
                        class_name=INPUT_STYLES["default"],
                    ),
                ),
                text_field("Fecha", form["fecha"], lambda v: State.update_recoleccion_field("fecha", v), input_type="date"),
                text_field("Ingresos (vacío = suma de ventas)", form["ingresos"], lambda v: State.update_recoleccion_field("ingresos", v), "0.00", "number"),
                text_field("Comisión del local (%)", form["comision_local"], lambda v: State.update_recoleccion_field("comision_local", v), "0", "number"),
                class_name="grid grid-cols-1 md:grid-cols-2 gap-4",
            ),
            peluchera_fields(),
            rx.cond(
                State.lineas_venta_form.length() > 0,
                rx.el.div(
                    rx.el.h4("Ventas y rellenos", class_name="text-sm font-semibold text-gray-700"),
                    rx.el.table(
                        rx.el.thead(
                            rx.el.tr(
                                rx.el.th("Compartimento", class_name="py-2 px-2 text-left"),
                                rx.el.th("Vendidos", class_name="py-2 px-2 text-left"),
                                rx.el.th("Ingresos", class_name="py-2 px-2 text-left"),
                                rx.el.th("Relleno", class_name="py-2 px-2 text-left"),
                                class_name="bg-gray-100",
                            )
                        ),
                        rx.el.tbody(rx.foreach(State.lineas_venta_form, linea_venta_row)),
                        class_name="min-w-full text-sm",
                    ),
                    rx.el.p(
                        "Total de ventas: $",
                        State.ingresos_lineas_total.to_string(),
                        class_name="text-xs text-gray-600",
                    ),
                    class_name="flex flex-col gap-2 overflow-x-auto",
                ),
                rx.fragment(),
            ),
            rx.el.div(
                rx.el.div(
                    rx.el.h4("Costos de la visita", class_name="text-sm font-semibold text-gray-700"),
                    rx.el.button(
                        rx.icon("plus", class_name="h-4 w-4"),
                        "Agregar",
                        on_click=State.add_costo_recoleccion,
                        class_name=BUTTON_STYLES["ghost"],
                    ),
                    class_name="flex items-center justify-between",
                ),
                rx.foreach(State.costos_recoleccion_form, costo_recoleccion_row),
                class_name="flex flex-col gap-2",
            ),
            text_field("Notas", form["notas"], lambda v: State.update_recoleccion_field("notas", v), "Opcional"),
            rx.el.div(
                rx.el.span("Ingresos netos estimados", class_name="text-sm text-gray-600"),
                rx.el.span(
                    "$",
                    State.ingresos_netos_preview.to_string(),
                    class_name="text-xl font-bold text-emerald-700",
                ),
                class_name="flex items-center justify-between bg-emerald-50 border border-emerald-100 rounded-lg p-3",
            ),
        ],
        footer=modal_footer(State.close_recoleccion_modal, State.save_recoleccion),
        max_width="max-w-3xl",
    )


def recolecciones_page() -> rx.Component:
    return rx.el.div(
        page_header(
            "Recolecciones",
            "Historial de visitas y recaudación por máquina.",
            action_button("Nueva Recolección", lambda: State.open_recoleccion_modal(None), icon="plus"),
        ),
        rx.el.select(
            rx.el.option("Todas las máquinas", value="todas"),
            rx.foreach(
                State.recoleccion_maquina_options,
                lambda m: rx.el.option(m["nombre"], value=m["id"]),
            ),
            value=rx.cond(State.recoleccion_filter_maquina == "", "todas", State.recoleccion_filter_maquina),
            on_change=State.set_recoleccion_filter_maquina,
            class_name="w-full sm:w-72 p-2 border rounded-md bg-white",
        ),
        data_table(
            headers=[
                ("Fecha", "text-left"),
                ("Máquina", "text-left"),
                ("Ingresos", "text-right"),
                ("Comisión", "text-right"),
                ("Netos", "text-right"),
                ("Costos", "text-right"),
                ("Conversión", "text-right"),
                ("Notas", "text-left"),
                ("Comprobante", "text-center"),
            ],
            rows=rx.foreach(State.recolecciones, recoleccion_row),
            empty_message="No hay recolecciones registradas.",
            has_data=State.recolecciones.length() > 0,
        ),
        recoleccion_form_modal(),
        on_mount=State.load_recolecciones,
        class_name="flex flex-col gap-6 w-full",
    )
