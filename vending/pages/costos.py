import reflex as rx

from vending.components.ui import (
    CELL_STYLE,
    TABLE_ROW_STYLE,
    action_button,
    data_table,
    modal_container,
    modal_footer,
    page_header,
    select_field,
    text_field,
)
from vending.state import State

UNIDAD_OPTIONS = [
    ("unidades", "Unidades"),
    ("kg", "Kilogramos"),
    ("cajas", "Cajas"),
    ("bolsas", "Bolsas"),
    ("paquetes", "Paquetes"),
]
TIPO_OPTIONS = [("chiclera", "Chiclera"), ("peluchera", "Peluchera")]


def costo_row(costo: rx.Var[dict]) -> rx.Component:
    return rx.el.tr(
        rx.el.td(costo["fecha"], class_name=CELL_STYLE),
        rx.el.td(
            rx.el.div(
                rx.el.span(costo["concepto"], class_name="font-medium text-gray-900"),
                rx.el.span(costo["proveedor"], class_name="text-xs text-gray-500"),
                class_name="flex flex-col",
            ),
            class_name=CELL_STYLE,
        ),
        rx.el.td(costo["tipo_maquina"], class_name=CELL_STYLE),
        rx.el.td(costo["cantidad"].to_string(), " ", costo["unidad"], class_name=CELL_STYLE),
        rx.el.td("$", costo["costo_total"].to_string(), class_name=f"{CELL_STYLE} text-right"),
        rx.el.td("$", costo["costo_unitario"].to_string(), class_name=f"{CELL_STYLE} text-right"),
        rx.el.td(
            "$",
            costo["costo_por_unidad"].to_string(),
            class_name=f"{CELL_STYLE} text-right font-semibold",
        ),
        rx.el.td(costo["relacionados"].to_string(), class_name=f"{CELL_STYLE} text-center"),
        class_name=TABLE_ROW_STYLE,
    )


def conversion_fields() -> rx.Component:
    form = State.costo_form
    unidades_kg = text_field(
        "Unidades por kg", form["unidades_por_kg"], lambda v: State.update_costo_field("unidades_por_kg", v), "100", "number"
    )
    return rx.match(
        form["unidad"],
        ("kg", unidades_kg),
        (
            "cajas",
            rx.fragment(
                text_field("Kg por caja", form["kg_por_caja"], lambda v: State.update_costo_field("kg_por_caja", v), "10", "number"),
                unidades_kg,
            ),
        ),
        (
            "bolsas",
            text_field(
                "Unidades por bolsa",
                form["unidades_por_bolsas"],
                lambda v: State.update_costo_field("unidades_por_bolsas", v),
                "50",
                "number",
            ),
        ),
        rx.fragment(),
    )


def relacion_option(option: rx.Var[dict]) -> rx.Component:
    return rx.el.label(
        rx.el.input(
            type="checkbox",
            checked=State.costo_relacionados.contains(option["value"]),
            on_change=lambda _: State.toggle_costo_relacionado(option["value"]),
        ),
        rx.el.span(option["nombre"], class_name="text-sm"),
        class_name="flex items-center gap-2",
    )


def costo_preview() -> rx.Component:
    return rx.cond(
        State.costo_preview["valido"],
        rx.el.div(
            rx.el.span("Costo por ", State.costo_form["unidad"], ": $", State.costo_preview["costo_unitario"]),
            rx.el.span(
                "Costo por pieza: $",
                State.costo_preview["costo_por_unidad"],
                class_name="font-semibold",
            ),
            class_name="flex flex-col sm:flex-row sm:justify-between gap-1 text-sm bg-indigo-50 border border-indigo-100 rounded-lg p-3",
        ),
        rx.el.p(State.costo_preview["mensaje"], class_name="text-sm text-amber-700"),
    )


def costo_form_modal() -> rx.Component:
    form = State.costo_form
    return modal_container(
        is_open=State.show_costo_modal,
        on_close=State.close_costo_modal,
        title="Registrar Compra de Insumos",
        description="El costo por pieza se calcula según la unidad de compra.",
        children=[
            rx.el.div(
                text_field("Concepto", form["concepto"], lambda v: State.update_costo_field("concepto", v), "Ej: Chicle bola 1kg"),
                select_field("Tipo de máquina", form["tipo_maquina"], lambda v: State.update_costo_field("tipo_maquina", v), TIPO_OPTIONS),
                text_field("Fecha", form["fecha"], lambda v: State.update_costo_field("fecha", v), input_type="date"),
                select_field("Unidad de compra", form["unidad"], lambda v: State.update_costo_field("unidad", v), UNIDAD_OPTIONS),
                text_field("Cantidad", form["cantidad"], lambda v: State.update_costo_field("cantidad", v), "1", "number"),
                text_field("Costo total", form["costo_total"], lambda v: State.update_costo_field("costo_total", v), "0.00", "number"),
                conversion_fields(),
                text_field("Proveedor", form["proveedor"], lambda v: State.update_costo_field("proveedor", v), "Opcional"),
                text_field("Notas", form["notas"], lambda v: State.update_costo_field("notas", v), "Opcional"),
                class_name="grid grid-cols-1 md:grid-cols-2 gap-4",
            ),
            costo_preview(),
            rx.cond(
                State.costo_relacion_options.length() > 0,
                rx.el.div(
                    rx.el.h4("Productos relacionados", class_name="text-sm font-semibold text-gray-700"),
                    rx.el.div(
                        rx.foreach(State.costo_relacion_options, relacion_option),
                        class_name="grid grid-cols-1 md:grid-cols-2 gap-2",
                    ),
                    class_name="flex flex-col gap-2",
                ),
                rx.fragment(),
            ),
        ],
        footer=modal_footer(State.close_costo_modal, State.save_costo),
        max_width="max-w-3xl",
    )


def costos_page() -> rx.Component:
    return rx.el.div(
        page_header(
            "Costos de Insumos",
            "Compras de producto para tus máquinas.",
            action_button("Nueva Compra", State.open_costo_modal, icon="plus"),
        ),
        rx.el.div(
            rx.el.select(
                rx.el.option("Todos", value="todos"),
                rx.el.option("Chicleras", value="chiclera"),
                rx.el.option("Pelucheras", value="peluchera"),
                value=State.costo_filter_tipo,
                on_change=State.set_costo_filter_tipo,
                class_name="w-full sm:w-60 p-2 border rounded-md bg-white",
            ),
            rx.el.span(
                "Total: $",
                State.costos_total_periodo.to_string(),
                class_name="text-sm font-semibold text-gray-700",
            ),
            class_name="flex flex-col sm:flex-row sm:items-center sm:justify-between gap-3",
        ),
        data_table(
            headers=[
                ("Fecha", "text-left"),
                ("Concepto", "text-left"),
                ("Tipo", "text-left"),
                ("Cantidad", "text-left"),
                ("Total", "text-right"),
                ("Por unidad de compra", "text-right"),
                ("Por pieza", "text-right"),
                ("Relacionados", "text-center"),
            ],
            rows=rx.foreach(State.costos, costo_row),
            empty_message="No hay compras registradas.",
            has_data=State.costos.length() > 0,
        ),
        costo_form_modal(),
        on_mount=State.load_costos,
        class_name="flex flex-col gap-6 w-full",
    )
