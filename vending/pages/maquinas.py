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
    prioridad_badge,
    progress_bar,
    select_field,
    text_field,
)
from vending.state import State

TIPO_OPTIONS = [("peluchera", "Peluchera"), ("chiclera", "Chiclera")]
TIPO_CHICLERA_OPTIONS = [("individual", "Individual (1)"), ("doble", "Doble (2)"), ("triple", "Triple (3)")]
TIPO_PRODUCTO_OPTIONS = [("granel", "Granel"), ("bola", "Bola")]


def maquina_row(maquina: rx.Var[dict]) -> rx.Component:
    return rx.el.tr(
        rx.el.td(
            rx.el.div(
                rx.el.span(maquina["nombre"], class_name="font-medium text-gray-900"),
                rx.el.span(maquina["color"], class_name="text-xs text-gray-500"),
                class_name="flex flex-col",
            ),
            class_name=CELL_STYLE,
        ),
        rx.el.td(
            rx.el.div(
                rx.el.span(maquina["tipo"]),
                rx.el.span(maquina["detalle_tipo"], class_name="text-xs text-gray-500"),
                class_name="flex flex-col",
            ),
            class_name=CELL_STYLE,
        ),
        rx.el.td(maquina["lugar_nombre"], class_name=CELL_STYLE),
        rx.el.td(maquina["stock_resumen"], class_name=f"{CELL_STYLE} text-xs"),
        rx.el.td(
            rx.el.div(
                progress_bar(maquina["porcentaje"]),
                rx.el.div(
                    rx.el.span(maquina["ultima_recoleccion"], class_name="text-xs text-gray-500"),
                    prioridad_badge(maquina["prioridad"]),
                    class_name="flex items-center justify-between gap-2",
                ),
                class_name="flex flex-col gap-1 min-w-[160px]",
            ),
            class_name=CELL_STYLE,
        ),
        rx.el.td(
            rx.el.button(
                maquina["estado"],
                on_click=lambda _, m_id=maquina["id"]: State.toggle_maquina_activa(m_id),
                class_name=rx.cond(
                    maquina["activa"],
                    "px-2 py-1 text-xs font-semibold rounded-full bg-emerald-100 text-emerald-700",
                    "px-2 py-1 text-xs font-semibold rounded-full bg-gray-200 text-gray-700",
                ),
            ),
            class_name=f"{CELL_STYLE} text-center",
        ),
        rx.el.td(
            rx.el.div(
                icon_button(
                    "hand-coins",
                    lambda _, m_id=maquina["id"]: [
                        State.set_page("Recolecciones"),
                        State.open_recoleccion_modal(m_id),
                    ],
                    "icon_success",
                    "Registrar recolección",
                ),
                icon_button("pencil", lambda _, m_id=maquina["id"]: State.open_maquina_modal(m_id), title="Editar"),
                icon_button(
                    "trash-2",
                    lambda _, m_id=maquina["id"]: State.delete_maquina(m_id),
                    "icon_danger",
                    "Eliminar",
                ),
                class_name="flex items-center justify-center gap-1",
            ),
            class_name=f"{CELL_STYLE} text-center",
        ),
        class_name=TABLE_ROW_STYLE,
    )


def compartimento_row(comp: rx.Var[dict], index: rx.Var[int]) -> rx.Component:
    return rx.el.tr(
        rx.el.td(index + 1, class_name="py-2 px-2"),
        rx.el.td(
            rx.el.input(
                value=comp["tipo_producto"],
                on_change=lambda v: State.update_compartimento_field(index, "tipo_producto", v),
                placeholder="Producto",
                class_name=INPUT_STYLES["default"],
            ),
            class_name="py-2 px-2",
        ),
        *[
            rx.el.td(
                rx.el.input(
                    type="number",
                    step="any",
                    min="0",
                    value=comp[field],
                    on_change=lambda v, field=field: State.update_compartimento_field(index, field, v),
                    class_name=INPUT_STYLES["small"],
                ),
                class_name="py-2 px-2",
            )
            for field in ("precio_venta", "capacidad", "cantidad_actual")
        ],
        class_name="border-b",
    )


def compartimentos_editor() -> rx.Component:
    return rx.cond(
        State.compartimentos_form.length() > 0,
        rx.el.div(
            rx.el.h4("Compartimentos", class_name="text-sm font-semibold text-gray-700"),
            rx.el.table(
                rx.el.thead(
                    rx.el.tr(
                        rx.el.th("#", class_name="py-2 px-2 text-left"),
                        rx.el.th("Producto", class_name="py-2 px-2 text-left"),
                        rx.el.th("Precio", class_name="py-2 px-2 text-left"),
                        rx.el.th("Capacidad", class_name="py-2 px-2 text-left"),
                        rx.el.th("Stock", class_name="py-2 px-2 text-left"),
                        class_name="bg-gray-100",
                    )
                ),
                rx.el.tbody(rx.foreach(State.compartimentos_form, compartimento_row)),
                class_name="min-w-full text-sm",
            ),
            rx.el.p(
                "Cambiar el tipo de máquina o de chiclera reinicia los compartimentos.",
                class_name="text-xs text-gray-500",
            ),
            class_name="flex flex-col gap-2 overflow-x-auto",
        ),
        rx.fragment(),
    )


def maquina_form_modal() -> rx.Component:
    form = State.maquina_form
    return modal_container(
        is_open=State.show_maquina_modal,
        on_close=State.close_maquina_modal,
        title=rx.cond(form["id"] == "", "Nueva Máquina", "Editar Máquina"),
        description="Los compartimentos se crean automáticamente según el tipo.",
        children=[
            rx.el.div(
                text_field("Nombre", form["nombre"], lambda v: State.update_maquina_field("nombre", v), "Ej: Peluchera Plaza"),
                text_field("Color", form["color"], lambda v: State.update_maquina_field("color", v), "Rojo"),
                select_field("Tipo", form["tipo"], lambda v: State.update_maquina_field("tipo", v), TIPO_OPTIONS),
                form_field(
                    "Lugar",
                    rx.el.select(
                        rx.el.option("Seleccione un lugar", value=""),
                        rx.foreach(
                            State.lugar_options,
                            lambda lugar: rx.el.option(lugar["nombre"], value=lugar["id"]),
                        ),
                        value=form["lugar_id"],
                        on_change=lambda v: State.update_maquina_field("lugar_id", v),
                        class_name=INPUT_STYLES["default"],
                    ),
                ),
                rx.cond(
                    form["tipo"] == "chiclera",
                    select_field(
                        "Tipo de chiclera",
                        form["tipo_chiclera"],
                        lambda v: State.update_maquina_field("tipo_chiclera", v),
                        TIPO_CHICLERA_OPTIONS,
                    ),
                    rx.fragment(),
                ),
                rx.cond(
                    form["tipo"] == "chiclera",
                    select_field(
                        "Tipo de producto",
                        form["tipo_producto_chiclera"],
                        lambda v: State.update_maquina_field("tipo_producto_chiclera", v),
                        TIPO_PRODUCTO_OPTIONS,
                    ),
                    rx.fragment(),
                ),
                text_field("Fecha de instalación", form["fecha_instalacion"], lambda v: State.update_maquina_field("fecha_instalacion", v), input_type="date"),
                text_field("Días entre recolecciones", form["dias_recoleccion_estimados"], lambda v: State.update_maquina_field("dias_recoleccion_estimados", v), "7", "number"),
                text_field("Costo de la máquina", form["costo_maquina"], lambda v: State.update_maquina_field("costo_maquina", v), "0.00", "number"),
                text_field("Notas", form["notas"], lambda v: State.update_maquina_field("notas", v), "Opcional"),
                class_name="grid grid-cols-1 md:grid-cols-2 gap-4",
            ),
            compartimentos_editor(),
        ],
        footer=modal_footer(State.close_maquina_modal, State.save_maquina),
        max_width="max-w-3xl",
    )


def maquinas_page() -> rx.Component:
    return rx.el.div(
        page_header(
            "Máquinas",
            "Pelucheras y chicleras instaladas en tus lugares.",
            action_button("Nueva Máquina", lambda: State.open_maquina_modal(None), icon="plus"),
        ),
        rx.el.div(
            rx.el.select(
                rx.el.option("Todas", value="todas"),
                rx.el.option("Pelucheras", value="peluchera"),
                rx.el.option("Chicleras", value="chiclera"),
                value=State.maquina_filter_tipo,
                on_change=State.set_maquina_filter_tipo,
                class_name="w-full sm:w-60 p-2 border rounded-md bg-white",
            ),
            class_name="flex",
        ),
        data_table(
            headers=[
                ("Máquina", "text-left"),
                ("Tipo", "text-left"),
                ("Lugar", "text-left"),
                ("Stock", "text-left"),
                ("Ciclo", "text-left"),
                ("Estado", "text-center"),
                ("Acciones", "text-center"),
            ],
            rows=rx.foreach(State.maquinas, maquina_row),
            empty_message="No hay máquinas registradas.",
            has_data=State.maquinas.length() > 0,
        ),
        maquina_form_modal(),
        on_mount=[State.load_lugares, State.load_maquinas],
        class_name="flex flex-col gap-6 w-full",
    )
