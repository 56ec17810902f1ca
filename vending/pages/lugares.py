import reflex as rx

from vending.components.ui import (
    CELL_STYLE,
    INPUT_STYLES,
    TABLE_ROW_STYLE,
    action_button,
    data_table,
    icon_button,
    modal_container,
    modal_footer,
    page_header,
    text_field,
)
from vending.state import State


def lugar_row(lugar: rx.Var[dict]) -> rx.Component:
    return rx.el.tr(
        rx.el.td(lugar["nombre"], class_name=f"{CELL_STYLE} font-medium text-gray-900"),
        rx.el.td(lugar["direccion"], class_name=CELL_STYLE),
        rx.el.td(
            rx.cond(
                lugar["google_maps_url"] != "",
                rx.el.a(
                    rx.icon("map", class_name="h-4 w-4"),
                    "Ver mapa",
                    href=lugar["google_maps_url"],
                    target="_blank",
                    class_name="flex items-center gap-1 text-indigo-600 hover:underline",
                ),
                rx.el.span("-", class_name="text-gray-400"),
            ),
            class_name=CELL_STYLE,
        ),
        rx.el.td(lugar["maquinas"].to_string(), class_name=f"{CELL_STYLE} text-center"),
        rx.el.td(
            rx.el.div(
                icon_button("pencil", lambda _, l_id=lugar["id"]: State.open_lugar_modal(l_id), title="Editar"),
                icon_button(
                    "trash-2",
                    lambda _, l_id=lugar["id"]: State.delete_lugar(l_id),
                    "icon_danger",
                    "Eliminar",
                ),
                class_name="flex items-center justify-center gap-1",
            ),
            class_name=f"{CELL_STYLE} text-center",
        ),
        class_name=TABLE_ROW_STYLE,
    )


def lugar_form_modal() -> rx.Component:
    form = State.lugar_form
    return modal_container(
        is_open=State.show_lugar_modal,
        on_close=State.close_lugar_modal,
        title=rx.cond(form["id"] == "", "Nuevo Lugar", "Editar Lugar"),
        description="Comercio o ubicación donde se instalan las máquinas.",
        children=[
            rx.el.div(
                text_field("Nombre", form["nombre"], lambda v: State.update_lugar_field("nombre", v), "Ej: Plaza Central"),
                text_field("Dirección", form["direccion"], lambda v: State.update_lugar_field("direccion", v), "Calle y número"),
                text_field("Latitud", form["lat"], lambda v: State.update_lugar_field("lat", v), "-12.0464"),
                text_field("Longitud", form["lng"], lambda v: State.update_lugar_field("lng", v), "-77.0428"),
                text_field("Enlace de Google Maps", form["google_maps_url"], lambda v: State.update_lugar_field("google_maps_url", v), "https://maps.google.com/..."),
                text_field("Notas", form["notas"], lambda v: State.update_lugar_field("notas", v), "Opcional"),
                class_name="grid grid-cols-1 md:grid-cols-2 gap-4",
            )
        ],
        footer=modal_footer(State.close_lugar_modal, State.save_lugar),
        max_width="max-w-2xl",
    )


def lugares_page() -> rx.Component:
    return rx.el.div(
        page_header(
            "Lugares",
            "Ubicaciones donde tienes máquinas instaladas.",
            action_button("Nuevo Lugar", lambda: State.open_lugar_modal(None), icon="plus"),
        ),
        rx.el.input(
            placeholder="Buscar por nombre o dirección...",
            value=State.lugar_search,
            on_change=State.set_lugar_search,
            class_name=INPUT_STYLES["search"],
        ),
        data_table(
            headers=[
                ("Nombre", "text-left"),
                ("Dirección", "text-left"),
                ("Mapa", "text-left"),
                ("Máquinas", "text-center"),
                ("Acciones", "text-center"),
            ],
            rows=rx.foreach(State.lugares, lugar_row),
            empty_message="No hay lugares registrados.",
            has_data=State.lugares.length() > 0,
        ),
        lugar_form_modal(),
        on_mount=State.load_lugares,
        class_name="flex flex-col gap-6 w-full",
    )
