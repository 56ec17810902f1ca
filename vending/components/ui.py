"""
Componentes de interfaz reutilizables para Gestión Vending.

Estilos compartidos (botones, inputs, tarjetas) y piezas comunes de las
páginas: encabezados, modales, tablas, tarjetas de métricas y badges de
prioridad.
"""
import reflex as rx
from typing import Callable


BUTTON_STYLES = {
    "primary": "flex items-center justify-center gap-2 px-4 py-2 rounded-md bg-indigo-600 text-white hover:bg-indigo-700 min-h-[44px]",
    "secondary": "flex items-center justify-center gap-2 px-4 py-2 rounded-md border text-gray-700 hover:bg-gray-50 min-h-[44px]",
    "success": "flex items-center justify-center gap-2 px-4 py-2 rounded-md bg-green-600 text-white hover:bg-green-700 min-h-[44px]",
    "danger": "flex items-center justify-center gap-2 px-4 py-2 rounded-md bg-red-600 text-white hover:bg-red-700 min-h-[44px]",
    "ghost": "flex items-center justify-center gap-2 px-3 py-2 rounded-md text-gray-600 hover:bg-gray-100 min-h-[40px]",
    "icon_danger": "p-2 text-red-500 hover:bg-red-100 rounded-full",
    "icon_primary": "p-2 text-indigo-600 hover:bg-indigo-50 rounded-full",
    "icon_success": "p-2 text-emerald-600 hover:bg-emerald-50 rounded-full",
}

INPUT_STYLES = {
    "default": "w-full p-2 border rounded-md",
    "small": "w-24 p-1 border rounded-md text-sm",
    "search": "w-full p-2 border rounded-md",
}

CARD_STYLES = {
    "default": "bg-white p-4 sm:p-6 rounded-lg shadow-md",
    "bordered": "bg-white border border-gray-200 rounded-lg p-4 sm:p-5 shadow-sm",
}

TABLE_HEADER_STYLE = "bg-gray-100"
TABLE_ROW_STYLE = "border-b hover:bg-gray-50 transition-colors"
CELL_STYLE = "py-3 px-4"


def action_button(
    text: str,
    on_click: Callable,
    variant: str = "primary",
    icon: str | None = None,
) -> rx.Component:
    """Botón con ícono opcional y estilo de ``BUTTON_STYLES``."""
    content = []
    if icon:
        content.append(rx.icon(icon, class_name="h-4 w-4"))
    content.append(rx.el.span(text))
    return rx.el.button(
        *content,
        on_click=on_click,
        class_name=BUTTON_STYLES.get(variant, BUTTON_STYLES["primary"]),
    )


def icon_button(icon: str, on_click: Callable, variant: str = "icon_primary", title: str = "") -> rx.Component:
    return rx.el.button(
        rx.icon(icon, class_name="h-4 w-4"),
        on_click=on_click,
        title=title,
        class_name=BUTTON_STYLES.get(variant, BUTTON_STYLES["icon_primary"]),
    )


def form_field(label: str, input_component: rx.Component) -> rx.Component:
    return rx.el.div(
        rx.el.label(label, class_name="text-sm font-medium text-gray-700"),
        input_component,
        class_name="flex flex-col gap-1",
    )


def text_field(
    label: str,
    value: rx.Var,
    on_change: Callable,
    placeholder: str = "",
    input_type: str = "text",
) -> rx.Component:
    """Campo etiquetado con input controlado."""
    extra = {"step": "any", "min": "0"} if input_type == "number" else {}
    return form_field(
        label,
        rx.el.input(
            type=input_type,
            value=value,
            on_change=on_change,
            placeholder=placeholder,
            class_name=INPUT_STYLES["default"],
            **extra,
        ),
    )


def select_field(
    label: str,
    value: rx.Var,
    on_change: Callable,
    options: list[tuple[str, str]],
) -> rx.Component:
    """Select etiquetado con opciones fijas ``(valor, texto)``."""
    return form_field(
        label,
        rx.el.select(
            *[rx.el.option(text, value=val) for val, text in options],
            value=value,
            on_change=on_change,
            class_name=INPUT_STYLES["default"],
        ),
    )


def empty_state(message: str) -> rx.Component:
    return rx.el.p(message, class_name="text-gray-500 text-center py-8")


def page_header(title: str, subtitle: str = "", actions: rx.Component | None = None) -> rx.Component:
    """Título de página con subtítulo y acciones a la derecha."""
    text = [rx.el.h1(title, class_name="text-2xl font-bold text-gray-800")]
    if subtitle:
        text.append(rx.el.p(subtitle, class_name="text-sm text-gray-600"))
    return rx.el.div(
        rx.el.div(*text, class_name="flex flex-col gap-1"),
        actions if actions is not None else rx.fragment(),
        class_name="flex flex-col gap-3 sm:flex-row sm:items-center sm:justify-between",
    )


def modal_container(
    is_open: rx.Var,
    on_close: Callable,
    title: str | rx.Var,
    description: str = "",
    children: list[rx.Component] | None = None,
    footer: rx.Component | None = None,
    max_width: str = "max-w-lg",
) -> rx.Component:
    """
    Modal con fondo oscurecido; al hacer clic fuera se cierra.

    Args:
        is_open: Var reactiva que controla la visibilidad
        on_close: Evento para cerrar
        title: Título del modal
        description: Texto opcional bajo el título
        children: Contenido
        footer: Botones de acción
        max_width: Clase Tailwind de ancho máximo
    """
    body_parts = [rx.el.h3(title, class_name="text-lg font-semibold text-gray-800")]
    if description:
        body_parts.append(rx.el.p(description, class_name="text-sm text-gray-600"))
    if children:
        body_parts.extend(children)
    if footer:
        body_parts.append(footer)

    return rx.cond(
        is_open,
        rx.el.div(
            rx.el.div(on_click=on_close, class_name="fixed inset-0 bg-black/40"),
            rx.el.div(
                *body_parts,
                class_name=f"relative z-10 w-full {max_width} rounded-xl bg-white p-6 shadow-xl max-h-[90vh] overflow-y-auto space-y-4",
            ),
            class_name="fixed inset-0 z-50 flex items-center justify-center px-4",
        ),
        rx.fragment(),
    )


def modal_footer(on_cancel: Callable, on_save: Callable, save_text: str = "Guardar") -> rx.Component:
    return rx.el.div(
        rx.el.button("Cancelar", on_click=on_cancel, class_name=BUTTON_STYLES["secondary"]),
        rx.el.button(
            rx.icon("save", class_name="h-4 w-4"),
            save_text,
            on_click=on_save,
            class_name=BUTTON_STYLES["primary"],
        ),
        class_name="flex justify-end gap-3 pt-2",
    )


def stat_card(
    icon: str,
    title: str,
    value: rx.Var | rx.Component,
    icon_color: str = "text-gray-600",
) -> rx.Component:
    return rx.el.div(
        rx.el.div(
            rx.icon(icon, class_name=f"h-6 w-6 {icon_color}"),
            class_name="p-3 bg-gray-100 rounded-lg",
        ),
        rx.el.div(
            rx.el.p(title, class_name="text-sm font-medium text-gray-500"),
            rx.el.p(value, class_name="text-2xl font-bold text-gray-800"),
            class_name="flex-grow",
        ),
        class_name="flex items-center gap-4 bg-white p-4 rounded-xl shadow-sm border",
    )


def prioridad_badge(prioridad: rx.Var) -> rx.Component:
    """Badge de prioridad de recolección (alta/media/baja)."""
    return rx.match(
        prioridad,
        (
            "alta",
            rx.el.span(
                "Alta",
                class_name="px-2 py-1 text-xs font-semibold rounded-full bg-red-100 text-red-700",
            ),
        ),
        (
            "media",
            rx.el.span(
                "Media",
                class_name="px-2 py-1 text-xs font-semibold rounded-full bg-amber-100 text-amber-700",
            ),
        ),
        rx.el.span(
            "Baja",
            class_name="px-2 py-1 text-xs font-semibold rounded-full bg-emerald-100 text-emerald-700",
        ),
    )


def progress_bar(porcentaje: rx.Var) -> rx.Component:
    """Barra del ciclo de recolección; pasa a rojo desde 100%."""
    return rx.el.div(
        rx.el.div(
            class_name=rx.cond(
                porcentaje >= 100,
                "h-2 rounded-full bg-red-500",
                rx.cond(porcentaje >= 75, "h-2 rounded-full bg-amber-500", "h-2 rounded-full bg-emerald-500"),
            ),
            style={"width": rx.cond(porcentaje >= 100, "100%", porcentaje.to_string() + "%")},
        ),
        class_name="w-full h-2 bg-gray-200 rounded-full",
    )


def data_table(
    headers: list[tuple[str, str]],
    rows: rx.Component,
    empty_message: str = "No hay datos disponibles.",
    has_data: rx.Var | bool = True,
) -> rx.Component:
    """
    Tabla con encabezados ``(texto, alineación)`` y mensaje cuando no hay filas.
    """
    header_cells = [rx.el.th(text, class_name=f"{CELL_STYLE} {align}") for text, align in headers]
    empty_component = empty_state(empty_message)
    if isinstance(has_data, rx.Var):
        empty_section = rx.cond(has_data, rx.fragment(), empty_component)
    else:
        empty_section = rx.fragment() if has_data else empty_component

    return rx.el.div(
        rx.el.table(
            rx.el.thead(rx.el.tr(*header_cells, class_name=TABLE_HEADER_STYLE)),
            rx.el.tbody(rows),
            class_name="min-w-full text-sm",
        ),
        empty_section,
        class_name=f"{CARD_STYLES['default']} overflow-x-auto flex flex-col gap-4",
    )
