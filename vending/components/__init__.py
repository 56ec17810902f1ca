"""
Componentes reutilizables de Gestión Vending.
"""
from vending.components.sidebar import sidebar
from vending.components.ui import (
    BUTTON_STYLES,
    CARD_STYLES,
    CELL_STYLE,
    INPUT_STYLES,
    TABLE_ROW_STYLE,
    action_button,
    data_table,
    empty_state,
    form_field,
    icon_button,
    modal_container,
    modal_footer,
    page_header,
    prioridad_badge,
    progress_bar,
    select_field,
    stat_card,
    text_field,
)

__all__ = [
    "sidebar",
    "BUTTON_STYLES",
    "CARD_STYLES",
    "CELL_STYLE",
    "INPUT_STYLES",
    "TABLE_ROW_STYLE",
    "action_button",
    "data_table",
    "empty_state",
    "form_field",
    "icon_button",
    "modal_container",
    "modal_footer",
    "page_header",
    "prioridad_badge",
    "progress_bar",
    "select_field",
    "stat_card",
    "text_field",
]
