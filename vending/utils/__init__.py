"""
Utility modules for Gestión Vending.

This package contains pure utility functions shared by the services,
the REST API and the Reflex states.
"""
from vending.utils.formatting import (
    format_currency,
    round_currency,
    parse_float_safe,
    parse_int_safe,
)
from vending.utils.dates import (
    now_iso,
    parse_iso,
    days_between,
    format_date_display,
    get_today_str,
)
from vending.utils.exports import (
    create_excel_workbook,
    style_header_row,
    add_data_rows,
)

__all__ = [
    # formatting
    "format_currency",
    "round_currency",
    "parse_float_safe",
    "parse_int_safe",
    # dates
    "now_iso",
    "parse_iso",
    "days_between",
    "format_date_display",
    "get_today_str",
    # exports
    "create_excel_workbook",
    "style_header_row",
    "add_data_rows",
]
