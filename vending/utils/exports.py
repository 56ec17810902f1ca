"""
Exportación a Excel (openpyxl).

Helpers para los reportes descargables: encabezado con estilo, filas con
formato numérico por columna, fila de totales en negrita y serialización
a bytes para ``rx.download`` o una respuesta HTTP.
"""
import io
from typing import Any, Sequence

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

MONEY_FORMAT = '"$"#,##0.00'
PERCENT_FORMAT = '0.00"%"'
INTEGER_FORMAT = "0"

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="047857", end_color="047857", fill_type="solid")
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
TOTAL_FONT = Font(bold=True)
TOTAL_FILL = PatternFill(start_color="ECFDF5", end_color="ECFDF5", fill_type="solid")
THIN_SIDE = Side(style="thin", color="D1D5DB")
THIN_BORDER = Border(left=THIN_SIDE, right=THIN_SIDE, top=THIN_SIDE, bottom=THIN_SIDE)


def create_excel_workbook(title: str) -> tuple[Workbook, Worksheet]:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = title[:31]  # límite de Excel
    return workbook, sheet


def style_header_row(ws: Worksheet, row: int, columns: Sequence[str]) -> None:
    for col_idx, header in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = THIN_BORDER
    ws.freeze_panes = ws.cell(row=row + 1, column=1)


def add_data_rows(
    ws: Worksheet,
    data: Sequence[Sequence[Any]],
    start_row: int,
    number_formats: dict[int, str] | None = None,
    total: bool = False,
) -> int:
    """
    Escribe ``data`` desde ``start_row`` y devuelve la fila siguiente.

    Args:
        number_formats: formato por número de columna (1-indexed), por
            ejemplo ``{4: MONEY_FORMAT}``
        total: marca las filas como totales (negrita y fondo)
    """
    number_formats = number_formats or {}
    current_row = start_row
    for row_data in data:
        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=current_row, column=col_idx, value=value)
            cell.border = THIN_BORDER
            if col_idx in number_formats and isinstance(value, (int, float)):
                cell.number_format = number_formats[col_idx]
            if total:
                cell.font = TOTAL_FONT
                cell.fill = TOTAL_FILL
        current_row += 1
    return current_row


def auto_adjust_column_widths(ws: Worksheet, min_width: int = 10, max_width: int = 40) -> None:
    for column in ws.columns:
        longest = max(
            (len(str(cell.value)) for cell in column if cell.value is not None),
            default=0,
        )
        ws.column_dimensions[column[0].column_letter].width = min(
            max(longest + 2, min_width), max_width
        )


def workbook_to_bytes(workbook: Workbook) -> bytes:
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()
