"""Invoice report workbook writer (openpyxl)."""

from io import BytesIO
from typing import Any

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter


REPORT_SHEET_NAME = "Invoice Report"

# SR. NO, CLIENT, PLACE, CITY, TOTAL SALES, TOTAL EXPENSES, GRAND TOTAL
FIXED_COLUMN_WIDTHS = [8, 25, 15, 15, 14, 16, 14]
DAY_COLUMN_WIDTH = 12


def write_report_workbook(header: list[str], rows: list[list[Any]]) -> bytes:
    """Render report rows to .xlsx bytes."""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = REPORT_SHEET_NAME

    sheet.append(header)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for row in rows:
        sheet.append(row)

    for idx in range(len(header)):
        width = FIXED_COLUMN_WIDTHS[idx] if idx < len(FIXED_COLUMN_WIDTHS) else DAY_COLUMN_WIDTH
        sheet.column_dimensions[get_column_letter(idx + 1)].width = width

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
