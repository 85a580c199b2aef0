"""Excel import and report export (openpyxl)."""

from marathi_invoice.services.excel.importer import (
    ExcelImportError,
    parse_invoice_workbook,
    parse_rows,
)
from marathi_invoice.services.excel.report import write_report_workbook

__all__ = [
    "ExcelImportError",
    "parse_invoice_workbook",
    "parse_rows",
    "write_report_workbook",
]
