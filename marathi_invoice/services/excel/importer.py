"""
Distribution workbook importer.

Layout of the first sheet:
- somewhere near the top, a header row containing the cell "BILL TO"
- fixed client/cinema columns (BILL TO, ADDRESS, PAN NO., GST NUMBER,
  CINEMA NAME, CENTRE, PLACE OF SERVICE)
- for each screening day, three columns: "DD-MM ..." (shows),
  then audience, then collection
- totals and deductions columns recognised by substring
  (TOTAL SHOW, TOTAL AUDIE, TOTAL COLLEC, SHOW TAX, OTHERS)

Each non-empty row below the header is one cinema invoice.
"""

import re
import zipfile
from io import BytesIO
from typing import Any, Optional

import openpyxl
import structlog
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError

from marathi_invoice.models.invoice import CinemaInvoice, DailyCollection


logger = structlog.get_logger(__name__)

HEADER_MARKER = "BILL TO"

FIXED_COLUMNS = {
    "invoice_no": "In_no",
    "client_name": "BILL TO",
    "client_address": "ADDRESS",
    "pan_no": "PAN NO.",
    "gstin_no": "GST NUMBER",
    "cinema_name": "CINEMA NAME",
    "centre": "CENTRE",
    "place_of_service": "PLACE OF SERVICE",
}

TOTAL_COLUMNS = {
    "total_show": "TOTAL SHOW",
    "total_aud": "TOTAL AUDIE",
    "total_collection": "TOTAL COLLEC",
    "show_tax": "SHOW TAX",
    "other_deduction": "OTHERS",
}

_DAY_HEADER_RE = re.compile(r"^(\d{2}-\d{2})")


class ExcelImportError(Exception):
    """Workbook could not be read or has no recognisable header."""
    pass


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _find_exact(header: list[str], name: str) -> Optional[int]:
    for idx, cell in enumerate(header):
        if cell == name:
            return idx
    return None


def _find_containing(header: list[str], fragment: str) -> Optional[int]:
    for idx, cell in enumerate(header):
        if cell and fragment in cell.upper():
            return idx
    return None


def find_day_groups(header: list[str]) -> list[tuple[str, int]]:
    """
    (day label, first column index) for every day group.

    A day header starts with DD-MM; its audience and collection columns
    follow it directly and are skipped.
    """
    groups = []
    idx = 0
    while idx < len(header):
        match = _DAY_HEADER_RE.match(header[idx] or "")
        if match:
            groups.append((match.group(1), idx))
            idx += 3
        else:
            idx += 1
    return groups


def _read_rows(data: bytes) -> list[list[Any]]:
    try:
        workbook = openpyxl.load_workbook(BytesIO(data), data_only=True, read_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as e:
        raise ExcelImportError(f"Could not read workbook: {e}") from e

    try:
        if not workbook.sheetnames:
            raise ExcelImportError("Workbook has no sheets")
        sheet = workbook[workbook.sheetnames[0]]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def parse_rows(rows: list[list[Any]]) -> list[CinemaInvoice]:
    """Map raw sheet rows (header row somewhere inside) to cinema invoices."""
    header_idx = None
    for idx, row in enumerate(rows):
        if any(_cell_text(cell) == HEADER_MARKER for cell in row):
            header_idx = idx
            break
    if header_idx is None:
        raise ExcelImportError(f"No header row containing '{HEADER_MARKER}' found")

    header = [_cell_text(cell) for cell in rows[header_idx]]
    fixed = {field: _find_exact(header, name) for field, name in FIXED_COLUMNS.items()}
    totals = {field: _find_containing(header, name) for field, name in TOTAL_COLUMNS.items()}
    day_groups = find_day_groups(header)

    def cell(row: list[Any], idx: Optional[int]) -> Any:
        if idx is None or idx >= len(row):
            return None
        return row[idx]

    invoices = []
    for offset, row in enumerate(rows[header_idx + 1:], start=header_idx + 2):
        if not _cell_text(cell(row, fixed["client_name"])):
            continue

        values = {field: cell(row, idx) for field, idx in fixed.items()}
        values.update({field: cell(row, idx) for field, idx in totals.items()})
        values["table"] = [
            DailyCollection(
                date=label,
                show=cell(row, start),
                aud=cell(row, start + 1),
                collection=cell(row, start + 2),
            )
            for label, start in day_groups
        ]

        try:
            invoices.append(CinemaInvoice(**values))
        except ValidationError as e:
            raise ExcelImportError(f"Row {offset}: {e.errors()[0]['msg']}") from e

    return invoices


def parse_invoice_workbook(data: bytes) -> list[CinemaInvoice]:
    """
    Parse a distribution workbook into one CinemaInvoice per cinema row.

    Raises:
        ExcelImportError: unreadable file or missing BILL TO header
    """
    if not data:
        raise ExcelImportError("Empty file")

    invoices = parse_rows(_read_rows(data))
    logger.info("excel_workbook_parsed", invoice_count=len(invoices))
    return invoices
