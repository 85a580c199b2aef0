"""Tests for the distribution workbook importer and the report writer."""

from io import BytesIO

import openpyxl
import pytest

from marathi_invoice.services.excel import (
    ExcelImportError,
    parse_invoice_workbook,
    parse_rows,
    write_report_workbook,
)
from marathi_invoice.services.excel.importer import find_day_groups
from marathi_invoice.services.excel.report import REPORT_SHEET_NAME


HEADER = [
    "In_no", "BILL TO", "ADDRESS", "PAN NO.", "GST NUMBER", "CINEMA NAME", "CENTRE",
    "PLACE OF SERVICE",
    "01-08 FRI", "AUD", "COLL",
    "02-08 SAT", "AUD", "COLL",
    "TOTAL SHOWS", "TOTAL AUDIENCE", "TOTAL COLLECTION", "SHOW TAX", "OTHERS",
]

ROW = [
    "INV-101", "Prabhat Talkies", "Tilak Road, Pune", "ABCDE1234F", "27ABCDE1234F1Z5",
    "Prabhat", "Pune", "Maharashtra",
    4, 100, 6000,
    4, 80, "5,000",
    8, 180, 11000, 500, 500,
]


def workbook_bytes(rows):
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class TestDayGroups:

    def test_groups_of_three(self):
        header = ["BILL TO", "01-08 FRI", "AUD", "COLL", "02-08", "A", "C", "TOTAL"]
        assert find_day_groups(header) == [("01-08", 1), ("02-08", 4)]

    def test_no_days(self):
        assert find_day_groups(["BILL TO", "ADDRESS"]) == []


class TestParseRows:

    def test_header_found_below_title(self):
        invoices = parse_rows([["Weekly distribution"], [], HEADER, ROW])

        assert len(invoices) == 1
        invoice = invoices[0]
        assert invoice.invoice_no == "INV-101"
        assert invoice.client_name == "Prabhat Talkies"
        assert invoice.cinema_name == "Prabhat"
        assert invoice.place_of_service == "Maharashtra"
        assert [day.date for day in invoice.table] == ["01-08", "02-08"]
        assert invoice.table[1].collection == 5000
        assert invoice.total_collection == 11000
        assert invoice.show_tax == 500
        assert invoice.other_deduction == 500

    def test_rows_without_client_are_skipped(self):
        blank = [None] * len(HEADER)
        invoices = parse_rows([HEADER, ROW, blank, ["INV-102", "  "]])
        assert len(invoices) == 1

    def test_short_rows(self):
        invoices = parse_rows([HEADER, [None, "Only a name"]])
        assert invoices[0].client_name == "Only a name"
        assert invoices[0].total_collection == 0
        assert invoices[0].table[0].show == 0

    def test_missing_header(self):
        with pytest.raises(ExcelImportError):
            parse_rows([["something else"], ROW])


class TestParseWorkbook:

    def test_round_trip_through_xlsx(self):
        invoices = parse_invoice_workbook(workbook_bytes([["Report"], HEADER, ROW]))
        assert len(invoices) == 1
        assert invoices[0].total_aud == 180

    def test_empty_file(self):
        with pytest.raises(ExcelImportError):
            parse_invoice_workbook(b"")

    def test_not_a_workbook(self):
        with pytest.raises(ExcelImportError):
            parse_invoice_workbook(b"this is not a zip file")


class TestReportWorkbook:

    def test_layout(self):
        header = [
            "SR. NO", "CLIENT (MR. RA. RA.)", "PLACE", "CITY",
            "TOTAL SALES", "TOTAL EXPENSES", "GRAND TOTAL", "01-08-2025",
        ]
        rows = [[1, "Patil", "Pune", "Pune", "100.00", "20.00", "80.00", "100.00"]]

        content = write_report_workbook(header, rows)

        workbook = openpyxl.load_workbook(BytesIO(content))
        sheet = workbook.active
        assert sheet.title == REPORT_SHEET_NAME
        assert [cell.value for cell in sheet[1]] == header
        assert sheet["A1"].font.bold
        assert sheet["B2"].value == "Patil"
        assert sheet.column_dimensions["A"].width == 8
        assert sheet.column_dimensions["H"].width == 12
