"""Tests for report summaries, filtering and report rows."""

from datetime import date
from decimal import Decimal

import pytest

from marathi_invoice.models import InvoiceRecord
from marathi_invoice.reports import (
    ReportError,
    build_report_rows,
    filter_records,
    grand_total_of,
    make_filter,
    no_match_message,
    parse_invoice_date,
    record_date,
    report_filename,
    summarize,
    unique_clients,
)


def record(**data):
    created_at = data.pop("created_at", None)
    return InvoiceRecord(data=data, created_at=created_at)


@pytest.fixture
def records():
    return [
        record(
            In_no="1", mrRaRa="Patil", place="Pune", centre="Pune",
            invoiceDate="05-08-2025", grandTotalRs=1000,
            totalCollection="1200", expensesTotal="200.00",
            table=[{"date": "05-08", "collection": 1200}],
        ),
        record(
            In_no="2", mrRaRa="Joshi", place="Nashik",
            invoiceDate="20/07/2025", grandTotal="₹ 2,500.50",
        ),
        record(In_no="3", mrRaRa="Patil", created_at="2025-06-30T12:00:00Z", netAmount=300.25),
        record(In_no="4", mrRaRa="", invoiceDate="not a date"),
    ]


class TestParseInvoiceDate:

    def test_formats(self):
        assert parse_invoice_date("2025-08-01T10:00:00Z") == date(2025, 8, 1)
        assert parse_invoice_date("01/08/2025") == date(2025, 8, 1)
        assert parse_invoice_date("01-08-2025") == date(2025, 8, 1)
        assert parse_invoice_date("2025-08-01") == date(2025, 8, 1)

    def test_unreadable(self):
        assert parse_invoice_date(None) is None
        assert parse_invoice_date("") is None
        assert parse_invoice_date("01-08") is None
        assert parse_invoice_date("32-01-2025") is None
        assert parse_invoice_date("yesterday") is None

    def test_record_date_falls_back_to_created_at(self, records):
        assert record_date(records[0]) == date(2025, 8, 5)
        assert record_date(records[2]) == date(2025, 6, 30)
        assert record_date(records[3]) is None


class TestGrandTotal:

    def test_key_order_and_cleanup(self, records):
        assert grand_total_of(records[0]) == Decimal("1000")
        assert grand_total_of(records[1]) == Decimal("2500.50")
        assert grand_total_of(records[2]) == Decimal("300.25")
        assert grand_total_of(records[3]) == Decimal("0")

    def test_blank_string(self):
        assert grand_total_of(record(grandTotalRs="")) == Decimal("0")


class TestSummary:

    def test_months(self, records):
        summary = summarize(records, today=date(2025, 8, 20))

        assert summary.total_invoices == 4
        assert summary.total_revenue == Decimal("3800.75")
        assert summary.this_month_invoices == 1
        assert summary.this_month_revenue == Decimal("1000")
        assert summary.last_month_invoices == 1
        assert summary.last_month_revenue == Decimal("2500.50")

    def test_january_looks_at_december(self):
        summary = summarize([record(invoiceDate="15-12-2024", grandTotalRs=10)], today=date(2025, 1, 3))
        assert summary.last_month_invoices == 1

    def test_unique_clients(self, records):
        assert unique_clients(records) == ["Joshi", "Patil"]


class TestFilter:

    def test_date_range(self, records):
        report_filter = make_filter(date(2025, 7, 1), date(2025, 8, 31))
        matched = filter_records(records, report_filter)
        assert [r.invoice_no for r in matched] == ["1", "2"]

    def test_client_only(self, records):
        matched = filter_records(records, make_filter(client=" Patil "))
        assert [r.invoice_no for r in matched] == ["1", "3"]

    def test_date_range_and_client(self, records):
        report_filter = make_filter(date(2025, 8, 1), date(2025, 8, 31), "Joshi")
        assert filter_records(records, report_filter) == []
        assert no_match_message(report_filter) == (
            'No invoices found for the selected date range and client "Joshi"'
        )

    def test_single_date_is_ignored(self, records):
        report_filter = make_filter(start_date=date(2025, 8, 1))
        assert not report_filter.has_date_range
        assert len(filter_records(records, report_filter)) == 4

    def test_no_filter(self):
        with pytest.raises(ReportError, match="at least one filter"):
            make_filter()
        with pytest.raises(ReportError):
            make_filter(client="   ")

    def test_inverted_range(self):
        with pytest.raises(ReportError, match="before start date"):
            make_filter(date(2025, 8, 2), date(2025, 8, 1))


class TestReportRows:

    def test_columns_and_days(self, records):
        header, rows = build_report_rows(records[:2])

        assert header[:7] == [
            "SR. NO", "CLIENT (MR. RA. RA.)", "PLACE", "CITY",
            "TOTAL SALES", "TOTAL EXPENSES", "GRAND TOTAL",
        ]
        assert header[7:] == ["05-08"]
        assert rows[0] == [1, "Patil", "Pune", "Pune", "1200.00", "200.00", "1000.00", "1200.00"]
        assert rows[1][0] == 2
        assert rows[1][3] == ""
        assert rows[1][-1] == "0.00"

    def test_filenames(self):
        assert report_filename(make_filter(date(2025, 8, 1), date(2025, 8, 31))) == (
            "Invoice_Report_01-08-2025_to_31-08-2025.xlsx"
        )
        assert report_filename(make_filter(client="Shri Sai")) == "Invoice_Report_Shri_Sai_AllDates.xlsx"
        assert report_filename(make_filter(date(2025, 8, 1), date(2025, 8, 2), "A&B")) == (
            "Invoice_Report_01-08-2025_to_02-08-2025_A_B.xlsx"
        )
