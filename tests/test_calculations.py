"""Tests for ledger totals, tax and distribution calculations."""

from decimal import Decimal

import pytest

from marathi_invoice.calculations import (
    TaxType,
    compute_distribution,
    compute_tax,
    compute_totals,
    fill_screening_rows,
    generate_date_range,
    net_balance,
    normalize_date,
    parse_dmy,
    row_total,
    total_expenses,
    total_sales,
)
from marathi_invoice.models import (
    CinemaInvoice,
    DailyCollection,
    ExpenseEntry,
    InvoiceLineItem,
    MonetaryAmount,
)


def rs(rupees, paise=0):
    return MonetaryAmount(rupees=rupees, paise=paise)


class TestRowTotal:

    def test_simple(self):
        assert row_total(5, 10) == rs(50)

    def test_zero_or_missing_is_blank(self):
        assert row_total(0, 100) is None
        assert row_total(5, 0) is None
        assert row_total(None, 10) is None
        assert row_total(-1, 10) is None

    def test_rounds_half_up_to_paisa(self):
        assert row_total(3, 0.335) == rs(1, 1)
        assert row_total("2.5", "10.10") == rs(25, 25)

    def test_devanagari_input(self):
        assert row_total("५", "१०") == rs(50)


class TestTotals:

    def test_total_sales_empty_is_blank(self):
        assert total_sales([]) is None
        assert total_sales([None, None]) is None

    def test_total_sales_zero_is_blank(self):
        assert total_sales([rs(0)]) is None

    def test_total_sales_sums_with_carry(self):
        assert total_sales([rs(10, 60), None, rs(5, 50)]) == rs(16, 10)

    def test_total_expenses_empty_is_zero(self):
        assert total_expenses([]) == rs(0)

    def test_total_expenses_from_entries(self):
        entries = [
            ExpenseEntry(name="हमाली", rupees="20", paise="50"),
            ExpenseEntry(name="मोटार भाडे", rupees=0, paise=150),
            ExpenseEntry(rupees=-10),
        ]
        assert total_expenses(entries) == rs(12)

    def test_refund_row_reduces_expenses(self):
        entries = [ExpenseEntry(rupees=100), ExpenseEntry(name="परत", rupees=-30)]
        assert total_expenses(entries).total_paise == 7000

    def test_expenses_never_below_zero(self):
        assert total_expenses([ExpenseEntry(rupees=-30), ExpenseEntry(paise=-5)]) == rs(0)

    def test_net_balance_negative(self):
        balance = net_balance(rs(50), rs(70))
        assert balance.is_negative
        assert balance.amount == rs(20)

    def test_net_balance_positive(self):
        balance = net_balance(rs(100, 25), rs(0, 50))
        assert not balance.is_negative
        assert balance.amount == rs(99, 75)

    def test_net_balance_blank_without_sales(self):
        assert net_balance(None, rs(70)) is None

    def test_compute_totals(self):
        items = [
            InvoiceLineItem(details="Tomato", piece=5, unit_price=10),
            InvoiceLineItem(details="Onion", crates=2, unit_price="12.5"),
            InvoiceLineItem(),
        ]
        expenses = [ExpenseEntry(name="हमाली", rupees=15)]

        totals = compute_totals(items, expenses)

        assert totals.total_sales == rs(75)
        assert totals.total_expenses == rs(15)
        assert totals.net_balance.amount == rs(60)
        assert not totals.net_balance.is_negative

    def test_piece_wins_over_crates(self):
        item = InvoiceLineItem(piece=3, crates=10, unit_price=2)
        assert item.quantity == 3


class TestTax:

    def test_cgst_sgst_split(self):
        tax = compute_tax(1000, 18, TaxType.CGST_SGST)
        assert tax.cgst == Decimal("90.00")
        assert tax.sgst == Decimal("90.00")
        assert tax.igst == Decimal("0.00")
        assert tax.net_payable == Decimal("1180.00")

    def test_igst(self):
        tax = compute_tax(1000, 18)
        assert tax.igst == Decimal("180.00")
        assert tax.net_payable == Decimal("1180.00")
        assert tax.total_tax == Decimal("180.00")

    def test_halves_are_rounded_independently(self):
        tax = compute_tax("100.05", 5, "CGST/SGST")
        assert tax.cgst == Decimal("2.50")
        assert tax.sgst == Decimal("2.50")
        assert tax.net_payable == Decimal("105.05")

    def test_unknown_tax_type(self):
        with pytest.raises(ValueError):
            compute_tax(100, 18, "VAT")


class TestDates:

    def test_parse_dmy(self):
        assert parse_dmy("01-08-2025").isoformat() == "2025-08-01"
        assert parse_dmy("1/8/2025").isoformat() == "2025-08-01"
        assert parse_dmy("31-02-2025") is None
        assert parse_dmy("") is None

    def test_normalize_date(self):
        assert normalize_date("01/08/2025") == "01-08-2025"
        assert normalize_date("2025-08-01") == "01-08-2025"
        assert normalize_date("23-05") == "23-05"

    def test_generate_date_range(self):
        assert generate_date_range("30-07-2025", "02-08-2025") == [
            "30-07-2025", "31-07-2025", "01-08-2025", "02-08-2025",
        ]
        assert generate_date_range("02-08-2025", "01-08-2025") == []
        assert generate_date_range(None, "01-08-2025") == []

    def test_date_range_is_capped(self):
        assert generate_date_range("01-01-1000", "31-12-9999") == []
        assert generate_date_range("01-01-2024", "01-01-2025") == []
        assert len(generate_date_range("01-01-2024", "31-12-2024")) == 366

    def test_date_range_ends_on_last_calendar_day(self):
        days = generate_date_range("29-12-9999", "31-12-9999")
        assert days == ["29-12-9999", "30-12-9999", "31-12-9999"]
        assert generate_date_range("31-12-9999", "31-12-9999") == ["31-12-9999"]

    def test_fill_screening_rows(self):
        table = [
            DailyCollection(date="01-08", show=4, aud=120, collection=12000),
            DailyCollection(date="03-08", show=3, aud=90, collection=9000),
        ]
        rows = fill_screening_rows(table, "01-08-2025", "03-08-2025")

        assert [row.date for row in rows] == ["01-08-2025", "02-08-2025", "03-08-2025"]
        assert rows[0].collection == 12000
        assert rows[1].collection == 0
        assert rows[2].show == 3

    def test_fill_without_window_keeps_rows(self):
        table = [DailyCollection(date="2025-08-01", collection=5)]
        rows = fill_screening_rows(table, None, None)
        assert rows[0].date == "01-08-2025"


class TestDistribution:

    def cinema(self, **overrides):
        values = dict(
            client_name="Prabhat Talkies",
            table=[
                DailyCollection(date="01-08", show=4, aud=100, collection=6000),
                DailyCollection(date="02-08", show=4, aud=80, collection=5000),
            ],
            show_tax=500,
            other_deduction=500,
        )
        values.update(overrides)
        return CinemaInvoice(**values)

    def test_igst_summary(self):
        summary = compute_distribution(self.cinema())

        assert summary.total_show == Decimal("8.0")
        assert summary.total_collection == Decimal("11000.0")
        assert summary.total_deduction == Decimal("1000.0")
        assert summary.net_collection == Decimal("10000.0")
        assert summary.taxable_amount == Decimal("4500.00")
        assert summary.tax.igst == Decimal("810.00")
        assert summary.net_payable == Decimal("5310.00")
        assert summary.amount_in_words == "Five Thousand Three Hundred and Ten Rupees only"

    def test_cgst_sgst_summary(self):
        summary = compute_distribution(self.cinema(), tax_type=TaxType.CGST_SGST)
        assert summary.tax.cgst == Decimal("405.00")
        assert summary.tax.sgst == Decimal("405.00")
        assert summary.net_payable == Decimal("5310.00")

    def test_zero_percent_falls_back_to_default_share(self):
        summary = compute_distribution(self.cinema(), distribution_percent=0)
        assert summary.distribution_percent == Decimal("45")

    def test_workbook_totals_used_when_table_is_empty(self):
        summary = compute_distribution(self.cinema(table=[], total_collection=2000, show_tax=0, other_deduction=0))
        assert summary.total_collection == Decimal("2000.0")
        assert summary.taxable_amount == Decimal("900.00")

    def test_screening_window(self):
        summary = compute_distribution(
            self.cinema(),
            screening_from="31-07-2025",
            screening_to="02-08-2025",
        )
        assert len(summary.rows) == 3
        assert summary.rows[0].collection == 0
        assert summary.total_collection == Decimal("11000.0")
