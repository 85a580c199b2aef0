"""Tests for two-stage invoice validation."""

import asyncio

from marathi_invoice.models import DirectInvoice, ExpenseEntry, InvoiceLineItem
from marathi_invoice.validation import InvoiceValidator


def draft(**overrides):
    values = dict(
        invoice_no="INV-1",
        invoice_date="01-08-2025",
        mr_ra_ra="Patil",
        line_items=[InvoiceLineItem(details="Tomato", piece=5, unit_price=10)],
        expenses=[ExpenseEntry(name="Porterage", rupees=10)],
    )
    values.update(overrides)
    return DirectInvoice(**values)


def issue_types(result):
    return [(issue.field, issue.issue_type) for issue in result.issues]


class TestSchemaStage:

    def test_clean_draft(self):
        result = asyncio.run(InvoiceValidator().validate(draft()))
        assert result.is_valid
        assert result.can_save
        assert result.issues == []

    def test_missing_invoice_number_blocks_save(self):
        result = asyncio.run(InvoiceValidator().validate(draft(invoice_no="")))
        assert not result.schema_valid
        assert not result.can_save
        assert ("invoice_no", "missing") in issue_types(result)

    def test_bad_date(self):
        result = asyncio.run(InvoiceValidator().validate(draft(invoice_date="31-02-2025")))
        assert ("invoice_date", "invalid_format") in issue_types(result)
        assert not result.can_save

    def test_missing_date(self):
        result = asyncio.run(InvoiceValidator().validate(draft(invoice_date="")))
        assert ("invoice_date", "missing") in issue_types(result)


class TestSemanticStage:

    def test_no_sales_is_a_warning(self):
        result = asyncio.run(InvoiceValidator().validate(draft(line_items=[])))
        assert result.can_save
        assert result.semantic_valid
        assert ("line_items", "empty") in issue_types(result)
        assert result.warnings

    def test_negative_net(self):
        result = asyncio.run(InvoiceValidator().validate(
            draft(expenses=[ExpenseEntry(name="Warai", rupees=100)])
        ))
        assert ("net_balance", "negative") in issue_types(result)
        assert "-50.00" in result.warnings[0]

    def test_total_too_large_for_words(self):
        big = [InvoiceLineItem(details="Lot", piece=1000, unit_price=10_000_000)]
        result = asyncio.run(InvoiceValidator().validate(draft(line_items=big)))
        assert ("total_sales", "suspicious_value") in issue_types(result)


class TestDuplicates:

    def test_existing_number_is_flagged(self, make_invoice_storage):
        storage = make_invoice_storage([{"In_no": "INV-1"}])
        result = asyncio.run(InvoiceValidator(storage).validate(draft()))

        assert result.duplicate_of == "INV-1"
        assert result.can_save
        assert ("invoice_no", "duplicate") in issue_types(result)

    def test_check_can_be_skipped(self, make_invoice_storage):
        storage = make_invoice_storage([{"In_no": "INV-1"}])
        result = asyncio.run(InvoiceValidator(storage).validate(draft(), check_duplicates=False))
        assert result.duplicate_of is None

    def test_storage_error_does_not_fail_validation(self, make_invoice_storage):
        storage = make_invoice_storage(fail=True)
        result = asyncio.run(InvoiceValidator(storage).validate(draft()))
        assert result.is_valid
        assert result.duplicate_of is None

    def test_not_checked_without_invoice_number(self, make_invoice_storage):
        storage = make_invoice_storage([{"In_no": ""}])
        result = asyncio.run(InvoiceValidator(storage).validate(draft(invoice_no="")))
        assert result.duplicate_of is None


class TestSummary:

    def test_all_clear(self):
        validator = InvoiceValidator()
        result = asyncio.run(validator.validate(draft()))
        assert validator.get_user_friendly_summary(result).startswith("✅")

    def test_cannot_save(self):
        validator = InvoiceValidator()
        result = asyncio.run(validator.validate(draft(invoice_no="")))
        summary = validator.get_user_friendly_summary(result)
        assert "❌" in summary
        assert "cannot be saved" in summary
