"""
Two-Stage Invoice Validation

STAGE 1 - SCHEMA VALIDATION:
- Invoice number present
- Invoice date readable as DD-MM-YYYY

STAGE 2 - SEMANTIC VALIDATION:
- Sales entered at all
- Net balance sign
- Amount within the amount-in-words range
- Invoice number already stored (duplicate)

Validation never fixes a draft. It reports issues for the operator;
the preview is rendered regardless.
"""

from typing import Optional

import structlog

from marathi_invoice.calculations.distribution import parse_dmy
from marathi_invoice.calculations.ledger import compute_totals
from marathi_invoice.marathi.amounts import MAX_WORDS_AMOUNT
from marathi_invoice.models.invoice import (
    DirectInvoice,
    InvoiceTotals,
    ValidationIssue,
    ValidationResult,
)
from marathi_invoice.services.storage import InvoiceStorageInterface, StorageError


logger = structlog.get_logger(__name__)


class InvoiceValidator:
    """
    Validates a direct-entry invoice draft.

    Stage 1 runs without storage; the duplicate check needs it and is
    skipped when no storage is given.
    """

    def __init__(
        self,
        invoice_storage: Optional[InvoiceStorageInterface] = None,
    ):
        self._storage = invoice_storage

    def _validate_schema(
        self,
        draft: DirectInvoice,
    ) -> tuple[bool, list[ValidationIssue]]:
        issues = []

        if not draft.invoice_no:
            issues.append(ValidationIssue(
                field="invoice_no",
                issue_type="missing",
                message="Invoice number is empty, the invoice will not be saved",
                severity="error",
                suggested_fix="Enter an invoice number to save this invoice",
            ))

        if not draft.invoice_date:
            issues.append(ValidationIssue(
                field="invoice_date",
                issue_type="missing",
                message="Invoice date is required",
                severity="error",
                suggested_fix="Enter the date as DD-MM-YYYY",
            ))
        elif parse_dmy(draft.invoice_date) is None:
            issues.append(ValidationIssue(
                field="invoice_date",
                issue_type="invalid_format",
                message=f"Invoice date ({draft.invoice_date}) is not a valid DD-MM-YYYY date",
                severity="error",
                suggested_fix="Enter the date as DD-MM-YYYY",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        totals: InvoiceTotals,
    ) -> tuple[bool, list[ValidationIssue]]:
        issues = []

        if totals.total_sales is None:
            issues.append(ValidationIssue(
                field="line_items",
                issue_type="empty",
                message="No sales entered, totals will be blank",
                severity="warning",
                suggested_fix="Fill in quantity and price for at least one row",
            ))

        net = totals.net_balance
        if net is not None and net.is_negative:
            issues.append(ValidationIssue(
                field="net_balance",
                issue_type="negative",
                message=f"Expenses exceed sales, net balance is -{net.amount.display()}",
                severity="warning",
                suggested_fix="Please verify the expense amounts",
            ))

        if totals.total_sales is not None and totals.total_sales.to_decimal() > MAX_WORDS_AMOUNT:
            issues.append(ValidationIssue(
                field="total_sales",
                issue_type="suspicious_value",
                message="Total is too large to be written in words",
                severity="warning",
                suggested_fix="Please verify quantities and prices",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    async def _check_duplicate(
        self,
        draft: DirectInvoice,
    ) -> tuple[Optional[str], list[ValidationIssue]]:
        if self._storage is None or not draft.invoice_no:
            return None, []

        try:
            existing = await self._storage.find_by_invoice_number(draft.invoice_no)
        except StorageError as e:
            # Don't fail validation due to storage errors
            logger.warning("duplicate_check_failed", invoice_no=draft.invoice_no, error=str(e))
            return None, []

        if existing is None:
            return None, []

        return draft.invoice_no, [ValidationIssue(
            field="invoice_no",
            issue_type="duplicate",
            message=f"Invoice number {draft.invoice_no} already exists",
            severity="warning",
            suggested_fix="Saving again will overwrite it, please confirm",
        )]

    async def validate(
        self,
        draft: DirectInvoice,
        check_duplicates: bool = True,
    ) -> ValidationResult:
        """
        Run both stages.

        The semantic stage always runs, since totals are shown in the
        preview even for a draft that cannot be saved.
        """
        schema_valid, issues = self._validate_schema(draft)

        totals = compute_totals(draft.line_items, draft.expenses)
        semantic_valid, semantic_issues = self._validate_semantic(totals)
        issues.extend(semantic_issues)

        duplicate_of = None
        if check_duplicates and schema_valid:
            duplicate_of, duplicate_issues = await self._check_duplicate(draft)
            issues.extend(duplicate_issues)

        warnings = [issue.message for issue in issues if issue.severity == "warning"]

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            can_save=schema_valid,
            issues=issues,
            warnings=warnings,
            duplicate_of=duplicate_of,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Summary shown above the preview."""
        if result.is_valid and not result.warnings:
            return "✅ All checks passed! Please review the preview below."

        lines = []

        if not result.schema_valid:
            lines.append("❌ Some required information is missing:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        lines.append("")
        if result.can_save:
            lines.append("You can still save, but please review carefully.")
        else:
            lines.append("The preview is ready, but the invoice cannot be saved yet.")

        return "\n".join(lines)
