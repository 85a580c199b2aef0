"""
Main Orchestrator for Marathi Invoice

Ties the components together into the three user flows:
1. Direct entry (draft -> preview -> validate -> save)
2. Excel import (workbook -> cinema invoices -> distribution totals -> save)
3. Reports (stored invoices -> summary / filter -> workbook)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The preview always renders, whatever state the draft is in
- Nothing without an invoice number is persisted
- An existing invoice number is only overwritten after confirmation
- Every save, import and report is audited
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, Field, ValidationError

from marathi_invoice.audit import AuditLogger, configure_logging, create_correlation_id
from marathi_invoice.calculations import (
    DistributionSummary,
    TaxType,
    compute_distribution,
    compute_totals,
    row_total,
)
from marathi_invoice.config import AppSettings, get_settings
from marathi_invoice.marathi import (
    amount_to_words,
    format_amount,
    number_to_devanagari,
    to_devanagari_digits,
)
from marathi_invoice.models import (
    CinemaInvoice,
    DirectInvoice,
    InvoiceRecord,
    InvoiceTotals,
    MonetaryAmount,
    ValidationResult,
)
from marathi_invoice.reports import (
    ReportError,
    ReportSummary,
    build_report_rows,
    filter_records,
    make_filter,
    no_match_message,
    report_filename,
    summarize,
    unique_clients,
)
from marathi_invoice.services.excel import (
    ExcelImportError,
    parse_invoice_workbook,
    write_report_workbook,
)
from marathi_invoice.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    InvoiceStorageInterface,
    RemoteInvoiceStorage,
    StorageError,
)
from marathi_invoice.services.transliteration import (
    TransliterationEngine,
    get_transliteration_engine,
)
from marathi_invoice.validation import InvoiceValidator


logger = structlog.get_logger(__name__)

INVOICE_SERVICE = "invoice_service"

# Free-text fields that are transliterated; the rest only get Devanagari digits
TRANSLITERATED_HEADER_FIELDS = ("mr_ra_ra", "place", "to")
NUMERIC_HEADER_FIELDS = ("invoice_no", "invoice_date", "cheque_draft_no", "received", "deposit", "ra_ra_no")


class SaveOutcome(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"
    NEEDS_CONFIRMATION = "needs_confirmation"
    INVALID = "invalid"


class SaveResult(BaseModel):
    """What happened to a save request."""

    outcome: SaveOutcome
    invoice_no: str = ""
    message: str

    @property
    def saved(self) -> bool:
        return self.outcome == SaveOutcome.SAVED


class InvoicePreview(BaseModel):
    """
    Display strings for the printed direct-entry invoice.

    Every value is ready to print: Marathi text, Devanagari digits,
    blank where the sheet shows nothing.
    """

    header: dict[str, str] = Field(default_factory=dict)
    rows: list[dict[str, str]] = Field(default_factory=list)
    expenses: list[dict[str, str]] = Field(default_factory=list)
    total_sales: str = ""
    total_expenses: str = ""
    net_balance: str = ""
    amount_in_words: str = ""
    totals: InvoiceTotals


class ImportedInvoice(BaseModel):
    """A cinema invoice from a workbook with its computed totals."""

    invoice: CinemaInvoice
    summary: DistributionSummary


class GeneratedReport(BaseModel):
    filename: str
    content: bytes
    row_count: int


def _rs_display(amount: Optional[MonetaryAmount]) -> str:
    return number_to_devanagari(amount.rupees) if amount else ""


def _paise_display(amount: Optional[MonetaryAmount]) -> str:
    return to_devanagari_digits(f"{amount.paise:02d}") if amount else ""


def _money_text(value: Decimal) -> str:
    return f"{value:.2f}"


def build_cinema_record(imported: ImportedInvoice, invoice_date: Optional[str] = None) -> dict[str, Any]:
    """Flat record for a distribution invoice, in the same store as direct-entry invoices."""
    invoice = imported.invoice
    summary = imported.summary
    tax = summary.tax

    return {
        "In_no": invoice.invoice_no,
        "invoiceDate": invoice_date or datetime.now().strftime("%d-%m-%Y"),
        "mrRaRa": invoice.client_name,
        "clientAddress": invoice.client_address,
        "panNo": invoice.pan_no,
        "gstinNo": invoice.gstin_no,
        "cinemaName": invoice.cinema_name,
        "centre": invoice.centre,
        "place": invoice.place_of_service,
        "table": [
            {"date": row.date, "show": row.show, "aud": row.aud, "collection": row.collection}
            for row in summary.rows
        ],
        "totalShow": _money_text(summary.total_show),
        "totalAud": _money_text(summary.total_aud),
        "totalCollection": _money_text(summary.total_collection),
        "showTax": _money_text(summary.show_tax),
        "otherDeduction": _money_text(summary.other_deduction),
        "netCollection": _money_text(summary.net_collection),
        "distributionPercent": _money_text(summary.distribution_percent),
        "taxableAmount": _money_text(summary.taxable_amount),
        "taxType": tax.tax_type.value,
        "igst": _money_text(tax.igst),
        "cgst": _money_text(tax.cgst),
        "sgst": _money_text(tax.sgst),
        "netAmount": _money_text(tax.net_payable),
        "amountInWords": summary.amount_in_words,
    }


async def _persist(
    storage: InvoiceStorageInterface,
    audit_logger: Optional[AuditLogger],
    record: dict[str, Any],
    invoice_no: str,
    client: str,
    grand_total: str,
    is_duplicate: bool,
    overwrite: bool,
    correlation_id: UUID,
) -> SaveResult:
    """Upload one record, stopping for confirmation when its number exists."""
    if is_duplicate and not overwrite:
        if audit_logger:
            await audit_logger.log_duplicate_detected(invoice_no, correlation_id)
        return SaveResult(
            outcome=SaveOutcome.NEEDS_CONFIRMATION,
            invoice_no=invoice_no,
            message=f"Invoice number {invoice_no} already exists. Do you want to update it?",
        )

    try:
        await storage.save_invoices([record])
    except StorageError as e:
        if audit_logger:
            await audit_logger.log_external_service_error(
                service=INVOICE_SERVICE,
                error_message=str(e),
                correlation_id=correlation_id,
            )
        raise

    if audit_logger:
        await audit_logger.log_invoice_saved(
            invoice_no=invoice_no,
            client=client,
            grand_total=grand_total,
            correlation_id=correlation_id,
            overwrite=is_duplicate,
        )

    verb = "updated" if is_duplicate else "saved"
    return SaveResult(
        outcome=SaveOutcome.SAVED,
        invoice_no=invoice_no,
        message=f"Invoice {invoice_no} {verb} successfully",
    )


class InvoiceFlow:
    """
    Orchestrates the direct-entry invoice.

    Flow:
    1. Preview -> totals and Marathi display strings (always works)
    2. Validate -> two-stage validation, duplicate warning
    3. Save -> skipped without an invoice number, confirmation on duplicates
    """

    def __init__(
        self,
        invoice_storage: Optional[InvoiceStorageInterface] = None,
        engine: Optional[TransliterationEngine] = None,
        validator: Optional[InvoiceValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = invoice_storage
        self._engine = engine or get_transliteration_engine()
        self._validator = validator or InvoiceValidator(invoice_storage)
        self._audit_logger = audit_logger

    def new_draft(self, settings: Optional[AppSettings] = None) -> DirectInvoice:
        """Blank sheet sized from settings."""
        settings = settings or get_settings().app
        return DirectInvoice.blank(
            sales_rows=settings.sales_row_count,
            blank_expense_rows=settings.blank_expense_row_count,
        )

    async def localize_fields(
        self,
        draft: DirectInvoice,
        correlation_id: Optional[UUID] = None,
    ) -> dict[str, str]:
        """Header fields as they are printed."""
        texts = await asyncio.gather(
            *(self._engine.transliterate(getattr(draft, name)) for name in TRANSLITERATED_HEADER_FIELDS)
        )
        header = dict(zip(TRANSLITERATED_HEADER_FIELDS, texts))
        header.update({
            name: to_devanagari_digits(getattr(draft, name)) for name in NUMERIC_HEADER_FIELDS
        })

        if self._engine.backend_failed and self._audit_logger:
            await self._audit_logger.log_transliteration_fallback("header", correlation_id)
        return header

    async def build_preview(
        self,
        draft: DirectInvoice,
        correlation_id: Optional[UUID] = None,
    ) -> InvoicePreview:
        totals = compute_totals(draft.line_items, draft.expenses)
        header = await self.localize_fields(draft, correlation_id)

        details = await asyncio.gather(
            *(self._engine.transliterate(item.details) for item in draft.line_items)
        )
        rows = []
        for item, localized in zip(draft.line_items, details):
            amount = row_total(item.quantity, item.unit_price)
            rows.append({
                "details": localized,
                "date": to_devanagari_digits(item.date),
                "piece": number_to_devanagari(item.piece) if item.piece else "",
                "crates": number_to_devanagari(item.crates) if item.crates else "",
                "price": format_amount(item.unit_price),
                "rs": _rs_display(amount),
                "paise": _paise_display(amount),
            })

        expenses = []
        for entry in draft.expenses:
            amount = MonetaryAmount.from_paise(entry.total_paise) if entry.total_paise else None
            rupees = _rs_display(amount)
            if entry.total_paise < 0:
                rupees = f"-{rupees}"
            expenses.append({
                "name": entry.name,
                "rs": rupees,
                "paise": _paise_display(amount),
            })

        net = totals.net_balance
        net_text = ""
        if net is not None:
            net_text = format_amount(net.amount.to_decimal()) or to_devanagari_digits("0.00")
            if net.is_negative:
                net_text = f"-{net_text}"

        return InvoicePreview(
            header=header,
            rows=rows,
            expenses=expenses,
            total_sales=format_amount(totals.total_sales.to_decimal()) if totals.total_sales else "",
            total_expenses=format_amount(totals.total_expenses.to_decimal()),
            net_balance=net_text,
            amount_in_words=amount_to_words(net.to_decimal()) if net is not None else "",
            totals=totals,
        )

    async def validate(self, draft: DirectInvoice) -> tuple[ValidationResult, str]:
        """
        Returns:
            (validation_result, user_message)
        """
        result = await self._validator.validate(draft)
        return result, self._validator.get_user_friendly_summary(result)

    async def save(
        self,
        draft: DirectInvoice,
        overwrite: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> SaveResult:
        """
        Persist the draft.

        Raises:
            StorageError: the invoice service rejected or could not take the upload
        """
        correlation_id = correlation_id or create_correlation_id()

        if not draft.invoice_no:
            reason = "Invoice number is empty, the invoice was not saved"
            if self._audit_logger:
                await self._audit_logger.log_invoice_save_skipped(reason, correlation_id)
            return SaveResult(outcome=SaveOutcome.SKIPPED, message=reason)

        if self._storage is None:
            return SaveResult(
                outcome=SaveOutcome.SKIPPED,
                invoice_no=draft.invoice_no,
                message="Invoice storage is not configured",
            )

        result = await self._validator.validate(draft)
        if not result.can_save:
            if self._audit_logger:
                issues = [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ]
                await self._audit_logger.log_validation_failed(
                    invoice_no=draft.invoice_no,
                    issues=issues,
                    correlation_id=correlation_id,
                )
            return SaveResult(
                outcome=SaveOutcome.INVALID,
                invoice_no=draft.invoice_no,
                message=self._validator.get_user_friendly_summary(result),
            )

        net = compute_totals(draft.line_items, draft.expenses).net_balance
        return await _persist(
            self._storage,
            self._audit_logger,
            draft.to_record(),
            invoice_no=draft.invoice_no,
            client=draft.mr_ra_ra,
            grand_total=net.display() if net is not None else "",
            is_duplicate=result.duplicate_of is not None,
            overwrite=overwrite,
            correlation_id=correlation_id,
        )


class ExcelImportFlow:
    """
    Orchestrates the distribution workbook import.

    Each cinema row becomes one invoice with its distribution totals;
    saving follows the same duplicate rule as direct entry.
    """

    def __init__(
        self,
        invoice_storage: Optional[InvoiceStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._storage = invoice_storage
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().app

    async def import_workbook(
        self,
        data: bytes,
        filename: str,
        distribution_percent: Optional[Decimal] = None,
        gst_rate: Optional[Decimal] = None,
        tax_type: Optional[TaxType] = None,
        screening_from: Optional[str] = None,
        screening_to: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[ImportedInvoice]:
        """
        Raises:
            ExcelImportError: file too large, unreadable, or without a BILL TO header
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            if len(data) > self._settings.max_upload_size_bytes:
                raise ExcelImportError(
                    f"File is larger than {self._settings.max_upload_size_mb} MB"
                )
            invoices = parse_invoice_workbook(data)
        except ExcelImportError as e:
            if self._audit_logger:
                await self._audit_logger.log_excel_import_failed(filename, str(e), correlation_id)
            raise

        percent = distribution_percent if distribution_percent is not None else self._settings.default_distribution_percent
        rate = gst_rate if gst_rate is not None else self._settings.default_gst_rate
        regime = tax_type or TaxType(self._settings.default_tax_type)

        imported = [
            ImportedInvoice(
                invoice=invoice,
                summary=compute_distribution(
                    invoice,
                    distribution_percent=percent,
                    gst_rate=rate,
                    tax_type=regime,
                    screening_from=screening_from,
                    screening_to=screening_to,
                ),
            )
            for invoice in invoices
        ]

        if self._audit_logger:
            await self._audit_logger.log_excel_imported(filename, len(imported), correlation_id)
        return imported

    async def save(
        self,
        imported: ImportedInvoice,
        overwrite: bool = False,
        invoice_date: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SaveResult:
        """
        Raises:
            StorageError: the invoice service could not be reached or refused the upload
        """
        correlation_id = correlation_id or create_correlation_id()
        invoice_no = imported.invoice.invoice_no

        if not invoice_no:
            reason = "Workbook row has no In_no, the invoice was not saved"
            if self._audit_logger:
                await self._audit_logger.log_invoice_save_skipped(reason, correlation_id)
            return SaveResult(outcome=SaveOutcome.SKIPPED, message=reason)

        if self._storage is None:
            return SaveResult(
                outcome=SaveOutcome.SKIPPED,
                invoice_no=invoice_no,
                message="Invoice storage is not configured",
            )

        existing = await self._storage.find_by_invoice_number(invoice_no)
        return await _persist(
            self._storage,
            self._audit_logger,
            build_cinema_record(imported, invoice_date),
            invoice_no=invoice_no,
            client=imported.invoice.client_name,
            grand_total=_money_text(imported.summary.net_payable),
            is_duplicate=existing is not None,
            overwrite=overwrite,
            correlation_id=correlation_id,
        )


class ReportFlow:
    """
    Orchestrates the reports page.

    All figures come from what the invoice service returns; nothing is
    cached between calls.
    """

    def __init__(
        self,
        invoice_storage: Optional[InvoiceStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = invoice_storage
        self._audit_logger = audit_logger

    async def load(self, correlation_id: Optional[UUID] = None) -> list[InvoiceRecord]:
        """
        Raises:
            ReportError: invoice storage is not configured
            StorageError: the invoice service could not be read
        """
        if self._storage is None:
            raise ReportError("Invoice storage is not configured")
        try:
            return await self._storage.list_invoices()
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_external_service_error(
                    service=INVOICE_SERVICE,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

    async def summary(
        self,
        records: Optional[list[InvoiceRecord]] = None,
        today: Optional[date] = None,
    ) -> ReportSummary:
        if records is None:
            records = await self.load()
        return summarize(records, today)

    async def clients(self, records: Optional[list[InvoiceRecord]] = None) -> list[str]:
        if records is None:
            records = await self.load()
        return unique_clients(records)

    async def generate(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client: Optional[str] = None,
        records: Optional[list[InvoiceRecord]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> GeneratedReport:
        """
        Filter stored invoices and render the report workbook.

        Raises:
            ReportError: no filter selected, inverted range, or nothing matched
        """
        correlation_id = correlation_id or create_correlation_id()
        report_filter = make_filter(start_date, end_date, client)

        if records is None:
            records = await self.load(correlation_id)

        matched = filter_records(records, report_filter)
        if not matched:
            raise ReportError(no_match_message(report_filter))

        header, rows = build_report_rows(matched)
        content = write_report_workbook(header, rows)
        filename = report_filename(report_filter)

        if self._audit_logger:
            await self._audit_logger.log_report_generated(
                filename=filename,
                row_count=len(rows),
                filters=report_filter.describe(),
                correlation_id=correlation_id,
            )

        return GeneratedReport(filename=filename, content=content, row_count=len(rows))


def create_app_components(
    use_storage: bool = True,
) -> tuple[InvoiceFlow, ExcelImportFlow, ReportFlow, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the remote invoice service and the
                    Google Sheets audit log. False gives an offline setup
                    (preview and import only).

    Returns:
        (invoice_flow, excel_import_flow, report_flow, sheets_client)
    """
    configure_logging(get_settings().app.debug_mode)

    sheets_client = None
    invoice_storage = None
    audit_logger = AuditLogger()  # Local-only logging

    if use_storage:
        invoice_storage = RemoteInvoiceStorage()
        try:
            sheets_client = GoogleSheetsClient()
            audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
        except (ValidationError, StorageError) as e:
            # Audit sheet not configured - continue with local logging
            logger.warning("audit_storage_not_configured", error=str(e))
            sheets_client = None

    engine = get_transliteration_engine()

    invoice_flow = InvoiceFlow(
        invoice_storage=invoice_storage,
        engine=engine,
        audit_logger=audit_logger,
    )
    excel_import_flow = ExcelImportFlow(
        invoice_storage=invoice_storage,
        audit_logger=audit_logger,
    )
    report_flow = ReportFlow(
        invoice_storage=invoice_storage,
        audit_logger=audit_logger,
    )

    return invoice_flow, excel_import_flow, report_flow, sheets_client
