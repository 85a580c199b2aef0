"""
Audit events.

Every business action that changes or exports invoice data is recorded:
saves (and skipped saves), duplicate overwrites, Excel imports, report
exports, and degraded transliteration. Events are append-only.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    INVOICE_SAVED = "invoice_saved"
    INVOICE_SAVE_SKIPPED = "invoice_save_skipped"
    DUPLICATE_INVOICE_DETECTED = "duplicate_invoice_detected"
    VALIDATION_FAILED = "validation_failed"
    EXCEL_IMPORTED = "excel_imported"
    EXCEL_IMPORT_FAILED = "excel_import_failed"
    REPORT_GENERATED = "report_generated"
    TRANSLITERATION_FALLBACK = "transliteration_fallback"
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Values double as structlog method names."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Column order of the audit sheet
SHEET_COLUMNS = (
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """One audited action, tied to its siblings by correlation_id."""

    event_type: AuditEventType
    description: str
    severity: AuditSeverity = AuditSeverity.INFO
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=_utc_now)

    # invoice, workbook, report or field, and its number or name
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = None
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        return self.model_dump(mode="json")

    def to_sheets_row(self) -> list[str]:
        """Cells in SHEET_COLUMNS order; empty cells are blank strings."""
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, ensure_ascii=False, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]

    @classmethod
    def from_sheets_row(cls, row: list[str]) -> "AuditEvent":
        """Read back a sheet row. Raises ValueError when the row is not an event."""
        cells = dict(zip(SHEET_COLUMNS, row))
        correlation = cells.get("correlation_id")
        details = cells.get("details_json")
        timestamp = datetime.fromisoformat(cells.get("timestamp", ""))
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            event_id=UUID(cells.get("event_id", "")),
            timestamp=timestamp,
            event_type=AuditEventType(cells.get("event_type", "")),
            severity=AuditSeverity(cells.get("severity") or AuditSeverity.INFO.value),
            entity_type=cells.get("entity_type") or None,
            entity_id=cells.get("entity_id") or None,
            correlation_id=UUID(correlation) if correlation else None,
            description=cells.get("description", ""),
            details=json.loads(details) if details else {},
            error_message=cells.get("error_message") or None,
            is_user_action=cells.get("is_user_action", "").lower() == "true",
        )


class AuditEventBuilder:
    """
    One constructor per audited action.

        AuditEventBuilder.invoice_saved("INV-7", "Bhaskar", "1,180.00", correlation_id)
    """

    @staticmethod
    def invoice_saved(
        invoice_no: str,
        client: str,
        grand_total: str,
        correlation_id: UUID,
        overwrite: bool = False
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_SAVED,
            description=f"Invoice saved: {invoice_no} - ₹{grand_total}",
            entity_type="invoice",
            entity_id=invoice_no,
            correlation_id=correlation_id,
            details={"client": client, "grand_total": grand_total, "overwrite": overwrite},
            is_user_action=True,
        )

    @staticmethod
    def invoice_save_skipped(reason: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_SAVE_SKIPPED,
            description=f"Invoice not saved: {reason}",
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            correlation_id=correlation_id,
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def duplicate_invoice_detected(invoice_no: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DUPLICATE_INVOICE_DETECTED,
            description=f"Invoice number {invoice_no} already exists",
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=invoice_no,
            correlation_id=correlation_id,
        )

    @staticmethod
    def validation_failed(invoice_no: str, issues: list[dict], correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            description=f"Validation failed with {len(issues)} issues",
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=invoice_no or None,
            correlation_id=correlation_id,
            details={"issues": issues},
        )

    @staticmethod
    def excel_imported(filename: str, invoice_count: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXCEL_IMPORTED,
            description=f"Workbook imported: {filename} ({invoice_count} invoices)",
            entity_type="workbook",
            entity_id=filename,
            correlation_id=correlation_id,
            details={"invoice_count": invoice_count},
            is_user_action=True,
        )

    @staticmethod
    def excel_import_failed(filename: str, error_message: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXCEL_IMPORT_FAILED,
            description=f"Workbook rejected: {filename}",
            severity=AuditSeverity.WARNING,
            entity_type="workbook",
            entity_id=filename,
            correlation_id=correlation_id,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def report_generated(filename: str, row_count: int, filters: dict, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            description=f"Report generated: {filename} with {row_count} invoices",
            entity_type="report",
            entity_id=filename,
            correlation_id=correlation_id,
            details={"row_count": row_count, "filters": filters},
            is_user_action=True,
        )

    @staticmethod
    def transliteration_fallback(field: str, correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSLITERATION_FALLBACK,
            description=f"Phonetic fallback used for field {field}",
            severity=AuditSeverity.DEBUG,
            entity_type="field",
            entity_id=field,
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            description=f"System error: {error_type}",
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            details=details or {},
            error_message=error_message,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            description=f"External service error: {service}",
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            details={"service": service},
            error_message=error_message,
        )
