"""
Audit Logger

Every invoice save, import and report is recorded as an AuditEvent:
- always to the structured local log
- to Google Sheets when audit storage is configured

A failing audit store never breaks the action being audited.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from marathi_invoice.models.audit import AuditEvent, AuditEventBuilder
from marathi_invoice.services.storage import AuditStorageInterface


def configure_logging(debug: bool = False) -> None:
    """JSON lines on stdout. Debug events are dropped unless debug is set."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Writes audit events to the local log and, when given, to audit storage.

    The log_* helpers build the event for one business action and log it.
    """

    def __init__(self, storage: Optional[AuditStorageInterface] = None):
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    @property
    def has_storage(self) -> bool:
        return self._storage is not None

    async def log(self, event: AuditEvent) -> bool:
        """
        Log one event at its own severity, then persist it.

        Returns False only when storage is configured and the write failed.
        """
        emit = getattr(self._logger, event.severity.value)
        emit("audit_event", **event.to_log_dict())

        if self._storage is None:
            return True
        try:
            return await self._storage.append_event(event)
        except Exception as e:
            self._logger.error("audit_storage_failed", error=str(e), event_id=str(event.event_id))
            return False

    async def log_invoice_saved(
        self,
        invoice_no: str,
        client: str,
        grand_total: str,
        correlation_id: UUID,
        overwrite: bool = False,
    ) -> None:
        await self.log(AuditEventBuilder.invoice_saved(
            invoice_no, client, grand_total, correlation_id, overwrite=overwrite
        ))

    async def log_invoice_save_skipped(self, reason: str, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.invoice_save_skipped(reason, correlation_id))

    async def log_duplicate_detected(self, invoice_no: str, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.duplicate_invoice_detected(invoice_no, correlation_id))

    async def log_validation_failed(self, invoice_no: str, issues: list[dict], correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.validation_failed(invoice_no, issues, correlation_id))

    async def log_excel_imported(self, filename: str, invoice_count: int, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.excel_imported(filename, invoice_count, correlation_id))

    async def log_excel_import_failed(self, filename: str, error_message: str, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.excel_import_failed(filename, error_message, correlation_id))

    async def log_report_generated(
        self,
        filename: str,
        row_count: int,
        filters: dict,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.report_generated(filename, row_count, filters, correlation_id))

    async def log_transliteration_fallback(self, field: str, correlation_id: Optional[UUID] = None) -> None:
        await self.log(AuditEventBuilder.transliteration_fallback(field, correlation_id))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.system_error(error_type, error_message, details, correlation_id))

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.external_service_error(service, error_message, correlation_id))


def create_correlation_id() -> UUID:
    """New ID shared by every event of one user action (save, import, report)."""
    return uuid4()
