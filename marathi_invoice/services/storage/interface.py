"""
Abstract Storage Interface

DESIGN DECISION: Invoice persistence and audit persistence sit behind
abstract interfaces. This allows us to:
1. Swap the remote invoice service for a database later
2. Use in-memory storage for testing
3. Keep the flows decoupled from HTTP and Sheets details

The interface is intentionally small: the remote service only supports
bulk upload and list-all.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import UUID

from marathi_invoice.models.audit import AuditEvent
from marathi_invoice.models.invoice import InvoiceRecord


class InvoiceStorageInterface(ABC):
    """
    Abstract interface for invoice storage operations.

    Records are the flat maps produced by DirectInvoice.to_record()
    or the imported distribution invoices.
    """

    @abstractmethod
    async def save_invoices(self, records: list[dict[str, Any]]) -> bool:
        """
        Upload one or more invoice records.

        The service keys invoices by invoice number, so uploading an
        existing number replaces it.

        Raises:
            StorageError: If the upload fails
        """
        pass

    @abstractmethod
    async def list_invoices(self) -> list[InvoiceRecord]:
        """
        Every stored invoice.

        Raises:
            StorageError: If the service cannot be read
        """
        pass

    async def find_by_invoice_number(self, invoice_no: str) -> Optional[InvoiceRecord]:
        """
        Look up an invoice by its number (In_no, falling back to invoiceNo).

        Returns:
            The record if found, None otherwise
        """
        wanted = (invoice_no or "").strip()
        if not wanted:
            return None
        for record in await self.list_invoices():
            if record.invoice_no == wanted:
                return record
        return None


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one save attempt).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
