"""Shared in-memory storages for flow and validator tests."""

from typing import Any
from uuid import UUID

import pytest

from marathi_invoice.models import AuditEvent, InvoiceRecord
from marathi_invoice.services.storage import (
    AuditStorageInterface,
    InvoiceStorageInterface,
    StorageError,
)


class MemoryInvoiceStorage(InvoiceStorageInterface):
    """Keyed by invoice number, like the remote service."""

    def __init__(self, records=None, fail=False):
        self.records: dict[str, dict[str, Any]] = {}
        self.fail = fail
        self.uploads = []
        for data in records or []:
            self.records[InvoiceRecord(data=data).invoice_no] = data

    async def save_invoices(self, records):
        if self.fail:
            raise StorageError("service down")
        self.uploads.append(records)
        for data in records:
            self.records[InvoiceRecord(data=data).invoice_no] = data
        return True

    async def list_invoices(self):
        if self.fail:
            raise StorageError("service down")
        return [InvoiceRecord(data=data) for data in self.records.values()]


class MemoryAuditStorage(AuditStorageInterface):

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event):
        self.events.append(event)
        return True

    async def get_events_by_correlation_id(self, correlation_id: UUID):
        return [e for e in self.events if e.correlation_id == correlation_id]

    async def get_recent_events(self, limit=100):
        return list(reversed(self.events))[:limit]

    def types(self):
        return [event.event_type.value for event in self.events]


@pytest.fixture
def invoice_storage():
    return MemoryInvoiceStorage()


@pytest.fixture
def make_invoice_storage():
    return MemoryInvoiceStorage


@pytest.fixture
def audit_storage():
    return MemoryAuditStorage()
