"""
Tests for the storage backends.

The invoice service runs against httpx.MockTransport; the Sheets audit
log against an in-memory worksheet. No real API calls.
"""

import asyncio
import json
from uuid import uuid4

import httpx
import pytest
from tenacity import wait_none

from marathi_invoice.models import AuditEventBuilder, AuditEventType
from marathi_invoice.services.storage import (
    ConnectionError,
    GoogleSheetsAuditStorage,
    NotFoundError,
    RemoteInvoiceStorage,
    StorageError,
)
from marathi_invoice.services.storage.google_sheets import AUDIT_COLUMNS


BASE_URL = "https://invoices.example.test"


def storage_with(handler):
    return RemoteInvoiceStorage(BASE_URL, timeout=5, transport=httpx.MockTransport(handler))


class TestRemoteInvoiceStorage:

    def test_list_invoices(self):
        payload = [
            {"id": 1, "createdAt": "2025-08-01T10:00:00Z", "data": {"In_no": "7", "mrRaRa": "Patil"}},
            "not an object",
            {"id": 2, "data": {"invoiceNo": "8"}},
        ]

        def handler(request):
            assert request.method == "GET"
            assert request.url.path == "/api/invoices"
            return httpx.Response(200, json=payload)

        records = asyncio.run(storage_with(handler).list_invoices())

        assert [r.invoice_no for r in records] == ["7", "8"]
        assert records[0].client == "Patil"
        assert records[0].id == "1"

    def test_find_by_invoice_number(self):
        payload = [{"data": {"In_no": "7"}}, {"data": {"In_no": "9"}}]
        storage = storage_with(lambda request: httpx.Response(200, json=payload))

        assert asyncio.run(storage.find_by_invoice_number(" 9 ")).invoice_no == "9"
        assert asyncio.run(storage.find_by_invoice_number("10")) is None
        assert asyncio.run(storage.find_by_invoice_number("")) is None

    def test_missing_endpoint(self):
        storage = storage_with(lambda request: httpx.Response(404))
        with pytest.raises(NotFoundError):
            asyncio.run(storage.list_invoices())

    def test_server_error(self):
        storage = storage_with(lambda request: httpx.Response(500))
        with pytest.raises(StorageError):
            asyncio.run(storage.list_invoices())

    def test_invalid_json(self):
        storage = storage_with(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(StorageError, match="invalid JSON"):
            asyncio.run(storage.list_invoices())

    def test_unexpected_payload(self):
        storage = storage_with(lambda request: httpx.Response(200, json={"error": "nope"}))
        with pytest.raises(StorageError):
            asyncio.run(storage.list_invoices())

    def test_upload_is_multipart_json(self):
        bodies = []

        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/api/invoice-upload"
            assert request.headers["content-type"].startswith("multipart/form-data")
            bodies.append(request.read().decode("utf-8"))
            return httpx.Response(200, json={"ok": True})

        records = [{"In_no": "7", "mrRaRa": "भास्कर", "table": [{"rs": 50}]}]
        assert asyncio.run(storage_with(handler).save_invoices(records))

        body = bodies[0]
        assert 'name="invoiceData"' in body
        assert json.dumps(records, ensure_ascii=False) in body

    def test_upload_nothing(self):
        def handler(request):
            raise AssertionError("no request expected")

        assert asyncio.run(storage_with(handler).save_invoices([]))

    def test_upload_rejected(self):
        storage = storage_with(lambda request: httpx.Response(400, text="bad invoice"))
        with pytest.raises(StorageError, match="HTTP 400"):
            asyncio.run(storage.save_invoices([{"In_no": "7"}]))

    def test_transport_errors_are_retried(self, monkeypatch):
        monkeypatch.setattr(RemoteInvoiceStorage._get.retry, "wait", wait_none())
        attempts = []

        def handler(request):
            attempts.append(1)
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ConnectionError):
            asyncio.run(storage_with(handler).list_invoices())
        assert len(attempts) == 3


class FakeWorksheet:

    def __init__(self, fail=False):
        self.rows = [list(AUDIT_COLUMNS)]
        self.fail = fail

    def append_row(self, row, value_input_option=None):
        if self.fail:
            raise RuntimeError("quota exceeded")
        self.rows.append(row)

    def get_all_values(self):
        return self.rows


class FakeSheetsClient:

    def __init__(self, sheet):
        self.sheet = sheet

    def get_audit_sheet(self):
        return self.sheet


class TestGoogleSheetsAuditStorage:

    def test_append_and_read_back(self):
        sheet = FakeWorksheet()
        storage = GoogleSheetsAuditStorage(FakeSheetsClient(sheet))
        cid = uuid4()

        first = AuditEventBuilder.invoice_saved("INV-7", "भास्कर", "20.00", cid)
        second = AuditEventBuilder.excel_imported("june.xlsx", 3, uuid4())

        assert asyncio.run(storage.append_event(first))
        assert asyncio.run(storage.append_event(second))
        sheet.rows.append(["", "garbage"])
        sheet.rows.append(["not-a-uuid", "2025-08-01T00:00:00", "invoice_saved"])

        related = asyncio.run(storage.get_events_by_correlation_id(cid))
        assert len(related) == 1
        assert related[0].event_type == AuditEventType.INVOICE_SAVED
        assert related[0].details["client"] == "भास्कर"

        recent = asyncio.run(storage.get_recent_events())
        assert {e.event_id for e in recent} == {first.event_id, second.event_id}
        assert recent[0].timestamp >= recent[1].timestamp
        assert len(asyncio.run(storage.get_recent_events(limit=1))) == 1

    def test_write_failure_is_not_raised(self, monkeypatch):
        monkeypatch.setattr(GoogleSheetsAuditStorage._append_row.retry, "wait", wait_none())
        storage = GoogleSheetsAuditStorage(FakeSheetsClient(FakeWorksheet(fail=True)))

        event = AuditEventBuilder.excel_imported("june.xlsx", 3, uuid4())
        assert asyncio.run(storage.append_event(event)) is False
