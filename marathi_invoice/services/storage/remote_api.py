"""
Remote invoice service client.

The invoice service exposes two endpoints:

    GET  /api/invoices         -> JSON array of {id, createdAt, data}
    POST /api/invoice-upload   -> multipart form, field "invoiceData"
                                  holding a JSON array of records

Transport failures (connection refused, timeouts) are retried; HTTP error
responses are not, they are reported as StorageError straight away.
"""

import json
from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from marathi_invoice.config import get_settings
from marathi_invoice.models.invoice import InvoiceRecord
from marathi_invoice.services.storage.interface import (
    ConnectionError,
    InvoiceStorageInterface,
    NotFoundError,
    StorageError,
)


logger = structlog.get_logger(__name__)

LIST_ENDPOINT = "/api/invoices"
UPLOAD_ENDPOINT = "/api/invoice-upload"


_retry_transport = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)


class RemoteInvoiceStorage(InvoiceStorageInterface):
    """
    httpx implementation of invoice storage.

    `transport` is passed straight to httpx.AsyncClient; tests use
    httpx.MockTransport.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if base_url is None or timeout is None:
            settings = get_settings().invoice_backend
            base_url = base_url or settings.base_url
            timeout = timeout or settings.timeout_seconds
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    @_retry_transport
    async def _get(self, path: str) -> httpx.Response:
        async with self._client() as client:
            return await client.get(path)

    @_retry_transport
    async def _post_form(self, path: str, data: dict[str, str]) -> httpx.Response:
        async with self._client() as client:
            return await client.post(path, files={k: (None, v) for k, v in data.items()})

    async def save_invoices(self, records: list[dict[str, Any]]) -> bool:
        """Upload records as one multipart request."""
        if not records:
            return True

        payload = json.dumps(records, ensure_ascii=False, default=str)
        try:
            response = await self._post_form(UPLOAD_ENDPOINT, {"invoiceData": payload})
        except httpx.TransportError as e:
            raise ConnectionError(f"Invoice service unreachable: {e}") from e

        if response.is_error:
            raise StorageError(
                f"Failed to save invoices: HTTP {response.status_code} {response.text[:200]}"
            )

        logger.info(
            "invoices_uploaded",
            count=len(records),
            status_code=response.status_code,
        )
        return True

    async def list_invoices(self) -> list[InvoiceRecord]:
        """Fetch and parse every stored invoice; malformed entries are skipped."""
        try:
            response = await self._get(LIST_ENDPOINT)
        except httpx.TransportError as e:
            raise ConnectionError(f"Invoice service unreachable: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Invoice list endpoint not found: {LIST_ENDPOINT}")
        if response.is_error:
            raise StorageError(f"Failed to list invoices: HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise StorageError(f"Invoice service returned invalid JSON: {e}") from e

        if not isinstance(payload, list):
            raise StorageError("Invoice service returned an unexpected payload")

        records = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            try:
                records.append(InvoiceRecord.model_validate(item))
            except ValidationError:
                logger.debug("invoice_record_skipped", item_id=item.get("id"))
                continue
        return records
