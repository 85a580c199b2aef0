"""
Storage Services Package

Invoices are persisted by the remote invoice service (httpx);
audit events go to Google Sheets.
"""

from marathi_invoice.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    InvoiceStorageInterface,
    NotFoundError,
    StorageError,
)
from marathi_invoice.services.storage.remote_api import RemoteInvoiceStorage
from marathi_invoice.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "InvoiceStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "RemoteInvoiceStorage",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
]
