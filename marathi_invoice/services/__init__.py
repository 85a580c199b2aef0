"""Services package."""

from marathi_invoice.services.excel import (
    ExcelImportError,
    parse_invoice_workbook,
    write_report_workbook,
)
from marathi_invoice.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    InvoiceStorageInterface,
    NotFoundError,
    RemoteInvoiceStorage,
    StorageError,
)
from marathi_invoice.services.transliteration import (
    BackendLoader,
    TransliterationEngine,
    get_transliteration_engine,
)

__all__ = [
    # Excel
    "ExcelImportError",
    "parse_invoice_workbook",
    "write_report_workbook",
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "InvoiceStorageInterface",
    "NotFoundError",
    "RemoteInvoiceStorage",
    "StorageError",
    # Transliteration
    "BackendLoader",
    "TransliterationEngine",
    "get_transliteration_engine",
]
