"""
Data Models Package

This package contains all Pydantic models used in Marathi Invoice.
All data flowing through the system must conform to these schemas.
"""

from marathi_invoice.models.money import (
    MonetaryAmount,
    NetBalance,
)
from marathi_invoice.models.invoice import (
    EXPENSE_HEADS,
    CinemaInvoice,
    DailyCollection,
    DirectInvoice,
    ExpenseEntry,
    InvoiceLineItem,
    InvoiceRecord,
    InvoiceTotals,
    ValidationIssue,
    ValidationResult,
)
from marathi_invoice.models.transliteration import (
    TransliterationConfidence,
    TransliterationResult,
)
from marathi_invoice.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Money
    "MonetaryAmount",
    "NetBalance",
    # Invoice models
    "EXPENSE_HEADS",
    "CinemaInvoice",
    "DailyCollection",
    "DirectInvoice",
    "ExpenseEntry",
    "InvoiceLineItem",
    "InvoiceRecord",
    "InvoiceTotals",
    "ValidationIssue",
    "ValidationResult",
    # Transliteration
    "TransliterationConfidence",
    "TransliterationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
