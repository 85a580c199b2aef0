"""Invoice draft validation."""

from marathi_invoice.validation.validator import InvoiceValidator

__all__ = ["InvoiceValidator"]
