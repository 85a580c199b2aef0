"""Configuration package."""

from marathi_invoice.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    InvoiceBackendSettings,
    Settings,
    TransliterationSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "InvoiceBackendSettings",
    "Settings",
    "TransliterationSettings",
    "get_settings",
    "validate_all_settings",
]
