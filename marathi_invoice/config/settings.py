"""
Configuration Management for Marathi Invoice

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every external collaborator (transliteration backend, remote invoice
service, Google Sheets audit log) is visible in one place and validated
at startup.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransliterationSettings(BaseSettings):
    """External transliteration backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSLITERATION_",
        extra="ignore"
    )

    backend: str = Field(
        default="sanscript",
        pattern="^(sanscript|aksharamukha_api|none)$",
        description="Which external backend to load ('none' = phonetic fallback only)"
    )
    api_url: str = Field(
        default="https://aksharamukha-plugin.appspot.com/api/public",
        description="Aksharamukha public API endpoint"
    )
    load_timeout_seconds: float = Field(
        default=2.0,
        ge=0.1,
        le=30.0,
        description="How long a caller waits for the shared backend load"
    )
    request_timeout_seconds: float = Field(
        default=5.0,
        ge=0.5,
        le=60.0,
        description="Per-request timeout for the HTTP backend"
    )
    phonetic_fallback: bool = Field(
        default=True,
        description="Use the local phonetic transliterator when the backend fails"
    )


class InvoiceBackendSettings(BaseSettings):
    """Remote invoice service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INVOICE_BACKEND_",
        extra="ignore"
    )

    base_url: str = Field(
        default="https://backend-invoice-gen.onrender.com",
        description="Base URL of the invoice persistence service"
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=120.0,
        description="HTTP timeout for invoice service calls"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets audit log configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Excel upload limits
    max_upload_size_mb: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum Excel upload size in MB"
    )

    # Direct-entry sheet layout
    sales_row_count: int = Field(
        default=13,
        ge=1,
        le=100,
        description="Number of sales rows on the direct-entry sheet"
    )
    blank_expense_row_count: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Unnamed expense rows after the standard expense heads"
    )

    # Distribution invoice defaults
    default_distribution_percent: Decimal = Field(
        default=Decimal("45"),
        ge=0,
        le=100,
        description="Distributor share of net collection (%)"
    )
    default_gst_rate: Decimal = Field(
        default=Decimal("18"),
        ge=0,
        le=100,
        description="Default GST/IGST rate (%)"
    )
    default_tax_type: str = Field(
        default="IGST",
        pattern="^(IGST|CGST/SGST)$",
        description="Default tax regime"
    )

    # Issuing firm
    firm_name: str = Field(
        default="FIRST FILM STUDIOS LLP",
        description="Name printed on invoices"
    )
    signatory: str = Field(
        default="For FIRST FILM STUDIOS LLP",
        description="Signature line"
    )

    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def transliteration(self) -> TransliterationSettings:
        return TransliterationSettings()

    @property
    def invoice_backend(self) -> InvoiceBackendSettings:
        return InvoiceBackendSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the failures.
    """
    results = {}
    settings = get_settings()

    sections = {
        "transliteration": lambda: settings.transliteration,
        "invoice_backend": lambda: settings.invoice_backend,
        "google_sheets": lambda: settings.google_sheets,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
