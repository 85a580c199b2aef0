"""Transliteration services: backends, the shared loader and the engine."""

from marathi_invoice.services.transliteration.backends import (
    AksharamukhaApiBackend,
    SanscriptBackend,
    TransliterationBackend,
    TransliterationBackendError,
    UnsupportedFormatError,
    create_backend_factory,
    nativize_devanagari,
)
from marathi_invoice.services.transliteration.loader import BackendLoader, LoadState
from marathi_invoice.services.transliteration.engine import (
    CORRECTION_DICTIONARY,
    TransliterationEngine,
    get_transliteration_engine,
    lookup_dictionary,
    tokenize,
)

__all__ = [
    "AksharamukhaApiBackend",
    "SanscriptBackend",
    "TransliterationBackend",
    "TransliterationBackendError",
    "UnsupportedFormatError",
    "create_backend_factory",
    "nativize_devanagari",
    "BackendLoader",
    "LoadState",
    "CORRECTION_DICTIONARY",
    "TransliterationEngine",
    "get_transliteration_engine",
    "lookup_dictionary",
    "tokenize",
]
