"""
Transliteration Engine

Best-effort rendering of Latin-script names and places in Devanagari.
Per word, first hit wins:

1. correction dictionary (known proper nouns)
2. already Devanagari -> unchanged
3. external backend, under several input-format hypotheses
4. local phonetic transducer
5. unchanged

Whole text: digits are converted first, then the text is split on
whitespace/punctuation and each word is handled independently; separators
are put back exactly as they were.

The engine never raises to its caller. Transliteration is cosmetic and
an invoice must always render.
"""

import asyncio
import re
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Any, Optional

import structlog

from marathi_invoice.config import get_settings
from marathi_invoice.marathi.digits import (
    contains_devanagari,
    count_devanagari,
    number_to_devanagari,
    to_devanagari_digits,
)
from marathi_invoice.marathi.phonetic import phonetic_transliterate
from marathi_invoice.models.transliteration import (
    TransliterationConfidence,
    TransliterationResult,
)
from marathi_invoice.services.transliteration.backends import DEVANAGARI, create_backend_factory
from marathi_invoice.services.transliteration.loader import BackendLoader, LoadState


logger = structlog.get_logger(__name__)


CORRECTION_DICTIONARY: dict[str, str] = {
    "mumbai": "मुंबई",
    "delhi": "दिल्ली",
    "bhaskar": "भास्कर",
    "pune": "पुणे",
    "nagpur": "नागपूर",
    "nashik": "नाशिक",
    "raipur": "रायपूर",
    "kolhapur": "कोल्हापूर",
    "thane": "ठाणे",
}

TOKEN_SPLIT_RE = re.compile(r"""(\s+|[.,;:!?\-_()\[\]{}'"/])""")
_SEPARATOR_ONLY_RE = re.compile(r"""^[\s.,;:!?\-_()\[\]{}'"/]*$""")


@dataclass(frozen=True)
class BackendAttempt:
    source_format: str
    nativize: bool


# Tried in order; the first nativized success ends the search
BACKEND_ATTEMPTS = (
    BackendAttempt("IAST", True),
    BackendAttempt("ITRANS", True),
    BackendAttempt("autodetect", True),
    BackendAttempt("Latin", True),
    BackendAttempt("IAST", False),
    BackendAttempt("ITRANS", False),
    BackendAttempt("autodetect", False),
)


def lookup_dictionary(word: str) -> Optional[str]:
    if not word:
        return None
    return CORRECTION_DICTIONARY.get(word) or CORRECTION_DICTIONARY.get(word.lower())


def tokenize(text: str) -> list[str]:
    """Split keeping separators, so "".join(tokenize(t)) == t."""
    return [token for token in TOKEN_SPLIT_RE.split(text) if token]


def _is_separator(token: str) -> bool:
    return bool(_SEPARATOR_ONLY_RE.match(token))


class TransliterationEngine:
    """
    Dictionary -> backend -> phonetic transliteration.

    `loader` is optional; without one the external step is skipped
    entirely (offline mode, tests).
    """

    def __init__(
        self,
        loader: Optional[BackendLoader] = None,
        phonetic_fallback: bool = True,
        load_timeout: Optional[float] = None,
    ):
        self._loader = loader
        self._phonetic_fallback = phonetic_fallback
        self._load_timeout = load_timeout

    @property
    def backend_failed(self) -> bool:
        """True once a configured backend has failed to load."""
        return self._loader is not None and self._loader.state == LoadState.FAILED

    async def transliterate_word(self, word: str) -> TransliterationResult:
        """Transliterate a single token."""
        word = (word or "").strip()
        if not word:
            return TransliterationResult(text=word)

        hit = lookup_dictionary(word)
        if hit:
            return TransliterationResult(text=hit, confidence=TransliterationConfidence.DICTIONARY)

        if contains_devanagari(word):
            return TransliterationResult(text=word)

        external = await self._try_backend(word)
        if external:
            return TransliterationResult(text=external, confidence=TransliterationConfidence.EXTERNAL)

        return self._fallback(word)

    def _fallback(self, word: str) -> TransliterationResult:
        if self._phonetic_fallback:
            phonetic = phonetic_transliterate(word)
            if phonetic != word and contains_devanagari(phonetic):
                logger.debug("transliteration_phonetic_fallback", word=word)
                return TransliterationResult(
                    text=phonetic,
                    confidence=TransliterationConfidence.PHONETIC,
                )
        return TransliterationResult(text=word)

    async def _try_backend(self, word: str) -> Optional[str]:
        """Best accepted backend result, or None."""
        if self._loader is None:
            return None

        backend = await self._loader.get(self._load_timeout)
        if backend is None:
            return None

        source = word.lower()
        best: Optional[str] = None
        best_count = 0

        for attempt in BACKEND_ATTEMPTS:
            try:
                result = await backend.transliterate(
                    attempt.source_format,
                    DEVANAGARI,
                    source,
                    nativize=attempt.nativize,
                )
            except Exception as e:
                logger.debug(
                    "transliteration_attempt_failed",
                    source_format=attempt.source_format,
                    nativize=attempt.nativize,
                    error=str(e),
                )
                continue

            if not result or result == source:
                continue
            count = count_devanagari(result)
            if count == 0:
                continue

            if count > best_count:
                best, best_count = result, count
            if attempt.nativize:
                break

        return best

    async def _transliterate_token(self, token: str) -> str:
        if not token or _is_separator(token) or contains_devanagari(token):
            return token
        result = await self.transliterate_word(token)
        return result.text

    async def transliterate(self, text: Optional[str]) -> str:
        """
        Transliterate free text, keeping separators byte-for-byte.

        Example: "Mumbai, 2025" -> "मुंबई, २०२५"
        """
        if not text:
            return ""

        converted = to_devanagari_digits(text)
        try:
            tokens = tokenize(converted)
            results = await asyncio.gather(
                *(self._transliterate_token(token) for token in tokens)
            )
        except Exception as e:
            logger.warning("transliteration_failed", error=str(e))
            return converted
        return "".join(results)

    def transliterate_sync(self, text: Optional[str]) -> str:
        """Dictionary and phonetic only; no I/O, safe from synchronous code."""
        if not text:
            return ""

        out = []
        for token in tokenize(to_devanagari_digits(text)):
            if _is_separator(token) or contains_devanagari(token):
                out.append(token)
                continue
            hit = lookup_dictionary(token)
            out.append(hit if hit else self._fallback(token).text)
        return "".join(out)

    async def convert_to_marathi(self, value: Any) -> str:
        """
        Display string for any scalar field value.

        Numbers get Devanagari digits; text is transliterated; None is "".
        """
        if value is None:
            return ""
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return number_to_devanagari(value)
        return await self.transliterate(str(value))


@lru_cache()
def get_transliteration_engine() -> TransliterationEngine:
    """
    Process-wide engine built from settings (cached).

    Call get_transliteration_engine.cache_clear() to rebuild.
    """
    settings = get_settings().transliteration
    factory = create_backend_factory(settings)
    loader = BackendLoader(factory, timeout=settings.load_timeout_seconds) if factory else None
    return TransliterationEngine(
        loader=loader,
        phonetic_fallback=settings.phonetic_fallback,
        load_timeout=settings.load_timeout_seconds,
    )
