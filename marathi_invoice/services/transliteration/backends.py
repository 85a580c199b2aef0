"""
External transliteration backends.

A backend exposes one coroutine:

    transliterate(source_format, target_script, text, nativize) -> text

Two implementations:
- SanscriptBackend: the pure-Python indic_transliteration library,
  no network needed.
- AksharamukhaApiBackend: the public Aksharamukha HTTP API via httpx.

Backends may raise; the engine treats any exception from a backend as
"this attempt failed" and moves on.
"""

import asyncio
import re
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from indic_transliteration import detect, sanscript
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from marathi_invoice.config.settings import TransliterationSettings


DEVANAGARI = "Devanagari"
AUTODETECT = "autodetect"

# Nasal consonant + virama before another consonant is written as anusvara
_NASAL_CLUSTER_RE = re.compile("[ङञणनम]्(?=[क-ह])")
_TRAILING_VIRAMA_RE = re.compile("्(?=\\s|$)")
_ASCII_LETTER_RE = re.compile("[A-Za-z]")

# Spellings a scheme has no mapping for; IAST writes ś/ṣ, never "sh"
_UNSPELLABLE = {
    "IAST": re.compile("sh|[fqwxz]"),
}


class TransliterationBackendError(Exception):
    """A backend could not transliterate the given text."""
    pass


class UnsupportedFormatError(TransliterationBackendError):
    """Source format or target script is not known to the backend."""
    pass


def nativize_devanagari(text: str) -> str:
    """
    Normalise scholarly Devanagari output to everyday Marathi spelling.

    "सुन्दर" -> "सुंदर", "नागपुर्" -> "नागपुर"
    """
    text = _NASAL_CLUSTER_RE.sub("ं", text)
    return _TRAILING_VIRAMA_RE.sub("", text)


class TransliterationBackend(ABC):
    """Interface for an external transliteration capability."""

    name: str = "backend"

    @abstractmethod
    async def transliterate(
        self,
        source_format: str,
        target_script: str,
        text: str,
        nativize: bool = True,
    ) -> str:
        pass


class SanscriptBackend(TransliterationBackend):
    """
    indic_transliteration (sanscript) backend.

    Runs in-process; the library call is synchronous and cheap, so it is
    called directly from the coroutine.
    """

    name = "sanscript"

    SCHEMES = {
        "IAST": sanscript.IAST,
        "ITRANS": sanscript.ITRANS,
        "HK": sanscript.HK,
        "Latin": sanscript.OPTITRANS,
        DEVANAGARI: sanscript.DEVANAGARI,
    }

    @classmethod
    async def load(cls) -> "SanscriptBackend":
        """Build the backend and prove it works with one conversion."""
        backend = cls()
        await asyncio.to_thread(
            sanscript.transliterate, "namaste", sanscript.IAST, sanscript.DEVANAGARI
        )
        return backend

    def _resolve_scheme(self, source_format: str, text: str) -> str:
        if source_format == AUTODETECT:
            return detect.detect(text)
        try:
            return self.SCHEMES[source_format]
        except KeyError:
            raise UnsupportedFormatError(f"Unknown source format: {source_format}")

    async def transliterate(
        self,
        source_format: str,
        target_script: str,
        text: str,
        nativize: bool = True,
    ) -> str:
        if target_script not in self.SCHEMES:
            raise UnsupportedFormatError(f"Unknown target script: {target_script}")

        source = self._resolve_scheme(source_format, text)
        unspellable = _UNSPELLABLE.get(source_format)
        if unspellable is not None and unspellable.search(text.lower()):
            raise TransliterationBackendError(f"{source_format} cannot spell {text!r}")

        result = sanscript.transliterate(text, source, self.SCHEMES[target_script])
        if target_script == DEVANAGARI and _ASCII_LETTER_RE.search(result):
            raise TransliterationBackendError(f"Unmapped letters left in {result!r}")
        if nativize and target_script == DEVANAGARI:
            result = nativize_devanagari(result)
        return result


class AksharamukhaApiBackend(TransliterationBackend):
    """
    Aksharamukha public HTTP API.

    GET {api_url}?source=IAST&target=Devanagari&text=...&nativize=true
    returns the converted text as the response body.
    """

    name = "aksharamukha_api"

    def __init__(
        self,
        api_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport

    @classmethod
    async def load(
        cls,
        api_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AksharamukhaApiBackend":
        """Build the backend and check the API answers."""
        backend = cls(api_url, timeout, transport)
        await backend.transliterate("IAST", DEVANAGARI, "namaste")
        return backend

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def transliterate(
        self,
        source_format: str,
        target_script: str,
        text: str,
        nativize: bool = True,
    ) -> str:
        params = {
            "source": source_format,
            "target": target_script,
            "text": text,
            "nativize": "true" if nativize else "false",
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(self._api_url, params=params)

        if response.status_code != 200:
            raise TransliterationBackendError(
                f"Aksharamukha API returned HTTP {response.status_code}"
            )
        return response.text.strip()


def create_backend_factory(settings: TransliterationSettings):
    """
    Factory coroutine function for the configured backend, or None when
    the external step is disabled.
    """
    if settings.backend == "none":
        return None
    if settings.backend == "aksharamukha_api":
        async def load_api() -> TransliterationBackend:
            return await AksharamukhaApiBackend.load(
                settings.api_url, settings.request_timeout_seconds
            )
        return load_api
    return SanscriptBackend.load
