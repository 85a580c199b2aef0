"""
Lazy loader for the external transliteration backend.

State machine:

    NOT_LOADED --get()--> LOADING --ok--> LOADED
                             |
                             +--error--> FAILED --get()--> LOADING ...

All callers that arrive while a load is in flight await the same task.
A caller's wait is bounded; when it times out it gets None (the engine
then falls back to phonetics) but the shared load keeps running for
later callers.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

import structlog

from marathi_invoice.services.transliteration.backends import TransliterationBackend


BackendFactory = Callable[[], Awaitable[TransliterationBackend]]


class LoadState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class BackendLoader:
    """Owns the one backend instance for the process."""

    def __init__(self, factory: BackendFactory, timeout: Optional[float] = None):
        self._factory = factory
        self._timeout = timeout
        self._state = LoadState.NOT_LOADED
        self._backend: Optional[TransliterationBackend] = None
        self._pending: Optional[asyncio.Future] = None
        self._logger = structlog.get_logger(__name__)

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def backend(self) -> Optional[TransliterationBackend]:
        return self._backend

    async def get(self, timeout: Optional[float] = None) -> Optional[TransliterationBackend]:
        """
        The loaded backend, loading it on first use.

        Returns None if the load fails or does not finish within the
        timeout. Never raises.
        """
        if self._state == LoadState.LOADED:
            return self._backend

        pending = self._pending
        if (
            pending is None
            or pending.done()
            or pending.get_loop() is not asyncio.get_running_loop()
        ):
            pending = self._start_load()

        wait = self._timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(asyncio.shield(pending), wait)
        except asyncio.TimeoutError:
            self._logger.warning(
                "transliteration_backend_load_timeout",
                timeout_seconds=wait,
            )
            return None

    def _start_load(self) -> asyncio.Future:
        self._state = LoadState.LOADING
        self._pending = asyncio.ensure_future(self._load())
        return self._pending

    async def _load(self) -> Optional[TransliterationBackend]:
        try:
            backend = await self._factory()
        except Exception as e:
            self._state = LoadState.FAILED
            self._logger.warning(
                "transliteration_backend_load_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        self._backend = backend
        self._state = LoadState.LOADED
        self._logger.info(
            "transliteration_backend_loaded",
            backend=getattr(backend, "name", type(backend).__name__),
        )
        return backend

    def reset(self) -> None:
        """Forget the loaded backend (tests)."""
        self._state = LoadState.NOT_LOADED
        self._backend = None
        self._pending = None
