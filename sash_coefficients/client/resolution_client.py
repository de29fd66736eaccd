"""
Resolution client: per-sash orchestration of coefficient requests.

Each sash (order line item) gets its own SashResolutionState. A new request
for a sash always supersedes the previous one: its debounce timer is cleared
and its in-flight exchange is cancelled, so at most one resolution per sash is
ever live and a stale result is never delivered. Different sashes share
nothing but the result cache.

Everything runs on one asyncio event loop; request_resolution() must be
called from code already running on that loop.
"""

import asyncio
import logging
from typing import Callable, Dict, Hashable, Optional

from ..config import settings
from ..schemas import ResolutionRequest, ResolutionResult
from .transport import Transport

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[ResolutionResult], None]
ErrorCallback = Callable[[Exception], None]


def fingerprint(request: ResolutionRequest) -> str:
    """Cache key: system|category|width(3dp)|height(3dp)."""
    return f"{request.system_key}|{request.category}|{request.width:.3f}|{request.height:.3f}"


class SashResolutionState:
    """Pending timer and in-flight task for one sash."""

    def __init__(self):
        self.timer: Optional[asyncio.TimerHandle] = None
        self.task: Optional[asyncio.Task] = None

    @property
    def is_live(self) -> bool:
        return self.timer is not None or self.task is not None

    def cancel(self):
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        if self.task is not None:
            self.task.cancel()
            self.task = None


class ResolutionClient:
    """
    Owns the session's result cache and every sash's resolution state.

    Construct one per editing session and pass it to the editors that need
    it; tests build as many independent instances as they like.
    """

    def __init__(self, transport: Transport, debounce_ms: int = None):
        self.transport = transport
        self.debounce_ms = debounce_ms if debounce_ms is not None else settings.CLIENT_DEBOUNCE_MS
        self._cache: Dict[str, ResolutionResult] = {}
        self._sashes: Dict[Hashable, SashResolutionState] = {}

    # --- Public API ---

    def request_resolution(self, sash_id: Hashable, request: ResolutionRequest,
                           on_success: SuccessCallback,
                           on_error: ErrorCallback = None,
                           debounce_ms: int = None):
        """
        Resolve `request` for `sash_id`, delivering the result to `on_success`.

        Cache hits are delivered synchronously. Otherwise the exchange fires
        after `debounce_ms` of quiet for this sash; a newer call for the same
        sash cancels this one and neither callback fires for it.
        """
        key = fingerprint(request)

        state = self._sashes.get(sash_id)
        if state is not None:
            # Whatever was live for this sash is now stale
            state.cancel()

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for sash %s: %s", sash_id, key)
            on_success(cached)
            return

        loop = asyncio.get_running_loop()
        if state is None:
            state = SashResolutionState()
            self._sashes[sash_id] = state

        delay_ms = debounce_ms if debounce_ms is not None else self.debounce_ms
        state.timer = loop.call_later(
            max(delay_ms, 0) / 1000.0,
            self._fire, sash_id, state, request, key, on_success, on_error,
        )

    def release_sash(self, sash_id: Hashable):
        """Forget a sash removed from the order. No callback fires for it afterwards."""
        state = self._sashes.pop(sash_id, None)
        if state is not None:
            state.cancel()
            logger.debug("Released sash %s", sash_id)

    def reset_all(self):
        """Release every sash and empty the result cache."""
        for sash_id in list(self._sashes.keys()):
            self.release_sash(sash_id)
        self._cache.clear()

    # --- Introspection ---

    def cached(self, request: ResolutionRequest) -> Optional[ResolutionResult]:
        return self._cache.get(fingerprint(request))

    def is_pending(self, sash_id: Hashable) -> bool:
        state = self._sashes.get(sash_id)
        return state is not None and state.is_live

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    @property
    def tracked_sashes(self) -> int:
        return len(self._sashes)

    # --- Internals ---

    def _fire(self, sash_id, state: SashResolutionState, request: ResolutionRequest,
              key: str, on_success: SuccessCallback, on_error: Optional[ErrorCallback]):
        state.timer = None
        logger.debug("Sending coefficient request for sash %s: %s", sash_id, key)
        state.task = asyncio.get_running_loop().create_task(
            self._exchange(sash_id, state, request, key, on_success, on_error)
        )

    def _is_current(self, sash_id, state: SashResolutionState) -> bool:
        return (
            self._sashes.get(sash_id) is state
            and state.task is asyncio.current_task()
        )

    async def _exchange(self, sash_id, state: SashResolutionState, request: ResolutionRequest,
                        key: str, on_success: SuccessCallback, on_error: Optional[ErrorCallback]):
        try:
            result = await self.transport.send(request)
        except asyncio.CancelledError:
            logger.debug("Coefficient request for sash %s superseded", sash_id)
            raise
        except Exception as e:
            if not self._is_current(sash_id, state):
                return
            state.task = None
            logger.warning("Coefficient request for sash %s failed: %s", sash_id, e)
            if on_error is not None:
                on_error(e)
            return

        if not self._is_current(sash_id, state):
            return
        state.task = None
        # Same fingerprint always yields the same value, so a concurrent
        # write from another sash is harmless.
        self._cache.setdefault(key, result)
        on_success(self._cache[key])
