from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEBOUNCE_DELAY = 0.3  # seconds


class Debouncer:
    """
    Holds at most one pending call on the event loop.

    Every `schedule` cancels the pending call (if any) and starts a new timer,
    so only the last call inside a quiet period of `delay` seconds runs.
    """

    def __init__(self, delay: float = DEBOUNCE_DELAY, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.delay = delay
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, fn: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, fn, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, fn: Callable[..., Any], args: tuple) -> None:
        self._handle = None
        try:
            fn(*args)
        except Exception:
            logger.exception("Debounced callback failed", extra={"callback": getattr(fn, "__name__", repr(fn))})
