from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from aawaaj_admin.metrics import observe_inactivity_signout


logger = logging.getLogger("aawaaj.security")

DEFAULT_TIMEOUT_MS = 1_800_000
QUALIFYING_EVENTS = frozenset(
    {"mousemove", "mousedown", "pointermove", "pointerdown", "keydown", "touchstart", "scroll"}
)

TimeoutCallback = Callable[[], Awaitable[None] | None]


class InactivityMonitor:
    """Idle countdown on the running asyncio loop.

    ``start()`` schedules the countdown, every qualifying ``notify()`` cancels
    and reschedules it, and ``close()`` cancels whatever is pending. When the
    countdown elapses ``on_timeout`` runs exactly once and the monitor stops
    accepting events.
    """

    def __init__(self, on_timeout: TimeoutCallback, *, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self._on_timeout = on_timeout
        self._timeout_ms = timeout_ms
        self._task: asyncio.Task[None] | None = None
        self._expired = False
        self._closed = False

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def expired(self) -> bool:
        return self._expired

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._closed or self._expired:
            return
        self._reschedule()

    def notify(self, event: str) -> bool:
        """Reset the countdown for a qualifying input event; returns whether it counted."""

        if event not in QUALIFYING_EVENTS or self._closed or self._expired:
            return False
        self._reschedule()
        return True

    def close(self) -> None:
        self._closed = True
        self._cancel()

    async def __aenter__(self) -> InactivityMonitor:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def _reschedule(self) -> None:
        self._cancel()
        self._task = asyncio.get_running_loop().create_task(self._countdown())

    def _cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _countdown(self) -> None:
        await asyncio.sleep(self._timeout_ms / 1000)
        self._expired = True
        # Detach so close() during sign-out does not cancel it.
        self._task = None
        observe_inactivity_signout()
        logger.info("session.inactivity_timeout", extra={"duration_ms": self._timeout_ms})
        try:
            result = self._on_timeout()
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.exception("session.inactivity_signout_failed", extra={"error": str(exc)})
