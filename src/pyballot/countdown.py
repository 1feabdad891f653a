"""Countdown to the end of the voting period.

The displayed value is advanced locally every tick and then replaced by
the contract's ``getRemainingTime`` answer, so local drift never
accumulates. The periodic task belongs to whoever created the ticker
and is cancelled by :meth:`CountdownTicker.stop` (or on context exit).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pyballot._constants import ENDED_LABEL, SECONDS_PER_DAY

_logger = logging.getLogger(__name__)


def format_remaining(seconds: float | None) -> str:
    """Render seconds as ``"{d}d {h}h {m}m {s}s"``; ``"Ended"`` at or below zero."""
    if seconds is None or seconds <= 0:
        return ENDED_LABEL
    days, rest = divmod(int(seconds), SECONDS_PER_DAY)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d {hours}h {minutes}m {secs}s"


class CountdownTicker:
    """Locally ticking remaining-time estimate with per-tick resync.

    Parameters
    ----------
    fetch_remaining
        Coroutine function returning the authoritative remaining seconds.
    interval
        Seconds between ticks.
    on_tick
        Called with the formatted label after every tick.
    """

    def __init__(
        self,
        fetch_remaining: Callable[[], Awaitable[int]],
        *,
        interval: float = 1.0,
        on_tick: Callable[[str], None] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._fetch_remaining = fetch_remaining
        self._interval = interval
        self._step = max(1, round(interval))
        self._on_tick = on_tick
        self._remaining: int | None = None
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CountdownTicker:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def remaining(self) -> int | None:
        """Current estimate in seconds (never negative), ``None`` before any value."""
        return self._remaining

    @property
    def label(self) -> str:
        return format_remaining(self._remaining)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def observe(self, seconds: int | None) -> None:
        """Feed an authoritative value; starts ticking on the first positive one."""
        if seconds is None:
            return
        self._remaining = max(0, int(seconds))
        if self._remaining > 0 and not self.running:
            self.start()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pyballot-countdown")
        _logger.debug("Countdown started at %s", self.label)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        _logger.debug("Countdown stopped")

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    async def tick(self) -> str:
        """Advance one tick: decrement locally, then resync from the contract."""
        if self._remaining is not None and self._remaining > 0:
            self._remaining = max(0, self._remaining - self._step)
        try:
            authoritative = await self._fetch_remaining()
        except Exception:
            _logger.debug("Remaining-time resync failed; keeping local estimate", exc_info=True)
        else:
            self._remaining = max(0, int(authoritative))

        label = self.label
        if self._on_tick is not None:
            try:
                self._on_tick(label)
            except Exception:
                _logger.debug("on_tick callback failed", exc_info=True)
        return label

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.tick()
            if self._remaining is not None and self._remaining <= 0:
                _logger.info("Voting period countdown reached zero")
                return
