"""Best-effort contract log watcher.

Polls the contract's logs block range by block range and hands decoded
events to a callback. Nothing here is needed for correctness: every
consumer still re-queries the contract, the watcher only makes those
refreshes happen sooner after another party's transaction.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable

from pydantic import ValidationError

from pyballot._transport import ContractTransport
from pyballot.models.events import ContractEvent, parse_contract_event

_logger = logging.getLogger(__name__)

EventCallback = Callable[[ContractEvent], Awaitable[None] | None]


class EventWatcher:
    """Poll ``eth_getLogs`` for the voting contract.

    The first poll only records the chain head; events are reported for
    blocks mined after the watcher started.
    """

    def __init__(
        self,
        transport: ContractTransport,
        *,
        on_event: EventCallback,
        poll_interval: float = 5.0,
    ) -> None:
        self._transport = transport
        self._on_event = on_event
        self._poll_interval = poll_interval
        self._last_block: int | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_block(self) -> int | None:
        return self._last_block

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pyballot-events")

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def poll_once(self) -> list[ContractEvent]:
        """Fetch logs mined since the last poll and dispatch them in order."""
        head = await self._transport.block_number()
        if self._last_block is None:
            self._last_block = head
            return []
        if head <= self._last_block:
            return []

        payloads = await self._transport.get_events(self._last_block + 1, head)
        self._last_block = head

        events: list[ContractEvent] = []
        for payload in payloads:
            try:
                event = parse_contract_event(payload)
            except ValidationError:
                _logger.debug("Skipping malformed %s log", payload.get("event"), exc_info=True)
                continue
            if event is not None:
                events.append(event)

        for event in events:
            _logger.debug("Contract event %s in block %s", event.event, event.block_number)
            try:
                result = self._on_event(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                _logger.debug("Event callback failed for %s", event.event, exc_info=True)
        return events

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except Exception:
                _logger.debug("Event poll failed", exc_info=True)
            await asyncio.sleep(self._poll_interval)
