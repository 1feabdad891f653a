from __future__ import annotations

import pytest
from conftest import VOTER, FakeVotingBackend

from pyballot._events import EventWatcher
from pyballot.models.events import ContractEvent, VoteCast


@pytest.mark.asyncio
async def test_first_poll_only_records_head(backend: FakeVotingBackend) -> None:
    backend.logs.append({"event": "VotingEnded", "args": {"endTime": 1}, "block_number": 90})
    seen: list[ContractEvent] = []
    watcher = EventWatcher(backend, on_event=seen.append)

    assert await watcher.poll_once() == []
    assert watcher.last_block == 100
    assert seen == []
    assert backend.call_count("get_events") == 0


@pytest.mark.asyncio
async def test_new_logs_are_dispatched_in_order(backend: FakeVotingBackend) -> None:
    seen: list[ContractEvent] = []
    watcher = EventWatcher(backend, on_event=seen.append)
    await watcher.poll_once()

    backend.block = 102
    backend.logs.extend(
        [
            {"event": "VotingStarted", "args": {"startTime": 1, "endTime": 2}, "block_number": 101},
            {"event": "VoteCast", "args": {"voter": VOTER, "candidateId": 1}, "block_number": 102},
            {"event": "VoteCast", "args": {"voter": "garbage", "candidateId": 1}, "block_number": 102},
            {"event": "Unknown", "args": {}, "block_number": 102},
        ]
    )

    events = await watcher.poll_once()

    assert [e.event for e in events] == ["VotingStarted", "VoteCast"]
    assert [e.event for e in seen] == ["VotingStarted", "VoteCast"]
    assert isinstance(seen[1], VoteCast)
    assert watcher.last_block == 102

    # Nothing new: no log query.
    calls = backend.call_count("get_events")
    assert await watcher.poll_once() == []
    assert backend.call_count("get_events") == calls


@pytest.mark.asyncio
async def test_callback_failure_does_not_stop_dispatch(backend: FakeVotingBackend) -> None:
    seen: list[str] = []

    async def _callback(event: ContractEvent) -> None:
        seen.append(event.event)
        raise RuntimeError("boom")

    watcher = EventWatcher(backend, on_event=_callback)
    await watcher.poll_once()
    backend.block = 101
    backend.logs.append({"event": "VotingEnded", "args": {"endTime": 5}, "block_number": 101})
    backend.logs.append({"event": "VotingEnded", "args": {"endTime": 6}, "block_number": 101})

    await watcher.poll_once()

    assert seen == ["VotingEnded", "VotingEnded"]


@pytest.mark.asyncio
async def test_start_and_stop(backend: FakeVotingBackend) -> None:
    watcher = EventWatcher(backend, on_event=lambda _e: None, poll_interval=0.01)

    watcher.start()
    assert watcher.running is True
    await watcher.stop()
    assert watcher.running is False
