"""Turn an :class:`ElectionSnapshot` into store updates."""

from __future__ import annotations

from collections.abc import Callable

from pyballot.models.election import ElectionSnapshot
from pyballot.state.events import IngestionEvent, IngestionSource, StateSection


def build_events_from_snapshot(
    snapshot: ElectionSnapshot,
    *,
    block_number: int | None = None,
) -> list[IngestionEvent]:
    """One event per store section covered by *snapshot*."""
    observed_at = snapshot.fetched_at
    source = IngestionSource.QUERY

    def _event(section: StateSection, data: dict[str, object]) -> IngestionEvent:
        return IngestionEvent(
            section=section,
            source=source,
            observed_at=observed_at,
            block_number=block_number,
            data=data,
        )

    events = [
        _event(StateSection.ADMIN, {"admin": snapshot.admin}),
        _event(StateSection.CANDIDATES, {"candidates": snapshot.candidates}),
        _event(
            StateSection.STATUS,
            {
                "voting_status": snapshot.voting_status,
                "start_time": snapshot.window.start_time,
                "end_time": snapshot.window.end_time,
            },
        ),
        _event(StateSection.WINNER, {"winner": snapshot.winner}),
        _event(StateSection.REMAINING_TIME, {"remaining_time": snapshot.remaining_time}),
    ]
    if snapshot.voter is not None:
        events.append(
            _event(
                StateSection.VOTER,
                {"address": snapshot.voter.address, "has_voted": snapshot.voter.has_voted},
            )
        )
    return events


def apply_snapshot(
    store_apply: Callable[[IngestionEvent], bool],
    snapshot: ElectionSnapshot,
    *,
    block_number: int | None = None,
) -> bool:
    """Apply every section of *snapshot*; ``True`` if anything changed."""
    changed = False
    for event in build_events_from_snapshot(snapshot, block_number=block_number):
        changed = store_apply(event) or changed
    return changed
