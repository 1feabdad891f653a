"""Deterministic in-memory session store.

This is the only component allowed to merge incoming ingestion updates.
It enforces the two session invariants:

* the observed election phase never moves backwards;
* a voter's has-voted flag, once seen ``True``, stays ``True``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyballot.models._base import normalize_address
from pyballot.models.candidate import Candidate
from pyballot.models.election import ElectionPhase, VotingWindow, Winner, derive_phase
from pyballot.state.events import IngestionEvent, IngestionSource, StateSection
from pyballot.state.policy import merge_sticky_flag, should_accept_phase, should_accept_update

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _window_from(data: dict[str, Any]) -> VotingWindow:
    return VotingWindow(start_time=data.get("start_time", 0), end_time=data.get("end_time", 0))


class SectionSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data: dict[str, Any] = Field(default_factory=dict)
    block_number: int | None = None
    observed_at: datetime | None = None
    source: IngestionSource | None = None


class StateStore:
    """In-memory store for the merged election state of one session.

    Given the same sequence of :class:`IngestionEvent`s it produces the
    same view. Nothing here is persisted.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._sections: dict[StateSection, SectionSnapshot] = {}
        self._phase: ElectionPhase | None = None
        self._voters: dict[str, bool] = {}

    def apply(self, event: IngestionEvent) -> bool:
        """Apply a normalized ingestion event.

        Returns ``True`` when the event changed the store.
        """
        if event.section == StateSection.VOTER:
            return self._apply_voter(event)

        snapshot = self._sections.get(event.section)
        if snapshot is not None and not should_accept_update(
            cached_block=snapshot.block_number,
            incoming_block=event.block_number,
        ):
            _logger.debug(
                "Dropping stale %s update (block %s < %s)",
                event.section,
                event.block_number,
                snapshot.block_number,
            )
            return False

        merged = dict(snapshot.data) if snapshot is not None else {}
        merged.update(event.data)

        if event.section == StateSection.STATUS:
            incoming_phase = derive_phase(bool(merged.get("voting_status")), _window_from(merged))
            if not should_accept_phase(observed=self._phase, incoming=incoming_phase):
                _logger.debug("Ignoring phase regression %s -> %s", self._phase, incoming_phase)
                return False
            if incoming_phase != self._phase:
                _logger.info("Election phase observed: %s", incoming_phase.name)
            self._phase = incoming_phase

        block = event.block_number
        if snapshot is not None and snapshot.block_number is not None:
            block = max(snapshot.block_number, block) if block is not None else snapshot.block_number
        self._sections[event.section] = SectionSnapshot(
            data=merged,
            block_number=block,
            observed_at=event.observed_at,
            source=event.source,
        )
        return True

    def _apply_voter(self, event: IngestionEvent) -> bool:
        address = event.data.get("address")
        if not isinstance(address, str):
            return False
        key = normalize_address(address)
        previous = self._voters.get(key)
        merged = merge_sticky_flag(previous, bool(event.data.get("has_voted")))
        self._voters[key] = merged
        return merged != previous

    def _get(self, section: StateSection, key: str, default: Any = None) -> Any:
        snapshot = self._sections.get(section)
        if snapshot is None:
            return default
        return snapshot.data.get(key, default)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def admin(self) -> str | None:
        return self._get(StateSection.ADMIN, "admin")

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._get(StateSection.CANDIDATES, "candidates", ())

    @property
    def candidate_ids(self) -> frozenset[int]:
        return frozenset(candidate.id for candidate in self.candidates)

    @property
    def voting_status(self) -> bool:
        return bool(self._get(StateSection.STATUS, "voting_status", False))

    @property
    def window(self) -> VotingWindow:
        snapshot = self._sections.get(StateSection.STATUS)
        return _window_from(snapshot.data) if snapshot is not None else VotingWindow()

    @property
    def winner(self) -> Winner:
        return self._get(StateSection.WINNER, "winner") or Winner()

    @property
    def remaining_time(self) -> int | None:
        return self._get(StateSection.REMAINING_TIME, "remaining_time")

    @property
    def phase(self) -> ElectionPhase:
        """Highest phase observed this session (``NOT_STARTED`` before any read)."""
        return self._phase if self._phase is not None else ElectionPhase.NOT_STARTED

    @property
    def has_phase(self) -> bool:
        return self._phase is not None

    def has_voted(self, address: str | None) -> bool | None:
        """Sticky has-voted flag, ``None`` when never queried for *address*."""
        if not address:
            return None
        return self._voters.get(normalize_address(address))

    def observed_at(self, section: StateSection) -> datetime | None:
        snapshot = self._sections.get(section)
        return snapshot.observed_at if snapshot is not None else None

    def age_seconds(self, section: StateSection) -> float | None:
        observed = self.observed_at(section)
        if observed is None:
            return None
        return (self._clock() - observed).total_seconds()
