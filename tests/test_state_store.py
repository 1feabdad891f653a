from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pyballot.ingestion.contract_events import build_events_from_contract_event
from pyballot.ingestion.snapshot import apply_snapshot
from pyballot.models.candidate import Candidate
from pyballot.models.election import ElectionPhase, ElectionSnapshot, VoterRecord, VotingWindow, Winner
from pyballot.models.events import VoteCast, VotingEnded, VotingStarted
from pyballot.state.events import IngestionEvent, IngestionSource, StateSection
from pyballot.state.store import StateStore

VOTER = "0x" + "b" * 40


def _dt() -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC)


def _status(voting_status: bool, start: int, end: int, *, block: int | None = None) -> IngestionEvent:
    return IngestionEvent(
        section=StateSection.STATUS,
        source=IngestionSource.QUERY,
        observed_at=_dt(),
        block_number=block,
        data={"voting_status": voting_status, "start_time": start, "end_time": end},
    )


def _voter(has_voted: bool) -> IngestionEvent:
    return IngestionEvent(
        section=StateSection.VOTER,
        source=IngestionSource.QUERY,
        observed_at=_dt(),
        data={"address": VOTER, "has_voted": has_voted},
    )


def test_has_voted_is_sticky() -> None:
    store = StateStore()

    assert store.has_voted(VOTER) is None
    store.apply(_voter(False))
    assert store.has_voted(VOTER) is False
    store.apply(_voter(True))
    assert store.has_voted(VOTER) is True

    # A lagging read must not flip it back.
    assert store.apply(_voter(False)) is False
    assert store.has_voted(VOTER) is True
    assert store.has_voted(VOTER.upper().replace("0X", "0x")) is True


def test_phase_never_moves_backwards() -> None:
    store = StateStore()
    assert store.phase == ElectionPhase.NOT_STARTED
    assert store.has_phase is False

    store.apply(_status(True, 100, 200))
    assert store.phase == ElectionPhase.ACTIVE

    # A stale node answering "not started" is ignored.
    assert store.apply(_status(False, 0, 0)) is False
    assert store.phase == ElectionPhase.ACTIVE
    assert store.voting_status is True

    store.apply(_status(False, 100, 150))
    assert store.phase == ElectionPhase.ENDED

    assert store.apply(_status(True, 100, 200)) is False
    assert store.phase == ElectionPhase.ENDED


def test_stale_block_update_rejected() -> None:
    store = StateStore()
    store.apply(_status(True, 100, 200, block=10))

    assert store.apply(_status(True, 100, 300, block=9)) is False
    assert store.window.end_time == 200

    assert store.apply(_status(True, 100, 300, block=11)) is True
    assert store.window.end_time == 300


def test_partial_patch_keeps_existing_keys() -> None:
    store = StateStore()
    store.apply(_status(True, 100, 200))

    for event in build_events_from_contract_event(VotingEnded(end_time=150)):
        store.apply(event)

    assert store.phase == ElectionPhase.ENDED
    assert store.window.start_time == 100
    assert store.window.end_time == 150


def test_contract_events_patch_status_and_voter() -> None:
    store = StateStore()

    for event in build_events_from_contract_event(VotingStarted(start_time=100, end_time=700, block_number=5)):
        store.apply(event)
    for event in build_events_from_contract_event(VoteCast(voter=VOTER, candidate_id=1, block_number=6)):
        store.apply(event)

    assert store.phase == ElectionPhase.ACTIVE
    assert store.window.end_time == 700
    assert store.has_voted(VOTER) is True


def test_apply_snapshot_fills_every_section() -> None:
    store = StateStore(clock=lambda: _dt() + timedelta(seconds=30))
    snapshot = ElectionSnapshot(
        admin="0x" + "A" * 40,
        candidates=(Candidate(id=1, name="A", vote_count=2),),
        voting_status=True,
        window=VotingWindow(start_time=100, end_time=200),
        winner=Winner(winning_candidate_id=1, winning_vote_count=2),
        remaining_time=50,
        voter=VoterRecord(address=VOTER, has_voted=True),
        fetched_at=_dt(),
    )

    assert apply_snapshot(store.apply, snapshot) is True

    assert store.admin == "0x" + "a" * 40
    assert store.candidate_ids == frozenset({1})
    assert store.winner.candidate_id == 1
    assert store.remaining_time == 50
    assert store.phase == ElectionPhase.ACTIVE
    assert store.has_voted(VOTER) is True
    assert store.age_seconds(StateSection.CANDIDATES) == 30.0
