"""Tests for Pydantic model parsing with BallotBaseModel."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyballot._constants import days_to_seconds
from pyballot.models.candidate import Candidate
from pyballot.models.election import ElectionPhase, ElectionSnapshot, VotingWindow, Winner, derive_phase
from pyballot.models.events import CandidateAdded, VoteCast, VotingEnded, VotingStarted, parse_contract_event
from pyballot.models.requests import AddCandidateRequest, StartVotingRequest

# ------------------------------------------------------------------
# Contract tuples
# ------------------------------------------------------------------


class TestPositionalDecoding:
    def test_candidate_from_tuple(self) -> None:
        candidate = Candidate.model_validate((3, "Carol", 12, True))

        assert candidate.id == 3
        assert candidate.name == "Carol"
        assert candidate.vote_count == 12
        assert candidate.raw == [3, "Carol", 12, True]

    def test_candidate_from_camel_case_mapping(self) -> None:
        candidate = Candidate.model_validate({"id": 1, "name": "A", "voteCount": 4, "exists": True})
        assert candidate.vote_count == 4

    def test_wrong_arity_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Winner.model_validate((1, 2, 3))

    def test_window_and_winner(self) -> None:
        window = VotingWindow.model_validate((100, 700))
        winner = Winner.model_validate((2, 5))

        assert window.is_valid
        assert window.end_at is not None
        assert winner.candidate_id == 2
        assert winner.has_votes


# ------------------------------------------------------------------
# Phase derivation
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    ("status", "window", "expected"),
    [
        (True, VotingWindow(start_time=100, end_time=200), ElectionPhase.ACTIVE),
        (False, VotingWindow(start_time=100, end_time=200), ElectionPhase.ENDED),
        (False, VotingWindow(), ElectionPhase.NOT_STARTED),
        (False, None, ElectionPhase.NOT_STARTED),
    ],
)
def test_derive_phase(status: bool, window: VotingWindow | None, expected: ElectionPhase) -> None:
    assert derive_phase(status, window) == expected


def test_phase_ordering() -> None:
    assert ElectionPhase.NOT_STARTED < ElectionPhase.ACTIVE < ElectionPhase.ENDED
    assert ElectionPhase.NOT_STARTED.label == "Not started"


def test_snapshot_phase() -> None:
    snapshot = ElectionSnapshot(voting_status=False, window=VotingWindow(start_time=1, end_time=2))
    assert snapshot.phase == ElectionPhase.ENDED


# ------------------------------------------------------------------
# Requests
# ------------------------------------------------------------------


def test_days_to_seconds() -> None:
    assert days_to_seconds(7) == 604800
    for bad in (0, -3, True, 1.0):
        with pytest.raises(ValueError):
            days_to_seconds(bad)  # type: ignore[arg-type]


def test_start_voting_request() -> None:
    assert StartVotingRequest(duration_days=1).duration_seconds == 86400
    with pytest.raises(ValidationError):
        StartVotingRequest(duration_days=0)


def test_add_candidate_request_trims() -> None:
    assert AddCandidateRequest(name="  Bob ").name == "Bob"
    with pytest.raises(ValidationError):
        AddCandidateRequest(name="\t ")


# ------------------------------------------------------------------
# Contract events
# ------------------------------------------------------------------


def test_parse_contract_events() -> None:
    vote = parse_contract_event(
        {
            "event": "VoteCast",
            "args": {"voter": "0x" + "B" * 40, "candidateId": 2},
            "block_number": 12,
            "tx_hash": "0x01",
            "log_index": 0,
        }
    )
    assert isinstance(vote, VoteCast)
    assert vote.voter == "0x" + "b" * 40
    assert vote.candidate_id == 2
    assert vote.block_number == 12

    started = parse_contract_event({"event": "VotingStarted", "args": {"startTime": 1, "endTime": 2}})
    assert isinstance(started, VotingStarted)
    assert started.end_time == 2

    assert isinstance(parse_contract_event({"event": "VotingEnded", "args": {"endTime": 2}}), VotingEnded)
    added = parse_contract_event({"event": "CandidateAdded", "args": {"candidateId": 1, "name": "A"}})
    assert isinstance(added, CandidateAdded)


def test_unknown_event_is_ignored() -> None:
    assert parse_contract_event({"event": "OwnershipTransferred", "args": {}}) is None
    assert parse_contract_event({}) is None
