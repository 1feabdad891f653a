"""Derived election view: totals, per-candidate share and leader.

Pure functions of ``(candidates, winner, window, phase)``. The leader is
always the candidate the contract's ``getWinner`` names; it is never
recomputed from vote counts so local and remote tie-breaks cannot
disagree.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from pyballot._constants import NO_LEADER_LABEL
from pyballot.models.candidate import Candidate
from pyballot.models.election import ElectionPhase, VotingWindow, Winner


def vote_percentage(vote_count: int, total_votes: int) -> float:
    """Share of *total_votes* in percent, one decimal; ``0.0`` when nobody voted.

    Shares are rounded independently and need not sum to exactly 100.
    """
    if total_votes <= 0:
        return 0.0
    return round(vote_count / total_votes * 100, 1)


def resolve_leader(candidates: Iterable[Candidate], winner: Winner | None) -> Candidate | None:
    """Candidate matching ``winner.candidate_id``, only if the winner has votes.

    ``getWinner`` answers ``(0, 0)`` before any vote, which is why a
    zero vote count means "no leader" regardless of the id.
    """
    if winner is None or not winner.has_votes:
        return None
    for candidate in candidates:
        if candidate.id == winner.candidate_id:
            return candidate
    return None


class CandidateShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate: Candidate
    percentage: float
    is_leader: bool = False

    @property
    def label(self) -> str:
        return f"{self.percentage:.1f}%"


class ElectionViewModel(BaseModel):
    """Everything a renderer needs about the tally."""

    model_config = ConfigDict(frozen=True)

    phase: ElectionPhase
    total_votes: int
    shares: tuple[CandidateShare, ...]
    leader: Candidate | None
    leader_votes: int
    window: VotingWindow

    @classmethod
    def from_inputs(
        cls,
        candidates: Iterable[Candidate],
        winner: Winner | None,
        window: VotingWindow | None,
        phase: ElectionPhase,
    ) -> ElectionViewModel:
        ordered = tuple(candidates)
        total = sum(candidate.vote_count for candidate in ordered)
        leader = resolve_leader(ordered, winner)
        shares = tuple(
            CandidateShare(
                candidate=candidate,
                percentage=vote_percentage(candidate.vote_count, total),
                is_leader=leader is not None and candidate.id == leader.id,
            )
            for candidate in ordered
        )
        return cls(
            phase=phase,
            total_votes=total,
            shares=shares,
            leader=leader,
            leader_votes=winner.vote_count if leader is not None and winner is not None else 0,
            window=window or VotingWindow(),
        )

    @property
    def leader_label(self) -> str:
        return self.leader.name if self.leader is not None else NO_LEADER_LABEL

    @property
    def status_label(self) -> str:
        return self.phase.label

    @property
    def window_start(self) -> datetime | None:
        return self.window.start_at

    @property
    def window_end(self) -> datetime | None:
        return self.window.end_at

    def percentage_of(self, candidate_id: int) -> float:
        for share in self.shares:
            if share.candidate.id == candidate_id:
                return share.percentage
        return 0.0


def build_election_view(
    candidates: Iterable[Candidate],
    winner: Winner | None,
    window: VotingWindow | None,
    phase: ElectionPhase,
) -> ElectionViewModel:
    return ElectionViewModel.from_inputs(candidates, winner, window, phase)
