"""Election phase, voting window, winner and voter models."""

from __future__ import annotations

import enum
from datetime import UTC, datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from pyballot.models._base import Address, BallotBaseModel, epoch_to_datetime
from pyballot.models.candidate import Candidate


class ElectionPhase(enum.IntEnum):
    """Stage of the election.

    Ordered so that ``NOT_STARTED < ACTIVE < ENDED``; a session never
    observes a lower phase after a higher one.
    """

    NOT_STARTED = 0
    ACTIVE = 1
    ENDED = 2

    @property
    def label(self) -> str:
        return {
            ElectionPhase.NOT_STARTED: "Not started",
            ElectionPhase.ACTIVE: "Active",
            ElectionPhase.ENDED: "Ended",
        }[self]


class VotingWindow(BallotBaseModel):
    """Start/end of the voting period (``getVotingTimes``)."""

    _POSITIONAL_FIELDS: ClassVar[tuple[str, ...]] = ("start_time", "end_time")

    start_time: int = Field(default=0, ge=0)
    end_time: int = Field(default=0, ge=0)

    @property
    def is_valid(self) -> bool:
        """The window only means something once voting has been started."""
        return self.start_time > 0

    @property
    def start_at(self) -> datetime | None:
        return epoch_to_datetime(self.start_time) if self.is_valid else None

    @property
    def end_at(self) -> datetime | None:
        return epoch_to_datetime(self.end_time) if self.is_valid else None


class Winner(BallotBaseModel):
    """Leader as reported by ``getWinner``.

    The contract applies its own tie-break; this model is never derived
    locally from candidate order.
    """

    _POSITIONAL_FIELDS: ClassVar[tuple[str, ...]] = ("winning_candidate_id", "winning_vote_count")

    winning_candidate_id: int = Field(default=0, ge=0)
    winning_vote_count: int = Field(default=0, ge=0)

    @property
    def candidate_id(self) -> int:
        return self.winning_candidate_id

    @property
    def vote_count(self) -> int:
        return self.winning_vote_count

    @property
    def has_votes(self) -> bool:
        return self.winning_vote_count > 0


class VoterRecord(BaseModel):
    """Has-voted flag for one address."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    address: Address
    has_voted: bool = False


def derive_phase(voting_status: bool, window: VotingWindow | None) -> ElectionPhase:
    """Derive the phase from the remote voting flag and window.

    - voting flag set: ``ACTIVE``
    - flag clear but a window was opened (``start > 0``): ``ENDED``
    - otherwise: ``NOT_STARTED``
    """
    if voting_status:
        return ElectionPhase.ACTIVE
    if window is not None and window.is_valid:
        return ElectionPhase.ENDED
    return ElectionPhase.NOT_STARTED


class ElectionSnapshot(BaseModel):
    """One point-in-time read of everything the views depend on."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    admin: Address | None = None
    candidates: tuple[Candidate, ...] = ()
    voting_status: bool = False
    window: VotingWindow = Field(default_factory=VotingWindow)
    winner: Winner = Field(default_factory=Winner)
    remaining_time: int = Field(default=0, ge=0)
    voter: VoterRecord | None = None
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def phase(self) -> ElectionPhase:
        return derive_phase(self.voting_status, self.window)
