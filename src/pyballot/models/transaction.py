"""Transaction lifecycle models.

One :class:`TransactionRequest` exists per action kind. It moves
through an explicit state machine instead of independent
pending/confirming/confirmed/error flags::

    IDLE -> PENDING -> CONFIRMING -> CONFIRMED
               |           |
               +-----------+-----> FAILED
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TransactionKind(StrEnum):
    ADD_CANDIDATE = "add_candidate"
    START_VOTING = "start_voting"
    END_VOTING = "end_voting"
    CAST_VOTE = "cast_vote"

    @property
    def function_name(self) -> str:
        """Contract function submitted for this kind."""
        return {
            TransactionKind.ADD_CANDIDATE: "addCandidate",
            TransactionKind.START_VOTING: "startVoting",
            TransactionKind.END_VOTING: "endVoting",
            TransactionKind.CAST_VOTE: "vote",
        }[self]


class TransactionStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    CONFIRMING = "confirming"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TransactionStatus.CONFIRMED, TransactionStatus.FAILED)


_TRANSITIONS: dict[TransactionStatus, frozenset[TransactionStatus]] = {
    TransactionStatus.IDLE: frozenset({TransactionStatus.PENDING}),
    TransactionStatus.PENDING: frozenset({TransactionStatus.CONFIRMING, TransactionStatus.FAILED}),
    TransactionStatus.CONFIRMING: frozenset({TransactionStatus.CONFIRMED, TransactionStatus.FAILED}),
    TransactionStatus.CONFIRMED: frozenset(),
    TransactionStatus.FAILED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TransactionRequest(BaseModel):
    """Lifecycle record of one mutating request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: TransactionKind
    status: TransactionStatus = TransactionStatus.IDLE
    args: tuple[Any, ...] = ()
    tx_hash: str | None = None
    error_message: str | None = None
    error_code: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def in_flight(self) -> bool:
        return self.status in (TransactionStatus.PENDING, TransactionStatus.CONFIRMING)

    def advance(self, status: TransactionStatus, **update: Any) -> TransactionRequest:
        """Return a copy moved to *status*.

        Raises :class:`ValueError` for a transition the state machine
        does not allow (e.g. ``CONFIRMED -> PENDING``).
        """
        if status not in _TRANSITIONS[self.status]:
            raise ValueError(f"illegal transition {self.status} -> {status} for {self.kind}")
        if status.is_terminal:
            update.setdefault("finished_at", _utcnow())
        return self.model_copy(update={"status": status, **update})


class TransactionReceipt(BaseModel):
    """Inclusion receipt of a broadcast transaction."""

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    block_number: int | None = None
    status: int = 1
    gas_used: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1
