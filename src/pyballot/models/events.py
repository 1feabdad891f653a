"""Events emitted by the voting contract."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from pyballot.models._base import Address


class ContractEvent(BaseModel):
    """Common envelope of a decoded contract log."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    event: str
    block_number: int | None = None
    tx_hash: str | None = None
    log_index: int | None = None


class CandidateAdded(ContractEvent):
    event: Literal["CandidateAdded"] = "CandidateAdded"
    candidate_id: int = Field(ge=0, alias="candidateId")
    name: str


class VoteCast(ContractEvent):
    event: Literal["VoteCast"] = "VoteCast"
    voter: Address
    candidate_id: int = Field(ge=0, alias="candidateId")


class VotingStarted(ContractEvent):
    event: Literal["VotingStarted"] = "VotingStarted"
    start_time: int = Field(ge=0, alias="startTime")
    end_time: int = Field(ge=0, alias="endTime")


class VotingEnded(ContractEvent):
    event: Literal["VotingEnded"] = "VotingEnded"
    end_time: int = Field(ge=0, alias="endTime")


_EVENT_MODELS: dict[str, type[ContractEvent]] = {
    "CandidateAdded": CandidateAdded,
    "VoteCast": VoteCast,
    "VotingStarted": VotingStarted,
    "VotingEnded": VotingEnded,
}


def parse_contract_event(payload: Mapping[str, Any]) -> ContractEvent | None:
    """Build a typed event from a decoded log.

    *payload* carries ``event`` (the event name), ``args`` (decoded
    arguments) and optional ``block_number``, ``tx_hash``, ``log_index``.
    Returns ``None`` for events this library does not know.
    """
    name = payload.get("event")
    model = _EVENT_MODELS.get(name) if isinstance(name, str) else None
    if model is None:
        return None
    args = payload.get("args")
    merged: dict[str, Any] = dict(args) if isinstance(args, Mapping) else {}
    for key in ("block_number", "tx_hash", "log_index"):
        if payload.get(key) is not None:
            merged[key] = payload[key]
    return model.model_validate(merged)
