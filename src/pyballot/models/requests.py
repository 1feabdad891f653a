"""Pydantic request models for orchestrator entrypoints.

These models provide a consistent "validate -> normalize -> execute" flow.
They are used internally by :class:`pyballot.orchestrator.TransactionOrchestrator`
and :class:`pyballot.remote.RemoteStateClient`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyballot._constants import days_to_seconds
from pyballot.models._base import Address


class _Request(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )


class AddCandidateRequest(_Request):
    name: str

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("candidate name must be non-empty")
        return name


class StartVotingRequest(_Request):
    duration_days: int = Field(ge=1, strict=True)

    @property
    def duration_seconds(self) -> int:
        return days_to_seconds(self.duration_days)


class CastVoteRequest(_Request):
    candidate_id: int = Field(ge=0, strict=True)


class VoterRequest(_Request):
    address: Address
