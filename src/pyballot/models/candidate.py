"""Candidate record as stored by the contract."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from pyballot.models._base import BallotBaseModel


class Candidate(BallotBaseModel):
    """A candidate entry (``struct VotingSystem.Candidate``)."""

    _POSITIONAL_FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "vote_count", "exists")

    id: int = Field(ge=0)
    name: str
    vote_count: int = Field(default=0, ge=0)
    exists: bool = True
