"""Normalized ingestion events.

All ingestion paths (read queries, contract logs, receipts) convert their inputs
into these events. Only the state/store layer is allowed to merge them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngestionSource(StrEnum):
    QUERY = "query"
    EVENT = "event"
    RECEIPT = "receipt"


class StateSection(StrEnum):
    ADMIN = "admin"
    CANDIDATES = "candidates"
    STATUS = "status"
    WINNER = "winner"
    REMAINING_TIME = "remaining_time"
    VOTER = "voter"


class IngestionEvent(BaseModel):
    """A normalized update to apply to the state store."""

    model_config = ConfigDict(frozen=True)

    section: StateSection
    source: IngestionSource
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    block_number: int | None = Field(
        default=None,
        description="Block the data was read at or emitted in, if known.",
    )
    data: dict[str, Any] = Field(default_factory=dict, description="Normalized patch data")

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
