"""Base model and shared field types for contract responses.

Every contract response model inherits from :class:`BallotBaseModel`
which provides:

* ``alias_generator=to_camel`` so the contract's camelCase names
  (``voteCount``, ``startTime``) map to snake_case fields.
* A ``model_validator(mode="before")`` that accepts the positional
  tuples web3 returns for structs and multi-value outputs, using the
  subclass's ``_POSITIONAL_FIELDS`` order.
* A ``raw`` field that captures the original decoded value.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from web3 import Web3


def normalize_address(value: Any) -> str:
    """Return *value* as a lowercase ``0x`` address.

    Raises :class:`ValueError` when *value* is not a well-formed address.
    Lowercase is the only form used for equality comparisons.
    """
    if not isinstance(value, str):
        raise ValueError(f"address must be a string, got {type(value).__name__}")
    candidate = value.strip()
    if not Web3.is_address(candidate):
        raise ValueError(f"malformed address: {candidate!r}")
    return candidate.lower()


Address = Annotated[str, BeforeValidator(normalize_address)]
"""Annotated type that validates and lowercases an address."""


def epoch_to_datetime(value: int | None) -> datetime | None:
    """Convert contract epoch seconds to a UTC datetime (``None`` for 0)."""
    if not value:
        return None
    return datetime.fromtimestamp(int(value), tz=UTC)


class BallotBaseModel(BaseModel):
    """Base for contract response models."""

    _POSITIONAL_FIELDS: ClassVar[tuple[str, ...]] = ()
    """Field order used when the contract returns a bare tuple."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: Any = Field(default=None, exclude=True)
    """Original decoded contract value."""

    @model_validator(mode="before")
    @classmethod
    def _from_positional(cls, values: Any) -> Any:
        """Map a web3 tuple onto named fields and stash the raw value."""
        if isinstance(values, Mapping):
            if "raw" in values:
                return values
            return {**values, "raw": dict(values)}
        if isinstance(values, Sequence) and not isinstance(values, (str, bytes, bytearray)):
            names = cls._POSITIONAL_FIELDS
            if not names or len(values) != len(names):
                raise ValueError(
                    f"{cls.__name__} expects {len(names)} positional values, got {len(values)}"
                )
            mapped: dict[str, Any] = dict(zip(names, values, strict=True))
            mapped["raw"] = list(values)
            return mapped
        return values
