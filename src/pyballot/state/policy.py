"""Deterministic state merge policy.

This module contains no decoding. The ingestion boundary produces
normalized patches; these predicates only decide what may be applied.
"""

from __future__ import annotations

from pyballot.models.election import ElectionPhase


def should_accept_update(*, cached_block: int | None, incoming_block: int | None) -> bool:
    """Reject updates read at an older block than what is already cached.

    Without block information on either side the update is accepted;
    query results are always the freshest answer the node gave.
    """
    if cached_block is not None and incoming_block is not None:
        return incoming_block >= cached_block
    return True


def should_accept_phase(*, observed: ElectionPhase | None, incoming: ElectionPhase) -> bool:
    """Phases only move forward: NOT_STARTED -> ACTIVE -> ENDED."""
    if observed is None:
        return True
    return incoming >= observed


def merge_sticky_flag(cached: bool | None, incoming: bool) -> bool:
    """A flag seen ``True`` once stays ``True`` for the session."""
    return bool(cached) or bool(incoming)
