"""Contract log ingestion.

Logs are authoritative facts (they were emitted by an included
transaction), so a few of them can patch the store directly ahead of
the full refresh they also trigger.
"""

from __future__ import annotations

from pyballot.models.events import ContractEvent, VoteCast, VotingEnded, VotingStarted
from pyballot.state.events import IngestionEvent, IngestionSource, StateSection


def build_events_from_contract_event(event: ContractEvent) -> list[IngestionEvent]:
    """Translate one decoded contract event into store patches.

    ``CandidateAdded`` produces nothing: the candidate list is only
    taken from ``getAllCandidates`` so ids and counts stay consistent.
    """
    source = IngestionSource.EVENT
    block = event.block_number

    if isinstance(event, VoteCast):
        return [
            IngestionEvent(
                section=StateSection.VOTER,
                source=source,
                block_number=block,
                data={"address": event.voter, "has_voted": True},
            )
        ]
    if isinstance(event, VotingStarted):
        return [
            IngestionEvent(
                section=StateSection.STATUS,
                source=source,
                block_number=block,
                data={"voting_status": True, "start_time": event.start_time, "end_time": event.end_time},
            )
        ]
    if isinstance(event, VotingEnded):
        return [
            IngestionEvent(
                section=StateSection.STATUS,
                source=source,
                block_number=block,
                data={"voting_status": False, "end_time": event.end_time},
            )
        ]
    return []
