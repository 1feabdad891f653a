"""Ingestion layer.

Adapters that turn contract query results and contract logs into
normalized :class:`pyballot.state.events.IngestionEvent` patches.
"""

__all__: list[str] = []
