"""High-level async client for the on-chain voting contract."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pyballot._events import EventWatcher
from pyballot._transport import ContractTransport, Web3Transport
from pyballot.access import AccessGate
from pyballot.config import BallotConfig
from pyballot.countdown import CountdownTicker
from pyballot.exceptions import BallotConfigError
from pyballot.ingestion.contract_events import build_events_from_contract_event
from pyballot.ingestion.snapshot import apply_snapshot
from pyballot.models.events import ContractEvent
from pyballot.models.transaction import TransactionKind, TransactionRequest
from pyballot.orchestrator import TransactionOrchestrator
from pyballot.remote import RemoteStateClient
from pyballot.signer import Signer
from pyballot.state.store import StateStore
from pyballot.view import ElectionViewModel, build_election_view

_logger = logging.getLogger(__name__)


class BallotClient:
    """Async client for a deployed ``VotingSystem`` contract.

    Usage::

        async with BallotClient(BallotConfig.from_env(), signer=signer) as client:
            view = await client.refresh()
            await client.cast_vote(view.shares[0].candidate.id)

    Every confirmed transaction and every contract event triggers a
    re-query; the local store never stands in for the contract.
    """

    def __init__(
        self,
        config: BallotConfig,
        *,
        signer: Signer | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: ContractTransport | None = None,
        on_update: Callable[[ElectionViewModel], None] | None = None,
        on_tick: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config
        self._signer = signer
        self._external_session = session is not None
        self._http_session = session
        self._injected_transport = transport
        self._transport: ContractTransport | None = None
        self._on_update = on_update
        self._on_tick = on_tick

        self._store = StateStore()
        self._access = AccessGate(lambda: self._store.admin)
        self._remote: RemoteStateClient | None = None
        self._orchestrator: TransactionOrchestrator | None = None
        self._countdown: CountdownTicker | None = None
        self._events: EventWatcher | None = None
        self._refresh_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BallotClient:
        if self._injected_transport is not None:
            transport = self._injected_transport
        else:
            if not self._config.contract_address:
                raise BallotConfigError("contract_address is required (set BALLOT_CONTRACT_ADDRESS)")
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            try:
                web3_transport = Web3Transport(self._config, self._http_session)
                await web3_transport.open()
            except BaseException:
                await self._close_owned_session()
                raise
            transport = web3_transport
        self._transport = transport

        self._remote = RemoteStateClient(transport, query_timeout=self._config.query_timeout)
        self._orchestrator = TransactionOrchestrator(
            transport,
            self._store,
            self._signer,
            receipt_timeout=self._config.receipt_timeout,
        )
        self._orchestrator.add_listener(self._on_confirmed)
        self._countdown = CountdownTicker(
            self._remote.get_remaining_time,
            interval=self._config.tick_interval,
            on_tick=self._on_tick,
        )
        if self._config.events_enabled:
            self._events = EventWatcher(
                transport,
                on_event=self._on_contract_event,
                poll_interval=self._config.event_poll_interval,
            )
            self._events.start()
        _logger.debug("BallotClient opened for %s on %s", self._config.contract_address, self._config.chain.name)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._events is not None:
            await self._events.stop()
            self._events = None
        if self._orchestrator is not None:
            # Broadcast transactions still need the session for their receipt.
            self._orchestrator.remove_listener(self._on_confirmed)
            await self._orchestrator.wait_idle()
        if self._countdown is not None:
            await self._countdown.stop()
        await self._close_owned_session()
        self._transport = None

    async def _close_owned_session(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def config(self) -> BallotConfig:
        return self._config

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def signer_address(self) -> str | None:
        return self._signer.address if self._signer is not None else None

    @property
    def remote(self) -> RemoteStateClient:
        if self._remote is None:
            raise RuntimeError("Client not initialized. Use 'async with BallotClient(...)'.")
        return self._remote

    @property
    def orchestrator(self) -> TransactionOrchestrator:
        if self._orchestrator is None:
            raise RuntimeError("Client not initialized. Use 'async with BallotClient(...)'.")
        return self._orchestrator

    @property
    def countdown(self) -> CountdownTicker:
        if self._countdown is None:
            raise RuntimeError("Client not initialized. Use 'async with BallotClient(...)'.")
        return self._countdown

    @property
    def events(self) -> EventWatcher | None:
        return self._events

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def refresh(self, voter: str | None = None) -> ElectionViewModel:
        """Re-query the contract and merge the answers into the store.

        *voter* defaults to the signer's address; the has-voted flag is
        only queried when one of them is known.
        """
        async with self._refresh_lock:
            snapshot = await self.remote.fetch_snapshot(voter or self.signer_address)
            apply_snapshot(self._store.apply, snapshot)
            self.countdown.observe(snapshot.remaining_time)
        view = self.view()
        if self._on_update is not None:
            try:
                self._on_update(view)
            except Exception:
                _logger.debug("on_update callback failed", exc_info=True)
        return view

    def view(self) -> ElectionViewModel:
        """Election view from the last merged state, without querying."""
        return build_election_view(
            self._store.candidates,
            self._store.winner,
            self._store.window,
            self._store.phase,
        )

    def is_admin(self, address: str | None = None) -> bool:
        """Whether *address* (default: the signer) matches the known admin."""
        return self._access.can_manage(address or self.signer_address)

    def has_voted(self, address: str | None = None) -> bool | None:
        return self._store.has_voted(address or self.signer_address)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def add_candidate(self, name: str) -> TransactionRequest:
        return await self.orchestrator.add_candidate(name)

    async def start_voting(self, duration_days: int) -> TransactionRequest:
        return await self.orchestrator.start_voting(duration_days)

    async def end_voting(self) -> TransactionRequest:
        return await self.orchestrator.end_voting()

    async def cast_vote(self, candidate_id: int) -> TransactionRequest:
        return await self.orchestrator.cast_vote(candidate_id)

    def request(self, kind: TransactionKind) -> TransactionRequest:
        return self.orchestrator.request(kind)

    def last_error(self, kind: TransactionKind) -> str | None:
        return self.orchestrator.last_error(kind)

    def transaction_url(self, record: TransactionRequest) -> str | None:
        """Explorer link for a broadcast request."""
        if not record.tx_hash:
            return None
        return self._config.chain.transaction_url(record.tx_hash)

    # ------------------------------------------------------------------
    # Refresh triggers
    # ------------------------------------------------------------------

    async def _on_confirmed(self, record: TransactionRequest) -> None:
        _logger.debug("Refreshing after confirmed %s", record.kind)
        await self.refresh()

    async def _on_contract_event(self, event: ContractEvent) -> None:
        for ingestion_event in build_events_from_contract_event(event):
            self._store.apply(ingestion_event)
        await self.refresh()
