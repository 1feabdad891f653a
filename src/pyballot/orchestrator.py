"""Mutating contract operations and their lifecycle.

Each of the four mutating actions owns one :class:`TransactionRequest`
record. A submission walks ``PENDING -> CONFIRMING -> CONFIRMED|FAILED``;
local preconditions are checked against the session store first and
raise :class:`BallotValidationError` before anything reaches the signer
or the network.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import ValidationError

from pyballot._transport import ContractTransport
from pyballot.exceptions import (
    BallotAlreadyPendingError,
    BallotConfigError,
    BallotContractError,
    BallotCorruptResponseError,
    BallotError,
    BallotStateConflictError,
    BallotTransportError,
    BallotUserDeclinedError,
    BallotValidationError,
)
from pyballot.models.election import ElectionPhase
from pyballot.models.requests import AddCandidateRequest, CastVoteRequest, StartVotingRequest
from pyballot.models.transaction import TransactionKind, TransactionRequest, TransactionStatus
from pyballot.signer import Signer
from pyballot.state.events import IngestionEvent, IngestionSource, StateSection
from pyballot.state.store import StateStore

_logger = logging.getLogger(__name__)

ConfirmedListener = Callable[[TransactionRequest], Awaitable[None] | None]


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, BallotContractError):
        return exc.code or "reverted"
    if isinstance(exc, BallotUserDeclinedError):
        return "user_declined"
    if isinstance(exc, BallotTransportError):
        return "unavailable"
    if isinstance(exc, BallotCorruptResponseError):
        return "corrupt"
    return type(exc).__name__


class TransactionOrchestrator:
    """Submit the contract's mutating calls, one in-flight request per kind.

    Parameters
    ----------
    transport
        Contract transport used for submission and receipts.
    store
        Session store providing the phase, candidate ids and has-voted
        flags used for local precondition checks.
    signer
        Signs submissions. Without one every submission raises
        :class:`BallotConfigError`.
    receipt_timeout
        Seconds to wait for the receipt once broadcast.
    """

    def __init__(
        self,
        transport: ContractTransport,
        store: StateStore,
        signer: Signer | None = None,
        *,
        receipt_timeout: float = 120.0,
    ) -> None:
        self._transport = transport
        self._store = store
        self._signer = signer
        self._receipt_timeout = receipt_timeout
        self._records: dict[TransactionKind, TransactionRequest] = {
            kind: TransactionRequest(kind=kind) for kind in TransactionKind
        }
        self._listeners: list[ConfirmedListener] = []
        self._tasks: set[asyncio.Task[TransactionRequest]] = set()

    # ------------------------------------------------------------------
    # Records and listeners
    # ------------------------------------------------------------------

    @property
    def signer(self) -> Signer | None:
        return self._signer

    def request(self, kind: TransactionKind) -> TransactionRequest:
        """Current lifecycle record for *kind*."""
        return self._records[TransactionKind(kind)]

    def last_error(self, kind: TransactionKind) -> str | None:
        """Message of the last failure of *kind*, until a new request supersedes it."""
        record = self.request(kind)
        return record.error_message if record.status == TransactionStatus.FAILED else None

    def add_listener(self, listener: ConfirmedListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ConfirmedListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    async def wait_idle(self) -> None:
        """Wait for every in-flight lifecycle to reach a terminal state."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def add_candidate(self, name: str) -> TransactionRequest:
        self._ensure_not_pending(TransactionKind.ADD_CANDIDATE)
        try:
            request = AddCandidateRequest(name=name)
        except ValidationError as exc:
            raise BallotValidationError("Candidate name must not be empty") from exc
        if self._store.phase != ElectionPhase.NOT_STARTED:
            raise BallotValidationError(
                f"Candidates can only be added before voting starts (phase: {self._store.phase.label})"
            )
        return await self._submit(TransactionKind.ADD_CANDIDATE, (request.name,))

    async def start_voting(self, duration_days: int) -> TransactionRequest:
        self._ensure_not_pending(TransactionKind.START_VOTING)
        try:
            request = StartVotingRequest(duration_days=duration_days)
        except ValidationError as exc:
            raise BallotValidationError(f"Duration must be a whole number of days >= 1, got {duration_days!r}") from exc
        return await self._submit(TransactionKind.START_VOTING, (request.duration_seconds,))

    async def end_voting(self) -> TransactionRequest:
        self._ensure_not_pending(TransactionKind.END_VOTING)
        return await self._submit(TransactionKind.END_VOTING, ())

    async def cast_vote(self, candidate_id: int) -> TransactionRequest:
        self._ensure_not_pending(TransactionKind.CAST_VOTE)
        try:
            request = CastVoteRequest(candidate_id=candidate_id)
        except ValidationError as exc:
            raise BallotValidationError(f"Invalid candidate id {candidate_id!r}") from exc
        if request.candidate_id not in self._store.candidate_ids:
            raise BallotValidationError(f"Unknown candidate id {request.candidate_id}")
        if self._store.phase != ElectionPhase.ACTIVE:
            raise BallotValidationError(f"Voting is not active (phase: {self._store.phase.label})")
        signer = self._require_signer()
        if self._store.has_voted(signer.address):
            raise BallotValidationError("This address has already voted")
        return await self._submit(TransactionKind.CAST_VOTE, (request.candidate_id,))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _ensure_not_pending(self, kind: TransactionKind) -> None:
        if self._records[kind].in_flight:
            raise BallotAlreadyPendingError(f"A {kind} request is already in flight", kind=kind)

    def _require_signer(self) -> Signer:
        if self._signer is None:
            raise BallotConfigError("No signer configured; mutating calls need one")
        return self._signer

    async def _submit(self, kind: TransactionKind, args: Sequence[Any]) -> TransactionRequest:
        signer = self._require_signer()
        record = TransactionRequest(kind=kind, args=tuple(args)).advance(TransactionStatus.PENDING)
        self._records[kind] = record
        _logger.info("%s: pending", kind)

        # The lifecycle runs in its own task so cancelling the caller never
        # leaves a broadcast transaction without a terminal record.
        task = asyncio.get_running_loop().create_task(self._run_lifecycle(record, signer), name=f"pyballot-{kind}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return await asyncio.shield(task)

    async def _run_lifecycle(self, record: TransactionRequest, signer: Signer) -> TransactionRequest:
        kind = record.kind
        function = kind.function_name
        try:
            tx_hash = await self._transport.submit(function, record.args, signer)
            record = self._set(record.advance(TransactionStatus.CONFIRMING, tx_hash=tx_hash))
            _logger.info("%s: broadcast %s, awaiting receipt", kind, tx_hash)

            try:
                receipt = await asyncio.wait_for(
                    self._transport.wait_for_receipt(tx_hash, timeout=self._receipt_timeout),
                    self._receipt_timeout,
                )
            except TimeoutError as exc:
                raise BallotTransportError(
                    f"No receipt for {tx_hash} after {self._receipt_timeout:.0f}s",
                    function=function,
                ) from exc
            if not receipt.succeeded:
                raise BallotStateConflictError(
                    f"{function} reverted in block {receipt.block_number}",
                    code="reverted",
                    function=function,
                )
        except BallotError as exc:
            return self._fail(record, exc)
        except Exception as exc:
            self._fail(record, exc)
            raise

        record = self._set(record.advance(TransactionStatus.CONFIRMED))
        _logger.info("%s: confirmed in block %s", kind, receipt.block_number)
        if kind == TransactionKind.CAST_VOTE:
            self._store.apply(
                IngestionEvent(
                    section=StateSection.VOTER,
                    source=IngestionSource.RECEIPT,
                    block_number=receipt.block_number,
                    data={"address": signer.address, "has_voted": True},
                )
            )
        await self._notify(record)
        return record

    def _set(self, record: TransactionRequest) -> TransactionRequest:
        self._records[record.kind] = record
        return record

    def _fail(self, record: TransactionRequest, exc: BaseException) -> TransactionRequest:
        failed = self._set(
            record.advance(
                TransactionStatus.FAILED,
                error_message=str(exc),
                error_code=_error_code(exc),
            )
        )
        _logger.info("%s: failed (%s): %s", record.kind, failed.error_code, failed.error_message)
        return failed

    async def _notify(self, record: TransactionRequest) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(record)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                _logger.warning("Confirmed-transaction listener failed for %s", record.kind, exc_info=True)
