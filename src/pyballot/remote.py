"""Typed, read-only query surface of the voting contract.

:class:`RemoteStateClient` owns no state. Every method issues exactly
one view call (``has_voted(None)`` issues none), decodes the answer into
a model and raises:

* :class:`BallotTransportError` when the call cannot complete or misses
  its deadline;
* :class:`BallotCorruptResponseError` when the answer does not decode.

Neither is retried here; a retry is always a new call by the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, TypeVar

from pydantic import ValidationError
from web3 import Web3

from pyballot._transport import ContractTransport
from pyballot.exceptions import BallotCorruptResponseError, BallotTransportError, BallotValidationError
from pyballot.models._base import BallotBaseModel, normalize_address
from pyballot.models.candidate import Candidate
from pyballot.models.election import ElectionSnapshot, VoterRecord, VotingWindow, Winner
from pyballot.models.requests import CastVoteRequest, VoterRequest

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BallotBaseModel)


def _decode_uint(value: Any, function: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise BallotCorruptResponseError(f"{function} returned {value!r}, expected uint", function=function)
    return value


def _decode_model(model: type[M], value: Any, function: str) -> M:
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise BallotCorruptResponseError(
            f"{function} returned a value that is not a {model.__name__}: {value!r}",
            function=function,
        ) from exc


class RemoteStateClient:
    """One coroutine per contract view function."""

    def __init__(self, transport: ContractTransport, *, query_timeout: float = 15.0) -> None:
        self._transport = transport
        self._query_timeout = query_timeout

    async def _query(self, function: str, *args: Any) -> Any:
        try:
            return await asyncio.wait_for(self._transport.call(function, *args), self._query_timeout)
        except TimeoutError as exc:
            raise BallotTransportError(
                f"{function} timed out after {self._query_timeout:.1f}s",
                function=function,
            ) from exc

    async def get_admin(self) -> str:
        value = await self._query("getAdmin")
        try:
            return normalize_address(value)
        except ValueError as exc:
            raise BallotCorruptResponseError(f"getAdmin returned {value!r}", function="getAdmin") from exc

    async def get_all_candidates(self) -> tuple[Candidate, ...]:
        value = await self._query("getAllCandidates")
        if not isinstance(value, (list, tuple)):
            raise BallotCorruptResponseError(
                f"getAllCandidates returned {type(value).__name__}, expected a list",
                function="getAllCandidates",
            )
        return tuple(_decode_model(Candidate, item, "getAllCandidates") for item in value)

    async def get_candidate(self, candidate_id: int) -> Candidate:
        try:
            request = CastVoteRequest(candidate_id=candidate_id)
        except ValidationError as exc:
            raise BallotValidationError(f"Invalid candidate id {candidate_id!r}") from exc
        value = await self._query("getCandidate", request.candidate_id)
        return _decode_model(Candidate, value, "getCandidate")

    async def get_candidate_count(self) -> int:
        return _decode_uint(await self._query("getCandidateCount"), "getCandidateCount")

    async def get_remaining_time(self) -> int:
        return _decode_uint(await self._query("getRemainingTime"), "getRemainingTime")

    async def get_voting_status(self) -> bool:
        value = await self._query("getVotingStatus")
        if not isinstance(value, bool):
            raise BallotCorruptResponseError(
                f"getVotingStatus returned {value!r}, expected bool",
                function="getVotingStatus",
            )
        return value

    async def get_voting_times(self) -> VotingWindow:
        return _decode_model(VotingWindow, await self._query("getVotingTimes"), "getVotingTimes")

    async def get_winner(self) -> Winner:
        return _decode_model(Winner, await self._query("getWinner"), "getWinner")

    async def has_voted(self, address: str | None) -> bool | None:
        """Has-voted flag for *address*; ``None`` without querying when no address."""
        if not address:
            return None
        try:
            request = VoterRequest(address=address)
        except ValidationError as exc:
            raise BallotValidationError(f"Malformed address {address!r}") from exc
        value = await self._query("hasVoted", Web3.to_checksum_address(request.address))
        if not isinstance(value, bool):
            raise BallotCorruptResponseError(f"hasVoted returned {value!r}, expected bool", function="hasVoted")
        return value

    async def fetch_snapshot(self, voter: str | None = None) -> ElectionSnapshot:
        """Read everything the views need, concurrently.

        The reads are independent; any failure fails the whole snapshot.
        """
        admin, candidates, status, window, winner, remaining, voted = await asyncio.gather(
            self.get_admin(),
            self.get_all_candidates(),
            self.get_voting_status(),
            self.get_voting_times(),
            self.get_winner(),
            self.get_remaining_time(),
            self.has_voted(voter),
        )
        _logger.debug(
            "Snapshot: %d candidates, status=%s, remaining=%s, winner=%s",
            len(candidates),
            status,
            remaining,
            winner.candidate_id,
        )
        return ElectionSnapshot(
            admin=admin,
            candidates=candidates,
            voting_status=status,
            window=window,
            winner=winner,
            remaining_time=remaining,
            voter=VoterRecord(address=voter, has_voted=voted) if voter and voted is not None else None,
        )
