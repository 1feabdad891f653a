from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyballot._transport import contract_error
from pyballot.exceptions import BallotUserDeclinedError
from pyballot.models.transaction import TransactionReceipt
from pyballot.signer import Signer

ADMIN = "0x" + "a" * 40
VOTER = "0x" + "b" * 40
OTHER_VOTER = "0x" + "c" * 40
CONTRACT = "0x" + "d" * 40


@dataclass
class FakeSigner:
    address: str = VOTER
    decline: bool = False
    signed: list[dict[str, Any]] = field(default_factory=list)

    async def sign_transaction(self, transaction: Mapping[str, Any]) -> bytes:
        if self.decline:
            raise BallotUserDeclinedError("User rejected the request.")
        self.signed.append(dict(transaction))
        return b"\x02signed"


@dataclass
class FakeVotingBackend:
    """In-memory stand-in for the deployed contract and its node."""

    admin: str = ADMIN
    candidates: list[list[Any]] = field(default_factory=list)
    voting_status: bool = False
    start_time: int = 0
    end_time: int = 0
    remaining_time: int = 0
    voters: set[str] = field(default_factory=set)
    block: int = 100
    now: int = 1_770_000_000

    calls: dict[str, int] = field(default_factory=dict)
    submitted: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)
    overrides: dict[str, Any] = field(default_factory=dict)
    hang: set[str] = field(default_factory=set)
    receipt_status: int = 1
    receipt_gate: asyncio.Event | None = None
    logs: list[dict[str, Any]] = field(default_factory=list)

    def _record_call(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def call_count(self, name: str) -> int:
        return self.calls.get(name, 0)

    def add(self, name: str, votes: int = 0) -> int:
        candidate_id = len(self.candidates) + 1
        self.candidates.append([candidate_id, name, votes, True])
        return candidate_id

    def open_voting(self, duration_seconds: int = 7 * 86400) -> None:
        self.voting_status = True
        self.start_time = self.now
        self.end_time = self.now + duration_seconds
        self.remaining_time = duration_seconds

    def close_voting(self) -> None:
        self.voting_status = False
        self.end_time = self.now
        self.remaining_time = 0

    def _winner(self) -> tuple[int, int]:
        best_id, best_votes = 0, 0
        for candidate_id, _name, votes, _exists in self.candidates:
            if votes > best_votes:
                best_id, best_votes = candidate_id, votes
        return best_id, best_votes

    # ------------------------------------------------------------------
    # ContractTransport
    # ------------------------------------------------------------------

    async def call(self, function: str, *args: Any) -> Any:
        self._record_call(function)
        if function in self.hang:
            await asyncio.sleep(3600)
        if function in self.overrides:
            return self.overrides[function]

        if function == "getAdmin":
            return self.admin
        if function == "getAllCandidates":
            return [tuple(c) for c in self.candidates]
        if function == "getCandidate":
            for candidate in self.candidates:
                if candidate[0] == args[0]:
                    return tuple(candidate)
            raise contract_error("VotingSystem__InvalidCandidate", function=function)
        if function == "getCandidateCount":
            return len(self.candidates)
        if function == "getRemainingTime":
            return self.remaining_time
        if function == "getVotingStatus":
            return self.voting_status
        if function == "getVotingTimes":
            return (self.start_time, self.end_time)
        if function == "getWinner":
            return self._winner()
        if function == "hasVoted":
            return args[0].lower() in self.voters
        raise AssertionError(f"unexpected call {function}")

    async def submit(self, function: str, args: Sequence[Any], signer: Signer) -> str:
        self._record_call(f"submit:{function}")
        self._check(function, tuple(args), signer.address.lower())
        await signer.sign_transaction({"from": signer.address, "to": CONTRACT, "data": "0x" + function.encode().hex()})
        self.submitted.append((function, tuple(args)))
        self._apply(function, tuple(args), signer.address.lower())
        return f"0x{len(self.submitted):064x}"

    async def wait_for_receipt(self, tx_hash: str, *, timeout: float) -> TransactionReceipt:
        self._record_call("wait_for_receipt")
        if self.receipt_gate is not None:
            await self.receipt_gate.wait()
        self.block += 1
        return TransactionReceipt(tx_hash=tx_hash, block_number=self.block, status=self.receipt_status)

    async def block_number(self) -> int:
        return self.block

    async def get_events(self, from_block: int, to_block: int) -> list[dict[str, Any]]:
        self._record_call("get_events")
        return [log for log in self.logs if from_block <= log.get("block_number", 0) <= to_block]

    # ------------------------------------------------------------------
    # Contract rules
    # ------------------------------------------------------------------

    def _check(self, function: str, args: tuple[Any, ...], sender: str) -> None:
        if function in {"addCandidate", "startVoting", "endVoting"} and sender != self.admin.lower():
            raise contract_error("VotingSystem__NotAdmin", function=function)
        if function == "addCandidate" and self.voting_status:
            raise contract_error("VotingSystem__VotingAlreadyStarted", function=function)
        if function == "startVoting" and self.voting_status:
            raise contract_error("VotingSystem__VotingAlreadyStarted", function=function)
        if function == "endVoting" and not self.voting_status:
            raise contract_error("VotingSystem__VotingNotActive", function=function)
        if function == "vote":
            if not self.voting_status:
                raise contract_error("VotingSystem__VotingNotActive", function=function)
            if sender in self.voters:
                raise contract_error("VotingSystem__AlreadyVoted", function=function)
            if all(c[0] != args[0] for c in self.candidates):
                raise contract_error("VotingSystem__InvalidCandidate", function=function)

    def _apply(self, function: str, args: tuple[Any, ...], sender: str) -> None:
        if function == "addCandidate":
            self.add(args[0])
        elif function == "startVoting":
            self.open_voting(args[0])
        elif function == "endVoting":
            self.close_voting()
        elif function == "vote":
            for candidate in self.candidates:
                if candidate[0] == args[0]:
                    candidate[2] += 1
            self.voters.add(sender)


@pytest.fixture
def backend() -> FakeVotingBackend:
    return FakeVotingBackend()


@pytest.fixture
def voter_signer() -> FakeSigner:
    return FakeSigner(address=VOTER)


@pytest.fixture
def admin_signer() -> FakeSigner:
    return FakeSigner(address=ADMIN)
