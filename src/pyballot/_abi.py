"""ABI of the deployed ``VotingSystem`` contract.

Only the surface pyballot talks to is described here; the contract
itself is immutable and owned elsewhere.
"""

from __future__ import annotations

from typing import Any

_CANDIDATE_COMPONENTS: list[dict[str, Any]] = [
    {"name": "id", "type": "uint256", "internalType": "uint256"},
    {"name": "name", "type": "string", "internalType": "string"},
    {"name": "voteCount", "type": "uint256", "internalType": "uint256"},
    {"name": "exists", "type": "bool", "internalType": "bool"},
]


def _param(name: str, type_: str, **extra: Any) -> dict[str, Any]:
    return {"name": name, "type": type_, "internalType": type_, **extra}


def _function(
    name: str,
    inputs: list[dict[str, Any]] | None = None,
    outputs: list[dict[str, Any]] | None = None,
    *,
    view: bool = False,
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": inputs or [],
        "outputs": outputs or [],
        "stateMutability": "view" if view else "nonpayable",
    }


def _event(name: str, inputs: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": "event", "name": name, "inputs": inputs, "anonymous": False}


def _error(name: str) -> dict[str, Any]:
    return {"type": "error", "name": name, "inputs": []}


VOTING_SYSTEM_ABI: list[dict[str, Any]] = [
    {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
    _function("addCandidate", [_param("_name", "string")]),
    _function("endVoting"),
    _function("getAdmin", outputs=[_param("", "address")], view=True),
    _function(
        "getAllCandidates",
        outputs=[
            {
                "name": "",
                "type": "tuple[]",
                "internalType": "struct VotingSystem.Candidate[]",
                "components": _CANDIDATE_COMPONENTS,
            }
        ],
        view=True,
    ),
    _function(
        "getCandidate",
        [_param("_candidateId", "uint256")],
        [
            {
                "name": "",
                "type": "tuple",
                "internalType": "struct VotingSystem.Candidate",
                "components": _CANDIDATE_COMPONENTS,
            }
        ],
        view=True,
    ),
    _function("getCandidateCount", outputs=[_param("", "uint256")], view=True),
    _function("getRemainingTime", outputs=[_param("", "uint256")], view=True),
    _function("getVotingStatus", outputs=[_param("", "bool")], view=True),
    _function(
        "getVotingTimes",
        outputs=[_param("startTime", "uint256"), _param("endTime", "uint256")],
        view=True,
    ),
    _function(
        "getWinner",
        outputs=[_param("winningCandidateId", "uint256"), _param("winningVoteCount", "uint256")],
        view=True,
    ),
    _function("hasVoted", [_param("_voter", "address")], [_param("", "bool")], view=True),
    _function("startVoting", [_param("_durationInSeconds", "uint256")]),
    _function("vote", [_param("_candidateId", "uint256")]),
    _event(
        "CandidateAdded",
        [_param("candidateId", "uint256", indexed=True), _param("name", "string", indexed=False)],
    ),
    _event(
        "VoteCast",
        [_param("voter", "address", indexed=True), _param("candidateId", "uint256", indexed=True)],
    ),
    _event("VotingEnded", [_param("endTime", "uint256", indexed=False)]),
    _event(
        "VotingStarted",
        [_param("startTime", "uint256", indexed=False), _param("endTime", "uint256", indexed=False)],
    ),
    _error("VotingSystem__AlreadyVoted"),
    _error("VotingSystem__InvalidCandidate"),
    _error("VotingSystem__InvalidVotingPeriod"),
    _error("VotingSystem__NotAdmin"),
    _error("VotingSystem__VotingAlreadyStarted"),
    _error("VotingSystem__VotingNotActive"),
    _error("VotingSystem__VotingStillActive"),
]

#: Canonical event signatures, used to match ``topics[0]`` of raw logs.
EVENT_SIGNATURES: dict[str, str] = {
    "CandidateAdded": "CandidateAdded(uint256,string)",
    "VoteCast": "VoteCast(address,uint256)",
    "VotingStarted": "VotingStarted(uint256,uint256)",
    "VotingEnded": "VotingEnded(uint256)",
}
