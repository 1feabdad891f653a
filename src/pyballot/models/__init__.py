"""Data models for the voting contract surface."""

from pyballot.models._base import Address, BallotBaseModel, epoch_to_datetime, normalize_address
from pyballot.models.candidate import Candidate
from pyballot.models.election import (
    ElectionPhase,
    ElectionSnapshot,
    VoterRecord,
    VotingWindow,
    Winner,
    derive_phase,
)
from pyballot.models.events import (
    CandidateAdded,
    ContractEvent,
    VoteCast,
    VotingEnded,
    VotingStarted,
    parse_contract_event,
)
from pyballot.models.requests import AddCandidateRequest, CastVoteRequest, StartVotingRequest, VoterRequest
from pyballot.models.transaction import (
    TransactionKind,
    TransactionReceipt,
    TransactionRequest,
    TransactionStatus,
)

__all__ = [
    "AddCandidateRequest",
    "Address",
    "BallotBaseModel",
    "Candidate",
    "CandidateAdded",
    "CastVoteRequest",
    "ContractEvent",
    "ElectionPhase",
    "ElectionSnapshot",
    "StartVotingRequest",
    "TransactionKind",
    "TransactionReceipt",
    "TransactionRequest",
    "TransactionStatus",
    "VoteCast",
    "VoterRecord",
    "VoterRequest",
    "VotingEnded",
    "VotingStarted",
    "VotingWindow",
    "Winner",
    "derive_phase",
    "epoch_to_datetime",
    "normalize_address",
    "parse_contract_event",
]
