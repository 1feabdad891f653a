"""pyballot - Async Python client for an on-chain voting contract."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyballot")
except PackageNotFoundError:
    __version__ = "0+local"
from pyballot.access import AccessGate, is_admin
from pyballot.client import BallotClient
from pyballot.config import BallotConfig, ChainProfile
from pyballot.countdown import CountdownTicker, format_remaining
from pyballot.exceptions import (
    BallotAlreadyPendingError,
    BallotConfigError,
    BallotContractError,
    BallotCorruptResponseError,
    BallotError,
    BallotInvalidInputError,
    BallotStateConflictError,
    BallotTransportError,
    BallotUnauthorizedError,
    BallotUserDeclinedError,
    BallotValidationError,
)
from pyballot.models import (
    Candidate,
    ContractEvent,
    ElectionPhase,
    ElectionSnapshot,
    TransactionKind,
    TransactionReceipt,
    TransactionRequest,
    TransactionStatus,
    VotingWindow,
    Winner,
)
from pyballot.orchestrator import TransactionOrchestrator
from pyballot.remote import RemoteStateClient
from pyballot.signer import LocalAccountSigner, Signer
from pyballot.view import CandidateShare, ElectionViewModel, build_election_view

__all__ = [
    "__version__",
    "AccessGate",
    "BallotAlreadyPendingError",
    "BallotClient",
    "BallotConfig",
    "BallotConfigError",
    "BallotContractError",
    "BallotCorruptResponseError",
    "BallotError",
    "BallotInvalidInputError",
    "BallotStateConflictError",
    "BallotTransportError",
    "BallotUnauthorizedError",
    "BallotUserDeclinedError",
    "BallotValidationError",
    "Candidate",
    "CandidateShare",
    "ChainProfile",
    "ContractEvent",
    "CountdownTicker",
    "ElectionPhase",
    "ElectionSnapshot",
    "ElectionViewModel",
    "LocalAccountSigner",
    "RemoteStateClient",
    "Signer",
    "TransactionKind",
    "TransactionOrchestrator",
    "TransactionReceipt",
    "TransactionRequest",
    "TransactionStatus",
    "VotingWindow",
    "Winner",
    "build_election_view",
    "format_remaining",
    "is_admin",
]
