"""Custom exception hierarchy for pyballot."""

from __future__ import annotations


class BallotError(Exception):
    """Base exception for all pyballot errors."""


class BallotConfigError(BallotError):
    """Invalid or missing configuration."""


class BallotValidationError(BallotError):
    """Local pre-submission rejection.

    Raised before any network call is made, so the remote contract never
    sees a request that fails local validation.
    """


class BallotAlreadyPendingError(BallotValidationError):
    """A request of the same kind is still in flight."""

    def __init__(self, message: str, *, kind: str = "") -> None:
        self.kind = kind
        super().__init__(message)


class BallotTransportError(BallotError):
    """The query or submission could not complete (network, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        function: str = "",
    ) -> None:
        self.function = function
        super().__init__(message)


class BallotCorruptResponseError(BallotError):
    """The response did not decode to the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        function: str = "",
    ) -> None:
        self.function = function
        super().__init__(message)


class BallotUserDeclinedError(BallotError):
    """The signer refused to sign the transaction."""


class BallotContractError(BallotError):
    """The contract rejected the call (revert or custom error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        function: str = "",
    ) -> None:
        self.code = code
        self.function = function
        super().__init__(message)


class BallotUnauthorizedError(BallotContractError):
    """Caller lacks the privilege required (``VotingSystem__NotAdmin``)."""


class BallotStateConflictError(BallotContractError):
    """Action illegal in the current election phase.

    Covers contract errors such as:
    - ``VotingSystem__AlreadyVoted``
    - ``VotingSystem__VotingAlreadyStarted``
    - ``VotingSystem__VotingNotActive``
    - ``VotingSystem__VotingStillActive``
    """


class BallotInvalidInputError(BallotContractError):
    """Malformed argument (unknown candidate, invalid voting period)."""
