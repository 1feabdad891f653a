"""Transaction signers.

pyballot never implements a signing protocol itself. Submissions are
handed to a :class:`Signer`; wallets, hardware devices or remote signing
services plug in through this protocol. :class:`LocalAccountSigner`
wraps an ``eth_account`` key for scripts and tests.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from eth_account import Account

from pyballot._redact import redact_for_log
from pyballot.exceptions import BallotUserDeclinedError
from pyballot.models._base import normalize_address

_logger = logging.getLogger(__name__)

ApprovalHook = Callable[[Mapping[str, Any]], bool | Awaitable[bool]]


class Signer(Protocol):
    """Structural signer interface used by the transport.

    Raising :class:`pyballot.exceptions.BallotUserDeclinedError` from
    :meth:`sign_transaction` reports a refusal before broadcast.
    """

    @property
    def address(self) -> str: ...

    async def sign_transaction(self, transaction: Mapping[str, Any]) -> bytes: ...


class LocalAccountSigner:
    """Sign with a private key held in memory.

    Parameters
    ----------
    private_key : str
        Hex-encoded private key.
    approve : callable, optional
        Called with the unsigned transaction before signing. Returning
        ``False`` declines the request. May be sync or async.
    """

    def __init__(self, private_key: str, *, approve: ApprovalHook | None = None) -> None:
        self._account = Account.from_key(private_key)
        self._approve = approve

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def normalized_address(self) -> str:
        return normalize_address(self._account.address)

    async def sign_transaction(self, transaction: Mapping[str, Any]) -> bytes:
        if self._approve is not None:
            verdict = self._approve(transaction)
            if inspect.isawaitable(verdict):
                verdict = await verdict
            if not verdict:
                raise BallotUserDeclinedError("User rejected the request.")
        _logger.debug("Signing transaction %s", redact_for_log(dict(transaction)))
        signed = self._account.sign_transaction(dict(transaction))
        return bytes(signed.raw_transaction)
