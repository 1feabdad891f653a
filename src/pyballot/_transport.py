"""JSON-RPC transport to the voting contract.

Wraps an ``AsyncWeb3`` contract behind a small protocol and maps every
web3/aiohttp failure onto the pyballot exception hierarchy.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Sequence
from typing import Any, Protocol, TypeVar

import aiohttp
from web3 import AsyncWeb3, Web3
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    MismatchedABI,
    ProviderConnectionError,
    TimeExhausted,
    Web3RPCError,
)
from web3.providers import AsyncHTTPProvider

from pyballot._abi import EVENT_SIGNATURES, VOTING_SYSTEM_ABI
from pyballot._constants import (
    CONTRACT_ERRORS,
    INVALID_INPUT_ERRORS,
    STATE_CONFLICT_ERRORS,
    UNAUTHORIZED_ERRORS,
)
from pyballot._redact import redact_for_log
from pyballot.config import BallotConfig
from pyballot.exceptions import (
    BallotConfigError,
    BallotContractError,
    BallotCorruptResponseError,
    BallotInvalidInputError,
    BallotStateConflictError,
    BallotTransportError,
    BallotUnauthorizedError,
)
from pyballot.models.transaction import TransactionReceipt
from pyballot.signer import Signer

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _selector(signature: str) -> str:
    return Web3.to_hex(Web3.keccak(text=signature))


ERROR_SELECTORS: dict[str, str] = {_selector(f"{name}()")[:10]: name for name in sorted(CONTRACT_ERRORS)}
EVENT_TOPICS: dict[str, str] = {_selector(sig): name for name, sig in EVENT_SIGNATURES.items()}


class ContractTransport(Protocol):
    """Structural transport interface used by the client components.

    Having a protocol here makes it easy to pass in-memory fakes while
    keeping the production implementation (`Web3Transport`) concrete.
    """

    async def call(self, function: str, *args: Any) -> Any: ...

    async def submit(self, function: str, args: Sequence[Any], signer: Signer) -> str: ...

    async def wait_for_receipt(self, tx_hash: str, *, timeout: float) -> TransactionReceipt: ...

    async def block_number(self) -> int: ...

    async def get_events(self, from_block: int, to_block: int) -> list[dict[str, Any]]: ...


def contract_error(name: str, *, function: str, message: str | None = None) -> BallotContractError:
    """Build the exception matching a contract custom error name."""
    text = message or f"{function} reverted: {name}"
    if name in UNAUTHORIZED_ERRORS:
        return BallotUnauthorizedError(text, code=name, function=function)
    if name in STATE_CONFLICT_ERRORS:
        return BallotStateConflictError(text, code=name, function=function)
    if name in INVALID_INPUT_ERRORS:
        return BallotInvalidInputError(text, code=name, function=function)
    return BallotContractError(text, code=name, function=function)


def map_contract_logic_error(exc: ContractLogicError, *, function: str) -> BallotContractError:
    """Map a web3 revert onto the pyballot hierarchy.

    Custom errors are matched on their 4-byte selector in ``exc.data``;
    string reverts fall back to matching the error name in the message.
    """
    data = exc.data if isinstance(exc.data, str) else ""
    name = ERROR_SELECTORS.get(data[:10].lower()) if data else None
    message = str(exc.message or exc)
    if name is None:
        for known in CONTRACT_ERRORS:
            if known in message:
                name = known
                break
    if name is None:
        return BallotContractError(f"{function} reverted: {message}", code="reverted", function=function)
    return contract_error(name, function=function)


class Web3Transport:
    """Contract transport over an ``AsyncWeb3`` HTTP provider."""

    def __init__(
        self,
        config: BallotConfig,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        if not config.contract_address:
            raise BallotConfigError("contract_address is required (set BALLOT_CONTRACT_ADDRESS)")
        if not Web3.is_address(config.contract_address):
            raise BallotConfigError(f"contract_address is not a valid address: {config.contract_address!r}")
        self._config = config
        self._http_session = http_session
        self._provider = AsyncHTTPProvider(
            config.rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=config.query_timeout)},
        )
        self._w3 = AsyncWeb3(self._provider)
        self._address = Web3.to_checksum_address(config.contract_address)
        self._contract = self._w3.eth.contract(address=self._address, abi=VOTING_SYSTEM_ABI)

    async def open(self) -> None:
        """Bind the provider to the shared aiohttp session, if one was given."""
        if self._http_session is not None:
            await self._provider.cache_async_session(self._http_session)

    async def _guard(self, function: str, awaitable: Awaitable[T], *, write: bool = False) -> T:
        try:
            return await awaitable
        except ContractLogicError as exc:
            raise map_contract_logic_error(exc, function=function) from exc
        except BadFunctionCallOutput as exc:
            raise BallotCorruptResponseError(
                f"{function} returned undecodable output: {exc}",
                function=function,
            ) from exc
        except TimeExhausted as exc:
            raise BallotTransportError(f"{function} timed out: {exc}", function=function) from exc
        except (aiohttp.ClientError, ProviderConnectionError, TimeoutError) as exc:
            raise BallotTransportError(f"{function} failed: {exc}", function=function) from exc
        except Web3RPCError as exc:
            # A node error on a read means the node could not answer, not that the contract refused.
            if not write:
                raise BallotTransportError(f"{function} failed: {exc}", function=function) from exc
            raise BallotContractError(
                f"{function} rejected by node: {exc}",
                code="rpc_error",
                function=function,
            ) from exc

    async def call(self, function: str, *args: Any) -> Any:
        _logger.debug("eth_call %s%r", function, args)
        bound = getattr(self._contract.functions, function)(*args)
        return await self._guard(function, bound.call())

    async def submit(self, function: str, args: Sequence[Any], signer: Signer) -> str:
        """Build, sign and broadcast a contract call; return the tx hash.

        Gas estimation runs the call against current state, so contract
        rejections usually surface here, before anything is signed.
        """
        sender = Web3.to_checksum_address(signer.address)
        bound = getattr(self._contract.functions, function)(*args)
        pending_nonce = self._w3.eth.get_transaction_count(sender, "pending")
        nonce = await self._guard(function, pending_nonce, write=True)
        params: dict[str, Any] = {
            "from": sender,
            "chainId": self._config.chain.chain_id,
            "nonce": nonce,
        }
        if self._config.gas_limit is not None:
            params["gas"] = self._config.gas_limit
        tx = await self._guard(function, bound.build_transaction(params), write=True)
        _logger.debug("Built %s transaction %s", function, redact_for_log(dict(tx)))

        raw = await signer.sign_transaction(tx)
        tx_hash = await self._guard(function, self._w3.eth.send_raw_transaction(raw), write=True)
        return Web3.to_hex(tx_hash)

    async def wait_for_receipt(self, tx_hash: str, *, timeout: float) -> TransactionReceipt:
        receipt = await self._guard(
            "wait_for_receipt",
            self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout),
        )
        return TransactionReceipt(
            tx_hash=tx_hash,
            block_number=receipt.get("blockNumber"),
            status=int(receipt.get("status", 0)),
            gas_used=receipt.get("gasUsed"),
        )

    async def block_number(self) -> int:
        return int(await self._guard("eth_blockNumber", self._w3.eth.block_number))

    async def get_events(self, from_block: int, to_block: int) -> list[dict[str, Any]]:
        """Fetch and decode contract logs in ``[from_block, to_block]``."""
        logs = await self._guard(
            "eth_getLogs",
            self._w3.eth.get_logs({"address": self._address, "fromBlock": from_block, "toBlock": to_block}),
        )
        decoded: list[dict[str, Any]] = []
        for log in logs:
            topics = log.get("topics") or []
            if not topics:
                continue
            name = EVENT_TOPICS.get(Web3.to_hex(topics[0]))
            if name is None:
                continue
            try:
                event = getattr(self._contract.events, name)().process_log(log)
            except MismatchedABI:
                _logger.debug("Skipping undecodable %s log", name, exc_info=True)
                continue
            decoded.append(
                {
                    "event": name,
                    "args": dict(event["args"]),
                    "block_number": event.get("blockNumber"),
                    "tx_hash": Web3.to_hex(event["transactionHash"]) if event.get("transactionHash") else None,
                    "log_index": event.get("logIndex"),
                }
            )
        return decoded
