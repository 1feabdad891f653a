"""Client configuration for pyballot."""

from __future__ import annotations

import dataclasses
import os
from typing import Any


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class ChainProfile:
    """Network the voting contract is deployed on.

    Defaults to the Hedera testnet JSON-RPC relay.
    """

    chain_id: int = 296
    name: str = "Hedera Testnet"
    rpc_url: str = "https://testnet.hashio.io/api"
    explorer_url: str = "https://hashscan.io/testnet"
    native_symbol: str = "HBAR"

    def transaction_url(self, tx_hash: str) -> str:
        """Block explorer link for a transaction hash."""
        return f"{self.explorer_url.rstrip('/')}/transaction/{tx_hash}"


@dataclasses.dataclass(frozen=True)
class BallotConfig:
    """Client configuration.

    Parameters
    ----------
    contract_address : str
        Address of the deployed ``VotingSystem`` contract.
    chain : ChainProfile
        Network parameters. ``rpc_url`` is the JSON-RPC endpoint.
    query_timeout : float
        Deadline in seconds for a single read query. Expiry surfaces as
        :class:`pyballot.exceptions.BallotTransportError`; nothing retries.
    receipt_timeout : float
        Seconds to wait for a broadcast transaction to be included before
        the request is marked failed.
    tick_interval : float
        Countdown tick interval in seconds.
    events_enabled : bool
        Poll contract logs for push-based refresh.
    event_poll_interval : float
        Seconds between log polls.
    gas_limit : int or None
        Fixed gas limit for submissions. ``None`` lets the node estimate.
    """

    contract_address: str = ""
    chain: ChainProfile = dataclasses.field(default_factory=ChainProfile)
    query_timeout: float = 15.0
    receipt_timeout: float = 120.0
    tick_interval: float = 1.0
    events_enabled: bool = True
    event_poll_interval: float = 5.0
    gas_limit: int | None = None

    @property
    def rpc_url(self) -> str:
        return self.chain.rpc_url

    @classmethod
    def from_env(cls, **overrides: Any) -> BallotConfig:
        """Create configuration from environment variables.

        Reads ``BALLOT_CONTRACT_ADDRESS`` and optional ``BALLOT_*``
        variables. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        BallotConfig
            Populated configuration.
        """
        env = os.environ

        chain_kwargs: dict[str, Any] = {}
        _ENV_CHAIN_MAP = {
            "BALLOT_CHAIN_NAME": "name",
            "BALLOT_RPC_URL": "rpc_url",
            "BALLOT_EXPLORER_URL": "explorer_url",
            "BALLOT_NATIVE_SYMBOL": "native_symbol",
        }
        for env_key, field_name in _ENV_CHAIN_MAP.items():
            val = env.get(env_key)
            if val is not None:
                chain_kwargs[field_name] = val
        chain_id_env = env.get("BALLOT_CHAIN_ID")
        if chain_id_env is not None:
            chain_kwargs["chain_id"] = int(chain_id_env)

        # Allow overriding chain fields via a nested dict
        chain_overrides = overrides.pop("chain", None)
        if isinstance(chain_overrides, dict):
            chain_kwargs.update(chain_overrides)
        elif isinstance(chain_overrides, ChainProfile):
            chain_kwargs = dataclasses.asdict(chain_overrides)

        chain = ChainProfile(**chain_kwargs) if chain_kwargs else ChainProfile()

        config_kwargs: dict[str, Any] = {"chain": chain}
        address_env = env.get("BALLOT_CONTRACT_ADDRESS")
        if address_env is not None:
            config_kwargs["contract_address"] = address_env.strip()

        _ENV_FLOAT_MAP = {
            "BALLOT_QUERY_TIMEOUT": "query_timeout",
            "BALLOT_RECEIPT_TIMEOUT": "receipt_timeout",
            "BALLOT_TICK_INTERVAL": "tick_interval",
            "BALLOT_EVENT_POLL_INTERVAL": "event_poll_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        gas_env = env.get("BALLOT_GAS_LIMIT")
        if gas_env is not None and "gas_limit" not in overrides:
            config_kwargs["gas_limit"] = int(gas_env)

        if "events_enabled" not in overrides:
            config_kwargs["events_enabled"] = _env_bool(env.get("BALLOT_EVENTS_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
