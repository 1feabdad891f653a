from __future__ import annotations

import pytest

from pyballot.config import BallotConfig, ChainProfile


def test_defaults_target_hedera_testnet() -> None:
    config = BallotConfig()

    assert config.chain.chain_id == 296
    assert config.rpc_url == "https://testnet.hashio.io/api"
    assert config.chain.transaction_url("0xabc") == "https://hashscan.io/testnet/transaction/0xabc"


def test_from_env_reads_ballot_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BALLOT_CONTRACT_ADDRESS", " 0x" + "d" * 40 + " ")
    monkeypatch.setenv("BALLOT_RPC_URL", "http://localhost:8545")
    monkeypatch.setenv("BALLOT_CHAIN_ID", "31337")
    monkeypatch.setenv("BALLOT_QUERY_TIMEOUT", "2.5")
    monkeypatch.setenv("BALLOT_EVENTS_ENABLED", "off")
    monkeypatch.setenv("BALLOT_GAS_LIMIT", "300000")

    config = BallotConfig.from_env()

    assert config.contract_address == "0x" + "d" * 40
    assert config.rpc_url == "http://localhost:8545"
    assert config.chain.chain_id == 31337
    assert config.query_timeout == 2.5
    assert config.events_enabled is False
    assert config.gas_limit == 300000


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BALLOT_QUERY_TIMEOUT", "2.5")
    monkeypatch.setenv("BALLOT_EVENTS_ENABLED", "true")

    config = BallotConfig.from_env(
        query_timeout=9.0,
        events_enabled=False,
        chain=ChainProfile(chain_id=1, name="Local"),
    )

    assert config.query_timeout == 9.0
    assert config.events_enabled is False
    assert config.chain.name == "Local"
