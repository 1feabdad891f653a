from __future__ import annotations

from pyballot._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "from": "0x" + "a" * 40,
        "privateKey": "0xdeadbeef",
        "rawTransaction": "0x02f8",
        "nested": {"signature": "0xabc", "mnemonic": "word word"},
    }

    redacted = redact_for_log(payload)
    assert redacted["from"] == payload["from"]
    assert redacted["privateKey"] == "<redacted>"
    assert redacted["rawTransaction"] == "<redacted>"
    assert redacted["nested"]["signature"] == "<redacted>"
    assert redacted["nested"]["mnemonic"] == "<redacted>"


def test_redact_for_log_shortens_calldata() -> None:
    calldata = "0x0121b93f" + "0" * 64
    redacted = redact_for_log({"data": calldata, "nonce": 3})

    assert redacted["data"].startswith("0x0121b93f")
    assert f"<{len(calldata)} chars>" in redacted["data"]
    assert redacted["nonce"] == 3


def test_redact_for_log_truncates_long_strings_and_bytes() -> None:
    redacted = redact_for_log({"value": "x" * 600, "blob": b"\x00" * 4}, max_string=10)

    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
    assert redacted["blob"] == "<bytes:4b>"
