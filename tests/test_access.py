from __future__ import annotations

from pyballot.access import AccessGate, is_admin

ADMIN = "0x" + "a" * 40


def test_is_admin_requires_both_addresses() -> None:
    assert is_admin(None, ADMIN) is False
    assert is_admin(ADMIN, None) is False
    assert is_admin("", "") is False


def test_is_admin_ignores_case() -> None:
    assert is_admin(ADMIN.upper().replace("0X", "0x"), ADMIN) is True
    assert is_admin("0x" + "b" * 40, ADMIN) is False


def test_is_admin_malformed_is_false() -> None:
    assert is_admin("not-an-address", ADMIN) is False


def test_gate_follows_latest_admin() -> None:
    current: dict[str, str | None] = {"admin": None}
    gate = AccessGate(lambda: current["admin"])

    assert gate.can_manage(ADMIN) is False
    current["admin"] = ADMIN
    assert gate.admin_address == ADMIN
    assert gate.can_manage(ADMIN) is True
