"""Admin display gating.

Nothing here grants privilege. The contract still authorizes every
privileged call and may reject one that this gate allowed (for example
when the cached admin address is stale).
"""

from __future__ import annotations

from collections.abc import Callable

from pyballot.models._base import normalize_address


def is_admin(connected_address: str | None, admin_address: str | None) -> bool:
    """``True`` only when both addresses are present and equal ignoring case."""
    if not connected_address or not admin_address:
        return False
    try:
        return normalize_address(connected_address) == normalize_address(admin_address)
    except ValueError:
        return False


class AccessGate:
    """Admin check against the latest admin address the session has seen."""

    def __init__(self, admin_getter: Callable[[], str | None]) -> None:
        self._admin_getter = admin_getter

    @property
    def admin_address(self) -> str | None:
        return self._admin_getter()

    def can_manage(self, connected_address: str | None) -> bool:
        return is_admin(connected_address, self._admin_getter())
