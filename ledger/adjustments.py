"""
Manual loyalty point adjustments.

The adjustment ledger is the only loyalty state with a lifecycle of its own:
admins add signed deltas per customer phone, and those deltas are summed on
top of the points derived from estimates. Entries only ever accumulate.
"""

import logging
from typing import Dict, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)


class AdjustmentLedger(Protocol):
    """Read/append access to per-phone point adjustments."""

    def get(self, phone: str, default: int = 0) -> int:
        ...

    def append(self, phone: str, delta: int) -> int:
        ...


def validate_delta(delta: int) -> None:
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise ValueError(f"Point adjustment must be an integer, got {delta!r}")


def apply_adjustment(ledger: Mapping[str, int], phone: str, delta: int) -> Dict[str, int]:
    """
    Return a copy of ledger with delta added to the phone's entry.

    The entry is created at 0 when absent. Applying +50 then -20 gives the
    same result as applying +30.

    Args:
        ledger: Current phone -> adjustment mapping (left untouched)
        phone: Customer phone
        delta: Signed number of points

    Returns:
        New mapping

    Raises:
        ValueError: If delta is not an integer
    """
    validate_delta(delta)
    updated = dict(ledger)
    updated[phone] = updated.get(phone, 0) + delta
    return updated


class InMemoryAdjustmentLedger:
    """Dict-backed AdjustmentLedger."""

    def __init__(self, initial: Optional[Mapping[str, int]] = None):
        self._entries: Dict[str, int] = dict(initial or {})

    def get(self, phone: str, default: int = 0) -> int:
        return self._entries.get(phone, default)

    def append(self, phone: str, delta: int) -> int:
        self._entries = apply_adjustment(self._entries, phone, delta)
        logger.debug("Adjusted loyalty points for %s by %+d", phone, delta)
        return self._entries[phone]

    def snapshot(self) -> Dict[str, int]:
        return dict(self._entries)
