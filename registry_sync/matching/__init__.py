"""
Schedule-to-registry matching.

Usage:
    >>> from registry_sync.matching import reconcile
    >>> commands = reconcile(scheduled, existing)
"""

from .bit_array import BitArray
from .pairing import AlreadyConsumedError, PairingEngine, PotentialMapping
from .reconciliation import (
    DayGroup,
    DayReconciliation,
    Match,
    MatchPass,
    group_by_day,
    needs_update,
    reconcile,
    reconcile_day,
)

__all__ = [
    "BitArray",
    "AlreadyConsumedError",
    "PairingEngine",
    "PotentialMapping",
    "DayGroup",
    "DayReconciliation",
    "Match",
    "MatchPass",
    "group_by_day",
    "needs_update",
    "reconcile",
    "reconcile_day",
]
