from .adjustments import AdjustmentLedger, InMemoryAdjustmentLedger, apply_adjustment
from .loyalty import (
    ClientFilter,
    client_achievements,
    client_badge,
    client_progress,
    compute_client_aggregates,
    find_client,
    suggest_discount,
)
from .tiers import DEFAULT_LOYALTY_CONFIG, TierTable, loyalty_config_from_dict, loyalty_config_to_dict
from .totals import compute_transaction_totals

__all__ = [
    "AdjustmentLedger",
    "InMemoryAdjustmentLedger",
    "apply_adjustment",
    "ClientFilter",
    "client_achievements",
    "client_badge",
    "client_progress",
    "compute_client_aggregates",
    "find_client",
    "suggest_discount",
    "DEFAULT_LOYALTY_CONFIG",
    "TierTable",
    "loyalty_config_from_dict",
    "loyalty_config_to_dict",
    "compute_transaction_totals",
]
