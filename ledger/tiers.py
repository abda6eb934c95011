"""
Loyalty tier table.
Holds the default configuration, converts the stored settings shape and
answers "which tier" / "how far to the next tier" questions.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ledger.models import LoyaltyConfig, LoyaltyTier, TierConfig, TierProgress

logger = logging.getLogger(__name__)


# Default configuration values
DEFAULT_LOYALTY_CONFIG = LoyaltyConfig(
    points_per_currency_unit=0.1,  # 1 point for every 10 currency units
    tiers={
        LoyaltyTier.BRONZE: TierConfig(points_threshold=250, labor_discount_rate=0.05, parts_discount_rate=0.0),
        LoyaltyTier.SILVER: TierConfig(points_threshold=500, labor_discount_rate=0.10, parts_discount_rate=0.02),
        LoyaltyTier.GOLD: TierConfig(points_threshold=1500, labor_discount_rate=0.15, parts_discount_rate=0.05),
        LoyaltyTier.PLATINUM: TierConfig(points_threshold=3000, labor_discount_rate=0.20, parts_discount_rate=0.07),
        LoyaltyTier.VETERAN: TierConfig(points_threshold=5000, labor_discount_rate=0.25, parts_discount_rate=0.10),
        # Not reachable through points
        LoyaltyTier.STAFF: TierConfig(points_threshold=999999, labor_discount_rate=1.0, parts_discount_rate=0.15),
    },
)

RESERVED_TIERS = frozenset({LoyaltyTier.STAFF})


def _tier_from_dict(raw: Dict[str, Any], fallback: TierConfig) -> TierConfig:
    return TierConfig(
        points_threshold=int(raw.get("points", fallback.points_threshold)),
        labor_discount_rate=float(raw.get("laborDiscount", fallback.labor_discount_rate)),
        parts_discount_rate=float(raw.get("partsDiscount", fallback.parts_discount_rate)),
    )


def loyalty_config_from_dict(raw: Optional[Dict[str, Any]]) -> LoyaltyConfig:
    """
    Build a LoyaltyConfig from the stored settings shape.

    Accepts both the current keys (pointsPerCurrencyUnit / tiers) and the
    legacy ones (POINTS_PER_RON / TIERS). Any missing key or tier falls back
    to DEFAULT_LOYALTY_CONFIG; unknown tier names are ignored.

    Args:
        raw: Stored settings dict, or None

    Returns:
        A complete LoyaltyConfig
    """
    raw = raw or {}
    points_per_unit = raw.get("pointsPerCurrencyUnit", raw.get("POINTS_PER_RON"))
    stored_tiers = raw.get("tiers", raw.get("TIERS")) or {}

    tiers = {}
    for tier, default in DEFAULT_LOYALTY_CONFIG.tiers.items():
        stored = stored_tiers.get(tier.value)
        tiers[tier] = _tier_from_dict(stored, default) if stored else TierConfig(**vars(default))

    for name in stored_tiers:
        if name not in LoyaltyTier.__members__:
            logger.debug("Ignoring unknown loyalty tier %r in stored config", name)

    return LoyaltyConfig(
        points_per_currency_unit=(
            DEFAULT_LOYALTY_CONFIG.points_per_currency_unit
            if points_per_unit is None
            else float(points_per_unit)
        ),
        tiers=tiers,
    )


def loyalty_config_to_dict(config: LoyaltyConfig) -> Dict[str, Any]:
    """Inverse of loyalty_config_from_dict, always in the current key names."""
    return {
        "pointsPerCurrencyUnit": config.points_per_currency_unit,
        "tiers": {
            tier.value: {
                "points": tier_config.points_threshold,
                "laborDiscount": tier_config.labor_discount_rate,
                "partsDiscount": tier_config.parts_discount_rate,
            }
            for tier, tier_config in config.tiers.items()
        },
    }


def merge_with_defaults(stored: Optional[Dict[str, Any]]) -> LoyaltyConfig:
    """Loyalty config for a stored settings value that may be missing or partial."""
    if not stored:
        logger.debug("No stored loyalty config, using defaults")
    return loyalty_config_from_dict(stored)


def validate_loyalty_config(config: LoyaltyConfig) -> List[str]:
    """
    Check a config for problems the engine tolerates but an admin should see.

    Nothing is raised: equal or descending thresholds are handled by the
    progress guard, so the caller decides whether to reject.

    Returns:
        List of warning strings (empty when the config is well formed)
    """
    warnings = []
    if config.points_per_currency_unit < 0:
        warnings.append("pointsPerCurrencyUnit must not be negative")

    for tier, tier_config in config.tiers.items():
        if tier_config.points_threshold < 0:
            warnings.append(f"{tier.value}: points threshold must not be negative")
        for label, rate in (
            ("laborDiscount", tier_config.labor_discount_rate),
            ("partsDiscount", tier_config.parts_discount_rate),
        ):
            if not 0 <= rate <= 1:
                warnings.append(f"{tier.value}: {label} must be between 0 and 1")

    # Customer-facing tiers should climb strictly in enum order
    previous: Optional[Tuple[LoyaltyTier, int]] = None
    for tier in LoyaltyTier:
        if tier in RESERVED_TIERS or tier not in config.tiers:
            continue
        threshold = config.tiers[tier].points_threshold
        if previous is not None and threshold <= previous[1]:
            warnings.append(
                f"{tier.value}: threshold {threshold} is not above {previous[0].value} ({previous[1]})"
            )
        previous = (tier, threshold)

    return warnings


class TierTable:
    """
    Customer-facing tiers ordered by ascending points threshold.

    The reserved STAFF tier is never part of the table. Tiers with equal
    thresholds keep their enum order.
    """

    def __init__(self, config: LoyaltyConfig):
        self.config = config
        self.ordered: List[Tuple[LoyaltyTier, TierConfig]] = sorted(
            (
                (tier, tier_config)
                for tier, tier_config in config.tiers.items()
                if tier not in RESERVED_TIERS
            ),
            key=lambda item: item[1].points_threshold,
        )
        # Stable: among equal thresholds the earlier tier is matched first
        self.descending = sorted(self.ordered, key=lambda item: item[1].points_threshold, reverse=True)

    def threshold(self, tier: Optional[LoyaltyTier]) -> int:
        if tier is None:
            return 0
        return self.config.tiers[tier].points_threshold

    def tier_for_points(self, points: int) -> Optional[LoyaltyTier]:
        """
        Highest tier whose threshold is covered by points.

        Returns:
            The tier, or None for the baseline "Standard" level
        """
        for tier, tier_config in self.descending:
            if tier_config.points_threshold <= points:
                return tier
        return None

    def next_tier(self, current: Optional[LoyaltyTier]) -> Optional[LoyaltyTier]:
        if current is None:
            return self.ordered[0][0] if self.ordered else None
        tiers = [tier for tier, _ in self.ordered]
        if current not in tiers:
            return None
        index = tiers.index(current)
        return tiers[index + 1] if index < len(tiers) - 1 else None

    def progress(self, points: int, current: Optional[LoyaltyTier]) -> TierProgress:
        """
        Progress from the current tier towards the next one.

        A non-positive gap between the two thresholds (misconfigured table)
        saturates at 100% with nothing needed instead of dividing by it.

        Args:
            points: Customer's loyalty points
            current: Tier currently held (None = standard)

        Returns:
            TierProgress

        Example:
            >>> # BRONZE 0, SILVER 200, GOLD 500
            >>> table.progress(345, LoyaltyTier.SILVER).points_needed
            155
        """
        upcoming = self.next_tier(current)
        if upcoming is None:
            return TierProgress(
                current_tier=current,
                next_tier=None,
                progress_percent=100.0,
                points_needed=0,
                max_tier_reached=True,
            )

        current_threshold = self.threshold(current)
        next_threshold = self.threshold(upcoming)
        gap = next_threshold - current_threshold
        if gap <= 0:
            return TierProgress(current, upcoming, progress_percent=100.0, points_needed=0)

        raw_percent = (points - current_threshold) / gap * 100
        return TierProgress(
            current_tier=current,
            next_tier=upcoming,
            progress_percent=min(100.0, max(0.0, raw_percent)),
            points_needed=max(0, next_threshold - points),
        )
