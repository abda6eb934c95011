"""
Loyalty aggregation across a customer's estimates.
Groups completed estimates by phone, derives points and tiers, and builds
the per-client views (badge, discount suggestion, achievements) on top.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ledger.adjustments import AdjustmentLedger
from ledger.models import (
    Achievement,
    ClientAggregate,
    ClientBadge,
    DiscountSuggestion,
    Estimate,
    EstimateStatus,
    LoyaltyConfig,
    LoyaltyTier,
    Promotion,
    PromotionType,
    TierProgress,
)
from ledger.tiers import DEFAULT_LOYALTY_CONFIG, TierTable
from ledger.totals import compute_transaction_totals

logger = logging.getLogger(__name__)

Adjustments = Union[Mapping[str, int], AdjustmentLedger]

DEFAULT_VIP_THRESHOLD = 10000.0
PREMIUM_SPEND_THRESHOLD = 5000.0
MIN_PHONE_LENGTH_FOR_SUGGESTION = 3


@dataclass
class ClientFilter:
    """
    Narrowing applied to the aggregate list after it is computed.

    Fields:
    - search: case-insensitive substring of name, phone or email ("" = all)
    - tier: exact tier match (None = all tiers)
    """
    search: str = ""
    tier: Optional[LoyaltyTier] = None

    def matches(self, client: ClientAggregate) -> bool:
        needle = self.search.strip().lower()
        matches_search = (
            not needle
            or needle in client.name.lower()
            or needle in client.phone
            or needle in client.email.lower()
        )
        matches_tier = self.tier is None or client.tier == self.tier
        return matches_search and matches_tier


def _phone_key(phone: Optional[str]) -> str:
    # "0722" and "0722 " are the same customer
    return (phone or "").strip()


def _completed(estimates: Iterable[Estimate]) -> List[Estimate]:
    return [e for e in estimates if e.status == EstimateStatus.COMPLETED]


def compute_client_aggregates(
    estimates: Iterable[Estimate],
    loyalty_config: LoyaltyConfig,
    adjustments: Adjustments,
    client_filter: Optional[ClientFilter] = None,
) -> List[ClientAggregate]:
    """
    Build one ClientAggregate per customer from completed estimates.

    Only COMPLETED estimates count, and estimates without a phone number are
    skipped since they cannot be attributed to anyone. Spend is the
    discounted billed total, independent of payments. Points are
    floor(spend * rate) plus the manual adjustment for that phone.

    Args:
        estimates: All estimates known to the host
        loyalty_config: Points rate and tier table
        adjustments: phone -> manual point delta (mapping or AdjustmentLedger)
        client_filter: Optional narrowing applied after aggregation

    Returns:
        Aggregates sorted by loyalty_points descending

    Example:
        >>> # one completed estimate worth 330, rate 1, adjustment +15
        >>> compute_client_aggregates([est], config, {"0722": 15})[0].loyalty_points
        345
    """
    groups: Dict[str, List[Estimate]] = {}
    skipped = 0
    for estimate in _completed(estimates):
        key = _phone_key(estimate.customer_phone)
        if not key:
            skipped += 1
            continue
        groups.setdefault(key, []).append(estimate)

    if skipped:
        logger.debug("Skipped %d completed estimates without a customer phone", skipped)

    table = TierTable(loyalty_config)
    clients = []
    for phone, group in groups.items():
        first = group[0]
        total_spent = sum(compute_transaction_totals(e).total for e in group)
        visit_count = len(group)
        loyalty_points = (
            math.floor(total_spent * loyalty_config.points_per_currency_unit)
            + adjustments.get(phone, 0)
        )
        clients.append(
            ClientAggregate(
                name=first.customer_name,
                phone=phone,
                email=first.customer_email,
                total_spent=total_spent,
                visit_count=visit_count,
                avg_spent=total_spent / visit_count,
                loyalty_points=loyalty_points,
                tier=table.tier_for_points(loyalty_points),
            )
        )

    if client_filter is not None:
        clients = [c for c in clients if client_filter.matches(c)]

    clients.sort(key=lambda c: c.loyalty_points, reverse=True)
    return clients


def client_progress(client: ClientAggregate, loyalty_config: LoyaltyConfig) -> TierProgress:
    """Progress of one aggregated client towards their next tier."""
    return TierTable(loyalty_config).progress(client.loyalty_points, client.tier)


def find_client(
    estimates: Iterable[Estimate],
    loyalty_config: LoyaltyConfig,
    adjustments: Adjustments,
    phone: str,
) -> Optional[ClientAggregate]:
    """Aggregate for a single phone, or None if it has no completed estimates."""
    key = _phone_key(phone)
    if not key:
        return None
    own = [e for e in estimates if _phone_key(e.customer_phone) == key]
    clients = compute_client_aggregates(own, loyalty_config, adjustments)
    return clients[0] if clients else None


def client_badge(
    estimates: Iterable[Estimate],
    loyalty_config: LoyaltyConfig,
    adjustments: Adjustments,
    phone: str,
    vip_threshold: float = DEFAULT_VIP_THRESHOLD,
) -> ClientBadge:
    """
    Small badge shown next to a customer's name.

    Rules:
    - No phone: standard, new, not VIP
    - is_new while the customer has at most one completed estimate
    - is_vip once total spend exceeds vip_threshold
    """
    client = find_client(estimates, loyalty_config, adjustments, phone)
    if client is None:
        return ClientBadge(tier=None, is_new=True, is_vip=False)
    return ClientBadge(
        tier=client.tier,
        is_new=client.visit_count <= 1,
        is_vip=client.total_spent > vip_threshold,
    )


def suggest_discount(
    estimates: Iterable[Estimate],
    loyalty_config: LoyaltyConfig,
    adjustments: Adjustments,
    phone: str,
    exclude_estimate_id: Optional[str] = None,
    is_staff: bool = False,
    promotion: Optional[Promotion] = None,
) -> Optional[DiscountSuggestion]:
    """
    Discount percentages to pre-fill on an estimate being edited.

    Rules (first match wins):
    - Staff members get the STAFF tier parts rate and free labor
    - An applied promotion sets the percentage on its side only
    - Otherwise the customer's tier rates apply, computed without the
      estimate being edited so it cannot discount itself

    Returns:
        DiscountSuggestion, or None when nothing applies
    """
    if is_staff:
        staff = loyalty_config.tiers.get(LoyaltyTier.STAFF) or DEFAULT_LOYALTY_CONFIG.tiers[LoyaltyTier.STAFF]
        return DiscountSuggestion(
            parts_discount_percent=staff.parts_discount_rate * 100,
            labor_discount_percent=100.0,
            reason="STAFF - no labor charge",
            tier=LoyaltyTier.STAFF,
        )

    if promotion is not None:
        return DiscountSuggestion(
            parts_discount_percent=promotion.value if promotion.type == PromotionType.PARTS_PERCENTAGE else 0.0,
            labor_discount_percent=promotion.value if promotion.type == PromotionType.LABOR_PERCENTAGE else 0.0,
            reason=f"Promotion: {promotion.name}",
        )

    if len((phone or "").strip()) < MIN_PHONE_LENGTH_FOR_SUGGESTION:
        return None

    history = [e for e in estimates if e.id != exclude_estimate_id]
    client = find_client(history, loyalty_config, adjustments, phone)
    if client is None or client.tier is None:
        return None

    tier_config = loyalty_config.tiers[client.tier]
    return DiscountSuggestion(
        parts_discount_percent=tier_config.parts_discount_rate * 100,
        labor_discount_percent=tier_config.labor_discount_rate * 100,
        reason=f"{client.tier.value} ({client.loyalty_points} pts)",
        tier=client.tier,
    )


def client_achievements(estimates: Iterable[Estimate], phone: str) -> List[Achievement]:
    """
    Milestones shown on the client portal.

    Spend for the premium milestone uses the same discounted totals as the
    loyalty aggregation.
    """
    key = _phone_key(phone)
    own = [e for e in estimates if key and _phone_key(e.customer_phone) == key]
    completed = _completed(own)
    total_spent = sum(compute_transaction_totals(e).total for e in completed)

    achievements = []
    if own:
        achievements.append(Achievement("welcome", "Welcome!", "First visit to the workshop."))
    if len(completed) >= 3:
        achievements.append(Achievement("loyal_client", "Loyal Client", "3+ completed visits."))
    if len(completed) >= 10:
        achievements.append(Achievement("veteran", "Veteran", "10+ completed visits."))
    if total_spent > PREMIUM_SPEND_THRESHOLD:
        achievements.append(Achievement("premium_rider", "Premium Rider", "Serious investment in the ride."))
    if any(_mentions_brakes(e.services) for e in completed):
        achievements.append(Achievement("safety_first", "Safety First", "Braking system maintenance."))
    return achievements


def _mentions_brakes(services: str) -> bool:
    text = (services or "").lower()
    return "brake" in text or "fran" in text
