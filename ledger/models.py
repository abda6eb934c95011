"""
Data models for the Billing & Loyalty Ledger.
All models are dataclasses for simplicity and type safety.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EstimateStatus(Enum):
    DRAFT = "DRAFT"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    COMPLETED = "COMPLETED"


class LoyaltyTier(Enum):
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    VETERAN = "VETERAN"
    # Internal tier, granted by staff membership only
    STAFF = "STAFF"


@dataclass
class Part:
    price: float
    quantity: float
    name: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Part":
        return cls(price=raw.get("price", 0), quantity=raw.get("quantity", 0), name=raw.get("name", ""))


@dataclass
class Labor:
    rate: float
    hours: float
    description: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Labor":
        return cls(rate=raw.get("rate", 0), hours=raw.get("hours", 0), description=raw.get("description", ""))


@dataclass
class Payment:
    amount: float
    method: str = "CASH"  # 'CARD' | 'CASH' | 'TRANSFER'
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Payment":
        return cls(amount=raw.get("amount", 0), method=raw.get("method", "CASH"), date=raw.get("date"))


def payments_from_list(raw: Optional[List[Dict[str, Any]]]) -> Optional[List[Payment]]:
    """None stays None: legacy records without a payments list are not the same as no payments."""
    return None if raw is None else [Payment.from_dict(p) for p in raw]


@dataclass
class Estimate:
    """
    A single billable service record.

    Fields:
    - id: unique identifier for the estimate
    - customer_phone: phone number, the join key for loyalty aggregation
    - status: DRAFT, AWAITING_PAYMENT or COMPLETED
    - parts / labor: ordered line items
    - parts_discount_percent / labor_discount_percent: 0-100, None on legacy records
    - payments: payments received so far, None on legacy records
    - estimate_number, customer_name, customer_email, date, services: display fields
    """
    id: str
    customer_phone: str
    status: EstimateStatus
    parts: List[Part] = field(default_factory=list)
    labor: List[Labor] = field(default_factory=list)
    parts_discount_percent: Optional[float] = None
    labor_discount_percent: Optional[float] = None
    payments: Optional[List[Payment]] = None
    estimate_number: str = ""
    customer_name: str = ""
    customer_email: str = ""
    date: str = ""  # YYYY-MM-DD
    services: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Estimate":
        """
        Build an Estimate from a stored camelCase record.

        Older records may lack the discount fields, the payments list or even
        the phone number; those are kept as None/empty rather than rejected.
        """
        return cls(
            id=str(raw.get("id", "")),
            customer_phone=raw.get("customerPhone") or "",
            status=EstimateStatus(raw.get("status", EstimateStatus.DRAFT.value)),
            parts=[Part.from_dict(p) for p in raw.get("parts") or []],
            labor=[Labor.from_dict(l) for l in raw.get("labor") or []],
            parts_discount_percent=raw.get("partsDiscount"),
            labor_discount_percent=raw.get("laborDiscount"),
            payments=payments_from_list(raw.get("payments")),
            estimate_number=raw.get("estimateNumber", ""),
            customer_name=raw.get("customerName") or "",
            customer_email=raw.get("customerEmail") or "",
            date=raw.get("date", ""),
            services=raw.get("services") or "",
        )


@dataclass
class EstimateTotals:
    """
    Monetary figures for one estimate, as displayed on every surface.

    Fields:
    - parts_subtotal / labor_subtotal: undiscounted line sums
    - parts_discount_amount / labor_discount_amount: discount in currency units
    - total: discounted total billed
    - total_paid: sum of payments
    - balance_due: total - total_paid
    """
    parts_subtotal: float
    labor_subtotal: float
    parts_discount_amount: float
    labor_discount_amount: float
    total: float
    total_paid: float
    balance_due: float


@dataclass
class TierConfig:
    points_threshold: int
    labor_discount_rate: float  # 0-1
    parts_discount_rate: float  # 0-1


@dataclass
class LoyaltyConfig:
    points_per_currency_unit: float
    tiers: Dict[LoyaltyTier, TierConfig]


@dataclass
class ClientAggregate:
    """
    Derived summary of one customer's completed estimates.
    Recomputed on every read, never persisted.
    """
    name: str
    phone: str
    email: str
    total_spent: float
    visit_count: int
    avg_spent: float
    loyalty_points: int
    tier: Optional[LoyaltyTier] = None


@dataclass
class TierProgress:
    """
    Progress from the current tier towards the next one.

    Fields:
    - current_tier: tier held now (None = standard)
    - next_tier: tier immediately above, None when the top tier is reached
    - progress_percent: 0-100
    - points_needed: points still missing for next_tier (never negative)
    - max_tier_reached: True when there is no higher tier
    """
    current_tier: Optional[LoyaltyTier]
    next_tier: Optional[LoyaltyTier]
    progress_percent: float
    points_needed: int
    max_tier_reached: bool = False


@dataclass
class ClientBadge:
    tier: Optional[LoyaltyTier]
    is_new: bool
    is_vip: bool


@dataclass
class DiscountSuggestion:
    parts_discount_percent: float
    labor_discount_percent: float
    reason: str
    tier: Optional[LoyaltyTier] = None


class PromotionType(Enum):
    PARTS_PERCENTAGE = "PARTS_PERCENTAGE"
    LABOR_PERCENTAGE = "LABOR_PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


@dataclass
class Promotion:
    id: str
    name: str
    type: PromotionType
    value: float
    is_active: bool = True


@dataclass
class Achievement:
    key: str
    title: str
    description: str
