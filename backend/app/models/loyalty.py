from sqlalchemy import Column, Integer, String, DateTime, JSON
from app.db.db import Base
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, UTC
from typing import Optional

from ledger.models import LoyaltyConfig, LoyaltyTier, PromotionType, TierConfig


def _utc_now_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class LoyaltyAdjustment(Base):
    """One manual point correction. Rows are only ever inserted."""
    __tablename__ = "loyalty_adjustments"
    id = Column(Integer, primary_key=True, index=True)
    customer_phone = Column(String, nullable=False, index=True)
    delta = Column(Integer, nullable=False)
    reason = Column(String, nullable=True)
    created_date = Column(DateTime, default=_utc_now_naive, nullable=False)


class ShopSetting(Base):
    __tablename__ = "shop_settings"
    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
    updated_date = Column(DateTime, default=_utc_now_naive, onupdate=_utc_now_naive, nullable=False)


# Pydantic models for request/response validation
class AdjustmentCreate(BaseModel):
    points: int
    reason: Optional[str] = None

    @field_validator("points")
    @classmethod
    def points_non_zero(cls, v):
        if v == 0:
            raise ValueError("points must not be 0")
        return v


class TierConfigPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    points_threshold: int = Field(ge=0)
    labor_discount_rate: float = Field(ge=0, le=1)
    parts_discount_rate: float = Field(ge=0, le=1)


class LoyaltyConfigPayload(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    points_per_currency_unit: float = Field(ge=0)
    tiers: dict[LoyaltyTier, TierConfigPayload]

    def to_ledger(self) -> LoyaltyConfig:
        return LoyaltyConfig(
            points_per_currency_unit=self.points_per_currency_unit,
            tiers={tier: TierConfig(**payload.model_dump()) for tier, payload in self.tiers.items()},
        )


class LoyaltyConfigResponse(LoyaltyConfigPayload):
    warnings: list[str] = Field(default_factory=list)


class ClientAggregateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    name: str
    phone: str
    email: str
    total_spent: float
    visit_count: int
    avg_spent: float
    loyalty_points: int
    tier: Optional[LoyaltyTier] = None


class TierProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    current_tier: Optional[LoyaltyTier] = None
    next_tier: Optional[LoyaltyTier] = None
    progress_percent: float
    points_needed: int
    max_tier_reached: bool


class ClientBadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    tier: Optional[LoyaltyTier] = None
    is_new: bool
    is_vip: bool


class PromotionPayload(BaseModel):
    id: str = ""
    name: str
    type: PromotionType
    value: float = Field(ge=0)


class DiscountSuggestionRequest(BaseModel):
    customer_phone: str = ""
    estimate_id: Optional[int] = None
    is_staff: bool = False
    promotion: Optional[PromotionPayload] = None


class DiscountSuggestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    parts_discount_percent: float
    labor_discount_percent: float
    reason: str
    tier: Optional[LoyaltyTier] = None
