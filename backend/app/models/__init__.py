from .estimate import (
    EstimateRecord,
    EstimateCreate,
    EstimateRequest,
    EstimateStatusUpdate,
    EstimateTotalsResponse,
    PaymentCreate,
)
from .loyalty import (
    LoyaltyAdjustment,
    ShopSetting,
    AdjustmentCreate,
    LoyaltyConfigPayload,
    LoyaltyConfigResponse,
    ClientAggregateResponse,
    TierProgressResponse,
    ClientBadgeResponse,
    DiscountSuggestionRequest,
    DiscountSuggestionResponse,
)

__all__ = [
    "EstimateRecord",
    "EstimateCreate",
    "EstimateRequest",
    "EstimateStatusUpdate",
    "EstimateTotalsResponse",
    "PaymentCreate",
    "LoyaltyAdjustment",
    "ShopSetting",
    "AdjustmentCreate",
    "LoyaltyConfigPayload",
    "LoyaltyConfigResponse",
    "ClientAggregateResponse",
    "TierProgressResponse",
    "ClientBadgeResponse",
    "DiscountSuggestionRequest",
    "DiscountSuggestionResponse",
]
