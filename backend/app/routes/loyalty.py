from fastapi import APIRouter, Depends, Query
from typing import Dict, Any, Optional

from app.dependencies.services import get_loyalty_service
from app.models.loyalty import (
    AdjustmentCreate,
    ClientAggregateResponse,
    ClientBadgeResponse,
    DiscountSuggestionRequest,
    DiscountSuggestionResponse,
    LoyaltyConfigPayload,
    LoyaltyConfigResponse,
    TierConfigPayload,
    TierProgressResponse,
)
from app.services.errors import ServiceError
from app.services.loyalty_service import LoyaltyService
from ledger.models import LoyaltyConfig, LoyaltyTier

router = APIRouter(prefix="/api/v1/loyalty", tags=["loyalty"])


def _config_response(config: LoyaltyConfig, warnings: Optional[list[str]] = None) -> LoyaltyConfigResponse:
    return LoyaltyConfigResponse(
        points_per_currency_unit=config.points_per_currency_unit,
        tiers={
            tier: TierConfigPayload.model_validate(tier_config, from_attributes=True)
            for tier, tier_config in config.tiers.items()
        },
        warnings=warnings or [],
    )


def _client_detail(detail: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "client": ClientAggregateResponse.model_validate(detail["client"]),
        "progress": TierProgressResponse.model_validate(detail["progress"]),
        "adjustment": detail["adjustment"],
    }


@router.get("/clients")
def list_clients(
    search: str = Query(default=""),
    tier: Optional[LoyaltyTier] = Query(default=None),
    service: LoyaltyService = Depends(get_loyalty_service),
) -> Dict[str, Any]:
    """
    Clients ranked by loyalty points.

    Query params:
    - search: matches name, phone or email
    - tier: exact tier (omit for all)
    """
    clients = service.list_clients(search=search, tier=tier)
    return {"clients": [ClientAggregateResponse.model_validate(c) for c in clients]}


@router.get("/clients/{phone}")
def get_client(phone: str, service: LoyaltyService = Depends(get_loyalty_service)) -> Dict[str, Any]:
    try:
        return _client_detail(service.get_client(phone))
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.post("/clients/{phone}/adjustments", status_code=201)
def adjust_points(
    phone: str,
    payload: AdjustmentCreate,
    service: LoyaltyService = Depends(get_loyalty_service),
) -> Dict[str, Any]:
    """
    Add (or with a negative value, remove) points for a client.

    The value is added to any earlier adjustment; it never replaces the
    client's balance.
    """
    try:
        return _client_detail(service.adjust_points(phone, payload.points, payload.reason))
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.get("/clients/{phone}/badge", response_model=ClientBadgeResponse)
def get_badge(phone: str, service: LoyaltyService = Depends(get_loyalty_service)):
    return ClientBadgeResponse.model_validate(service.badge(phone))


@router.get("/config", response_model=LoyaltyConfigResponse)
def get_config(service: LoyaltyService = Depends(get_loyalty_service)):
    return _config_response(service.get_config())


@router.put("/config", response_model=LoyaltyConfigResponse)
def update_config(
    payload: LoyaltyConfigPayload,
    service: LoyaltyService = Depends(get_loyalty_service),
):
    config, warnings = service.update_config(payload)
    return _config_response(config, warnings)


@router.post("/discount-suggestion")
def discount_suggestion(
    request: DiscountSuggestionRequest,
    service: LoyaltyService = Depends(get_loyalty_service),
) -> Dict[str, Any]:
    """Discount percentages to pre-fill on an estimate form (null when none apply)."""
    suggestion = service.suggest_discount(request)
    return {
        "suggestion": None if suggestion is None else DiscountSuggestionResponse.model_validate(suggestion)
    }
