"""
Loyalty Service - dashboard-side access to the loyalty ledger.

Loads the current estimates, loyalty config and adjustment ledger from the
database and hands them to the ledger engine; nothing derived is stored.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.config import ShopConfig
from app.models.loyalty import DiscountSuggestionRequest, LoyaltyConfigPayload, ShopSetting
from app.services.adjustment_ledger import SqlAdjustmentLedger
from app.services.errors import ServiceError, not_found
from app.services.estimate_service import EstimateService
from ledger.loyalty import (
    ClientFilter,
    client_badge,
    client_progress,
    compute_client_aggregates,
    find_client,
    suggest_discount,
)
from ledger.models import ClientAggregate, ClientBadge, DiscountSuggestion, LoyaltyConfig, LoyaltyTier, Promotion
from ledger.tiers import loyalty_config_to_dict, merge_with_defaults, validate_loyalty_config

logger = logging.getLogger(__name__)

LOYALTY_CONFIG_KEY = "loyalty_config"


class LoyaltyService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.estimates = EstimateService(db)
        self.ledger = SqlAdjustmentLedger(db)

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def get_config(self) -> LoyaltyConfig:
        setting = self.db.query(ShopSetting).filter(ShopSetting.key == LOYALTY_CONFIG_KEY).first()
        return merge_with_defaults(setting.value if setting else None)

    def update_config(self, payload: LoyaltyConfigPayload) -> Tuple[LoyaltyConfig, List[str]]:
        """
        Store a new loyalty config.

        Range problems are rejected by the payload model; ordering problems
        (equal or descending thresholds) are accepted and reported back as
        warnings.
        """
        # Tiers left out of the payload keep their stored/default values
        current = loyalty_config_to_dict(self.get_config())
        incoming = loyalty_config_to_dict(payload.to_ledger())
        current["pointsPerCurrencyUnit"] = incoming["pointsPerCurrencyUnit"]
        current["tiers"].update(incoming["tiers"])
        config = merge_with_defaults(current)

        warnings = validate_loyalty_config(config)
        for warning in warnings:
            logger.warning("Loyalty config: %s", warning)

        setting = self.db.query(ShopSetting).filter(ShopSetting.key == LOYALTY_CONFIG_KEY).first()
        if setting is None:
            setting = ShopSetting(key=LOYALTY_CONFIG_KEY, value=loyalty_config_to_dict(config))
            self.db.add(setting)
        else:
            setting.value = loyalty_config_to_dict(config)
        self.db.commit()
        logger.info("Loyalty config updated (points per unit %s)", config.points_per_currency_unit)
        return config, warnings

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    def list_clients(self, search: str = "", tier: Optional[LoyaltyTier] = None) -> List[ClientAggregate]:
        return compute_client_aggregates(
            self.estimates.all_for_ledger(),
            self.get_config(),
            self.ledger.snapshot(),
            ClientFilter(search=search, tier=tier),
        )

    def get_client(self, phone: str) -> Dict[str, Any]:
        config = self.get_config()
        client = find_client(self.estimates.all_for_ledger(), config, self.ledger.snapshot(), phone)
        if client is None:
            raise not_found("Client", phone)
        return {
            "client": client,
            "progress": client_progress(client, config),
            "adjustment": self.ledger.get(phone),
        }

    def adjust_points(self, phone: str, points: int, reason: Optional[str] = None) -> Dict[str, Any]:
        # Only clients visible in the loyalty list can be adjusted
        self.get_client(phone)
        try:
            self.ledger.append(phone, points, reason)
        except ValueError as exc:
            raise ServiceError(400, "VALIDATION_ERROR", str(exc), {"field": "points"})
        return self.get_client(phone)

    def badge(self, phone: str) -> ClientBadge:
        return client_badge(
            self.estimates.all_for_ledger(),
            self.get_config(),
            self.ledger.snapshot(),
            phone,
            vip_threshold=ShopConfig.VIP_SPEND_THRESHOLD,
        )

    def suggest_discount(self, request: DiscountSuggestionRequest) -> Optional[DiscountSuggestion]:
        promotion = None
        if request.promotion is not None:
            promotion = Promotion(
                id=request.promotion.id,
                name=request.promotion.name,
                type=request.promotion.type,
                value=request.promotion.value,
            )
        return suggest_discount(
            self.estimates.all_for_ledger(),
            self.get_config(),
            self.ledger.snapshot(),
            request.customer_phone.strip(),
            exclude_estimate_id=None if request.estimate_id is None else str(request.estimate_id),
            is_staff=request.is_staff,
            promotion=promotion,
        )
