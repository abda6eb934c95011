import logging
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.loyalty import LoyaltyAdjustment
from ledger.adjustments import validate_delta

logger = logging.getLogger(__name__)


class SqlAdjustmentLedger:
    """
    AdjustmentLedger backed by the loyalty_adjustments table.

    Each admin action inserts one row; a phone's adjustment is the sum of
    its rows, so earlier corrections are never overwritten.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, phone: str, default: int = 0) -> int:
        total = (
            self.db.query(func.sum(LoyaltyAdjustment.delta))
            .filter(LoyaltyAdjustment.customer_phone == phone)
            .scalar()
        )
        return default if total is None else int(total)

    def append(self, phone: str, delta: int, reason: Optional[str] = None) -> int:
        validate_delta(delta)
        self.db.add(LoyaltyAdjustment(customer_phone=phone, delta=delta, reason=reason))
        self.db.commit()
        running = self.get(phone)
        logger.info("Loyalty adjustment %+d for %s (running adjustment %d)", delta, phone, running)
        return running

    def snapshot(self) -> Dict[str, int]:
        rows = (
            self.db.query(LoyaltyAdjustment.customer_phone, func.sum(LoyaltyAdjustment.delta))
            .group_by(LoyaltyAdjustment.customer_phone)
            .all()
        )
        return {phone: int(total) for phone, total in rows}
