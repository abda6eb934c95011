"""
Client-facing views: the authenticated client portal and the public
estimate status page. Money figures come from the ledger engine, the same
as on the dashboard.
"""

from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.config import ShopConfig
from app.models.estimate import EstimateTotalsResponse
from app.services.errors import not_found
from app.services.estimate_service import EstimateService
from app.services.loyalty_service import LoyaltyService
from ledger.loyalty import client_achievements, client_badge, client_progress, find_client
from ledger.models import EstimateStatus
from ledger.totals import compute_transaction_totals

STATUS_DESCRIPTIONS = {
    EstimateStatus.DRAFT: "Your estimate is being prepared.",
    EstimateStatus.AWAITING_PAYMENT: "Work is done and waiting for payment.",
    EstimateStatus.COMPLETED: "Your vehicle is ready. Thank you!",
}


class PortalService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.estimates = EstimateService(db)
        self.loyalty = LoyaltyService(db)
        self.ledger = self.loyalty.ledger

    def client_estimates(self, phone: str) -> List[Dict[str, Any]]:
        return self.estimates.list_estimates(customer_phone=phone)

    def client_estimate(self, phone: str, estimate_id: int) -> Dict[str, Any]:
        estimate = self.estimates.get_estimate(estimate_id)
        # Don't reveal that another client's estimate exists
        if estimate["customer_phone"] != phone:
            raise not_found("Estimate", estimate_id)
        return estimate

    def summary(self, phone: str) -> Dict[str, Any]:
        estimates = self.estimates.all_for_ledger()
        own = [e for e in estimates if e.customer_phone == phone]
        if not own:
            raise not_found("Client", phone)

        config = self.loyalty.get_config()
        adjustments = self.ledger.snapshot()
        client = find_client(estimates, config, adjustments, phone)
        latest = max(own, key=lambda e: (e.date, int(e.id) if e.id.isdigit() else 0))

        return {
            "name": latest.customer_name,
            "phone": phone,
            "estimate_count": len(own),
            "outstanding_balance": sum(
                compute_transaction_totals(e).balance_due
                for e in own
                if e.status == EstimateStatus.AWAITING_PAYMENT
            ),
            "loyalty": client,
            "progress": client_progress(client, config) if client else None,
            "badge": client_badge(estimates, config, adjustments, phone, ShopConfig.VIP_SPEND_THRESHOLD),
            "achievements": client_achievements(estimates, phone),
        }

    def public_status(self, estimate_number: str) -> Dict[str, Any]:
        record = self.estimates.get_by_number(estimate_number)
        estimate = record.to_ledger()
        totals = EstimateTotalsResponse.model_validate(compute_transaction_totals(estimate))
        return {
            "estimate_number": estimate.estimate_number,
            "date": estimate.date,
            "status": estimate.status.value,
            "status_description": STATUS_DESCRIPTIONS[estimate.status],
            "services": estimate.services,
            "total": totals.total,
            "total_paid": totals.total_paid,
            "balance_due": totals.balance_due,
        }
