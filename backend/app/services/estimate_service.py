import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.estimate import EstimateCreate, EstimateRecord, EstimateTotalsResponse, PaymentCreate
from app.services.errors import ServiceError, not_found
from ledger.models import Estimate, EstimateStatus
from ledger.totals import compute_transaction_totals

logger = logging.getLogger(__name__)

ESTIMATE_NUMBER_PREFIX = "EST-"


class EstimateService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _get_record(self, estimate_id: int) -> EstimateRecord:
        record = self.db.query(EstimateRecord).filter(EstimateRecord.id == estimate_id).first()
        if not record:
            raise not_found("Estimate", estimate_id)
        return record

    def estimate_to_dict(self, record: EstimateRecord) -> Dict[str, Any]:
        estimate = record.to_ledger()
        totals = compute_transaction_totals(estimate)
        return {
            "id": record.id,
            "estimate_number": record.estimate_number,
            "date": estimate.date,
            "customer_name": estimate.customer_name,
            "customer_phone": estimate.customer_phone,
            "customer_email": estimate.customer_email,
            "services": estimate.services,
            "status": estimate.status.value,
            "parts": record.parts or [],
            "labor": record.labor or [],
            "payments": record.payments or [],
            "parts_discount": record.parts_discount,
            "labor_discount": record.labor_discount,
            "discount_reason": record.discount_reason,
            "totals": EstimateTotalsResponse.model_validate(totals),
        }

    def create_estimate(self, payload: EstimateCreate) -> Dict[str, Any]:
        record = EstimateRecord(
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone or None,
            customer_email=payload.customer_email or None,
            services=payload.services,
            status=payload.status,
            parts=[p.model_dump() for p in payload.parts],
            labor=[l.model_dump() for l in payload.labor],
            payments=[self._payment_to_json(p) for p in payload.payments],
            parts_discount=payload.parts_discount,
            labor_discount=payload.labor_discount,
            discount_reason=payload.discount_reason,
            estimate_date=payload.estimate_date or date.today(),
        )
        self.db.add(record)
        self.db.flush()
        record.estimate_number = f"{ESTIMATE_NUMBER_PREFIX}{record.id:05d}"
        self.db.commit()
        self.db.refresh(record)
        logger.info("Created estimate %s for phone=%r", record.estimate_number, record.customer_phone)
        return self.estimate_to_dict(record)

    def list_estimates(
        self,
        status: Optional[EstimateStatus] = None,
        customer_phone: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        query = self.db.query(EstimateRecord)
        if status is not None:
            query = query.filter(EstimateRecord.status == status)
        if customer_phone:
            query = query.filter(EstimateRecord.customer_phone == customer_phone)
        records = query.order_by(EstimateRecord.estimate_date.desc(), EstimateRecord.id.desc()).all()
        return [self.estimate_to_dict(r) for r in records]

    def get_estimate(self, estimate_id: int) -> Dict[str, Any]:
        return self.estimate_to_dict(self._get_record(estimate_id))

    def get_by_number(self, estimate_number: str) -> EstimateRecord:
        record = (
            self.db.query(EstimateRecord)
            .filter(EstimateRecord.estimate_number == estimate_number)
            .first()
        )
        if not record:
            raise not_found("Estimate", estimate_number)
        return record

    def add_payment(self, estimate_id: int, payment: PaymentCreate) -> Dict[str, Any]:
        record = self._get_record(estimate_id)
        if record.status == EstimateStatus.DRAFT:
            raise ServiceError(
                409,
                "INVALID_STATE",
                "Payments cannot be recorded on a draft estimate.",
                {"status": record.status.value},
            )
        # Reassign so SQLAlchemy notices the JSON change
        record.payments = list(record.payments or []) + [self._payment_to_json(payment)]
        self.db.commit()
        self.db.refresh(record)
        logger.info("Recorded payment of %.2f on estimate %s", payment.amount, record.estimate_number)
        return self.estimate_to_dict(record)

    def update_status(self, estimate_id: int, status: EstimateStatus) -> Dict[str, Any]:
        record = self._get_record(estimate_id)
        record.status = status
        self.db.commit()
        self.db.refresh(record)
        return self.estimate_to_dict(record)

    def all_for_ledger(self) -> List[Estimate]:
        """Snapshot of every estimate as ledger input."""
        return [r.to_ledger() for r in self.db.query(EstimateRecord).order_by(EstimateRecord.id).all()]

    @staticmethod
    def _payment_to_json(payment: PaymentCreate) -> Dict[str, Any]:
        return {
            "amount": payment.amount,
            "method": payment.method,
            "date": (payment.payment_date or date.today()).isoformat(),
            "notes": payment.notes,
        }
