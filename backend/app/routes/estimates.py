from fastapi import APIRouter, Depends, Query
from typing import Dict, Any, Optional

from app.dependencies.services import get_estimate_service
from app.models.estimate import EstimateRequest, EstimateStatusUpdate, PaymentCreate
from app.services.errors import ServiceError
from app.services.estimate_service import EstimateService
from ledger.models import EstimateStatus

router = APIRouter(
    prefix="/api/v1/estimates",
    tags=["estimates"]
)


@router.post("", status_code=201)
def create_estimate(
    request: EstimateRequest,
    service: EstimateService = Depends(get_estimate_service),
) -> Dict[str, Any]:
    """
    Create a new estimate.

    Request body:
    {
        "estimate": {
            "customer_name": "Ion Popescu",
            "customer_phone": "0722123456",
            "parts": [{"name": "Brake pads", "price": 100, "quantity": 2}],
            "labor": [{"description": "Fit pads", "rate": 50, "hours": 3}],
            "parts_discount": 10,
            "status": "DRAFT"
        }
    }
    """
    return {"estimate": service.create_estimate(request.estimate)}


@router.get("")
def list_estimates(
    status: Optional[EstimateStatus] = Query(default=None),
    customer_phone: Optional[str] = Query(default=None),
    service: EstimateService = Depends(get_estimate_service),
) -> Dict[str, Any]:
    """List estimates, newest first, each with its computed totals."""
    return {"estimates": service.list_estimates(status=status, customer_phone=customer_phone)}


@router.get("/{estimate_id}")
def get_estimate(
    estimate_id: int,
    service: EstimateService = Depends(get_estimate_service),
) -> Dict[str, Any]:
    try:
        return {"estimate": service.get_estimate(estimate_id)}
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.post("/{estimate_id}/payments", status_code=201)
def add_payment(
    estimate_id: int,
    payment: PaymentCreate,
    service: EstimateService = Depends(get_estimate_service),
) -> Dict[str, Any]:
    """
    Record a payment against an estimate.

    The balance in the response is recomputed from all payments.
    """
    try:
        return {"estimate": service.add_payment(estimate_id, payment)}
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.patch("/{estimate_id}/status")
def update_status(
    estimate_id: int,
    update: EstimateStatusUpdate,
    service: EstimateService = Depends(get_estimate_service),
) -> Dict[str, Any]:
    try:
        return {"estimate": service.update_status(estimate_id, update.status)}
    except ServiceError as exc:
        raise exc.to_http_exception()
