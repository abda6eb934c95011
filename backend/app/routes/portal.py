from fastapi import APIRouter, Depends
from typing import Dict, Any

from app.dependencies.security import require_client_phone
from app.dependencies.services import get_portal_service
from app.services.errors import ServiceError
from app.services.portal_service import PortalService

router = APIRouter(prefix="/api/v1/portal", tags=["client-portal"])


@router.get("/estimates")
def list_my_estimates(
    phone: str = Depends(require_client_phone),
    service: PortalService = Depends(get_portal_service),
) -> Dict[str, Any]:
    """
    Estimates for the client identified by the x-client-phone header.
    """
    return {"estimates": service.client_estimates(phone)}


@router.get("/estimates/{estimate_id}")
def get_my_estimate(
    estimate_id: int,
    phone: str = Depends(require_client_phone),
    service: PortalService = Depends(get_portal_service),
) -> Dict[str, Any]:
    try:
        return {"estimate": service.client_estimate(phone, estimate_id)}
    except ServiceError as exc:
        raise exc.to_http_exception()


@router.get("/summary")
def get_my_summary(
    phone: str = Depends(require_client_phone),
    service: PortalService = Depends(get_portal_service),
) -> Dict[str, Any]:
    """Loyalty standing, badge, achievements and outstanding balance."""
    try:
        return {"summary": service.summary(phone)}
    except ServiceError as exc:
        raise exc.to_http_exception()
