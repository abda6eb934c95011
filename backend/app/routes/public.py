from fastapi import APIRouter, Depends
from typing import Dict, Any

from app.dependencies.services import get_portal_service
from app.services.errors import ServiceError
from app.services.portal_service import PortalService

router = APIRouter(prefix="/api/v1/public", tags=["public-status"])


@router.get("/estimates/{estimate_number}")
def get_estimate_status(
    estimate_number: str,
    service: PortalService = Depends(get_portal_service),
) -> Dict[str, Any]:
    """
    Unauthenticated status page for a shared estimate link.

    Returns status and money figures only, no customer contact details.
    """
    try:
        return {"estimate": service.public_status(estimate_number)}
    except ServiceError as exc:
        raise exc.to_http_exception()
