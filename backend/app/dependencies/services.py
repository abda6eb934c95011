from fastapi import Depends
from sqlalchemy.orm import Session

from app.dependencies.db import get_db
from app.services.estimate_service import EstimateService
from app.services.loyalty_service import LoyaltyService
from app.services.portal_service import PortalService


def get_estimate_service(db: Session = Depends(get_db)) -> EstimateService:
    return EstimateService(db)

def get_loyalty_service(db: Session = Depends(get_db)) -> LoyaltyService:
    return LoyaltyService(db)

def get_portal_service(db: Session = Depends(get_db)) -> PortalService:
    # Client portal and public status page share one service
    return PortalService(db)
