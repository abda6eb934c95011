from .adjustment_ledger import SqlAdjustmentLedger
from .errors import ServiceError
from .estimate_service import EstimateService
from .loyalty_service import LoyaltyService
from .portal_service import PortalService

__all__ = [
    "SqlAdjustmentLedger",
    "ServiceError",
    "EstimateService",
    "LoyaltyService",
    "PortalService",
]
