from .estimates import router as estimates_router
from .loyalty import router as loyalty_router
from .portal import router as portal_router
from .public import router as public_router

__all__ = [
    "estimates_router",
    "loyalty_router",
    "portal_router",
    "public_router",
]
