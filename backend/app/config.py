"""
Shop application settings with environment variable overrides.
"""

import logging
import os

logger = logging.getLogger(__name__)


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        logger.warning("Invalid %s value; falling back to default %s", name, default)
        return default


class ShopConfig:
    """Centralized settings read once at import time"""
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./garage.db")

    # Total spend above which a client gets the VIP badge
    VIP_SPEND_THRESHOLD = _float_env("VIP_SPEND_THRESHOLD", 10000.0)

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO").upper()
