import sys
import unittest
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


# Ensure `backend/` is on sys.path so `import app...` works
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from app.db.db import Base  # noqa: E402
from app.dependencies.db import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.estimate import EstimateRecord  # noqa: F401,E402
from app.models.loyalty import LoyaltyAdjustment, ShopSetting  # noqa: F401,E402


def make_session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def estimate_payload(
    name: str = "Ion Popescu",
    phone: str = "0722",
    status: str = "COMPLETED",
    parts=None,
    labor=None,
    **extra,
) -> dict:
    estimate = {
        "customer_name": name,
        "customer_phone": phone,
        "status": status,
        "parts": parts if parts is not None else [{"name": "Brake pads", "price": 100, "quantity": 2}],
        "labor": labor if labor is not None else [{"description": "Fit pads", "rate": 50, "hours": 3}],
    }
    estimate.update(extra)
    return {"estimate": estimate}


class ApiTestCase(unittest.TestCase):
    """TestClient against the real app with an in-memory database."""

    def setUp(self):
        self.Session = make_session_factory()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def create_estimate(self, **kwargs) -> dict:
        resp = self.client.post("/api/v1/estimates", json=estimate_payload(**kwargs))
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["estimate"]
