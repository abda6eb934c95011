from sqlalchemy import Column, Integer, Float, String, Text, DateTime, Date, JSON, Enum as SAEnum
from app.db.db import Base
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, date, UTC
from typing import Literal, Optional

from ledger.models import Estimate, EstimateStatus, Labor, Part, payments_from_list


def _utc_now_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class EstimateRecord(Base):
    __tablename__ = "estimates"
    id = Column(Integer, primary_key=True, index=True)
    estimate_number = Column(String, nullable=True, unique=True, index=True)
    customer_name = Column(String, nullable=False, default="")
    # Nullable: walk-in jobs recorded without a phone are never attributed to a client
    customer_phone = Column(String, nullable=True, index=True)
    customer_email = Column(String, nullable=True)
    services = Column(Text, nullable=False, default="")
    status = Column(SAEnum(EstimateStatus), nullable=False, default=EstimateStatus.DRAFT)
    parts = Column(JSON, nullable=False, default=list)
    labor = Column(JSON, nullable=False, default=list)
    payments = Column(JSON, nullable=True)
    # Nullable for rows created before discounts existed
    parts_discount = Column(Float, nullable=True)
    labor_discount = Column(Float, nullable=True)
    discount_reason = Column(String, nullable=True)
    estimate_date = Column(Date, default=date.today, nullable=False)
    created_date = Column(DateTime, default=_utc_now_naive, nullable=False)

    def to_ledger(self) -> Estimate:
        """Convert the stored row into the ledger's Estimate."""
        return Estimate(
            id=str(self.id),
            customer_phone=self.customer_phone or "",
            status=self.status,
            parts=[Part.from_dict(p) for p in self.parts or []],
            labor=[Labor.from_dict(l) for l in self.labor or []],
            parts_discount_percent=self.parts_discount,
            labor_discount_percent=self.labor_discount,
            payments=payments_from_list(self.payments),
            estimate_number=self.estimate_number or "",
            customer_name=self.customer_name or "",
            customer_email=self.customer_email or "",
            date=self.estimate_date.isoformat() if self.estimate_date else "",
            services=self.services or "",
        )


# Pydantic models for request validation
class PartLine(BaseModel):
    name: str = ""
    price: float = Field(ge=0)
    quantity: float = Field(gt=0)


class LaborLine(BaseModel):
    description: str = ""
    rate: float = Field(ge=0)
    hours: float = Field(ge=0)


class PaymentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    amount: float
    method: Literal["CARD", "CASH", "TRANSFER"] = "CASH"
    payment_date: Optional[date] = Field(default=None, alias="date")
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v):
        if v <= 0:
            raise ValueError("amount must be greater than 0")
        return v


class EstimateCreate(BaseModel):
    """Estimate creation request"""
    model_config = ConfigDict(populate_by_name=True)
    customer_name: str
    customer_phone: str = ""
    customer_email: str = ""
    services: str = ""
    status: EstimateStatus = EstimateStatus.DRAFT
    parts: list[PartLine] = Field(default_factory=list)
    labor: list[LaborLine] = Field(default_factory=list)
    payments: list[PaymentCreate] = Field(default_factory=list)
    parts_discount: Optional[float] = Field(default=None, ge=0, le=100)
    labor_discount: Optional[float] = Field(default=None, ge=0, le=100)
    discount_reason: Optional[str] = None
    estimate_date: Optional[date] = Field(default=None, alias="date")

    @field_validator("customer_name")
    @classmethod
    def name_required(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError("customer_name is required")
        return v.strip()

    @field_validator("customer_phone")
    @classmethod
    def strip_phone(cls, v):
        return (v or "").strip()


class EstimateRequest(BaseModel):
    """Wrapper for API contract - POST body"""
    estimate: EstimateCreate


class EstimateStatusUpdate(BaseModel):
    status: EstimateStatus


class EstimateTotalsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    parts_subtotal: float
    labor_subtotal: float
    parts_discount_amount: float
    labor_discount_amount: float
    total: float
    total_paid: float
    balance_due: float
