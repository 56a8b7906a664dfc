"""
Lease schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class LeaseCreate(BaseModel):
    tenant_id: int
    room_id: int
    start_date: date
    end_date: Optional[date] = None
    rent_per_month: Decimal
    deposit_agreed: Decimal
    deposit_paid: Decimal = Decimal("0")
    billing_day: Optional[int] = Field(None, ge=1, le=31)
    status: str = "active"
    notes: Optional[str] = None


class LeaseEnd(BaseModel):
    end_date: Optional[date] = None
    notes: Optional[str] = None


class LeaseResponse(BaseModel):
    id: int
    tenant_id: int
    room_id: int
    start_date: date
    end_date: Optional[date] = None
    rent_per_month: float
    deposit_agreed: float
    deposit_paid: float
    deposit_refunded: float
    billing_day: int
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LeaseListResponse(BaseModel):
    data: List[LeaseResponse]
    total: int
