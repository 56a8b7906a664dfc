"""
Business settings schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


class SettingsUpdate(BaseModel):
    """Only the fields sent are changed."""

    currency: Optional[str] = None
    default_billing_day: Optional[int] = None
    late_fee_type: Optional[str] = None
    grace_days: Optional[int] = None
    per_day_amount: Optional[Decimal] = None
    percentage: Optional[Decimal] = None


class SettingsResponse(BaseModel):
    currency: str
    default_billing_day: int
    late_fee_type: str
    grace_days: int
    per_day_amount: float
    percentage: float
    updated_at: datetime

    model_config = {"from_attributes": True}
