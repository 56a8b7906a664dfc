"""
Business settings - a single row holding currency and late fee policy.
"""

from enum import Enum as PyEnum
from sqlalchemy import Column, String, Integer, Numeric, CheckConstraint

from ..base import BaseModel


SETTINGS_ID = 1


class LateFeeType(PyEnum):
    per_day = "per_day"
    percentage = "percentage"


class Settings(BaseModel):
    """Singleton: the check constraint pins the only row to id = 1."""

    __tablename__ = 'settings'

    currency = Column(String(10), default="INR", nullable=False)
    default_billing_day = Column(Integer, default=1, nullable=False)

    # Late fee policy
    late_fee_type = Column(String(20), default=LateFeeType.per_day.value, nullable=False)
    grace_days = Column(Integer, default=3, nullable=False)
    per_day_amount = Column(Numeric(12, 2), default=5, nullable=False)
    percentage = Column(Numeric(6, 2), default=1, nullable=False)

    __table_args__ = (
        CheckConstraint(f'id = {SETTINGS_ID}', name='ck_settings_singleton'),
        CheckConstraint('grace_days >= 0', name='ck_settings_grace_non_negative'),
        CheckConstraint('per_day_amount >= 0', name='ck_settings_per_day_non_negative'),
        CheckConstraint('percentage >= 0', name='ck_settings_percentage_non_negative'),
        CheckConstraint(
            'default_billing_day >= 1 AND default_billing_day <= 31',
            name='ck_settings_billing_day_range'
        ),
    )
