"""
Lease model - binds a tenant to a room for a period.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Integer, Text, Numeric, Date, ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from ..base import BaseModel


class LeaseStatus(PyEnum):
    upcoming = "upcoming"
    active = "active"
    ended = "ended"
    cancelled = "cancelled"


# Leases in these states block the room for their whole period
BLOCKING_LEASE_STATUSES = (LeaseStatus.upcoming.value, LeaseStatus.active.value)


class Lease(BaseModel):
    """
    Rental agreement.

    Open-ended leases (no end_date) extend indefinitely. Once ended a lease
    never becomes active again.
    """

    __tablename__ = 'leases'

    tenant_id = Column(Integer, ForeignKey('tenants.id'), nullable=False)
    room_id = Column(Integer, ForeignKey('rooms.id'), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)

    rent_per_month = Column(Numeric(12, 2), nullable=False)
    deposit_agreed = Column(Numeric(12, 2), nullable=False)
    deposit_paid = Column(Numeric(12, 2), default=0, nullable=False)
    deposit_refunded = Column(Numeric(12, 2), default=0, nullable=False)

    billing_day = Column(Integer, default=1, nullable=False)  # day of month

    status = Column(String(20), default=LeaseStatus.active.value, nullable=False)
    notes = Column(Text, nullable=True)

    tenant = relationship("Tenant", foreign_keys=[tenant_id])
    room = relationship("Room", foreign_keys=[room_id])

    __table_args__ = (
        Index('ix_leases_room_status', 'room_id', 'status'),
        Index('ix_leases_tenant_status', 'tenant_id', 'status'),
        CheckConstraint('rent_per_month > 0', name='ck_lease_rent_positive'),
        CheckConstraint('deposit_agreed >= 0', name='ck_lease_deposit_agreed_non_negative'),
        CheckConstraint('deposit_paid >= 0', name='ck_lease_deposit_paid_non_negative'),
        CheckConstraint('deposit_refunded >= 0', name='ck_lease_deposit_refunded_non_negative'),
        CheckConstraint('billing_day >= 1 AND billing_day <= 31', name='ck_lease_billing_day_range'),
    )

    def __repr__(self):
        return f"<Lease(id={self.id}, room_id={self.room_id}, tenant_id={self.tenant_id}, status='{self.status}')>"
