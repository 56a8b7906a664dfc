"""
Tenant model - a person renting a room.
"""

from enum import Enum as PyEnum
from sqlalchemy import Column, String, Text, Index

from ..base import BaseModel


class TenantStatus(PyEnum):
    active = "active"
    inactive = "inactive"


class Tenant(BaseModel):
    """Tenant, identified by phone number. Email is optional but unique."""

    __tablename__ = 'tenants'

    full_name = Column(String(200), nullable=False)
    phone = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True)

    # Identity document (Aadhaar, PAN, passport, ...)
    id_proof_type = Column(String(50), nullable=True)
    id_proof_number = Column(String(100), nullable=True)

    address = Column(Text, nullable=True)
    emergency_contact_name = Column(String(200), nullable=True)
    emergency_contact_phone = Column(String(20), nullable=True)

    status = Column(String(20), default=TenantStatus.active.value, nullable=False)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index('ix_tenants_status', 'status'),
    )

    def __repr__(self):
        return f"<Tenant(id={self.id}, full_name='{self.full_name}', phone='{self.phone}')>"
