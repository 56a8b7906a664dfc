"""
Notification model - in-app messages for administrators.
"""

from enum import Enum as PyEnum
from sqlalchemy import Column, String, Integer, Text, Boolean, JSON, Index

from ..base import BaseModel


class NotificationKind(PyEnum):
    payment_received = "payment_received"
    invoice_generated = "invoice_generated"
    overdue = "overdue"
    maintenance = "maintenance"


class NotificationPriority(PyEnum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class Notification(BaseModel):

    __tablename__ = 'notifications'

    kind = Column(String(30), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), default=NotificationPriority.medium.value, nullable=False)

    # "Invoice", "LightBill", "Room", ...
    related_entity_type = Column(String(30), nullable=True)
    related_entity_id = Column(Integer, nullable=True)
    payload = Column(JSON, default=dict, nullable=False)

    is_read = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index('ix_notifications_is_read', 'is_read', 'created_at'),
    )
