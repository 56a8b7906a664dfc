"""
Room model - a rentable unit.
"""

from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Integer, Text, Numeric, ForeignKey, Index, CheckConstraint
)

from ..base import BaseModel


class RoomStatus(PyEnum):
    vacant = "vacant"
    occupied = "occupied"
    partially_occupied = "partially_occupied"
    maintenance = "maintenance"


class Room(BaseModel):
    """
    A room that can be leased to one tenant at a time.

    ``status`` is "occupied" exactly while ``current_lease_id`` points at an
    active lease. Both are maintained by the lease service.
    """

    __tablename__ = 'rooms'

    name = Column(String(100), unique=True, nullable=False, index=True)  # "Room 101"
    floor = Column(String(50), nullable=True)

    capacity = Column(Integer, default=1, nullable=False)
    current_occupancy = Column(Integer, default=0, nullable=False)

    default_rent = Column(Numeric(12, 2), nullable=False)
    default_deposit = Column(Numeric(12, 2), nullable=False)

    status = Column(String(20), default=RoomStatus.vacant.value, nullable=False)
    current_lease_id = Column(
        Integer,
        ForeignKey('leases.id', use_alter=True, name='fk_rooms_current_lease_id', ondelete='SET NULL'),
        nullable=True,
    )

    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index('ix_rooms_status', 'status'),
        CheckConstraint('capacity > 0', name='ck_room_capacity_positive'),
        CheckConstraint('default_rent > 0', name='ck_room_default_rent_positive'),
        CheckConstraint('default_deposit >= 0', name='ck_room_default_deposit_non_negative'),
    )

    def __repr__(self):
        return f"<Room(id={self.id}, name='{self.name}', status='{self.status}')>"
