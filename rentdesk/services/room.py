"""
Room service - plain record management for rooms.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..database.models import Room, RoomStatus, Lease
from .notification import NotificationService
from .billing_rules import to_money

logger = logging.getLogger(__name__)


class RoomService:

    def __init__(self, db: Session, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService(db)

    def get_room(self, room_id: int) -> Room:
        room = self.db.get(Room, room_id)
        if not room:
            raise NotFoundError("Room", room_id)
        return room

    def list_rooms(self, status: Optional[str] = None) -> List[Room]:
        q = self.db.query(Room)
        if status:
            q = q.filter(Room.status == status)
        return q.order_by(Room.name).all()

    def list_room_leases(self, room_id: int) -> List[Lease]:
        self.get_room(room_id)
        return self.db.query(Lease).filter(
            Lease.room_id == room_id
        ).order_by(Lease.start_date.desc()).all()

    def create_room(
        self, name: str, default_rent, default_deposit,
        floor: str = None, capacity: int = 1,
        status: str = RoomStatus.vacant.value, notes: str = None,
    ) -> Room:
        if not name:
            raise InvalidInputError("Room name is required", field="name")
        self._validate_amounts(default_rent, default_deposit)
        self._validate_status(status)
        if capacity is None or capacity < 1:
            raise InvalidInputError("Capacity must be at least 1", field="capacity")
        if self._name_taken(name):
            raise ConflictError("Room with this name already exists")

        room = Room(
            name=name,
            floor=floor,
            capacity=capacity,
            default_rent=to_money(default_rent),
            default_deposit=to_money(default_deposit),
            status=status,
            notes=notes,
        )
        self.db.add(room)
        self.db.commit()
        logger.info(f"Room created: {room.name}")
        return room

    def update_room(self, room_id: int, changes: dict) -> Room:
        """Update the provided fields only."""
        room = self.get_room(room_id)

        if "name" in changes:
            if not changes["name"]:
                raise InvalidInputError("Room name cannot be empty", field="name")
            if self._name_taken(changes["name"], exclude_id=room.id):
                raise ConflictError("Room with this name already exists")
        if "default_rent" in changes or "default_deposit" in changes:
            self._validate_amounts(
                changes.get("default_rent", room.default_rent),
                changes.get("default_deposit", room.default_deposit),
            )
        if "status" in changes:
            self._validate_status(changes["status"])

        entering_maintenance = (
            changes.get("status") == RoomStatus.maintenance.value
            and room.status != RoomStatus.maintenance.value
        )

        for field in ("name", "floor", "capacity", "status", "notes"):
            if field in changes:
                setattr(room, field, changes[field])
        for field in ("default_rent", "default_deposit"):
            if field in changes:
                setattr(room, field, to_money(changes[field]))

        self.db.commit()

        if entering_maintenance:
            self.notifier.notify("maintenance", {
                "message": f"Room {room.name} requires maintenance. {room.notes or ''}".strip(),
                "entity_type": "Room",
                "entity_id": room.id,
            })
        return room

    def _name_taken(self, name: str, exclude_id: int = None) -> bool:
        q = self.db.query(Room).filter(Room.name == name)
        if exclude_id is not None:
            q = q.filter(Room.id != exclude_id)
        return q.first() is not None

    @staticmethod
    def _validate_amounts(default_rent, default_deposit):
        if default_rent is None or Decimal(str(default_rent)) <= 0:
            raise InvalidInputError("Default rent must be a positive number", field="default_rent")
        if default_deposit is None or Decimal(str(default_deposit)) < 0:
            raise InvalidInputError(
                "Default deposit must be zero or a positive number", field="default_deposit"
            )

    @staticmethod
    def _validate_status(status: str):
        valid = [s.value for s in RoomStatus]
        if status not in valid:
            raise InvalidInputError(f"Room status must be one of: {', '.join(valid)}", field="status")
