"""
Lease lifecycle service.

Creates and ends leases, keeping the room's status and current lease in
step. A room holds at most one upcoming/active lease for any given day.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError, StorageError
from ..database.models import (
    Lease, LeaseStatus, BLOCKING_LEASE_STATUSES, Room, RoomStatus, Tenant
)
from .billing_rules import to_money

logger = logging.getLogger(__name__)


class LeaseService:

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self.clock = clock or system_clock

    # ==================== QUERIES ====================

    def get_lease(self, lease_id: int) -> Lease:
        lease = self.db.get(Lease, lease_id)
        if not lease:
            raise NotFoundError("Lease", lease_id)
        return lease

    def list_leases(
        self, status: Optional[str] = None,
        room_id: Optional[int] = None, tenant_id: Optional[int] = None,
    ) -> List[Lease]:
        q = self.db.query(Lease)
        if status:
            q = q.filter(Lease.status == status)
        if room_id:
            q = q.filter(Lease.room_id == room_id)
        if tenant_id:
            q = q.filter(Lease.tenant_id == tenant_id)
        return q.order_by(Lease.start_date.desc(), Lease.id.desc()).all()

    def find_overlapping_lease(
        self, room_id: int, start_date: date, end_date: Optional[date]
    ) -> Optional[Lease]:
        """
        First upcoming/active lease on the room whose period touches
        [start_date, end_date]. Missing end dates are unbounded.
        """
        q = self.db.query(Lease).filter(
            Lease.room_id == room_id,
            Lease.status.in_(BLOCKING_LEASE_STATUSES),
            or_(Lease.end_date.is_(None), Lease.end_date >= start_date),
        )
        if end_date is not None:
            q = q.filter(Lease.start_date <= end_date)
        return q.first()

    # ==================== LIFECYCLE ====================

    def create_lease(
        self, tenant_id: int, room_id: int, start_date: date,
        rent_per_month, deposit_agreed,
        end_date: Optional[date] = None,
        billing_day: Optional[int] = None,
        status: str = LeaseStatus.active.value,
        deposit_paid=0,
        notes: str = None,
    ) -> Lease:
        """
        Create a lease and mark the room occupied.

        Raises:
            InvalidInputError: bad amounts, billing day, status or dates.
            NotFoundError: tenant or room does not exist.
            ConflictError: room occupied or another lease overlaps.
        """
        if start_date is None:
            raise InvalidInputError("Start date is required", field="start_date")
        if end_date is not None and end_date < start_date:
            raise InvalidInputError("End date cannot be before start date", field="end_date")
        if rent_per_month is None or Decimal(str(rent_per_month)) <= 0:
            raise InvalidInputError("Rent per month must be a positive number", field="rent_per_month")
        if deposit_agreed is None or Decimal(str(deposit_agreed)) < 0:
            raise InvalidInputError(
                "Deposit agreed must be zero or a positive number", field="deposit_agreed"
            )
        if deposit_paid is None or Decimal(str(deposit_paid)) < 0:
            raise InvalidInputError("Deposit paid must be zero or a positive number", field="deposit_paid")
        if billing_day is None:
            billing_day = 1
        if not 1 <= billing_day <= 31:
            raise InvalidInputError("Billing day must be between 1 and 31", field="billing_day")
        if status not in BLOCKING_LEASE_STATUSES:
            raise InvalidInputError("New leases must be upcoming or active", field="status")

        tenant = self.db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant", tenant_id)

        room = self.db.get(Room, room_id)
        if not room:
            raise NotFoundError("Room", room_id)

        if room.status == RoomStatus.occupied.value:
            raise ConflictError("Room is already occupied")

        existing = self.find_overlapping_lease(room_id, start_date, end_date)
        if existing:
            raise ConflictError("Room already has an active or upcoming lease during this period")

        try:
            lease = Lease(
                tenant_id=tenant_id,
                room_id=room_id,
                start_date=start_date,
                end_date=end_date,
                rent_per_month=to_money(rent_per_month),
                deposit_agreed=to_money(deposit_agreed),
                deposit_paid=to_money(deposit_paid),
                deposit_refunded=to_money(0),
                billing_day=billing_day,
                status=status,
                notes=notes,
            )
            self.db.add(lease)
            self.db.flush()

            room.status = RoomStatus.occupied.value
            room.current_lease_id = lease.id
            room.current_occupancy = 1
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Lease creation failed for room {room_id}: {e}")
            raise StorageError("Could not save lease") from e

        logger.info(f"Lease {lease.id} created: tenant {tenant_id} in room {room.name}")
        return lease

    def end_lease(
        self, lease_id: int, end_date: Optional[date] = None, notes: Optional[str] = None
    ) -> Lease:
        """
        End a lease and free its room.

        Ending a lease that is not active is allowed; the room is still
        set to vacant.
        """
        lease = self.get_lease(lease_id)
        if lease.status != LeaseStatus.active.value:
            logger.warning(f"Ending lease {lease.id} which is '{lease.status}', not active")

        try:
            lease.end_date = end_date or self.clock.today()
            lease.status = LeaseStatus.ended.value
            if notes is not None:
                lease.notes = notes

            room = self.db.get(Room, lease.room_id)
            if room:
                room.status = RoomStatus.vacant.value
                room.current_lease_id = None
                room.current_occupancy = 0
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Ending lease {lease_id} failed: {e}")
            raise StorageError("Could not end lease") from e

        logger.info(f"Lease {lease.id} ended on {lease.end_date}")
        return lease
