"""
Light (electricity) bill service.

Bills are entered by hand from meter readings. One bill per
(room, tenant, lease, period); the database enforces it as well.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.exceptions import (
    ConflictError, InvalidInputError, NotFoundError, StorageError
)
from ..database.models import (
    BillStatus, BLOCKING_LEASE_STATUSES, Invoice, Lease, LightBill, Room, Tenant
)
from .billing_rules import derive_status, light_bill_total, to_money

logger = logging.getLogger(__name__)


DUPLICATE_MESSAGE = "Light bill for this period already exists for this room, tenant, and lease"


@dataclass
class LightBillInput:
    """Fields for a new bill. Missing references and dates may be filled in."""

    room_id: Optional[int] = None
    tenant_id: Optional[int] = None
    lease_id: Optional[int] = None
    period_from: Optional[date] = None
    period_to: Optional[date] = None
    units_consumed: Optional[Decimal] = None
    rate_per_unit: Optional[Decimal] = None
    fixed_charge: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None


class LightBillService:

    _AMOUNT_FIELDS = ("units_consumed", "rate_per_unit", "fixed_charge", "tax")
    _UPDATABLE = (
        "period_from", "period_to", "units_consumed", "rate_per_unit",
        "fixed_charge", "tax", "issue_date", "due_date", "notes",
    )

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self.clock = clock or system_clock

    # ==================== QUERIES ====================

    def get_light_bill(self, bill_id: int) -> LightBill:
        bill = self.db.get(LightBill, bill_id)
        if not bill:
            raise NotFoundError("Light bill", bill_id)
        return bill

    def list_light_bills(
        self, status: Optional[str] = None, tenant_id: Optional[int] = None
    ) -> List[LightBill]:
        q = self.db.query(LightBill)
        if status:
            valid = [s.value for s in BillStatus]
            if status not in valid:
                raise InvalidInputError(
                    f"Invalid status. Valid statuses are: {', '.join(valid)}", field="status"
                )
            q = q.filter(LightBill.status == status)
        if tenant_id:
            q = q.filter(LightBill.tenant_id == tenant_id)
        return q.order_by(LightBill.period_from.desc(), LightBill.id).all()

    # ==================== CREATE ====================

    def create_light_bill(self, data: LightBillInput) -> LightBill:
        """
        Create a bill.

        When only the room is given, tenant and lease come from the room's
        active or upcoming lease. When period or dates are missing they are
        copied from the latest invoice of that tenant and lease.
        """
        self._resolve_references(data)
        self._backfill_dates(data)

        if not data.room_id or not data.tenant_id or not data.lease_id:
            raise InvalidInputError("Room, tenant, and lease are required")
        if not data.period_from or not data.period_to:
            raise InvalidInputError("Period from and period to dates are required")
        self._validate_period(data.period_from, data.period_to)
        self._validate_amounts(data.units_consumed, data.rate_per_unit, data.fixed_charge, data.tax)
        if not data.issue_date or not data.due_date:
            raise InvalidInputError("Issue date and due date are required")
        self._validate_issue_due(data.issue_date, data.due_date)

        if not self.db.get(Room, data.room_id):
            raise NotFoundError("Room", data.room_id)
        if not self.db.get(Tenant, data.tenant_id):
            raise NotFoundError("Tenant", data.tenant_id)
        if not self.db.get(Lease, data.lease_id):
            raise NotFoundError("Lease", data.lease_id)

        if self._find_duplicate(
            data.room_id, data.tenant_id, data.lease_id, data.period_from, data.period_to
        ):
            raise ConflictError(DUPLICATE_MESSAGE)

        total = light_bill_total(data.units_consumed, data.rate_per_unit, data.fixed_charge, data.tax)
        bill = LightBill(
            room_id=data.room_id,
            tenant_id=data.tenant_id,
            lease_id=data.lease_id,
            period_from=data.period_from,
            period_to=data.period_to,
            units_consumed=Decimal(str(data.units_consumed)),
            rate_per_unit=Decimal(str(data.rate_per_unit)),
            fixed_charge=to_money(data.fixed_charge),
            tax=to_money(data.tax),
            total_amount=total,
            paid_amount=to_money(0),
            issue_date=data.issue_date,
            due_date=data.due_date,
            status=BillStatus.unpaid.value,
            notes=data.notes,
        )
        self.db.add(bill)
        self._commit()
        logger.info(f"Light bill {bill.id} created for room {bill.room_id}: {total}")
        return bill

    def _resolve_references(self, data: LightBillInput):
        if not data.room_id or (data.tenant_id and data.lease_id):
            return
        lease = self.db.query(Lease).filter(
            Lease.room_id == data.room_id,
            Lease.status.in_(BLOCKING_LEASE_STATUSES),
        ).order_by(Lease.id.desc()).first()
        if lease:
            data.tenant_id = data.tenant_id or lease.tenant_id
            data.lease_id = data.lease_id or lease.id

    def _backfill_dates(self, data: LightBillInput):
        if not data.tenant_id or not data.lease_id:
            return
        if data.period_from and data.period_to and data.issue_date and data.due_date:
            return
        latest = self.db.query(Invoice).filter(
            Invoice.tenant_id == data.tenant_id,
            Invoice.lease_id == data.lease_id,
        ).order_by(Invoice.created_at.desc(), Invoice.id.desc()).first()
        if not latest:
            return
        data.period_from = data.period_from or latest.period_from
        data.period_to = data.period_to or latest.period_to
        data.issue_date = data.issue_date or latest.issue_date
        data.due_date = data.due_date or latest.due_date

    # ==================== UPDATE ====================

    def update_light_bill(self, bill_id: int, changes) -> LightBill:
        """
        Apply a partial update.

        ``changes`` is an update schema; only the fields the caller actually
        sent (``model_fields_set``) are applied. Sending ``notes: null``
        clears the notes; sending null for a required field is rejected.
        """
        bill = self.get_light_bill(bill_id)
        provided = {name: getattr(changes, name) for name in changes.model_fields_set if name in self._UPDATABLE}

        for name, value in provided.items():
            if value is None and name != "notes":
                raise InvalidInputError(f"{name} cannot be null", field=name)

        merged = {name: provided.get(name, getattr(bill, name)) for name in self._UPDATABLE}

        if "period_from" in provided or "period_to" in provided:
            self._validate_period(merged["period_from"], merged["period_to"])
        if "issue_date" in provided or "due_date" in provided:
            self._validate_issue_due(merged["issue_date"], merged["due_date"])
        amounts_changed = any(name in provided for name in self._AMOUNT_FIELDS)
        if amounts_changed:
            self._validate_amounts(
                merged["units_consumed"], merged["rate_per_unit"], merged["fixed_charge"], merged["tax"]
            )

        if "period_from" in provided or "period_to" in provided:
            duplicate = self._find_duplicate(
                bill.room_id, bill.tenant_id, bill.lease_id,
                merged["period_from"], merged["period_to"], exclude_id=bill.id,
            )
            if duplicate:
                raise ConflictError(DUPLICATE_MESSAGE)

        new_total = Decimal(bill.total_amount)
        if amounts_changed:
            new_total = light_bill_total(
                merged["units_consumed"], merged["rate_per_unit"], merged["fixed_charge"], merged["tax"]
            )
            if new_total < Decimal(bill.paid_amount or 0):
                raise ConflictError(
                    f"New total {new_total} is below the amount already paid ({bill.paid_amount})"
                )

        for name, value in provided.items():
            if name in ("fixed_charge", "tax"):
                value = to_money(value)
            elif name in ("units_consumed", "rate_per_unit"):
                value = Decimal(str(value))
            setattr(bill, name, value)

        if amounts_changed:
            bill.total_amount = new_total
        bill.status = derive_status(bill.paid_amount, bill.total_amount, self.clock.today(), bill.due_date)

        self._commit()
        return bill

    # ==================== DELETE ====================

    def delete_light_bill(self, bill_id: int) -> None:
        """Delete a bill. Any recorded paid amount is discarded with it."""
        bill = self.get_light_bill(bill_id)
        if Decimal(bill.paid_amount or 0) > 0:
            logger.warning(f"Deleting light bill {bill.id} with {bill.paid_amount} already paid")
        self.db.delete(bill)
        self._commit()

    # ==================== HELPERS ====================

    def _find_duplicate(
        self, room_id, tenant_id, lease_id, period_from, period_to, exclude_id: int = None
    ) -> Optional[LightBill]:
        q = self.db.query(LightBill).filter(
            LightBill.room_id == room_id,
            LightBill.tenant_id == tenant_id,
            LightBill.lease_id == lease_id,
            LightBill.period_from == period_from,
            LightBill.period_to == period_to,
        )
        if exclude_id is not None:
            q = q.filter(LightBill.id != exclude_id)
        return q.first()

    def _commit(self):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(DUPLICATE_MESSAGE) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Light bill write failed: {e}")
            raise StorageError("Could not save light bill") from e

    @staticmethod
    def _validate_period(period_from: date, period_to: date):
        if period_from >= period_to:
            raise InvalidInputError("Period from date must be before period to date", field="period_from")

    @staticmethod
    def _validate_issue_due(issue_date: date, due_date: date):
        if issue_date >= due_date:
            raise InvalidInputError("Issue date must be before due date", field="issue_date")

    @staticmethod
    def _validate_amounts(units, rate, fixed_charge, tax):
        if units is None or Decimal(str(units)) <= 0:
            raise InvalidInputError("Units consumed must be a positive number", field="units_consumed")
        if rate is None or Decimal(str(rate)) <= 0:
            raise InvalidInputError("Rate per unit must be a positive number", field="rate_per_unit")
        if fixed_charge is None or Decimal(str(fixed_charge)) < 0:
            raise InvalidInputError("Fixed charge must be zero or a positive number", field="fixed_charge")
        if tax is None or Decimal(str(tax)) < 0:
            raise InvalidInputError("Tax must be zero or a positive number", field="tax")
