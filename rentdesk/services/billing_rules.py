"""
Pure billing rules shared by the services.

Nothing here touches the database or the clock; callers pass "today" in.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from ..database.models import BillStatus, LateFeeType


CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value) -> Decimal:
    """Coerce a number to a Decimal rounded to cents."""
    if value is None:
        return ZERO.quantize(CENT)
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def derive_status(paid_amount, total_amount, today: date, due_date: date) -> str:
    """
    Status of an invoice or light bill.

    Depends only on the current amounts and dates, never on how the payments
    arrived:
        paid            paid >= total
        partially_paid  0 < paid < total (also after the due date)
        overdue         nothing paid and today is past the due date
        unpaid          nothing paid, not yet past due
    """
    paid = Decimal(paid_amount or 0)
    total = Decimal(total_amount or 0)
    if paid >= total:
        return BillStatus.paid.value
    if paid > 0:
        return BillStatus.partially_paid.value
    if today > due_date:
        return BillStatus.overdue.value
    return BillStatus.unpaid.value


def light_bill_total(units_consumed, rate_per_unit, fixed_charge=0, tax=0) -> Decimal:
    """units * rate + fixed charge + tax."""
    units = Decimal(str(units_consumed))
    rate = Decimal(str(rate_per_unit))
    return to_money(units * rate + Decimal(str(fixed_charge or 0)) + Decimal(str(tax or 0)))


def month_period(month: int, year: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def due_date_for(month: int, year: int, billing_day: int) -> date:
    """Billing day of the month, clamped to the month's last day (31 -> Feb 28)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(max(billing_day, 1), last_day))


def periods_overlap(
    start_a: date, end_a: Optional[date], start_b: date, end_b: Optional[date]
) -> bool:
    """
    Inclusive overlap test; a missing end date means the lease never ends.

    A lease ending on the day another starts counts as overlapping.
    """
    a_before_b_ends = end_b is None or start_a <= end_b
    b_before_a_ends = end_a is None or start_b <= end_a
    return a_before_b_ends and b_before_a_ends


@dataclass(frozen=True)
class LateFeeConfig:
    """Late fee policy, read once from Settings and passed to the services."""

    type: str = LateFeeType.per_day.value
    grace_days: int = 3
    per_day_amount: Decimal = Decimal("5")
    percentage: Decimal = Decimal("1")

    @classmethod
    def from_settings(cls, settings) -> "LateFeeConfig":
        return cls(
            type=settings.late_fee_type,
            grace_days=int(settings.grace_days or 0),
            per_day_amount=Decimal(settings.per_day_amount or 0),
            percentage=Decimal(settings.percentage or 0),
        )


def compute_late_fee(config: LateFeeConfig, base_amount, due_date: date, today: date) -> Decimal:
    """
    Late fee for an invoice as of ``today``.

    No fee until more than ``grace_days`` have passed since the due date.
    per_day charges each day beyond the grace period; percentage charges a
    flat share of the base amount.
    """
    diff_days = (today - due_date).days
    if diff_days <= config.grace_days:
        return to_money(0)

    effective_days = diff_days - config.grace_days
    if config.type == LateFeeType.per_day.value:
        return to_money(Decimal(effective_days) * Decimal(config.per_day_amount))
    if config.type == LateFeeType.percentage.value:
        return to_money(Decimal(base_amount) * Decimal(config.percentage) / Decimal(100))
    return to_money(0)


@dataclass
class BatchResult:
    """Outcome of a batch job. Failed items are reported, not raised."""

    processed: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    items: list = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)

    def record_error(self, entity_id, error: Exception):
        self.failed += 1
        self.errors.append({"id": entity_id, "error": str(error)})

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": self.errors,
        }
