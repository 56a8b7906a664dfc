"""
Late fee recalculation.

Recomputes the fee, total and status of every open invoice from the
current date and the late fee policy. Running it twice on the same day
changes nothing the second time.
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..database.models import BillStatus, Invoice
from .billing_rules import BatchResult, LateFeeConfig, compute_late_fee, to_money
from .notification import NotificationService
from .settings import SettingsService

logger = logging.getLogger(__name__)


# overdue invoices keep the fee they had when they went overdue
OPEN_STATUSES = (
    BillStatus.unpaid.value,
    BillStatus.partially_paid.value,
)


class LateFeeService:

    def __init__(
        self, db: Session, clock: Clock = None,
        notifier: Optional[NotificationService] = None,
    ):
        self.db = db
        self.clock = clock or system_clock
        self.notifier = notifier or NotificationService(db)

    def recalculate_late_fees(self, config: Optional[LateFeeConfig] = None) -> BatchResult:
        """
        Update late fees for all unpaid and partially paid invoices.

        Without ``config`` the policy is read from Settings, which must exist.
        An invoice is written only when its fee, total or status changes.
        """
        if config is None:
            config = SettingsService(self.db).require_late_fee_config()

        today = self.clock.today()
        result = BatchResult()

        invoice_ids = [
            row.id for row in self.db.query(Invoice.id).filter(
                Invoice.status.in_(OPEN_STATUSES)
            ).order_by(Invoice.id).all()
        ]

        for invoice_id in invoice_ids:
            result.processed += 1
            try:
                invoice, became_overdue = self._recalculate_invoice(invoice_id, config, today)
            except SQLAlchemyError as e:
                self.db.rollback()
                result.record_error(invoice_id, e)
                logger.error(f"Late fee update failed for invoice {invoice_id}: {e}")
                continue

            if invoice is None:
                continue
            result.updated += 1
            result.items.append(invoice)

            if became_overdue:
                self.notifier.notify("overdue", {
                    "message": (
                        f"Invoice #{invoice.id} is overdue. "
                        f"Amount due: {invoice.remaining_amount}"
                    ),
                    "entity_type": "Invoice",
                    "entity_id": invoice.id,
                    "tenant_id": invoice.tenant_id,
                    "amount": invoice.total_amount,
                })

        logger.info(
            f"Late fee recalculation: processed={result.processed} "
            f"updated={result.updated} failed={result.failed}"
        )
        return result

    def _recalculate_invoice(self, invoice_id: int, config: LateFeeConfig, today):
        invoice = self.db.get(Invoice, invoice_id)
        base = Decimal(invoice.base_amount)
        paid = Decimal(invoice.paid_amount or 0)

        late_fee = compute_late_fee(config, base, invoice.due_date, today)
        # a policy change may shrink the fee, but never below what was already paid
        if base + late_fee < paid:
            late_fee = to_money(paid - base)
        total = to_money(base + late_fee)
        status = _recalculated_status(invoice.status, paid, total, today, invoice.due_date)

        unchanged = (
            Decimal(invoice.late_fee or 0) == late_fee
            and Decimal(invoice.total_amount) == total
            and invoice.status == status
        )
        if unchanged:
            return None, False

        became_overdue = (
            status == BillStatus.overdue.value and invoice.status != BillStatus.overdue.value
        )
        invoice.late_fee = late_fee
        invoice.total_amount = total
        invoice.status = status
        self.db.commit()
        return invoice, became_overdue


def _recalculated_status(current: str, paid: Decimal, total: Decimal, today, due_date) -> str:
    """Before the due date an unpaid or partially paid invoice keeps its status."""
    if paid >= total:
        return BillStatus.paid.value
    if today > due_date:
        if paid > 0:
            return BillStatus.partially_paid.value
        return BillStatus.overdue.value
    return current
