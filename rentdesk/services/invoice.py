"""
Invoice service - monthly rent invoice generation and queries.

Generation is safe to repeat and to run concurrently: the existence check
skips leases already billed for the period, and the unique constraint on
(lease_id, period_from, period_to) rejects whatever slips past it.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.exceptions import InvalidInputError, NotFoundError
from ..database.models import Invoice, Lease, LeaseStatus, BillStatus
from .billing_rules import BatchResult, due_date_for, month_period, to_money
from .notification import NotificationService

logger = logging.getLogger(__name__)


class InvoiceService:

    def __init__(
        self, db: Session, clock: Clock = None,
        notifier: Optional[NotificationService] = None,
    ):
        self.db = db
        self.clock = clock or system_clock
        self.notifier = notifier or NotificationService(db)

    # ==================== GENERATION ====================

    def generate_monthly_invoices(
        self, month: int, year: int, default_billing_day: int = 1
    ) -> BatchResult:
        """
        Create one invoice per active lease for the given month.

        Leases that already have an invoice for the period are skipped. Each
        invoice is committed on its own so one failing lease does not stop
        the rest.
        """
        if not 1 <= month <= 12:
            raise InvalidInputError("Month must be between 1 and 12", field="month")

        period_from, period_to = month_period(month, year)
        issue_date = self.clock.today()
        result = BatchResult()

        lease_ids = [
            row.id for row in self.db.query(Lease.id).filter(
                Lease.status == LeaseStatus.active.value
            ).order_by(Lease.id).all()
        ]
        logger.info(f"Generating invoices for {year}-{month:02d}: {len(lease_ids)} active leases")

        for lease_id in lease_ids:
            result.processed += 1
            try:
                invoice = self._create_invoice_for_lease(
                    lease_id, period_from, period_to, month, year,
                    issue_date, default_billing_day,
                )
            except IntegrityError:
                # another run created it between our check and insert
                self.db.rollback()
                result.skipped += 1
                logger.info(f"Invoice for lease {lease_id} created concurrently, skipping")
                continue
            except SQLAlchemyError as e:
                self.db.rollback()
                result.record_error(lease_id, e)
                logger.error(f"Invoice generation failed for lease {lease_id}: {e}")
                continue

            if invoice is None:
                result.skipped += 1
                continue

            result.created += 1
            result.items.append(invoice)
            self.notifier.notify("invoice_generated", {
                "message": (
                    f"Invoice #{invoice.id} generated for period "
                    f"{period_from.isoformat()} to {period_to.isoformat()}"
                ),
                "entity_type": "Invoice",
                "entity_id": invoice.id,
                "tenant_id": invoice.tenant_id,
                "amount": invoice.total_amount,
            })

        logger.info(
            f"Invoice generation {year}-{month:02d} done: created={result.created} "
            f"skipped={result.skipped} failed={result.failed}"
        )
        return result

    def _create_invoice_for_lease(
        self, lease_id, period_from, period_to, month, year, issue_date, default_billing_day
    ) -> Optional[Invoice]:
        if self._invoice_exists(lease_id, period_from, period_to):
            logger.debug(f"Invoice already exists for lease {lease_id} for {period_from}..{period_to}")
            return None

        lease = self.db.get(Lease, lease_id)
        rent = to_money(lease.rent_per_month)
        invoice = Invoice(
            lease_id=lease.id,
            tenant_id=lease.tenant_id,
            room_id=lease.room_id,
            period_from=period_from,
            period_to=period_to,
            issue_date=issue_date,
            due_date=due_date_for(month, year, lease.billing_day or default_billing_day),
            base_amount=rent,
            late_fee=to_money(0),
            total_amount=rent,
            paid_amount=to_money(0),
            status=BillStatus.unpaid.value,
        )
        self.db.add(invoice)
        self.db.commit()
        return invoice

    def _invoice_exists(self, lease_id, period_from, period_to) -> bool:
        return self.db.query(Invoice.id).filter(
            Invoice.lease_id == lease_id,
            Invoice.period_from == period_from,
            Invoice.period_to == period_to,
        ).first() is not None

    # ==================== QUERIES ====================

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.db.get(Invoice, invoice_id)
        if not invoice:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    def list_invoices(
        self, status: Optional[str] = None, tenant_id: Optional[int] = None,
        month: Optional[int] = None, year: Optional[int] = None,
    ) -> List[Invoice]:
        q = self.db.query(Invoice)
        if status:
            q = q.filter(Invoice.status == status)
        if tenant_id:
            q = q.filter(Invoice.tenant_id == tenant_id)
        if month and year:
            start, end = month_period(month, year)
            q = q.filter(Invoice.period_from >= start, Invoice.period_to <= end)
        return q.order_by(Invoice.period_from.desc(), Invoice.id).all()

    @staticmethod
    def summarize(invoices: List[Invoice]) -> dict:
        """Expected, collected and pending totals over a list of invoices."""
        expected = sum((Decimal(i.total_amount) for i in invoices), Decimal(0))
        collected = sum((Decimal(i.paid_amount or 0) for i in invoices), Decimal(0))
        return {
            "total_expected": float(expected),
            "total_collected": float(collected),
            "total_pending": float(expected - collected),
        }
