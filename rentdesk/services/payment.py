"""
Payment ledger: money received against invoices and light bills.

Invoice payments are recorded as Payment rows and also accumulate in the
invoice's paid_amount. Light bill payments only accumulate in the bill.
Both go through ``_apply_payment`` so validation and status rules are the
same.
"""

import logging
from datetime import date as date_type, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple, Type, Union

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..core.exceptions import (
    ConflictError, InvalidAmountError, InvalidInputError, NotFoundError, StorageError
)
from ..database.models import Invoice, LightBill, Payment, PaymentMode, Tenant
from .billing_rules import derive_status, to_money
from .notification import NotificationService

logger = logging.getLogger(__name__)

# amounts are stored in cents; backends without a decimal type compare floats
_CENT_MARGIN = Decimal("0.005")


class PaymentLedger:

    def __init__(
        self, db: Session, clock: Clock = None,
        notifier: Optional[NotificationService] = None,
    ):
        self.db = db
        self.clock = clock or system_clock
        self.notifier = notifier or NotificationService(db)

    # ==================== PAYMENTS ====================

    def pay_invoice(
        self, invoice_id: int, amount, date: Optional[date_type] = None,
        mode: str = PaymentMode.cash.value, note: Optional[str] = None,
    ) -> Tuple[Invoice, Payment]:
        """Record a payment against an invoice. Returns the invoice and the new Payment."""
        invoice, payment = self._apply_payment(Invoice, invoice_id, amount, date, mode, note)

        self.notifier.notify("payment_received", {
            "message": f"Payment of {payment.amount} received for Invoice #{invoice.id}",
            "entity_type": "Invoice",
            "entity_id": invoice.id,
            "tenant_id": invoice.tenant_id,
            "amount": payment.amount,
            "status": invoice.status,
        })
        return invoice, payment

    def pay_light_bill(
        self, bill_id: int, amount, date: Optional[date_type] = None,
        mode: str = PaymentMode.cash.value, note: Optional[str] = None,
    ) -> LightBill:
        bill, _ = self._apply_payment(LightBill, bill_id, amount, date, mode, note)
        return bill

    def _apply_payment(
        self, model: Type[Union[Invoice, LightBill]], target_id: int, amount,
        paid_on: Optional[date_type], mode: str, note: Optional[str],
    ):
        label = "Invoice" if model is Invoice else "Light bill"

        amount = self._parse_amount(amount)
        if mode not in [m.value for m in PaymentMode]:
            raise InvalidInputError(
                f"Payment mode must be one of: {', '.join(m.value for m in PaymentMode)}",
                field="mode",
            )

        # compare-and-set: the row only changes if the new paid amount still fits the total
        try:
            applied = self.db.execute(
                update(model)
                .where(
                    model.id == target_id,
                    model.paid_amount + amount <= model.total_amount + _CENT_MARGIN,
                )
                .values(
                    paid_amount=func.round(model.paid_amount + amount, 2),
                    updated_at=self.clock.now(),
                )
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Payment on {label.lower()} {target_id} failed: {e}")
            raise StorageError("Could not record payment") from e

        if applied.rowcount == 0:
            self.db.rollback()
            target = self.db.get(model, target_id)
            if target is None:
                raise NotFoundError(label, target_id)
            raise ConflictError(
                f"Payment amount would exceed total. "
                f"Maximum allowable payment: {to_money(target.remaining_amount)}"
            )

        target = self.db.execute(
            select(model)
            .where(model.id == target_id)
            .execution_options(populate_existing=True)
        ).scalar_one()
        target.status = derive_status(
            target.paid_amount, target.total_amount, self.clock.today(), target.due_date
        )

        payment = None
        if model is Invoice:
            payment = Payment(
                invoice_id=target.id,
                lease_id=target.lease_id,
                tenant_id=target.tenant_id,
                amount=amount,
                date=paid_on or self.clock.today(),
                mode=mode,
                note=note,
            )
            self.db.add(payment)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Payment on {label.lower()} {target_id} failed: {e}")
            raise StorageError("Could not record payment") from e

        logger.info(
            f"{label} {target.id}: received {amount} via {mode}, "
            f"paid {target.paid_amount}/{target.total_amount} ({target.status})"
        )
        return target, payment

    @staticmethod
    def _parse_amount(amount) -> Decimal:
        try:
            value = Decimal(str(amount))
            if not value.is_finite() or value <= 0:
                raise InvalidAmountError()
            cents = value.quantize(Decimal("0.01"))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidAmountError()
        if cents != value:
            raise InvalidAmountError("Payment amount cannot have more than 2 decimal places")
        return cents

    # ==================== QUERIES ====================

    def list_payments(
        self,
        tenant_id: Optional[int] = None,
        lease_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        mode: Optional[str] = None,
        date_from: Optional[date_type] = None,
        date_to: Optional[date_type] = None,
    ) -> List[Payment]:
        q = self.db.query(Payment)
        if tenant_id:
            q = q.filter(Payment.tenant_id == tenant_id)
        if lease_id:
            q = q.filter(Payment.lease_id == lease_id)
        if invoice_id:
            q = q.filter(Payment.invoice_id == invoice_id)
        if mode:
            q = q.filter(Payment.mode == mode)
        if date_from:
            q = q.filter(Payment.date >= date_from)
        if date_to:
            q = q.filter(Payment.date <= date_to)
        return q.order_by(Payment.date.desc(), Payment.id.desc()).all()

    def list_payment_entries(
        self,
        tenant_id: Optional[int] = None,
        lease_id: Optional[int] = None,
        invoice_id: Optional[int] = None,
        mode: Optional[str] = None,
        date_from: Optional[date_type] = None,
        date_to: Optional[date_type] = None,
    ) -> List[dict]:
        """
        Invoice payments and paid light bills as one list, newest first.

        A light bill appears once, as a cash entry for its paid amount dated
        by its last update. Filtering by invoice, or by a mode other
        than cash, leaves light bills out.
        """
        entries = [
            self._invoice_payment_entry(p) for p in self.list_payments(
                tenant_id=tenant_id, lease_id=lease_id, invoice_id=invoice_id,
                mode=mode, date_from=date_from, date_to=date_to,
            )
        ]

        if not invoice_id and mode in (None, PaymentMode.cash.value):
            q = self.db.query(LightBill).filter(LightBill.paid_amount > 0)
            if tenant_id:
                q = q.filter(LightBill.tenant_id == tenant_id)
            if lease_id:
                q = q.filter(LightBill.lease_id == lease_id)
            if date_from:
                q = q.filter(LightBill.updated_at >= datetime.combine(date_from, time.min))
            if date_to:
                q = q.filter(LightBill.updated_at < datetime.combine(date_to + timedelta(days=1), time.min))
            entries.extend(self._light_bill_entry(bill) for bill in q.all())

        entries.sort(key=lambda e: (e["date"], e["id"]), reverse=True)
        return entries

    def payment_overview(self, **filters) -> dict:
        """Unified payment list grouped by tenant, with overall totals."""
        groups = {}
        for entry in self.list_payment_entries(**filters):
            group = groups.get(entry["tenant_id"])
            if group is None:
                group = groups[entry["tenant_id"]] = {
                    "tenant_id": entry["tenant_id"],
                    "tenant_name": entry["tenant_name"],
                    "total_amount": Decimal(0),
                    "payment_count": 0,
                    "payments": [],
                }
            group["total_amount"] += Decimal(entry["amount"])
            group["payment_count"] += 1
            group["payments"].append(entry)

        data = list(groups.values())
        total = sum((g["total_amount"] for g in data), Decimal(0))
        for group in data:
            group["total_amount"] = float(group["total_amount"])

        return {
            "count": sum(g["payment_count"] for g in data),
            "total_amount": float(total),
            "data": data,
        }

    def get_payment(self, payment_id: int, kind: Optional[str] = None) -> dict:
        """
        One payment with its invoice or light bill.

        Invoice payments are looked up first, then paid light bills, unless
        ``kind`` ("invoice" or "light_bill") picks one.
        """
        if kind not in (None, "invoice", "light_bill"):
            raise InvalidInputError("Payment type must be 'invoice' or 'light_bill'", field="type")

        if kind in (None, "invoice"):
            payment = self.db.get(Payment, payment_id)
            if payment:
                entry = self._invoice_payment_entry(payment)
                entry["invoice"] = payment.invoice
                return entry

        if kind in (None, "light_bill"):
            bill = self.db.get(LightBill, payment_id)
            if bill and bill.paid_amount > 0:
                entry = self._light_bill_entry(bill)
                entry["light_bill"] = bill
                return entry

        raise NotFoundError("Payment", payment_id)

    @staticmethod
    def _invoice_payment_entry(payment: Payment) -> dict:
        invoice = payment.invoice
        return {
            "id": payment.id,
            "type": "invoice",
            "tenant_id": payment.tenant_id,
            "tenant_name": payment.tenant.full_name,
            "lease_id": payment.lease_id,
            "related_id": payment.invoice_id,
            "amount": payment.amount,
            "date": payment.date,
            "mode": payment.mode,
            "note": payment.note,
            "period_from": invoice.period_from,
            "period_to": invoice.period_to,
            "status": invoice.status,
        }

    @staticmethod
    def _light_bill_entry(bill: LightBill) -> dict:
        return {
            "id": bill.id,
            "type": "light_bill",
            "tenant_id": bill.tenant_id,
            "tenant_name": bill.tenant.full_name,
            "lease_id": bill.lease_id,
            "related_id": bill.id,
            "amount": bill.paid_amount,
            "date": bill.updated_at.date(),
            "mode": PaymentMode.cash.value,
            "note": "Light bill payment",
            "period_from": bill.period_from,
            "period_to": bill.period_to,
            "status": bill.status,
        }

    def tenant_payment_history(self, tenant_id: int) -> dict:
        """All money a tenant has paid, for rent and for electricity."""
        tenant = self.db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant", tenant_id)

        payments = self.list_payments(tenant_id=tenant_id)
        light_bills = self.db.query(LightBill).filter(
            LightBill.tenant_id == tenant_id,
            LightBill.paid_amount > 0,
        ).order_by(LightBill.period_from.desc(), LightBill.id.desc()).all()

        rent_total = sum((Decimal(p.amount) for p in payments), Decimal(0))
        light_total = sum((Decimal(b.paid_amount) for b in light_bills), Decimal(0))

        return {
            "tenant_id": tenant.id,
            "tenant_name": tenant.full_name,
            "payments": payments,
            "light_bills": light_bills,
            "total_rent_paid": float(rent_total),
            "total_light_paid": float(light_total),
            "total_paid": float(rent_total + light_total),
        }
