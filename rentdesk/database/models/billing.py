"""
Billing models: rent invoices, electricity (light) bills and invoice payments.
"""

from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, String, Integer, Text, Numeric, Date,
    ForeignKey, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship

from ..base import BaseModel, Base, TimestampMixin


class BillStatus(PyEnum):
    """Status shared by invoices and light bills."""
    unpaid = "unpaid"
    partially_paid = "partially_paid"
    paid = "paid"
    overdue = "overdue"


class PaymentMode(PyEnum):
    cash = "cash"
    upi = "upi"
    bank_transfer = "bank_transfer"
    card = "card"


class PayableMixin:
    """
    Columns shared by everything that can receive payments.

    paid_amount never exceeds total_amount.
    """

    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)

    total_amount = Column(Numeric(12, 2), nullable=False)
    paid_amount = Column(Numeric(12, 2), default=0, nullable=False)

    status = Column(String(20), default=BillStatus.unpaid.value, nullable=False)

    @property
    def remaining_amount(self) -> Decimal:
        return Decimal(self.total_amount or 0) - Decimal(self.paid_amount or 0)


class Invoice(BaseModel, PayableMixin):
    """
    Monthly rent invoice.

    Tenant and room are copied from the lease at creation time and never
    re-derived. One invoice per (lease, period).
    """

    __tablename__ = 'invoices'

    lease_id = Column(Integer, ForeignKey('leases.id'), nullable=False)
    tenant_id = Column(Integer, ForeignKey('tenants.id'), nullable=False)
    room_id = Column(Integer, ForeignKey('rooms.id'), nullable=False)

    period_from = Column(Date, nullable=False)
    period_to = Column(Date, nullable=False)

    base_amount = Column(Numeric(12, 2), nullable=False)
    late_fee = Column(Numeric(12, 2), default=0, nullable=False)

    lease = relationship("Lease")
    tenant = relationship("Tenant")
    room = relationship("Room", foreign_keys=[room_id])
    payments = relationship("Payment", back_populates="invoice", order_by="Payment.id")

    __table_args__ = (
        UniqueConstraint('lease_id', 'period_from', 'period_to', name='uq_invoice_lease_period'),
        Index('ix_invoices_status', 'status'),
        Index('ix_invoices_tenant', 'tenant_id'),
        CheckConstraint('late_fee >= 0', name='ck_invoice_late_fee_non_negative'),
        CheckConstraint('paid_amount >= 0', name='ck_invoice_paid_non_negative'),
        CheckConstraint('paid_amount <= total_amount', name='ck_invoice_no_overpayment'),
    )

    def __repr__(self):
        return (
            f"<Invoice(id={self.id}, lease_id={self.lease_id}, "
            f"period={self.period_from}..{self.period_to}, status='{self.status}')>"
        )


class LightBill(BaseModel, PayableMixin):
    """
    Electricity bill entered manually from a meter reading.

    total = units_consumed * rate_per_unit + fixed_charge + tax.
    Payments only update paid_amount here; no Payment rows are written.
    """

    __tablename__ = 'light_bills'

    room_id = Column(Integer, ForeignKey('rooms.id'), nullable=False)
    tenant_id = Column(Integer, ForeignKey('tenants.id'), nullable=False)
    lease_id = Column(Integer, ForeignKey('leases.id'), nullable=False)

    period_from = Column(Date, nullable=False)
    period_to = Column(Date, nullable=False)

    units_consumed = Column(Numeric(12, 2), nullable=False)
    rate_per_unit = Column(Numeric(12, 4), nullable=False)
    fixed_charge = Column(Numeric(12, 2), default=0, nullable=False)
    tax = Column(Numeric(12, 2), default=0, nullable=False)

    notes = Column(Text, nullable=True)

    lease = relationship("Lease")
    tenant = relationship("Tenant")
    room = relationship("Room", foreign_keys=[room_id])

    __table_args__ = (
        UniqueConstraint(
            'room_id', 'tenant_id', 'lease_id', 'period_from', 'period_to',
            name='uq_light_bill_period'
        ),
        Index('ix_light_bills_status', 'status'),
        Index('ix_light_bills_tenant', 'tenant_id'),
        CheckConstraint('period_from < period_to', name='ck_light_bill_period_order'),
        CheckConstraint('units_consumed > 0', name='ck_light_bill_units_positive'),
        CheckConstraint('rate_per_unit > 0', name='ck_light_bill_rate_positive'),
        CheckConstraint('fixed_charge >= 0', name='ck_light_bill_fixed_non_negative'),
        CheckConstraint('tax >= 0', name='ck_light_bill_tax_non_negative'),
        CheckConstraint('paid_amount >= 0', name='ck_light_bill_paid_non_negative'),
        CheckConstraint('paid_amount <= total_amount', name='ck_light_bill_no_overpayment'),
    )

    def __repr__(self):
        return f"<LightBill(id={self.id}, room_id={self.room_id}, status='{self.status}')>"


class Payment(Base, TimestampMixin):
    """Immutable record of money received against an invoice."""

    __tablename__ = 'payments'

    id = Column(Integer, primary_key=True, autoincrement=True)

    invoice_id = Column(Integer, ForeignKey('invoices.id'), nullable=False)
    lease_id = Column(Integer, ForeignKey('leases.id'), nullable=False)
    tenant_id = Column(Integer, ForeignKey('tenants.id'), nullable=False)

    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    mode = Column(String(20), default=PaymentMode.cash.value, nullable=False)
    note = Column(Text, nullable=True)

    invoice = relationship("Invoice", back_populates="payments")
    lease = relationship("Lease")
    tenant = relationship("Tenant")

    __table_args__ = (
        Index('ix_payments_tenant', 'tenant_id'),
        Index('ix_payments_invoice', 'invoice_id'),
        CheckConstraint('amount > 0', name='ck_payment_amount_positive'),
    )

    def __repr__(self):
        return f"<Payment(id={self.id}, invoice_id={self.invoice_id}, amount={self.amount})>"
