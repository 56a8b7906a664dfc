"""
Dashboard statistics: occupancy, collections and outstanding amounts.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.clock import Clock, system_clock
from ..database.models import (
    BillStatus, Invoice, Lease, LeaseStatus, LightBill, Payment, Room, Tenant, TenantStatus
)
from .billing_rules import month_period


def _num(value) -> float:
    return float(value or 0)


class DashboardService:

    RECENT_LIMIT = 5
    CHART_MONTHS = 6

    def __init__(self, db: Session, clock: Clock = None):
        self.db = db
        self.clock = clock or system_clock

    def get_overview(self, month: Optional[int] = None, year: Optional[int] = None) -> dict:
        """Figures for one month (the current one by default)."""
        today = self.clock.today()
        if not (month and year):
            month, year = today.month, today.year
        start, end = month_period(month, year)

        month_collection = Decimal(self.db.query(func.coalesce(func.sum(Payment.amount), 0)).filter(
            Payment.date >= start, Payment.date <= end
        ).scalar() or 0)
        month_light_bills = Decimal(self.db.query(func.coalesce(func.sum(LightBill.total_amount), 0)).filter(
            LightBill.issue_date >= start, LightBill.issue_date <= end
        ).scalar() or 0)

        invoice_totals = self.db.query(
            func.coalesce(func.sum(Invoice.total_amount), 0),
            func.coalesce(func.sum(Invoice.paid_amount), 0),
        ).filter(Invoice.period_from >= start, Invoice.period_to <= end).one()

        light_totals = self.db.query(
            func.coalesce(func.sum(LightBill.total_amount), 0),
            func.coalesce(func.sum(LightBill.paid_amount), 0),
        ).one()

        return {
            "month": month,
            "year": year,
            "overview": {
                "total_rooms": self.db.query(func.count(Room.id)).scalar() or 0,
                "active_tenants": self.db.query(func.count(Tenant.id)).filter(
                    Tenant.status == TenantStatus.active.value
                ).scalar() or 0,
                "active_leases": self._count_leases(LeaseStatus.active.value),
                "upcoming_leases": self._count_leases(LeaseStatus.upcoming.value),
                "this_month_collection": _num(month_collection),
                "this_month_light_bills": _num(month_light_bills),
                "overdue_invoices": self.db.query(func.count(Invoice.id)).filter(
                    Invoice.status == BillStatus.overdue.value
                ).scalar() or 0,
                "pending_light_bills": self.db.query(func.count(LightBill.id)).filter(
                    LightBill.status.in_([
                        BillStatus.unpaid.value,
                        BillStatus.partially_paid.value,
                        BillStatus.overdue.value,
                    ])
                ).scalar() or 0,
            },
            "room_availability": self._group_count(Room.status),
            "tenant_status": self._group_count(Tenant.status),
            "invoice_summary": {
                "total_expected": _num(invoice_totals[0]),
                "total_collected": _num(invoice_totals[1]),
                "total_pending": _num(Decimal(invoice_totals[0]) - Decimal(invoice_totals[1])),
            },
            "light_bill_summary": {
                "total_amount": _num(light_totals[0]),
                "total_paid": _num(light_totals[1]),
                "total_pending": _num(Decimal(light_totals[0]) - Decimal(light_totals[1])),
            },
            "monthly_collections": self.monthly_collections(month, year),
            "recent_invoices": self.db.query(Invoice).order_by(
                Invoice.created_at.desc(), Invoice.id.desc()
            ).limit(self.RECENT_LIMIT).all(),
            "recent_payments": self.db.query(Payment).order_by(
                Payment.date.desc(), Payment.id.desc()
            ).limit(self.RECENT_LIMIT).all(),
        }

    def monthly_collections(self, month: int, year: int) -> list:
        """Payment totals for the six months ending with the given one."""
        result = []
        for offset in range(self.CHART_MONTHS - 1, -1, -1):
            index = year * 12 + (month - 1) - offset
            m_year, m_month = divmod(index, 12)
            start, end = month_period(m_month + 1, m_year)
            total, count = self.db.query(
                func.coalesce(func.sum(Payment.amount), 0), func.count(Payment.id)
            ).filter(Payment.date >= start, Payment.date <= end).one()
            result.append({
                "month": f"{m_month + 1}/{m_year}",
                "amount": _num(total),
                "transactions": count,
            })
        return result

    def _count_leases(self, status: str) -> int:
        return self.db.query(func.count(Lease.id)).filter(Lease.status == status).scalar() or 0

    def _group_count(self, column) -> dict:
        rows = self.db.query(column, func.count()).group_by(column).all()
        return {key: count for key, count in rows}
