"""
Invoice endpoints: listing, monthly generation, payments and late fees.
Endpoint: /api/invoices/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.clock import Clock
from ..core.dependencies import get_clock, get_current_admin
from ..schemas.billing import (
    GenerateInvoicesRequest, GenerateInvoicesResponse, InvoiceListResponse,
    InvoicePaymentResponse, InvoiceResponse, PaymentListResponse, PaymentRequest,
)
from ..schemas.common import BatchResultResponse
from ..services.invoice import InvoiceService
from ..services.late_fee import LateFeeService
from ..services.payment import PaymentLedger
from ..services.settings import SettingsService

router = APIRouter(tags=["Invoices"])


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    status: Optional[str] = Query(None),
    tenant_id: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Invoices with expected, collected and pending totals."""
    invoices = InvoiceService(db).list_invoices(status, tenant_id, month, year)
    return {
        "data": invoices,
        "total": len(invoices),
        "summary": InvoiceService.summarize(invoices),
    }


@router.post("/generate-monthly", response_model=GenerateInvoicesResponse)
async def generate_monthly_invoices(
    body: GenerateInvoicesRequest,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create this month's invoice for every active lease that has none yet."""
    stored = SettingsService(db).get_settings()
    billing_day = stored.default_billing_day if stored else 1

    result = InvoiceService(db, clock=clock).generate_monthly_invoices(
        body.month, body.year, default_billing_day=billing_day
    )
    return {
        "success": True,
        "message": f"Generated {result.created} invoices",
        "created": result.created,
        "skipped": result.skipped,
        "failed": result.failed,
        "errors": result.errors,
        "data": result.items,
    }


@router.post("/recalculate-late-fees", response_model=BatchResultResponse)
async def recalculate_late_fees(
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Bring late fees and statuses of all open invoices up to date."""
    result = LateFeeService(db, clock=clock).recalculate_late_fees()
    return result.to_dict()


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return InvoiceService(db).get_invoice(invoice_id)


@router.get("/{invoice_id}/payments", response_model=PaymentListResponse)
async def get_invoice_payments(
    invoice_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    InvoiceService(db).get_invoice(invoice_id)
    payments = PaymentLedger(db).list_payments(invoice_id=invoice_id)
    return {"data": payments, "total": len(payments)}


@router.post("/{invoice_id}/pay", response_model=InvoicePaymentResponse)
async def pay_invoice(
    invoice_id: int,
    body: PaymentRequest,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    invoice, payment = PaymentLedger(db, clock=clock).pay_invoice(
        invoice_id, body.amount, date=body.date, mode=body.mode, note=body.note
    )
    return {"success": True, "message": "Payment recorded successfully", "invoice": invoice, "payment": payment}
