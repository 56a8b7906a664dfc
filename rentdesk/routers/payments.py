"""
Payment history endpoints.
Endpoint: /api/payments/...
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.dependencies import get_current_admin
from ..schemas.billing import (
    PaymentDetailResponse, PaymentOverviewResponse, TenantPaymentHistoryResponse
)
from ..services.payment import PaymentLedger

router = APIRouter(tags=["Payments"])


@router.get("", response_model=PaymentOverviewResponse)
async def list_payments(
    tenant_id: Optional[int] = Query(None),
    lease_id: Optional[int] = Query(None),
    invoice_id: Optional[int] = Query(None),
    mode: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Invoice payments and paid light bills, grouped by tenant."""
    return PaymentLedger(db).payment_overview(
        tenant_id=tenant_id, lease_id=lease_id, invoice_id=invoice_id,
        mode=mode, date_from=date_from, date_to=date_to,
    )


@router.get("/tenant/{tenant_id}", response_model=TenantPaymentHistoryResponse)
async def get_tenant_payment_history(
    tenant_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Rent payments and paid light bills of one tenant, with totals."""
    return PaymentLedger(db).tenant_payment_history(tenant_id)


@router.get("/{payment_id}", response_model=PaymentDetailResponse)
async def get_payment(
    payment_id: int,
    type: Optional[str] = Query(None, description="invoice or light_bill"),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return PaymentLedger(db).get_payment(payment_id, kind=type)
