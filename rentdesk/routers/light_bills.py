"""
Light (electricity) bill endpoints.
Endpoint: /api/light-bills/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.clock import Clock
from ..core.dependencies import get_clock, get_current_admin
from ..schemas.billing import (
    LightBillCreate, LightBillListResponse, LightBillResponse, LightBillUpdate, PaymentRequest,
)
from ..services.light_bill import LightBillInput, LightBillService
from ..services.payment import PaymentLedger

router = APIRouter(tags=["Light Bills"])


@router.get("", response_model=LightBillListResponse)
async def list_light_bills(
    status: Optional[str] = Query(None),
    tenant_id: Optional[int] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    bills = LightBillService(db).list_light_bills(status, tenant_id)
    return {"data": bills, "total": len(bills)}


@router.post("", response_model=LightBillResponse, status_code=status.HTTP_201_CREATED)
async def create_light_bill(
    body: LightBillCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create a bill; tenant, lease and dates default from the room's lease."""
    return LightBillService(db, clock=clock).create_light_bill(LightBillInput(**body.model_dump()))


@router.get("/{bill_id}", response_model=LightBillResponse)
async def get_light_bill(
    bill_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return LightBillService(db).get_light_bill(bill_id)


@router.put("/{bill_id}", response_model=LightBillResponse)
async def update_light_bill(
    bill_id: int,
    body: LightBillUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return LightBillService(db, clock=clock).update_light_bill(bill_id, body)


@router.delete("/{bill_id}")
async def delete_light_bill(
    bill_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    LightBillService(db).delete_light_bill(bill_id)
    return {"success": True, "message": "Light bill deleted successfully"}


@router.post("/{bill_id}/pay", response_model=LightBillResponse)
async def pay_light_bill(
    bill_id: int,
    body: PaymentRequest,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    return PaymentLedger(db, clock=clock).pay_light_bill(
        bill_id, body.amount, date=body.date, mode=body.mode, note=body.note
    )
