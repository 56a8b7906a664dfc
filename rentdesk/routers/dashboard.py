"""
Dashboard statistics.
Endpoint: /api/dashboard
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.clock import Clock
from ..core.dependencies import get_clock, get_current_admin
from ..schemas.billing import InvoiceResponse, PaymentResponse
from ..services.dashboard import DashboardService

router = APIRouter(tags=["Dashboard"])


@router.get("")
async def get_dashboard(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Occupancy, collections and outstanding amounts for one month."""
    data = DashboardService(db, clock=clock).get_overview(month, year)
    data["recent_invoices"] = [
        InvoiceResponse.model_validate(i).model_dump(mode="json") for i in data["recent_invoices"]
    ]
    data["recent_payments"] = [
        PaymentResponse.model_validate(p).model_dump(mode="json") for p in data["recent_payments"]
    ]
    return {"success": True, "data": data}
