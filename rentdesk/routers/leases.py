"""
Lease endpoints.
Endpoint: /api/leases/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.clock import Clock
from ..core.dependencies import get_clock, get_current_admin
from ..schemas.lease import LeaseCreate, LeaseEnd, LeaseListResponse, LeaseResponse
from ..services.lease import LeaseService

router = APIRouter(tags=["Leases"])


@router.get("", response_model=LeaseListResponse)
async def list_leases(
    status: Optional[str] = Query(None),
    room_id: Optional[int] = Query(None),
    tenant_id: Optional[int] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    leases = LeaseService(db).list_leases(status, room_id, tenant_id)
    return {"data": leases, "total": len(leases)}


@router.post("", response_model=LeaseResponse, status_code=status.HTTP_201_CREATED)
async def create_lease(
    body: LeaseCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create a lease; the room becomes occupied."""
    return LeaseService(db, clock=clock).create_lease(**body.model_dump())


@router.get("/{lease_id}", response_model=LeaseResponse)
async def get_lease(
    lease_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return LeaseService(db).get_lease(lease_id)


@router.post("/{lease_id}/end", response_model=LeaseResponse)
async def end_lease(
    lease_id: int,
    body: LeaseEnd,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """End a lease; the room becomes vacant."""
    return LeaseService(db, clock=clock).end_lease(lease_id, body.end_date, body.notes)
