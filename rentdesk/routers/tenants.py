"""
Tenant (renter) endpoints.
Endpoint: /api/tenants/...
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.dependencies import get_current_admin
from ..schemas.lease import LeaseListResponse
from ..schemas.tenant import TenantCreate, TenantListResponse, TenantResponse, TenantUpdate
from ..services.tenant import TenantService

router = APIRouter(tags=["Tenants"])


@router.get("", response_model=TenantListResponse)
async def list_tenants(
    status: Optional[str] = Query(None),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    tenants = TenantService(db).list_tenants(status)
    return {"data": tenants, "total": len(tenants)}


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    body: TenantCreate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return TenantService(db).create_tenant(body.model_dump())


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return TenantService(db).get_tenant(tenant_id)


@router.put("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: int,
    body: TenantUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return TenantService(db).update_tenant(tenant_id, body.model_dump(exclude_unset=True))


@router.get("/{tenant_id}/leases", response_model=LeaseListResponse)
async def get_tenant_leases(
    tenant_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    leases = TenantService(db).list_tenant_leases(tenant_id)
    return {"data": leases, "total": len(leases)}
