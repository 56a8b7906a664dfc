"""
Tenant service - plain record management for renters.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, InvalidInputError, NotFoundError
from ..database.models import Tenant, TenantStatus, Lease


class TenantService:

    _FIELDS = (
        "full_name", "phone", "email", "id_proof_type", "id_proof_number",
        "address", "emergency_contact_name", "emergency_contact_phone",
        "status", "notes",
    )

    def __init__(self, db: Session):
        self.db = db

    def get_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant", tenant_id)
        return tenant

    def list_tenants(self, status: Optional[str] = None) -> List[Tenant]:
        q = self.db.query(Tenant)
        if status:
            q = q.filter(Tenant.status == status)
        return q.order_by(Tenant.full_name).all()

    def list_tenant_leases(self, tenant_id: int) -> List[Lease]:
        self.get_tenant(tenant_id)
        return self.db.query(Lease).filter(
            Lease.tenant_id == tenant_id
        ).order_by(Lease.start_date.desc()).all()

    def create_tenant(self, data: dict) -> Tenant:
        if not data.get("full_name"):
            raise InvalidInputError("Full name is required", field="full_name")
        if not data.get("phone"):
            raise InvalidInputError("Phone number is required", field="phone")
        self._check_unique(data.get("phone"), data.get("email"))
        self._validate_status(data.get("status", TenantStatus.active.value))

        tenant = Tenant(**{k: v for k, v in data.items() if k in self._FIELDS})
        self.db.add(tenant)
        self.db.commit()
        return tenant

    def update_tenant(self, tenant_id: int, changes: dict) -> Tenant:
        tenant = self.get_tenant(tenant_id)

        if "full_name" in changes and not changes["full_name"]:
            raise InvalidInputError("Full name cannot be empty", field="full_name")
        if "phone" in changes and not changes["phone"]:
            raise InvalidInputError("Phone number cannot be empty", field="phone")
        if "status" in changes:
            self._validate_status(changes["status"])
        self._check_unique(changes.get("phone"), changes.get("email"), exclude_id=tenant.id)

        for field in self._FIELDS:
            if field in changes:
                setattr(tenant, field, changes[field])
        self.db.commit()
        return tenant

    def _check_unique(self, phone: Optional[str], email: Optional[str], exclude_id: int = None):
        if phone:
            q = self.db.query(Tenant).filter(Tenant.phone == phone)
            if exclude_id is not None:
                q = q.filter(Tenant.id != exclude_id)
            if q.first():
                raise ConflictError("Tenant with this phone number already exists")
        if email:
            q = self.db.query(Tenant).filter(Tenant.email == email)
            if exclude_id is not None:
                q = q.filter(Tenant.id != exclude_id)
            if q.first():
                raise ConflictError("Tenant with this email already exists")

    @staticmethod
    def _validate_status(status: str):
        if status not in [s.value for s in TenantStatus]:
            raise InvalidInputError("Tenant status must be active or inactive", field="status")
