"""
Business settings endpoints.
Endpoint: /api/settings
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.dependencies import get_current_admin
from ..schemas.settings import SettingsResponse, SettingsUpdate
from ..services.settings import SettingsService

router = APIRouter(tags=["Settings"])


@router.get("", response_model=SettingsResponse)
async def get_settings(
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Current settings; created with defaults on first access."""
    return SettingsService(db).get_or_create()


@router.put("", response_model=SettingsResponse)
async def update_settings(
    body: SettingsUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return SettingsService(db).update_settings(body.model_dump(exclude_unset=True))
