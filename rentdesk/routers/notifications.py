"""
Notification endpoints.
Endpoint: /api/notifications/...
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..database.models import AdminUser
from ..core.dependencies import get_current_admin
from ..core.exceptions import NotFoundError
from ..schemas.notification import NotificationListResponse, NotificationResponse
from ..services.notification import NotificationService

router = APIRouter(tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    service = NotificationService(db)
    notifications = service.list_notifications(unread_only=unread_only, limit=limit)
    return {
        "data": notifications,
        "total": len(notifications),
        "unread": service.get_unread_count(),
    }


@router.put("/read-all")
async def mark_all_read(
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    count = NotificationService(db).mark_read()
    return {"success": True, "message": f"{count} notifications marked as read"}


@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    if not NotificationService(db).mark_read(notification_id):
        raise NotFoundError("Unread notification", notification_id)
    return {"success": True, "message": "Notification marked as read"}


@router.delete("")
async def delete_read_notifications(
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    count = NotificationService(db).delete_read()
    return {"success": True, "message": f"Deleted {count} read notifications"}


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return NotificationService(db).get_notification(notification_id)


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    NotificationService(db).delete_notification(notification_id)
    return {"success": True, "message": "Notification deleted successfully"}
