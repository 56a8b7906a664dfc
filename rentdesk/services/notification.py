"""
Notification sink.

Stores an in-app notification for administrators and, when
NOTIFY_WEBHOOK_URL is configured, forwards it to that URL via HTTP.
Fire-and-forget: failures are logged and never reach the caller.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import NotFoundError
from ..database.models import Notification, NotificationKind, NotificationPriority

logger = logging.getLogger(__name__)


_TITLES = {
    NotificationKind.payment_received.value: "Payment Received",
    NotificationKind.invoice_generated.value: "New Invoice Generated",
    NotificationKind.overdue.value: "Overdue Invoice",
    NotificationKind.maintenance.value: "Room Maintenance Required",
}

_PRIORITIES = {
    NotificationKind.overdue.value: NotificationPriority.high.value,
    NotificationKind.maintenance.value: NotificationPriority.high.value,
}


class NotificationService:
    """Create and read administrator notifications."""

    def __init__(
        self,
        db: Session,
        webhook_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.db = db
        self.webhook_url = settings.NOTIFY_WEBHOOK_URL if webhook_url is None else webhook_url
        self._http_client = http_client

    # ==================== SINK ====================

    def notify(self, kind: str, payload: Dict[str, Any]) -> Optional[Notification]:
        """
        Record a notification. Never raises.

        ``payload`` may carry ``message``, ``entity_type`` and ``entity_id``;
        the whole payload is stored for the UI.
        """
        try:
            notification = Notification(
                kind=kind,
                title=payload.get("title") or _TITLES.get(kind, "Notification"),
                message=payload.get("message") or _TITLES.get(kind, kind),
                priority=payload.get("priority") or _PRIORITIES.get(kind, NotificationPriority.medium.value),
                related_entity_type=payload.get("entity_type"),
                related_entity_id=payload.get("entity_id"),
                payload=_jsonable(payload),
                is_read=False,
            )
            self.db.add(notification)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store {kind} notification: {e}")
            return None

        if self.webhook_url:
            self._send_webhook(notification)
        return notification

    def _send_webhook(self, notification: Notification) -> bool:
        body = {
            "id": notification.id,
            "kind": notification.kind,
            "title": notification.title,
            "message": notification.message,
            "priority": notification.priority,
            "payload": notification.payload,
        }
        try:
            if self._http_client is not None:
                response = self._http_client.post(self.webhook_url, json=body)
            else:
                with httpx.Client(timeout=settings.NOTIFY_WEBHOOK_TIMEOUT) as client:
                    response = client.post(self.webhook_url, json=body)
            if response.status_code >= 400:
                logger.warning(f"Notification webhook returned {response.status_code}")
                return False
            return True
        except httpx.HTTPError as e:
            logger.error(f"Notification webhook failed: {e}")
            return False

    # ==================== QUERIES ====================

    def get_unread_count(self) -> int:
        return self.db.query(Notification).filter(Notification.is_read == False).count()

    def list_notifications(self, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        q = self.db.query(Notification)
        if unread_only:
            q = q.filter(Notification.is_read == False)
        return q.order_by(Notification.id.desc()).limit(limit).all()

    def mark_read(self, notification_id: Optional[int] = None) -> int:
        """Mark one notification (or all of them) as read."""
        q = self.db.query(Notification).filter(Notification.is_read == False)
        if notification_id is not None:
            q = q.filter(Notification.id == notification_id)
        count = q.update({Notification.is_read: True}, synchronize_session=False)
        self.db.commit()
        return count

    def get_notification(self, notification_id: int) -> Notification:
        notification = self.db.get(Notification, notification_id)
        if not notification:
            raise NotFoundError("Notification", notification_id)
        return notification

    def delete_notification(self, notification_id: int) -> None:
        notification = self.get_notification(notification_id)
        self.db.delete(notification)
        self.db.commit()

    def delete_read(self) -> int:
        """Remove every notification already marked as read."""
        count = self.db.query(Notification).filter(
            Notification.is_read == True
        ).delete(synchronize_session="fetch")
        self.db.commit()
        logger.info(f"Deleted {count} read notifications")
        return count


def _jsonable(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Dates and decimals become strings so the payload fits a JSON column."""
    result = {}
    for key, value in payload.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            result[key] = value
        else:
            result[key] = str(value)
    return result
