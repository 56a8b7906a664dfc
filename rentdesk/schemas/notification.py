"""
Notification schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    kind: str
    title: str
    message: str
    priority: str
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[int] = None
    payload: Dict[str, Any] = {}
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    data: List[NotificationResponse]
    total: int
    unread: int
