from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ..core.enums import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    recipient_id: str
    sender_id: Optional[str] = None
    type: NotificationType
    message: str
    read: bool
    related_id: Optional[str] = None
    related_model: Optional[str] = None
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int
