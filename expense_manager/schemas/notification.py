"""
Notification Schemas
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from expense_manager.models.lifecycle import NotificationType


class NotificationResponse(BaseModel):
    """Schema for a user notification"""
    id: int
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: datetime
    read_at: Optional[datetime] = None
    expense_id: Optional[int] = None
    triggered_by_name: Optional[str] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class UnreadCountResponse(BaseModel):
    unread_count: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True
