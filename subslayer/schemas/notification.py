# subslayer/schemas/notification.py
from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional
from datetime import datetime
import uuid

NotificationType = Literal["renewal", "overdue"]
NotificationStatus = Literal["urgent", "reminder", "alert"]

class NotificationBase(BaseModel):
    title: str
    message: str
    type: NotificationType
    status: NotificationStatus
    subscription_id: Optional[uuid.UUID] = None
    # Negative for overdue payments
    days_until: Optional[int] = None

class NotificationCreate(NotificationBase):
    user_id: uuid.UUID

class NotificationRead(NotificationBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    is_read: bool
    created_at: datetime

class RenewalRunResult(BaseModel):
    """Outcome of one renewal reminder run"""
    created: int
    emailed: int
