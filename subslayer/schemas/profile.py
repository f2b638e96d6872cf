# subslayer/schemas/profile.py
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

class ProfileRead(BaseModel):
    display_name: str
    email: str
    bio: str
    location: str
    website: str
    avatar: Optional[str] = None
    join_date: datetime
    reminder_days: int
    email_notifications: bool

class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=150)
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=150)
    website: Optional[str] = Field(None, max_length=255)
    avatar: Optional[str] = None
    reminder_days: Optional[int] = Field(None, ge=0, le=60)
    email_notifications: Optional[bool] = None

    # Only the avatar may be cleared with an explicit null
    @field_validator("display_name", "bio", "location", "website", "reminder_days", "email_notifications", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v
