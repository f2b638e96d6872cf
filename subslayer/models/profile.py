# subslayer/models/profile.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Boolean, Integer, DateTime, Text, Uuid
from sqlalchemy.orm import relationship
from subslayer.core.database import Base

DEFAULT_BIO = "Subscription management enthusiast"

class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    display_name = Column(String(length=150), nullable=False, default="")
    bio = Column(String(length=500), nullable=False, default=DEFAULT_BIO)
    location = Column(String(length=150), nullable=False, default="")
    website = Column(String(length=255), nullable=False, default="")
    # data URL or remote URL; may be large
    avatar = Column(Text, nullable=True)

    # Renewal reminder preferences
    reminder_days = Column(Integer, nullable=False, default=7)
    email_notifications = Column(Boolean, nullable=False, default=True)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="profile", lazy="joined")

    def __repr__(self):
        return f"<Profile display_name={self.display_name} user_id={self.user_id}>"
