import uuid
from sqlalchemy import Column, String, ForeignKey, Boolean, DateTime, Integer, Uuid
from sqlalchemy.orm import relationship
from subslayer.core.database import Base
from datetime import datetime

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    type = Column(String, nullable=False)    # 'renewal' or 'overdue'
    status = Column(String, nullable=False)  # 'urgent', 'reminder', 'alert'
    subscription_id = Column(Uuid(as_uuid=True), ForeignKey("subscriptions.id", ondelete="SET NULL"), nullable=True)
    days_until = Column(Integer, nullable=True)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="notifications")
    subscription = relationship("Subscription", back_populates="notifications")
