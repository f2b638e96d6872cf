# subslayer/models/subscription.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Float, Enum, Date, DateTime, Uuid
from sqlalchemy.orm import relationship
from subslayer.core.database import Base
import enum

DEFAULT_COLOR = "#8B5CF6"
DEFAULT_CURRENCY = "USD"

class BillingCycle(str, enum.Enum):
    monthly = "monthly"
    annual = "annual"

class SubscriptionStatus(str, enum.Enum):
    active = "active"
    paused = "paused"
    cancelled = "cancelled"

class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    description = Column(String(length=500), nullable=True)
    cost = Column(Float, nullable=False)
    currency = Column(String(length=3), nullable=False, default=DEFAULT_CURRENCY)
    billing_cycle = Column(Enum(BillingCycle), nullable=False, default=BillingCycle.monthly)
    next_billing = Column(Date, nullable=False)
    category = Column(String(length=100), nullable=True)
    status = Column(Enum(SubscriptionStatus), nullable=False, default=SubscriptionStatus.active)
    color = Column(String(length=20), nullable=True, default=DEFAULT_COLOR)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="subscriptions")
    notifications = relationship("Notification", back_populates="subscription", passive_deletes=True)

    def __repr__(self):
        return f"<Subscription name={self.name} cost={self.cost} user_id={self.user_id}>"
