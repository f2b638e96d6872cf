# subslayer/crud/subscription.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from subslayer.models.subscription import Subscription, SubscriptionStatus
from typing import List, Optional, Sequence
import uuid
from subslayer.schemas.subscription import SubscriptionCreate, SubscriptionUpdate

async def get_subscriptions_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Subscription]:
    """Newest first, the order the dashboard lists them in"""
    result = await db.execute(
        select(Subscription)
        .where(Subscription.user_id == user_id)
        .order_by(Subscription.created_at.desc())
    )
    return list(result.scalars().all())

async def get_subscription_by_id(subscription_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Subscription]:
    result = await db.execute(
        select(Subscription).where(Subscription.id == subscription_id, Subscription.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_subscription_for_user(user_id: uuid.UUID, sub_in: SubscriptionCreate, db: AsyncSession) -> Subscription:
    new_sub = Subscription(**sub_in.model_dump(), user_id=user_id)
    db.add(new_sub)
    await db.commit()
    await db.refresh(new_sub)
    return new_sub

async def update_subscription(subscription: Subscription, sub_in: SubscriptionUpdate, db: AsyncSession) -> Subscription:
    for field, value in sub_in.model_dump(exclude_unset=True).items():
        setattr(subscription, field, value)
    db.add(subscription)
    await db.commit()
    await db.refresh(subscription)
    return subscription

async def set_subscription_status(subscription: Subscription, status: SubscriptionStatus, db: AsyncSession) -> Subscription:
    subscription.status = status
    db.add(subscription)
    await db.commit()
    await db.refresh(subscription)
    return subscription

async def toggle_subscription_status(subscription: Subscription, db: AsyncSession) -> Subscription:
    """Active becomes paused; paused or cancelled becomes active"""
    if subscription.status == SubscriptionStatus.active:
        new_status = SubscriptionStatus.paused
    else:
        new_status = SubscriptionStatus.active
    return await set_subscription_status(subscription, new_status, db)

async def delete_subscription(subscription: Subscription, db: AsyncSession) -> None:
    await db.delete(subscription)
    await db.commit()

async def bulk_delete_subscriptions(ids: Sequence[uuid.UUID], user_id: uuid.UUID, db: AsyncSession) -> int:
    """Delete only the rows among ``ids`` that belong to ``user_id``"""
    result = await db.execute(
        delete(Subscription)
        .where(Subscription.user_id == user_id, Subscription.id.in_(list(ids)))
    )
    await db.commit()
    return result.rowcount
