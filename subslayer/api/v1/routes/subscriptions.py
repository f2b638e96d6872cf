# subslayer/api/v1/routes/subscriptions.py
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from subslayer.api.deps import get_current_user
from subslayer.core.auth import User
from subslayer.core.database import get_async_session
from subslayer.crud import subscription as crud_subscription
from subslayer.models.subscription import Subscription, SubscriptionStatus
from subslayer.schemas.subscription import (
    BulkDeleteRequest,
    ExtractedSubscription,
    SubscriptionCreate,
    SubscriptionRead,
    SubscriptionUpdate,
)
from subslayer.utils.file_intake import FileIntakeError, analyze_upload

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])
logger = logging.getLogger(__name__)

async def _get_owned_subscription(subscription_id: uuid.UUID, user: User, db: AsyncSession) -> Subscription:
    subscription = await crud_subscription.get_subscription_by_id(subscription_id, user.id, db)
    if not subscription:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")
    return subscription

@router.get("/", response_model=List[SubscriptionRead])
async def list_subscriptions(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """All subscriptions of the current user, newest first"""
    return await crud_subscription.get_subscriptions_for_user(user.id, db)

@router.post("/", response_model=SubscriptionRead, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    sub_in: SubscriptionCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    try:
        subscription = await crud_subscription.create_subscription_for_user(user.id, sub_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create subscription for {user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error occurred while creating subscription"
        )
    logger.info(f"Subscription {subscription.name} created for {user.email}")
    return subscription

@router.post("/intake", response_model=ExtractedSubscription)
async def intake_file(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
):
    """
    Pre-fill a subscription form from an uploaded screenshot, invoice or note.
    Images are matched by file name against known services; nothing is
    stored and the file contents are not inspected.
    """
    content = await file.read()
    try:
        extracted = analyze_upload(file.filename or "", file.content_type, len(content))
    except FileIntakeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return extracted

@router.post("/bulk-delete")
async def bulk_delete_subscriptions(
    payload: BulkDeleteRequest,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    deleted = await crud_subscription.bulk_delete_subscriptions(payload.ids, user.id, db)
    return {"deleted": deleted}

@router.get("/{subscription_id}", response_model=SubscriptionRead)
async def get_subscription(
    subscription_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await _get_owned_subscription(subscription_id, user, db)

@router.patch("/{subscription_id}", response_model=SubscriptionRead)
async def update_subscription(
    subscription_id: uuid.UUID,
    sub_in: SubscriptionUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    subscription = await _get_owned_subscription(subscription_id, user, db)
    try:
        return await crud_subscription.update_subscription(subscription, sub_in, db)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update subscription {subscription_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error occurred while updating subscription"
        )

@router.post("/{subscription_id}/toggle", response_model=SubscriptionRead)
async def toggle_subscription(
    subscription_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Pause an active subscription or resume a paused one"""
    subscription = await _get_owned_subscription(subscription_id, user, db)
    return await crud_subscription.toggle_subscription_status(subscription, db)

@router.post("/{subscription_id}/cancel", response_model=SubscriptionRead)
async def cancel_subscription(
    subscription_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    subscription = await _get_owned_subscription(subscription_id, user, db)
    return await crud_subscription.set_subscription_status(subscription, SubscriptionStatus.cancelled, db)

@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    subscription = await _get_owned_subscription(subscription_id, user, db)
    await crud_subscription.delete_subscription(subscription, db)
