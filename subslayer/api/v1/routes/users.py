# subslayer/api/v1/routes/users.py
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi_users import BaseUserManager
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from subslayer.core.auth import get_user_manager, User, UserRead, UserUpdate
from subslayer.core.database import get_async_session
from subslayer.api.deps import get_current_user

router = APIRouter(tags=["User Management"])

@router.get("/me", response_model=UserRead)
async def read_own_user(
    user: User = Depends(get_current_user)
):
    """Get the identity record of the current user"""
    return user

@router.patch("/me", response_model=UserRead)
async def update_own_user(
    user_update: UserUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
):
    """Update the current user's name. Email and password go through the auth routes."""
    update_dict = user_update.model_dump(exclude_unset=True, include={"full_name"})

    if not update_dict:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update"
        )

    user_id = uuid.UUID(str(user.id))
    try:
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(**update_dict)
        )
        await db.commit()

        result = await db.execute(
            select(User).where(User.id == user_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error occurred while updating user: {str(e)}"
        )

@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_own_user(
    user: User = Depends(get_current_user),
    user_manager: BaseUserManager[User, uuid.UUID] = Depends(get_user_manager),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete the current account together with its subscriptions, profile and notifications"""
    try:
        await user_manager.delete(user)
        await db.commit()
        return

    except SQLAlchemyError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error occurred while deleting account"
        )
