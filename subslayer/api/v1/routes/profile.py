# subslayer/api/v1/routes/profile.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from subslayer.api.deps import get_current_user
from subslayer.core.auth import User
from subslayer.core.database import get_async_session
from subslayer.crud.profile import get_or_create_profile, update_profile, profile_to_dict
from subslayer.schemas.profile import ProfileRead, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["Profile"])

@router.get("", response_model=ProfileRead)
async def read_profile(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Current user's profile, seeded from the account the first time it is read"""
    profile = await get_or_create_profile(user, db)
    return profile_to_dict(profile, user)

@router.patch("", response_model=ProfileRead)
async def patch_profile(
    profile_in: ProfileUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Merge the given fields into the stored profile"""
    profile = await get_or_create_profile(user, db)
    try:
        profile = await update_profile(profile, profile_in, db)
    except SQLAlchemyError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error occurred while updating profile"
        )
    return profile_to_dict(profile, user)
