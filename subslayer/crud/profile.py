# subslayer/crud/profile.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from subslayer.models.profile import Profile, DEFAULT_BIO
from subslayer.core.auth import User
from subslayer.core.config import settings
from subslayer.schemas.profile import ProfileUpdate
from typing import Optional
import uuid

def default_display_name(user: User) -> str:
    return user.full_name or user.email.split("@")[0]

async def get_profile(user_id: uuid.UUID, db: AsyncSession) -> Optional[Profile]:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalars().first()

async def get_or_create_profile(user: User, db: AsyncSession) -> Profile:
    """Return the stored profile, seeding it from the identity record the first time"""
    profile = await get_profile(user.id, db)
    if profile:
        return profile

    profile = Profile(
        user_id=user.id,
        display_name=default_display_name(user),
        bio=DEFAULT_BIO,
        location="",
        website="",
        avatar=None,
        reminder_days=settings.REMINDER_DAYS_DEFAULT,
        email_notifications=True,
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile

async def update_profile(profile: Profile, profile_in: ProfileUpdate, db: AsyncSession) -> Profile:
    for field, value in profile_in.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile

def profile_to_dict(profile: Profile, user: User) -> dict:
    """Merge the stored fields with identity fields owned by the auth layer"""
    return {
        "display_name": profile.display_name,
        "email": user.email,
        "bio": profile.bio,
        "location": profile.location,
        "website": profile.website,
        "avatar": profile.avatar,
        "join_date": user.created_at,
        "reminder_days": profile.reminder_days,
        "email_notifications": profile.email_notifications,
    }
