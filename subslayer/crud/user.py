# subslayer/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from subslayer.core.auth import User
from typing import Optional
import uuid

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    # fastapi-users stores emails as typed; match case-insensitively
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()
