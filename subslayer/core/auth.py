# subslayer/core/auth.py

import uuid
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, BaseUserManager, UUIDIDMixin, exceptions
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users import schemas

from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.ext.asyncio import AsyncSession

import jwt

from .database import Base, get_async_session
from .config import settings
from subslayer.utils.emails import (
    send_email_via_sendgrid,
    render_verification_email,
    render_welcome_email,
    render_password_reset_email,
)

logger = logging.getLogger(__name__)

AUTH_TOKEN_AUDIENCE = ["fastapi-users:auth"]

# 1. User DB model
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    full_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    subscriptions = relationship(
        "Subscription",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    profile = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

def get_secret_key() -> str:
    # Convert SecretStr to str if needed
    return str(settings.SECRET_KEY) if hasattr(settings.SECRET_KEY, "get_secret_value") else settings.SECRET_KEY

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token for the given subject (user ID).

    The audience matches the JWTStrategy below, so tokens minted here are
    accepted by every fastapi-users protected route.
    """
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": subject,
        "aud": AUTH_TOKEN_AUDIENCE,
        "exp": expire,
        "iat": datetime.utcnow(),
    }

    return jwt.encode(payload, get_secret_key(), algorithm=settings.ALGORITHM)

def decode_access_token(token: str, leeway: timedelta = timedelta(0)) -> Optional[str]:
    """
    Return the subject of a token signed by us, or None when it is not valid.
    ``leeway`` lets a recently expired token through (used by refresh).
    """
    try:
        payload = jwt.decode(
            token,
            get_secret_key(),
            algorithms=[settings.ALGORITHM],
            audience=AUTH_TOKEN_AUDIENCE,
            leeway=leeway,
        )
    except jwt.InvalidTokenError:
        return None
    return payload.get("sub")

# 2. Pydantic schemas
class UserRead(schemas.BaseUser[uuid.UUID]):
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None

class UserCreate(schemas.BaseUserCreate):
    full_name: Optional[str] = None

class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None

# 3. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} has registered. Sending welcome email…")

        subject, html_body = render_welcome_email(user.full_name or user.email.split('@')[0])
        await send_email_via_sendgrid(user.email, subject, html_body)

        try:
            # Generates a verification token and calls on_after_request_verify
            await self.request_verify(user, request)
        except exceptions.FastAPIUsersException as e:
            logger.error(f"❌ Could not request verification for {user.email}: {type(e).__name__}")

    async def on_after_request_verify(self, user: User, token: str, request: Optional[Request] = None):
        logger.info(f"Verification requested for user {user.email}. Token: {token[:10]}...")

        verification_url = f"{settings.FRONTEND_URL}/verify-email?token={token}"
        subject, html_body = render_verification_email(
            user.full_name or user.email.split('@')[0],
            verification_url,
        )

        success = await send_email_via_sendgrid(user.email, subject, html_body)
        if success:
            logger.info(f"✅ Verification email sent successfully to {user.email}")
        else:
            logger.error(f"❌ Failed to send verification email to {user.email}")

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None):
        logger.info(f"Password reset requested for user {user.email}. Token: {token[:10]}...")

        reset_url = f"{settings.FRONTEND_URL}/reset-password?token={token}"
        subject, html_body = render_password_reset_email(
            user.full_name or user.email.split('@')[0],
            reset_url,
        )

        success = await send_email_via_sendgrid(user.email, subject, html_body)
        if success:
            logger.info(f"✅ Password reset email sent successfully to {user.email}")
        else:
            logger.error(f"❌ Failed to send password reset email to {user.email}")

    async def on_after_verify(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} has been verified successfully! 🎉")

    async def on_after_reset_password(self, user: User, request: Optional[Request] = None):
        logger.info(f"Password reset completed for user {user.email}")

# 4. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)

# 5. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)

# 6. Authentication
bearer_transport = BearerTransport(tokenUrl="/api/v1/auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=get_secret_key(),
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        token_audience=AUTH_TOKEN_AUDIENCE,
    )

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# 7. FastAPI Users instance
fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

__all__ = [
    "fastapi_users",
    "auth_backend",
    "get_user_db",
    "get_user_manager",
    "create_access_token",
    "decode_access_token",
    "User",
    "UserRead",
    "UserCreate",
    "UserUpdate",
]
