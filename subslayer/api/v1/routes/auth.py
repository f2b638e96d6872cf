# subslayer/api/v1/routes/auth.py
import logging
import uuid
from datetime import timedelta

from fastapi import APIRouter, Depends, Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from fastapi_users import exceptions
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from subslayer.core.config import settings
from subslayer.core.database import get_async_session
from subslayer.core.auth import (
    UserManager,
    get_user_manager,
    create_access_token,
    decode_access_token,
)
from subslayer.api.deps import extract_token, optional_security
from subslayer.crud.user import get_user_by_id, get_user_by_email
from subslayer.schemas.email import MessageResponse, ResendConfirmationRequest
from subslayer.schemas.user import Token

router = APIRouter(tags=["Authentication"])
logger = logging.getLogger(__name__)

@router.post("/jwt/logout", status_code=status.HTTP_200_OK)
async def logout():
    """
    Logout endpoint that doesn't require authentication. Tokens are stateless,
    so the client drops its stored copy.
    """
    return {"detail": "Successfully logged out"}

@router.post("/jwt/refresh", response_model=Token)
async def refresh_token(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
):
    """
    Exchange a valid or recently expired token for a fresh one. Fails with
    401 when the token is unknown, too old or its user is gone or inactive.
    """
    token = extract_token(request, credentials)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    subject = decode_access_token(token, leeway=timedelta(minutes=settings.REFRESH_GRACE_MINUTES))
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Refresh Token")

    try:
        user = await get_user_by_id(uuid.UUID(subject), db)
    except ValueError:
        user = None

    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="refresh_token_not_found")

    return Token(
        access_token=create_access_token(str(user.id)),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

@router.post("/resend-confirmation", response_model=MessageResponse)
async def resend_confirmation(
    payload: ResendConfirmationRequest,
    db: AsyncSession = Depends(get_async_session),
    user_manager: UserManager = Depends(get_user_manager),
):
    """Send the email verification link again"""
    if not payload.email:
        return JSONResponse(status_code=400, content={"error": "Email is required"})

    user = await get_user_by_email(payload.email, db)
    if not user:
        return JSONResponse(status_code=404, content={"error": "User not found"})

    try:
        await user_manager.request_verify(user)
    except (exceptions.UserAlreadyVerified, exceptions.UserInactiveException) as e:
        logger.warning(f"Resend confirmation refused for {user.email}: {type(e).__name__}")
        return JSONResponse(status_code=500, content={"error": "Failed to resend confirmation email"})

    return {"message": "Confirmation email resent successfully"}
