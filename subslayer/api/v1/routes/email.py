# subslayer/api/v1/routes/email.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from subslayer.api.deps import get_current_user
from subslayer.core.auth import User
from subslayer.schemas.email import MessageResponse, SendEmailRequest
from subslayer.utils.emails import is_email_configured, send_email_via_sendgrid

router = APIRouter(prefix="/email", tags=["Email"])
logger = logging.getLogger(__name__)

@router.post("/send", response_model=MessageResponse)
async def send_email(
    payload: SendEmailRequest,
    user: User = Depends(get_current_user),
):
    """Send a transactional email (renewal reminders, support replies)"""
    if not payload.to or not payload.subject or not payload.htmlContent:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing required fields: to, subject, htmlContent"},
        )

    if not is_email_configured():
        logger.error("SendGrid API key not configured; refusing to send email")
        return JSONResponse(status_code=500, content={"error": "Email service is not configured"})

    sent = await send_email_via_sendgrid(payload.to, payload.subject, payload.htmlContent)
    if not sent:
        return JSONResponse(status_code=500, content={"error": "Failed to send email"})

    logger.info(f"Email to {payload.to} requested by {user.email}")
    return {"message": "Email sent successfully"}
