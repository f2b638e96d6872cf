# subslayer/schemas/email.py
from typing import Optional
from pydantic import BaseModel

# Fields are optional so the route can answer 400 itself instead of a 422
class SendEmailRequest(BaseModel):
    to: Optional[str] = None
    subject: Optional[str] = None
    htmlContent: Optional[str] = None

class ResendConfirmationRequest(BaseModel):
    email: Optional[str] = None

class MessageResponse(BaseModel):
    message: str
