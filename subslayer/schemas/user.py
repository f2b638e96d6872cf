# subslayer/schemas/user.py
# Registration / read / update schemas live in core/auth.py beside the
# fastapi-users wiring; this module holds the extra auth payloads.
from typing import Optional
from pydantic import BaseModel

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: Optional[str] = None
