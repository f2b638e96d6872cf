# subslayer/main.py
import uvicorn
import os
import logging
from fastapi import FastAPI, HTTPException, Form, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_users import exceptions
from subslayer.core.config import settings
from subslayer.core.database import engine, Base
from subslayer.core.auth import (
    fastapi_users,
    auth_backend,
    get_user_manager,
    UserManager,
    UserRead,
    UserCreate,
)
# Registers every table on Base.metadata
from subslayer.models import user as _models  # noqa: F401
from subslayer.api.v1.api import api_router
from subslayer.api.v1.routes import auth

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create all tables on startup; Alembic owns schema changes after that
async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login, token refresh and email confirmation"},
        {"name": "User Management", "description": "Identity record of the signed-in user"},
        {"name": "Profile", "description": "Display profile and reminder preferences"},
        {"name": "subscriptions", "description": "Tracked subscription services"},
        {"name": "dashboard", "description": "Spending analytics"},
        {"name": "Checkout", "description": "Upgrade to SubSlayer Pro"},
        {"name": "Notifications", "description": "Renewal reminders"},
    ],
)

# CORS Configuration
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Last-resort handler: log the failure and hide internals from the client"""
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail}
        )

    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

# ------------------------------------------------------------
# AUTHENTICATION ROUTES
# ------------------------------------------------------------

# Custom auth routes (logout, refresh, resend-confirmation) go first so they
# win over the fastapi-users routers on shared paths
app.include_router(
    auth.router,
    prefix="/api/v1/auth",
    tags=["Authentication"],
)

app.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/api/v1/auth/jwt",
    tags=["Authentication"],
)

app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/api/v1/auth",
    tags=["Authentication"],
)

app.include_router(
    fastapi_users.get_verify_router(UserRead),
    prefix="/api/v1/auth",
    tags=["Authentication"],
)

app.include_router(
    fastapi_users.get_reset_password_router(),
    prefix="/api/v1/auth",
    tags=["Authentication"],
)

@app.post("/api/v1/auth/verify-email", tags=["Authentication"])
async def verify_email_form(
    token: str = Form(...),
    user_manager: UserManager = Depends(get_user_manager)
):
    """Email verification for links opened from the confirmation email (form post)"""
    try:
        await user_manager.verify(token)
        return {"message": "Email verified successfully"}
    except exceptions.UserAlreadyVerified:
        return {"message": "Email already verified"}
    except (exceptions.InvalidVerifyToken, exceptions.UserNotExists) as e:
        logger.error(f"Email verification failed: {type(e).__name__}")
        raise HTTPException(status_code=400, detail="Invalid or expired verification token")

# ------------------------------------------------------------
# ROOT / HEALTH
# ------------------------------------------------------------
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "SubSlayer API is running!",
        "version": settings.VERSION
    }

@app.get("/health", tags=["Root"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "email_configured": bool(settings.SENDGRID_API_KEY),
        "checkout_configured": bool(settings.STRIPE_SECRET_KEY),
    }

# ------------------------------------------------------------
# BUSINESS LOGIC ROUTES
# ------------------------------------------------------------
app.include_router(api_router, prefix="/api/v1")

# ------------------------------------------------------------
# STARTUP EVENT
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    await create_db_and_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"✅ Frontend URL: {settings.FRONTEND_URL}")

    if not settings.SENDGRID_API_KEY:
        logger.warning("⚠️ SendGrid API key not configured - emails will not be sent")
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("⚠️ Stripe secret key not configured - checkout is unavailable")

def run():
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("subslayer.main:app", host="0.0.0.0", port=port, reload=False)

if __name__ == "__main__":
    run()
