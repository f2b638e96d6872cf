# subslayer/core/config.py

from pathlib import Path
from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "SubSlayer API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"

    # Database Configuration (required: startup fails without it)
    DATABASE_URL: str

    # JWT / Security Configuration (required)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    # How long after expiry a token can still be exchanged for a new one
    REFRESH_GRACE_MINUTES: int = 10080

    # CORS / links in emails
    FRONTEND_URL: str = "http://localhost:5173"

    # SendGrid Configuration; an empty key disables outbound email
    SENDGRID_API_KEY: str = ""
    EMAIL_FROM: EmailStr = "noreply@subslayer.app"
    EMAIL_FROM_NAME: str = "SubSlayer"

    # Stripe Configuration; an empty key disables checkout
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"
    STRIPE_TEST_MODE: bool = True

    # Renewal reminders
    REMINDER_DAYS_DEFAULT: int = 7

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @property
    def is_sqlite(self) -> bool:
        """SQLite engines reject the connection pool sizing used for Postgres"""
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_supabase(self) -> bool:
        """Check if we're using Supabase database"""
        return any(d in self.DATABASE_URL for d in [
            "supabase.co",
            "supabase.com",
            "pooler.supabase",
        ])

# Create a global settings instance
settings = Settings()
