"""Application settings using Pydantic."""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    This uses Pydantic to:
    1. Load values from .env file
    2. Validate data types
    3. Provide defaults
    """

    # API Settings
    PROJECT_NAME: str = "Kitchen Storefront"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Environment & Logging
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Public site URL used for payment redirects and email links
    SITE_URL: str = "http://localhost:3000"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]

    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None  # anon key
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None  # server-side key for table access
    # Cookie carrying the Supabase access token on page requests
    ACCESS_TOKEN_COOKIE: str = "sb-access-token"

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None  # For verifying webhook events
    STRIPE_WEBHOOK_TOLERANCE: int = 300  # seconds

    # Pricing
    CURRENCY: str = "usd"
    TAX_RATE: float = 0.08
    DEFAULT_DELIVERY_FEE: float = 2.99

    # Media CDN (product images on hosted checkout)
    CLOUDINARY_CLOUD_NAME: Optional[str] = None

    # Email delivery (Resend preferred, SendGrid fallback)
    RESEND_API_KEY: Optional[str] = None
    SENDGRID_API_KEY: Optional[str] = None
    EMAIL_FROM_ADDRESS: str = "orders@example.com"
    EMAIL_FROM_NAME: str = "Kitchen Storefront"
    SHOP_NAME: str = "Kitchen Storefront"

    # Redis / Celery
    REDIS_URL: str = "redis://localhost:6379"
    CELERY_BROKER_URL: Optional[str] = None
    CELERY_RESULT_BACKEND: Optional[str] = None
    CELERY_TASK_ALWAYS_EAGER: bool = False

    # Order lifecycle
    # When true, admins may only move an order one step forward or cancel it.
    ORDER_STATUS_STRICT_TRANSITIONS: bool = False
    ABANDONED_ORDER_TTL_HOURS: int = 24

    # Opening hours are interpreted in this zone
    SHOP_TIMEZONE: str = "UTC"

    # Load environment variables from .env; extra fields are ignored.
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_file_encoding='utf-8',
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Create cached settings instance.
    """
    return Settings()


# Create a single instance for easy importing
settings = get_settings()
