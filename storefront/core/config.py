# storefront/core/config.py
from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)

    Optional:
      - SUPABASE_JWT_SECRET (verify session tokens on restore/sign-in)
      - SHIPPING_FEE, MEMBERS_ONLY_CATEGORIES, NOTIFICATION_BUFFER
    """

    PROJECT_NAME: str = "Storefront"
    API_V1_STR: str = "/api/v1"

    # Supabase config
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Token verification; claims are read unverified when no secret is set
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_ALG: str = "HS256"

    # Flat shipping fee added to a non-empty cart at checkout
    SHIPPING_FEE: Decimal = Decimal("5.99")

    # Category names hidden from guests (compared lowercase)
    MEMBERS_ONLY_CATEGORIES: list[str] = ["clothing", "accessories"]

    # How many toasts are kept until the client drains them
    NOTIFICATION_BUFFER: int = 50

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
