# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a default so the service can boot against a local
    SQLite file. Override in .env or the process environment:
      - DATABASE_URL (any SQLAlchemy URL)
      - CART_SESSION_TTL_SECONDS (idle time before a cart is dropped)
      - CHECKOUT_MAX_ATTEMPTS (attempts on concurrent stock conflicts)
    """

    PROJECT_NAME: str = "Cart Checkout Service"
    API_V1_STR: str = "/api/v1"

    # Database
    DATABASE_URL: str = "sqlite:///./cart.db"
    DB_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Session-scoped carts
    CART_SESSION_COOKIE: str = "cart_session"
    CART_SESSION_TTL_SECONDS: int = 1800

    # Checkout
    CHECKOUT_MAX_ATTEMPTS: int = 3

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
