# inventory_api/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal

class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = False

    # Security
    SECRET_KEY: str
    ALGORITHM: Literal["HS256", "HS512"] = "HS512"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Database
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # Email (Resend)
    RESEND_API_KEY: str | None = None
    RESEND_FROM_EMAIL: str = "no-reply@example.com"
    NOTIFICATION_TIMEOUT_SECONDS: float = 10.0

    # Low stock alerts are sent here
    ADMIN_NOTIFICATION_EMAIL: str = "admin@example.com"

    # Optimistic retries when two writers race on the same product row
    STOCK_UPDATE_MAX_RETRIES: int = 5

    RATE_LIMIT_ENABLED: bool = True

    # Browser front ends allowed to call the API
    CORS_ORIGINS: list[str] = ["http://127.0.0.1:5500", "http://localhost:5500"]

    INTERNAL_ADMIN_SECRET: str



    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
    )


settings = Settings()
