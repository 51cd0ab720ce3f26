# advisor_booking/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_REMINDER_INTERVAL_MINUTES, SERVICE_NAME

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEV_SECRET_KEY = "dev-only-secret-key-change-me"

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _PROJECT_ROOT / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


class Settings(BaseSettings):
    app_name: str = SERVICE_NAME
    environment: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Deployment environment; admin creation is refused in production",
    )
    is_testing: bool = Field(
        default=False,
        alias="IS_TESTING",
        description="Set when running tests; disables background workers",
    )

    database_url: str = Field(
        default=f"sqlite:///{_PROJECT_ROOT / 'advisor_booking.db'}",
        alias="DATABASE_URL",
    )
    db_lock_timeout_seconds: float = Field(
        default=10.0,
        alias="DB_LOCK_TIMEOUT_SECONDS",
        description="Upper bound on waiting for a row/database lock inside a booking transaction",
    )
    db_pool_size: int = Field(default=5, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, alias="DB_MAX_OVERFLOW")

    secret_key: SecretStr = Field(default=SecretStr(DEV_SECRET_KEY), alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="ALGORITHM")
    access_token_expire_minutes: int = Field(default=1440, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    email_provider: Literal["console", "resend"] = Field(
        default="console",
        alias="EMAIL_PROVIDER",
        description="Email provider name",
    )
    resend_api_key: str | None = Field(
        default=None,
        alias="RESEND_API_KEY",
        description="API key for Resend provider (optional)",
    )
    from_email: str = Field(default="citas@advisor-booking.local", alias="FROM_EMAIL")
    from_name: str = Field(default="Advisor Booking", alias="FROM_NAME")

    reminder_scheduler_enabled: bool = Field(default=True, alias="REMINDER_SCHEDULER_ENABLED")
    reminder_interval_minutes: int = Field(
        default=DEFAULT_REMINDER_INTERVAL_MINUTES,
        alias="REMINDER_INTERVAL_MINUTES",
        ge=1,
    )

    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")

    admin_email: str = Field(default="admin@example.com", alias="ADMIN_EMAIL")
    admin_password: SecretStr = Field(default=SecretStr("admin12345"), alias="ADMIN_PASSWORD")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        alias="CORS_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("secret_key")
    @classmethod
    def require_real_secret_in_production(cls, value: SecretStr, info: ValidationInfo) -> SecretStr:
        if info.data.get("environment") == "production" and (
            not value.get_secret_value() or value.get_secret_value() == DEV_SECRET_KEY
        ):
            raise ValueError("SECRET_KEY must be set in production")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return (value or "INFO").upper()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.from_email}>"


settings = Settings()
