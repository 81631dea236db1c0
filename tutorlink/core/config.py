# tutorlink/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_SLOT_GRANULARITY


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).resolve().parents[2] / ".env"
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = "development"
    log_level: str = "INFO"

    # Identity provider token verification (tokens are issued elsewhere)
    secret_key: SecretStr = Field(
        default=SecretStr("dev-secret-key-change-me"),
        description="Shared secret used to verify identity tokens",
    )
    algorithm: str = "HS256"

    database_url: str = Field(
        default="sqlite:///./tutorlink.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    # Booking rules
    slot_granularity_minutes: int = Field(
        default=DEFAULT_SLOT_GRANULARITY,
        description="Step between bookable start times, in minutes",
    )
    booking_lock_ttl_seconds: int = Field(
        default=30,
        description="Expiry of the per-tutor booking lock",
    )
    booking_lock_wait_seconds: float = Field(
        default=5.0,
        description="How long a booking request waits for the per-tutor lock",
    )

    # Optional shared lock backend; without it locks are process-local
    redis_url: Optional[str] = Field(default=None, description="Redis URL for booking locks")

    is_testing: bool = False

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("slot_granularity_minutes")
    @classmethod
    def _granularity_positive(cls, v: int) -> int:
        if v <= 0 or v > 24 * 60:
            raise ValueError("slot_granularity_minutes must be between 1 and 1440")
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
