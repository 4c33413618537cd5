"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from session_clock import (
    DEFAULT_DAY_END,
    DEFAULT_START_TIMES,
    DEFAULT_TIMEZONE,
    SessionSchedule,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (for Dramatiq and distributed locks)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/network.log"

    # Session windows
    session_timezone: str = Field(
        default=DEFAULT_TIMEZONE,
        description="IANA timezone the session boundaries are expressed in",
    )
    session_start_times: str = Field(
        default=",".join(DEFAULT_START_TIMES),
        description="Comma-separated HH:MM start times of the 8 daily windows",
    )
    session_day_end: str = Field(
        default=DEFAULT_DAY_END,
        description="End of the last daily window (24:00 = midnight)",
    )

    # Pairing
    pair_capping_per_window: int | None = Field(
        default=None,
        ge=1,
        description="Max pairs per package tier per window (unset = unlimited)",
    )
    pairing_lock_timeout: int = Field(
        default=30, ge=1, description="Per-participant pairing lock timeout in seconds"
    )

    # Placement tree
    downline_default_depth: int = Field(
        default=1, ge=0, description="Downline depth used when a query names none"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
            raise ValueError(
                "DATABASE_URL must start with postgresql+asyncpg:// "
                "or sqlite+aiosqlite://"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_session_schedule(self) -> "Settings":
        """Fail fast on a broken session schedule."""
        self.get_session_schedule()
        return self

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production":
            if self.debug:
                raise ValueError(
                    "DEBUG must be False in production environment. "
                    "Set DEBUG=false in your .env file."
                )
            if self.database_url.startswith("sqlite"):
                logger.warning(
                    "DATABASE_URL points to SQLite in production. "
                    "Slot-fill races are only serialized per process."
                )
        return self

    def get_session_schedule(self) -> SessionSchedule:
        """Build the session schedule from the configured boundaries."""
        start_times = tuple(
            item.strip() for item in self.session_start_times.split(",") if item.strip()
        )
        return SessionSchedule(
            start_times=start_times,
            day_end=self.session_day_end,
            timezone=self.session_timezone,
        )


# Global settings instance
settings = Settings()
