"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    password_hash_rounds: int = Field(
        default=310_000,
        description="PBKDF2-SHA256 rounds used when hashing passwords",
        ge=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone (or UTC±HH:MM offset) used for stored timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:8080"],
        description="Origins allowed to call the API with credentials",
    )
    notification_channel_capacity: int = Field(
        default=32,
        description="Events buffered per live receiver before the oldest is dropped",
        gt=0,
    )
    channel_retention_seconds: float = Field(
        default=300.0,
        description="Idle time after which a per-user channel without receivers is pruned",
        gt=0,
    )
    typing_liveness_seconds: float = Field(
        default=5.0,
        description="Age below which a typing marker counts as currently typing",
        gt=0,
    )
    typing_staleness_seconds: float = Field(
        default=10.0,
        description="Age after which a typing marker is physically removed",
        gt=0,
    )
    maintenance_interval_seconds: float = Field(
        default=5.0,
        description="Interval between typing sweeps and channel pruning runs",
        gt=0,
    )
    sse_keepalive_seconds: float = Field(
        default=15.0,
        description="Idle time after which a keep-alive event is sent on live streams",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_typing_windows(self) -> "Settings":
        if self.typing_staleness_seconds <= self.typing_liveness_seconds:
            raise ValueError(
                "TYPING_STALENESS_SECONDS must be greater than TYPING_LIVENESS_SECONDS"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
