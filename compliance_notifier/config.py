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
    app_timezone: str = Field(
        default="Pacific/Auckland",
        description="IANA timezone (or UTC offset) used for stored datetimes",
    )
    app_base_url: str = Field(
        default="https://portal.ranz.org.nz",
        description="Public base URL of the portal, used for links in messages",
    )
    log_level: str = Field(default="INFO")
    cron_secret: str | None = Field(
        default=None,
        description="Shared secret expected in the Authorization header of cron calls",
    )

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )

    twilio_account_sid: str | None = Field(default=None)
    twilio_auth_token: str | None = Field(default=None)
    twilio_phone_number: str | None = Field(
        default=None, description="Sender number for outbound SMS"
    )
    twilio_timeout_seconds: float = Field(default=10.0, gt=0)

    lbp_api_base_url: str = Field(
        default="https://portal.api.business.govt.nz/api/lbp",
        description="Base URL of the Licensed Building Practitioner register API",
    )
    lbp_api_key: str | None = Field(default=None)
    lbp_timeout_seconds: float = Field(default=10.0, gt=0)

    notification_max_retries: int = Field(default=3, gt=0)
    retry_initial_backoff_seconds: int = Field(default=30, gt=0)
    retry_max_backoff_seconds: int = Field(default=900, gt=0)
    scheduled_batch_size: int = Field(default=100, gt=0)
    retry_batch_size: int = Field(default=50, gt=0)

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @model_validator(mode="after")
    def _validate_backoff_bounds(self) -> "Settings":
        if self.retry_max_backoff_seconds < self.retry_initial_backoff_seconds:
            raise ValueError(
                "RETRY_MAX_BACKOFF_SECONDS must not be lower than RETRY_INITIAL_BACKOFF_SECONDS"
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
