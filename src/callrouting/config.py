"""
Application configuration with environment-driven settings.

Per-tenant routing settings are NOT loaded here; they arrive with every call
from the settings store (see callrouting.routing.settings_store). This module
only carries process-wide knobs: logging, the business timezone and the
environment fallbacks for the conversational agent credentials.
"""

from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "callrouting"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    # Business clock
    business_timezone: str = Field(
        default="Europe/London",
        description="IANA timezone the business hours are expressed in",
    )

    # Conversational agent fallbacks (used when the settings store has none)
    eleven_labs_agent_id: str = Field(
        default="",
        description="Default Eleven Labs agent id",
    )
    eleven_labs_api_key: str = Field(
        default="",
        description="Eleven Labs API key",
    )

    @field_validator("business_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names the tz database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v!r}") from exc
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    @property
    def business_tzinfo(self) -> ZoneInfo:
        """Resolved business timezone."""
        return ZoneInfo(self.business_timezone)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
