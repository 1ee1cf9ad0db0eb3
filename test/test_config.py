"""
Tests for application configuration.
"""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from callrouting.config import Settings, get_settings


class TestSettings:
    def test_default_values(self) -> None:
        # Environment variables may override defaults; check the declared field defaults.
        assert Settings.model_fields["business_timezone"].default == "Europe/London"
        assert Settings.model_fields["log_level"].default == "INFO"
        assert Settings.model_fields["app_env"].default == "dev"

    def test_custom_values(self) -> None:
        config = Settings(
            app_env="prod",
            log_level="debug",
            business_timezone="America/New_York",
            eleven_labs_agent_id="agent",
            eleven_labs_api_key="key",
        )

        assert config.app_env == "prod"
        assert config.log_level == "DEBUG"
        assert config.business_tzinfo == ZoneInfo("America/New_York")
        assert config.eleven_labs_agent_id == "agent"
        assert config.eleven_labs_api_key == "key"

    def test_unknown_timezone_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(business_timezone="Mars/Olympus_Mons")

    def test_unknown_app_env_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(app_env="staging")

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("BUSINESS_TIMEZONE", "Europe/Dublin")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        config = Settings()

        assert config.business_timezone == "Europe/Dublin"
        assert config.log_level == "WARNING"


class TestGetSettings:
    def test_returns_settings_instance(self) -> None:
        assert isinstance(get_settings(), Settings)

    def test_is_cached(self) -> None:
        assert get_settings() is get_settings()
