"""
Pytest configuration and shared fixtures for the call routing tests.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Callable
from zoneinfo import ZoneInfo

import pytest

from callrouting.config import get_settings
from callrouting.routing.models import RoutingSettings

LONDON = ZoneInfo("Europe/London")

# 2026-01-05 is a Monday (GMT, no DST offset)
WINTER_MONDAY = date(2026, 1, 5)
# 2026-07-06 is a Monday (BST, UTC+1)
SUMMER_MONDAY = date(2026, 7, 6)


def london_time(day_of_week: int, hour: int, minute: int = 0, *, week_of: date = WINTER_MONDAY) -> datetime:
    """Wall-clock London datetime; day_of_week 1=Mon ... 7=Sun."""
    day = week_of + timedelta(days=day_of_week - 1)
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=LONDON)


@pytest.fixture
def uk_time() -> Callable[..., datetime]:
    return london_time


@pytest.fixture
def make_settings() -> Callable[..., RoutingSettings]:
    """Factory for a fully configured tenant: auto mode, forwarding on, Mon-Fri 08:00-18:00."""

    def _make(**overrides: Any) -> RoutingSettings:
        values: dict[str, Any] = {
            "agent_mode": "auto",
            "forward_enabled": True,
            "forward_number": "+447700900000",
            "fallback_action": "eleven-labs",
            "business_hours_start": "08:00",
            "business_hours_end": "18:00",
            "business_days": "1,2,3,4,5",
            "eleven_labs_agent_id": "test-agent-id",
            "eleven_labs_api_key": "test-api-key",
        }
        values.update(overrides)
        return RoutingSettings(**values)

    return _make


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Environment-driven settings must not leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
