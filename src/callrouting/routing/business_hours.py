"""
Business hours evaluation in the business's own civil timezone.

Instants are converted with zoneinfo, so the wall-clock hour is correct on
both sides of a daylight-saving change. The window is half-open: the start
minute is inside business hours, the end minute is not.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import FrozenSet, Optional

from callrouting.config import get_settings
from callrouting.routing.models import RoutingSettings

DEFAULT_START = "08:00"
DEFAULT_END = "18:00"
DEFAULT_BUSINESS_DAYS: FrozenSet[int] = frozenset({1, 2, 3, 4, 5})

# Lenient on purpose: "8:00" is accepted at evaluation time
_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


@dataclass(frozen=True)
class BusinessClock:
    """Snapshot of the business clock at one instant."""

    local_time: datetime
    weekday: int  # 1=Monday ... 7=Sunday
    minutes_of_day: int
    start_minutes: int
    end_minutes: int
    business_days: FrozenSet[int]

    @property
    def is_business_day(self) -> bool:
        return self.weekday in self.business_days

    @property
    def is_within_hours(self) -> bool:
        return self.is_business_day and self.start_minutes <= self.minutes_of_day < self.end_minutes

    def as_log_fields(self) -> dict:
        return {
            "local_time": self.local_time.isoformat(),
            "weekday": self.weekday,
            "business_days": sorted(self.business_days),
            "window": f"{_format_minutes(self.start_minutes)}-{_format_minutes(self.end_minutes)}",
            "within_hours": self.is_within_hours,
        }


def _format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_clock_minutes(value: Optional[str], default: str) -> int:
    """Minutes since midnight for an "HH:MM" string, or for ``default``."""
    match = _CLOCK_PATTERN.match(value) if isinstance(value, str) else None
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return hours * 60 + minutes
    hours, minutes = default.split(":")
    return int(hours) * 60 + int(minutes)


def resolve_business_timezone(tz: Optional[tzinfo] = None) -> tzinfo:
    """``tz`` if given, else the configured business timezone."""
    if tz is not None:
        return tz
    return get_settings().business_tzinfo


def to_business_time(instant: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    """Convert an instant to wall-clock time in ``tz``.

    Naive datetimes are taken to be UTC. Without ``tz`` the zone comes from
    ``Settings.business_timezone``.
    """
    tz = resolve_business_timezone(tz)
    if instant is None:
        instant = datetime.now(timezone.utc)
    elif instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz)


def describe_business_clock(
    settings: RoutingSettings,
    instant: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> BusinessClock:
    local = to_business_time(instant, tz)
    start = parse_clock_minutes(settings.business_hours_start, DEFAULT_START)
    end = parse_clock_minutes(settings.business_hours_end, DEFAULT_END)
    return BusinessClock(
        local_time=local,
        weekday=local.isoweekday(),
        minutes_of_day=local.hour * 60 + local.minute,
        start_minutes=start,
        end_minutes=end,
        business_days=settings.business_days or DEFAULT_BUSINESS_DAYS,
    )


def is_within_business_hours(
    settings: RoutingSettings,
    instant: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    """True iff ``instant`` falls on a business day inside [start, end)."""
    return describe_business_clock(settings, instant, tz).is_within_hours
