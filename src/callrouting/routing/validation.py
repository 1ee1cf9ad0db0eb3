"""
Business hours configuration helpers.

These run when an operator edits the routing settings, never on the live
call path. Days are numbered ISO-style: 1=Monday ... 7=Sunday.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

# 24-hour HH:MM, hour 00-23, minute 00-59
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

DAY_NAMES: dict[int, str] = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}


def is_valid_day(day: int) -> bool:
    return isinstance(day, int) and not isinstance(day, bool) and 1 <= day <= 7


@dataclass(frozen=True)
class BusinessHoursValidation:
    """Outcome of validating a business hours configuration."""

    is_valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "BusinessHoursValidation":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, error: str) -> "BusinessHoursValidation":
        return cls(is_valid=False, error=error)


def format_business_days(days: Iterable[int]) -> str:
    """Serialize days for the settings store: ascending, comma-joined."""
    return ",".join(str(day) for day in sorted(days))


def parse_business_days(value: str) -> List[int]:
    """Parse a stored day list.

    Entries that are not integers in 1..7 are dropped silently. The input
    order is kept; duplicates are not removed.
    """
    days: List[int] = []
    for part in (value or "").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            day = int(part)
        except ValueError:
            continue
        if is_valid_day(day):
            days.append(day)
    return days


def get_day_names(days: Iterable[int]) -> str:
    """Human-readable day list, e.g. ``"Monday, Saturday, Sunday"``."""
    return ", ".join(DAY_NAMES[day] for day in sorted(days) if day in DAY_NAMES)


def _to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def validate_business_hours(start: str, end: str, days: Iterable[int]) -> BusinessHoursValidation:
    """Validate an operator-entered business hours window.

    Checks run in order and the first failure is reported:
    time format, start strictly before end, at least one day, day range.
    """
    if not isinstance(start, str) or not TIME_PATTERN.match(start):
        return BusinessHoursValidation.fail(
            f"Invalid time format for start time: {start!r} (expected HH:MM)"
        )
    if not isinstance(end, str) or not TIME_PATTERN.match(end):
        return BusinessHoursValidation.fail(
            f"Invalid time format for end time: {end!r} (expected HH:MM)"
        )

    if _to_minutes(start) >= _to_minutes(end):
        return BusinessHoursValidation.fail("Start time must be before end time")

    day_list = list(days)
    if not day_list:
        return BusinessHoursValidation.fail("At least one business day must be selected")

    invalid = [day for day in day_list if not is_valid_day(day)]
    if invalid:
        return BusinessHoursValidation.fail(
            f"Invalid day number(s): {', '.join(str(d) for d in invalid)} (must be 1-7)"
        )

    return BusinessHoursValidation.ok()
