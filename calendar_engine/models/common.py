# File: calendar_engine/models/common.py
"""
Shared value types and parsing helpers: wall-clock times and calendar dates.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    Wall-clock time stored as minutes since midnight.

    Values past 23:59 are allowed and represent overflow into the next day;
    callers clamp them against their own daily window.
    """
    minutes: int

    def __post_init__(self):
        if not isinstance(self.minutes, int) or isinstance(self.minutes, bool):
            raise TypeError(f"TimeOfDay minutes must be an int, got {self.minutes!r}")
        if self.minutes < 0:
            raise ValueError(f"TimeOfDay cannot be negative: {self.minutes}")

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> 'TimeOfDay':
        """Build from an hour (0-23) and minute (0-59)."""
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23: {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59: {minute}")
        return cls(hour * 60 + minute)

    @classmethod
    def parse(cls, value: Union[str, 'TimeOfDay']) -> 'TimeOfDay':
        """Parse "HH:MM" strictly, raising ValueError on anything else."""
        if isinstance(value, TimeOfDay):
            return value
        parsed = parse_time_of_day(value)
        if parsed is None:
            raise ValueError(f"Invalid time of day (expected HH:MM): {value!r}")
        return parsed

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    @property
    def overflows(self) -> bool:
        """True when the value lies past 23:59."""
        return self.minutes >= MINUTES_PER_DAY

    def add_minutes(self, minutes: int) -> 'TimeOfDay':
        return TimeOfDay(self.minutes + minutes)

    def minutes_until(self, other: 'TimeOfDay') -> int:
        return other.minutes - self.minutes

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def parse_time_of_day(value: Optional[str]) -> Optional[TimeOfDay]:
    """Parse an "HH:MM" string into a TimeOfDay, or None if it is malformed."""
    if not value or not isinstance(value, str):
        return None
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        return None
    return TimeOfDay.of(int(match.group(1)), int(match.group(2)))


def parse_iso_date(value: Union[str, date, None]) -> Optional[date]:
    """Robustly parse ISO date strings, accepting full datetimes with 'Z' or offsets."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        # Fallback for datetime strings; only the calendar date is kept
        try:
            clean_str = value.strip().replace('Z', '+00:00')
            return datetime.fromisoformat(clean_str).date()
        except ValueError:
            return None


def format_date(value: date) -> str:
    """Format a date the way occurrence identities and JSON payloads expect."""
    return value.strftime("%Y-%m-%d")


def is_weekend(value: date) -> bool:
    """Saturday or Sunday."""
    return value.weekday() >= 5
