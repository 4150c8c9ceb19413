# File: calendar_engine/models/config.py
"""
Data models for scheduler configuration: the daily work window, efficiency
bands and per-request options.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .common import TimeOfDay


@dataclass(frozen=True)
class DayWindow:
    """Daily working window [start, end)."""
    start: TimeOfDay
    end: TimeOfDay

    def __post_init__(self):
        if isinstance(self.start, str):
            object.__setattr__(self, 'start', TimeOfDay.parse(self.start))
        if isinstance(self.end, str):
            object.__setattr__(self, 'end', TimeOfDay.parse(self.end))
        if self.start >= self.end:
            raise ValueError(f"Day window must start before it ends: {self.start}-{self.end}")

    def length_minutes(self) -> int:
        return self.start.minutes_until(self.end)

    def contains(self, start: TimeOfDay, end: TimeOfDay) -> bool:
        """Check that [start, end) lies within the window."""
        return self.start <= start and end <= self.end

    def to_dict(self) -> dict:
        return {'start': str(self.start), 'end': str(self.end)}


@dataclass(frozen=True)
class EfficiencyBand:
    """A named hour range (inclusive on both ends) and its work-suitability weight."""
    name: str
    first_hour: int
    last_hour: int
    weight: float

    def __post_init__(self):
        if not 0 <= self.first_hour <= self.last_hour <= 23:
            raise ValueError(f"Invalid band hours for {self.name}: {self.first_hour}-{self.last_hour}")
        if not 0.0 <= self.weight <= 1.0:
            raise ValueError(f"Band weight must be within 0..1: {self.weight}")

    def covers(self, hour: int) -> bool:
        return self.first_hour <= hour <= self.last_hour


DEFAULT_EFFICIENCY_BANDS: Tuple[EfficiencyBand, ...] = (
    EfficiencyBand("morning_focus", 9, 11, 1.0),    # Morning concentration
    EfficiencyBand("afternoon_focus", 14, 16, 0.9),  # Post-lunch focus
    EfficiencyBand("evening_push", 17, 19, 0.8),     # Evening wrap-up
)

DEFAULT_EFFICIENCY = 0.7


@dataclass(frozen=True)
class SchedulerOptions:
    """Per-request scheduling options. None means "use the configured default"."""
    allow_weekends: bool = False
    break_minutes: Optional[int] = None
    max_items: Optional[int] = None
    search_step_minutes: Optional[int] = None

    def __post_init__(self):
        if self.break_minutes is not None and self.break_minutes < 0:
            raise ValueError(f"break_minutes cannot be negative: {self.break_minutes}")
        if self.max_items is not None and self.max_items < 0:
            raise ValueError(f"max_items cannot be negative: {self.max_items}")
        if self.search_step_minutes is not None and self.search_step_minutes < 1:
            raise ValueError(f"search_step_minutes must be positive: {self.search_step_minutes}")

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'SchedulerOptions':
        """Create options from a request payload (camelCase or snake_case keys)."""
        data = data or {}
        break_minutes = data.get('breakMinutes', data.get('break_minutes'))
        max_items = data.get('maxItems', data.get('max_items'))
        step = data.get('searchStepMinutes', data.get('search_step_minutes'))
        return cls(
            allow_weekends=bool(data.get('allowWeekends', data.get('allow_weekends', False))),
            break_minutes=int(break_minutes) if break_minutes is not None else None,
            max_items=int(max_items) if max_items is not None else None,
            search_step_minutes=int(step) if step is not None else None,
        )
