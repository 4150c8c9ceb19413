# File: calendar_engine/models/calendar.py

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .common import TimeOfDay
from .errors import InvalidIntervalError


@dataclass(frozen=True)
class TimedEvent:
    """An event with a wall-clock time range on a single date."""
    id: str
    start_time: TimeOfDay
    end_time: TimeOfDay
    title: Optional[str] = None

    def __post_init__(self):
        """Accept "HH:MM" strings for times."""
        if isinstance(self.start_time, str):
            object.__setattr__(self, 'start_time', TimeOfDay.parse(self.start_time))
        if isinstance(self.end_time, str):
            object.__setattr__(self, 'end_time', TimeOfDay.parse(self.end_time))

    def validate(self) -> None:
        """Raise InvalidIntervalError unless start_time < end_time."""
        if self.start_time >= self.end_time:
            raise InvalidIntervalError(self.id, self.start_time, self.end_time)

    def duration_minutes(self) -> int:
        return self.start_time.minutes_until(self.end_time)

    def overlaps_with(self, other: 'TimedEvent') -> bool:
        """Strict overlap: back-to-back events do not conflict."""
        return intervals_overlap(self.start_time, self.end_time, other.start_time, other.end_time)

    def to_dict(self) -> dict:
        data = {
            'id': self.id,
            'startTime': str(self.start_time),
            'endTime': str(self.end_time),
        }
        if self.title:
            data['title'] = self.title
        return data


def intervals_overlap(start1: TimeOfDay, end1: TimeOfDay,
                      start2: TimeOfDay, end2: TimeOfDay) -> bool:
    """Check whether [start1, end1) and [start2, end2) share any instant."""
    return start1 < end2 and start2 < end1


def timed_event_from_dict(data: dict) -> TimedEvent:
    """Create TimedEvent from an ``{id, startTime, endTime}`` record."""
    return TimedEvent(
        id=str(data.get('id', '')),
        start_time=TimeOfDay.parse(data.get('startTime', data.get('start_time'))),
        end_time=TimeOfDay.parse(data.get('endTime', data.get('end_time'))),
        title=data.get('title'),
    )


@dataclass(frozen=True)
class OverlapPlacement:
    """Horizontal slot of one event within its overlap cluster."""
    column_index: int = 0
    total_columns: int = 1

    def __post_init__(self):
        if self.total_columns < 1:
            raise ValueError(f"total_columns must be at least 1: {self.total_columns}")
        if not 0 <= self.column_index < self.total_columns:
            raise ValueError(
                f"column_index {self.column_index} outside 0..{self.total_columns - 1}"
            )

    @property
    def width_fraction(self) -> float:
        return 1 / self.total_columns

    def to_dict(self) -> dict:
        return {
            'columnIndex': self.column_index,
            'totalColumns': self.total_columns,
        }


@dataclass
class DayLayout:
    """Column placements for the events of one date."""
    placements: Dict[str, OverlapPlacement] = field(default_factory=dict)
    events: Dict[str, TimedEvent] = field(default_factory=dict)
    clusters: List[Tuple[str, ...]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.placements)

    def __contains__(self, event_id: str) -> bool:
        return event_id in self.placements

    def placement_for(self, event_id: str) -> Optional[OverlapPlacement]:
        return self.placements.get(event_id)

    def overlap_count(self, event_id: str) -> int:
        """Number of columns sharing the event's cluster (1 when unknown)."""
        placement = self.placements.get(event_id)
        return placement.total_columns if placement else 1

    @property
    def has_overlaps(self) -> bool:
        return any(p.total_columns > 1 for p in self.placements.values())

    def details(self) -> List[dict]:
        """Human-readable rows, used for debug logging."""
        rows = []
        for event_id, placement in self.placements.items():
            event = self.events.get(event_id)
            rows.append({
                'id': event_id,
                'time': f"{event.start_time}-{event.end_time}" if event else None,
                'column': placement.column_index,
                'totalColumns': placement.total_columns,
                'width': f"{placement.width_fraction * 100:.1f}%",
            })
        return rows

    def to_dict(self) -> Dict[str, dict]:
        return {event_id: p.to_dict() for event_id, p in self.placements.items()}
