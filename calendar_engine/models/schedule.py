# File: calendar_engine/models/schedule.py

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .common import TimeOfDay, parse_iso_date, format_date
from .enums import TaskPriority


@dataclass
class WorkItem:
    """An unscheduled task waiting for a time slot."""
    id: str
    title: str
    duration_minutes: int
    priority: TaskPriority = TaskPriority.MEDIUM
    deadline: Optional[date] = None

    def __post_init__(self):
        """Validate item data and auto-convert types."""
        if self.duration_minutes <= 0:
            raise ValueError(f"Duration must be positive: {self.title}")

        # Auto-convert string priority to Enum
        if isinstance(self.priority, str):
            try:
                self.priority = TaskPriority(self.priority.strip().lower())
            except ValueError:
                self.priority = TaskPriority.MEDIUM

        if self.deadline and not isinstance(self.deadline, date):
            self.deadline = parse_iso_date(self.deadline)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'durationMinutes': self.duration_minutes,
            'priority': self.priority.value,
            'deadline': format_date(self.deadline) if self.deadline else None,
        }


def work_item_from_dict(data: dict) -> WorkItem:
    """Create WorkItem from dictionary with type safety."""
    raw_duration = data.get('durationMinutes', data.get('estimatedDuration', data.get('duration_minutes', 60)))
    try:
        duration = int(float(raw_duration))  # Handle "60.0" strings
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Invalid duration: {raw_duration!r}")

    raw_deadline = data.get('deadline')
    deadline = parse_iso_date(raw_deadline)
    if raw_deadline and deadline is None:
        raise ValueError(f"Invalid deadline: {raw_deadline!r}")

    return WorkItem(
        id=str(data.get('id', '')),
        title=str(data.get('title', 'Untitled Task')),
        duration_minutes=duration,
        priority=data.get('priority', TaskPriority.MEDIUM.value),
        deadline=deadline,
    )


@dataclass
class Placement:
    """A proposed slot for one work item."""
    item: WorkItem
    date: date
    start_time: TimeOfDay
    end_time: TimeOfDay
    quality_score: int
    efficiency: float = 0.0
    conflict_resolved: bool = False
    reasoning: str = ""

    def duration_minutes(self) -> int:
        return self.start_time.minutes_until(self.end_time)

    def to_dict(self) -> dict:
        return {
            'item': self.item.to_dict(),
            'date': format_date(self.date),
            'startTime': str(self.start_time),
            'endTime': str(self.end_time),
            'score': self.quality_score,
            'reasoning': self.reasoning,
        }


@dataclass
class SchedulingConflict:
    """An item that could not be placed. Returned as data, never raised."""
    item: WorkItem
    reason: str
    suggestions: List[str] = field(default_factory=list)
    date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            'item': self.item.to_dict(),
            'reason': self.reason,
            'suggestions': list(self.suggestions),
            'date': format_date(self.date) if self.date else None,
        }


@dataclass
class ScheduleSummary:
    """Aggregate signals over a suggestion."""
    total_hours: float = 0.0
    efficiency: int = 50
    stress: int = 50

    def to_dict(self) -> dict:
        return {
            'totalHours': self.total_hours,
            'efficiency': self.efficiency,
            'stress': self.stress,
        }


@dataclass
class ScheduleSuggestion:
    """Complete scheduler output."""
    placements: List[Placement] = field(default_factory=list)
    conflicts: List[SchedulingConflict] = field(default_factory=list)
    summary: ScheduleSummary = field(default_factory=ScheduleSummary)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'placements': [p.to_dict() for p in self.placements],
            'conflicts': [c.to_dict() for c in self.conflicts],
            'summary': self.summary.to_dict(),
        }
