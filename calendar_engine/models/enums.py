# File: calendar_engine/models/enums.py

from enum import Enum


class RecurrenceKind(Enum):
    """Repetition policies a recurring event can follow."""
    DAILY = "daily"        # every N days
    WEEKLY = "weekly"      # every N weeks
    WEEKDAYS = "weekdays"  # every Monday-Friday, interval ignored
    CUSTOM = "custom"      # spaced like WEEKLY


class TaskPriority(Enum):
    """Work item priority levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        """Ranking weight used by the composite score."""
        return {"high": 3, "medium": 2, "low": 1}[self.value]

    @property
    def complexity(self) -> float:
        """Energy multiplier applied per scheduled hour."""
        return {"high": 1.2, "medium": 1.0, "low": 0.8}[self.value]

    @property
    def bonus(self) -> int:
        """Quality-score bonus for placing an item of this priority."""
        return {"high": 20, "medium": 10, "low": 0}[self.value]
