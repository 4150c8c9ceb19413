from .recurrence_processor import (
    RecurrenceExpander, next_occurrence, validate_rule, ensure_valid_rule, is_recurrence_exception,
)
from .layout_processor import OverlapLayoutEngine, find_conflicts
from .task_processor import TaskProcessor
from .schedule_processor import SlotScheduler, efficiency_for_hour, next_working_day

__all__ = [
    "RecurrenceExpander",
    "next_occurrence",
    "validate_rule",
    "ensure_valid_rule",
    "is_recurrence_exception",
    "OverlapLayoutEngine",
    "find_conflicts",
    "TaskProcessor",
    "SlotScheduler",
    "efficiency_for_hour",
    "next_working_day",
]
