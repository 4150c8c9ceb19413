from .enums import RecurrenceKind, TaskPriority
from .errors import CalendarEngineError, InvalidRuleError, InvalidIntervalError
from .common import TimeOfDay, parse_time_of_day, parse_iso_date, format_date, is_weekend
from .recurrence import (
    RecurrenceRule, rule_from_dict, EventTemplate, template_from_dict,
    OccurrenceId, Occurrence, ExpansionResult,
)
from .calendar import (
    TimedEvent, timed_event_from_dict, intervals_overlap, OverlapPlacement, DayLayout,
)
from .config import (
    DayWindow, EfficiencyBand, SchedulerOptions, DEFAULT_EFFICIENCY_BANDS, DEFAULT_EFFICIENCY,
)
from .schedule import (
    WorkItem, work_item_from_dict, Placement, SchedulingConflict, ScheduleSummary,
    ScheduleSuggestion,
)
from .api import ValidationError

__all__ = [
    "RecurrenceKind",
    "TaskPriority",
    "CalendarEngineError",
    "InvalidRuleError",
    "InvalidIntervalError",
    "TimeOfDay",
    "parse_time_of_day",
    "parse_iso_date",
    "format_date",
    "is_weekend",
    "RecurrenceRule",
    "rule_from_dict",
    "EventTemplate",
    "template_from_dict",
    "OccurrenceId",
    "Occurrence",
    "ExpansionResult",
    "TimedEvent",
    "timed_event_from_dict",
    "intervals_overlap",
    "OverlapPlacement",
    "DayLayout",
    "DayWindow",
    "EfficiencyBand",
    "SchedulerOptions",
    "DEFAULT_EFFICIENCY_BANDS",
    "DEFAULT_EFFICIENCY",
    "WorkItem",
    "work_item_from_dict",
    "Placement",
    "SchedulingConflict",
    "ScheduleSummary",
    "ScheduleSuggestion",
    "ValidationError",
]
