# File: calendar_engine/models/errors.py
"""
Exceptions raised by the calendar engine.
"""


class CalendarEngineError(Exception):
    """Base class for calendar engine errors."""


class InvalidRuleError(CalendarEngineError, ValueError):
    """A recurrence rule is malformed (bad interval, unknown kind, ...)."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])


class InvalidIntervalError(CalendarEngineError, ValueError):
    """A timed event does not start strictly before it ends."""

    def __init__(self, event_id: str, start, end):
        super().__init__(
            f"Event '{event_id}' must start before it ends (got {start}-{end})"
        )
        self.event_id = event_id
        self.start = start
        self.end = end
