# File: calendar_engine/models/recurrence.py
"""
Data models for recurring event templates and their materialized occurrences.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .common import TimeOfDay, parse_iso_date, format_date
from .enums import RecurrenceKind
from .errors import InvalidRuleError


@dataclass(frozen=True)
class RecurrenceRule:
    """Repetition policy attached to a base event."""
    kind: RecurrenceKind
    interval: int = 1
    end_date: Optional[date] = None
    exceptions: FrozenSet[date] = frozenset()
    custom_days: Tuple[int, ...] = ()

    def __post_init__(self):
        """Coerce loose input types; range checks live in validate_rule."""
        if isinstance(self.kind, str):
            try:
                object.__setattr__(self, 'kind', RecurrenceKind(self.kind.strip().lower()))
            except ValueError:
                # Left as a string so validation can report it
                pass

        if isinstance(self.end_date, str):
            parsed = parse_iso_date(self.end_date)
            if self.end_date.strip() and parsed is None:
                raise InvalidRuleError(f"Invalid end date: {self.end_date!r}")
            object.__setattr__(self, 'end_date', parsed)

        if not isinstance(self.exceptions, frozenset):
            object.__setattr__(self, 'exceptions', frozenset(_coerce_dates(self.exceptions)))

        if not isinstance(self.custom_days, tuple):
            object.__setattr__(self, 'custom_days', tuple(self.custom_days or ()))

    def is_exception(self, day: date) -> bool:
        return day in self.exceptions

    def to_dict(self) -> dict:
        kind = self.kind.value if isinstance(self.kind, RecurrenceKind) else str(self.kind)
        data = {
            'kind': kind,
            'interval': self.interval,
            'endDate': format_date(self.end_date) if self.end_date else None,
            'exceptions': [format_date(d) for d in sorted(self.exceptions)],
        }
        if self.custom_days:
            data['customDays'] = list(self.custom_days)
        return data


def _coerce_dates(values: Optional[Iterable[Any]]) -> List[date]:
    dates = []
    for raw in values or ():
        parsed = parse_iso_date(raw)
        if parsed is None:
            raise InvalidRuleError(f"Invalid exception date: {raw!r}")
        dates.append(parsed)
    return dates


def rule_from_dict(data: Optional[dict]) -> Optional[RecurrenceRule]:
    """
    Create a RecurrenceRule from its serialized form.

    Accepts ``kind`` or the legacy ``type`` key, and ``endDate``/``end_date``.
    Returns None for an empty payload (no repetition).
    """
    if not data:
        return None

    raw_interval = data.get('interval', 1)
    if isinstance(raw_interval, bool) or (isinstance(raw_interval, float) and not raw_interval.is_integer()):
        raise InvalidRuleError(f"Interval must be an integer: {raw_interval!r}")
    try:
        interval = int(raw_interval)
    except (TypeError, ValueError):
        raise InvalidRuleError(f"Interval must be an integer: {raw_interval!r}")

    raw_end = data.get('endDate', data.get('end_date'))
    end_date = parse_iso_date(raw_end)
    if raw_end and end_date is None:
        raise InvalidRuleError(f"Invalid end date: {raw_end!r}")

    return RecurrenceRule(
        kind=data.get('kind', data.get('type', '')),
        interval=interval,
        end_date=end_date,
        exceptions=frozenset(_coerce_dates(data.get('exceptions'))),
        custom_days=tuple(data.get('customDays', data.get('custom_days')) or ()),
    )


@dataclass(frozen=True, order=True)
class OccurrenceId:
    """Stable identity of one occurrence: the template it came from plus its date."""
    template_id: str
    date: date

    def __str__(self) -> str:
        return f"{self.template_id}_{format_date(self.date)}"


@dataclass
class EventTemplate:
    """A stored event, optionally recurring. Extra fields are opaque to the engine."""
    id: str
    title: str
    date: date
    start_time: Optional[TimeOfDay] = None
    end_time: Optional[TimeOfDay] = None
    recurrence: Optional[RecurrenceRule] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.date, date):
            parsed = parse_iso_date(self.date)
            if parsed is None:
                raise ValueError(f"Invalid event date: {self.date!r}")
            self.date = parsed
        if isinstance(self.start_time, str):
            self.start_time = TimeOfDay.parse(self.start_time)
        if isinstance(self.end_time, str):
            self.end_time = TimeOfDay.parse(self.end_time)
        if isinstance(self.recurrence, dict):
            self.recurrence = rule_from_dict(self.recurrence)

    @property
    def is_timed(self) -> bool:
        return self.start_time is not None and self.end_time is not None


_TEMPLATE_KEYS = {'id', 'title', 'date', 'startTime', 'endTime', 'start_time', 'end_time',
                  'repeatPattern', 'recurrence'}


def template_from_dict(data: dict) -> EventTemplate:
    """Create EventTemplate from a stored event record."""
    start = data.get('startTime', data.get('start_time'))
    end = data.get('endTime', data.get('end_time'))
    rule_data = data.get('recurrence', data.get('repeatPattern'))
    return EventTemplate(
        id=str(data.get('id', '')),
        title=str(data.get('title', 'Untitled Event')),
        date=data['date'],
        start_time=TimeOfDay.parse(start) if start else None,
        end_time=TimeOfDay.parse(end) if end else None,
        recurrence=rule_data if isinstance(rule_data, RecurrenceRule) else rule_from_dict(rule_data),
        fields={k: v for k, v in data.items() if k not in _TEMPLATE_KEYS},
    )


@dataclass(frozen=True)
class Occurrence:
    """One concrete, non-recurring instance of an event template."""
    id: OccurrenceId
    title: str
    date: date
    start_time: Optional[TimeOfDay] = None
    end_time: Optional[TimeOfDay] = None
    fields: Dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def template_id(self) -> str:
        return self.id.template_id

    def to_dict(self) -> dict:
        data = dict(self.fields)
        data.update({
            'id': str(self.id),
            'templateId': self.id.template_id,
            'title': self.title,
            'date': format_date(self.date),
            'startTime': str(self.start_time) if self.start_time else None,
            'endTime': str(self.end_time) if self.end_time else None,
        })
        return data


@dataclass(frozen=True)
class ExpansionResult:
    """Occurrences inside a window, plus whether the iteration ceiling cut the walk short."""
    occurrences: Tuple[Occurrence, ...] = ()
    truncated: bool = False

    def __iter__(self):
        return iter(self.occurrences)

    def __len__(self) -> int:
        return len(self.occurrences)

    @property
    def dates(self) -> List[date]:
        return [o.date for o in self.occurrences]

    def to_dict(self) -> dict:
        return {
            'occurrences': [o.to_dict() for o in self.occurrences],
            'truncated': self.truncated,
        }
