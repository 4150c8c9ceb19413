# File: calendar_engine/processors/recurrence_processor.py
"""
Recurrence expansion module.
Turns stored recurring templates into concrete per-day occurrences.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from calendar_engine.core.config_manager import Config
from calendar_engine.utils.logger import setup_logger
from calendar_engine.models import (
    RecurrenceKind, RecurrenceRule, InvalidRuleError, ValidationError,
    EventTemplate, Occurrence, OccurrenceId, ExpansionResult, TimeOfDay,
)

logger = setup_logger(__name__)


def is_recurrence_exception(day: date, exceptions: Iterable[date]) -> bool:
    """Check whether ``day`` is one of the excluded calendar dates."""
    return any(day == excluded for excluded in exceptions)


def validate_rule(rule: RecurrenceRule) -> List[ValidationError]:
    """
    Validate a recurrence rule without raising.

    Returns:
        List of validation errors (empty when the rule is usable)
    """
    errors: List[ValidationError] = []

    if not isinstance(rule.kind, RecurrenceKind):
        allowed = ", ".join(k.value for k in RecurrenceKind)
        errors.append(ValidationError('kind', f"Unknown recurrence kind '{rule.kind}' (expected one of: {allowed})"))

    if isinstance(rule.interval, bool) or not isinstance(rule.interval, int):
        errors.append(ValidationError('interval', f"Interval must be an integer, got {rule.interval!r}"))
    elif not Config.MIN_RULE_INTERVAL <= rule.interval <= Config.MAX_RULE_INTERVAL:
        errors.append(ValidationError(
            'interval',
            f"Interval must be between {Config.MIN_RULE_INTERVAL} and {Config.MAX_RULE_INTERVAL}, got {rule.interval}"
        ))

    if rule.end_date is not None and not isinstance(rule.end_date, date):
        errors.append(ValidationError('endDate', f"End date is not a calendar date: {rule.end_date!r}"))

    for i, excluded in enumerate(sorted(rule.exceptions, key=str)):
        if not isinstance(excluded, date):
            errors.append(ValidationError('exceptions', f"Not a calendar date: {excluded!r}", i))

    for i, day in enumerate(rule.custom_days):
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            errors.append(ValidationError('customDays', f"Day of week must be 0-6, got {day!r}", i))

    return errors


def ensure_valid_rule(rule: Optional[RecurrenceRule]) -> None:
    """Raise InvalidRuleError if the rule cannot be expanded."""
    if rule is None:
        return
    errors = validate_rule(rule)
    if errors:
        raise InvalidRuleError("; ".join(str(e) for e in errors), errors)


def next_occurrence(current: date, rule: RecurrenceRule) -> Optional[date]:
    """
    Compute the occurrence that follows ``current`` under ``rule``.

    Returns None for kinds this engine cannot advance.
    """
    if rule.kind == RecurrenceKind.DAILY:
        return current + timedelta(days=rule.interval)

    if rule.kind in (RecurrenceKind.WEEKLY, RecurrenceKind.CUSTOM):
        # CUSTOM has no day-of-week semantics yet and is spaced like WEEKLY
        return current + timedelta(weeks=rule.interval)

    if rule.kind == RecurrenceKind.WEEKDAYS:
        next_date = current + timedelta(days=1)
        while next_date.weekday() >= 5:  # 5=Saturday, 6=Sunday
            next_date += timedelta(days=1)
        return next_date

    return None


class RecurrenceExpander:
    """Expands recurring templates into occurrences inside a date window."""

    def __init__(self, max_iterations: int = None):
        """
        Initialize the expander.

        Args:
            max_iterations: Hard ceiling on walk steps per expansion
                (default: Config.MAX_EXPANSION_ITERATIONS)
        """
        if max_iterations is None:
            max_iterations = Config.MAX_EXPANSION_ITERATIONS
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1: {max_iterations}")
        self.max_iterations = max_iterations

    def expand(self,
               base_date: date,
               template_id: str,
               rule: Optional[RecurrenceRule],
               window_start: date,
               window_end: date,
               title: str = "",
               start_time: Optional[TimeOfDay] = None,
               end_time: Optional[TimeOfDay] = None,
               fields: Optional[Dict[str, Any]] = None) -> ExpansionResult:
        """
        Enumerate every occurrence of a (possibly recurring) event inside
        [window_start, window_end], in ascending date order.

        Raises:
            InvalidRuleError: if the rule is malformed (checked before walking)
        """
        ensure_valid_rule(rule)
        fields = dict(fields or {})

        def make(day: date) -> Occurrence:
            return Occurrence(
                id=OccurrenceId(template_id, day),
                title=title,
                date=day,
                start_time=start_time,
                end_time=end_time,
                fields=dict(fields),
            )

        if rule is None:
            if window_start <= base_date <= window_end:
                return ExpansionResult((make(base_date),))
            return ExpansionResult()

        occurrences: List[Occurrence] = []
        current: Optional[date] = base_date
        iterations = 0
        truncated = False

        while current is not None and current <= window_end:
            if rule.end_date is not None and current > rule.end_date:
                break
            if iterations >= self.max_iterations:
                truncated = True
                break
            iterations += 1

            if current >= window_start and not rule.is_exception(current):
                occurrences.append(make(current))

            following = next_occurrence(current, rule)
            if following is None or following <= current:
                break
            current = following

        if truncated:
            logger.warning(
                f"Expansion of '{template_id}' stopped at the {self.max_iterations}-step ceiling "
                f"before reaching {window_end}; result is truncated"
            )
        logger.debug(
            f"Expanded '{template_id}' ({rule.kind.value} every {rule.interval}) into "
            f"{len(occurrences)} occurrences in {iterations} steps"
        )
        return ExpansionResult(tuple(occurrences), truncated)

    def expand_template(self, template: EventTemplate,
                        window_start: date, window_end: date) -> ExpansionResult:
        """Expand a stored EventTemplate."""
        return self.expand(
            template.date,
            template.id,
            template.recurrence,
            window_start,
            window_end,
            title=template.title,
            start_time=template.start_time,
            end_time=template.end_time,
            fields=template.fields,
        )

    def expand_templates(self, templates: Iterable[EventTemplate],
                         window_start: date, window_end: date) -> ExpansionResult:
        """
        Expand many templates and merge their occurrences ordered by
        (date, start time, identity). Invalid rules fail the whole call
        before any output is produced.
        """
        templates = list(templates)
        for template in templates:
            ensure_valid_rule(template.recurrence)

        merged: List[Occurrence] = []
        truncated = False
        for template in templates:
            result = self.expand_template(template, window_start, window_end)
            merged.extend(result.occurrences)
            truncated = truncated or result.truncated

        merged.sort(key=lambda o: (o.date, o.start_time or TimeOfDay(0), o.id))
        logger.debug(f"Expanded {len(templates)} templates into {len(merged)} occurrences")
        return ExpansionResult(tuple(merged), truncated)

    def preview(self, base_date: date, rule: Optional[RecurrenceRule],
                count: int = None) -> List[date]:
        """
        List the next ``count`` non-excluded occurrence dates starting at
        ``base_date``, with no window. Bounded by ``count * 10`` steps.
        """
        if count is None:
            count = Config.PREVIEW_COUNT
        ensure_valid_rule(rule)
        if count <= 0:
            return []
        if rule is None:
            return [base_date]

        dates: List[date] = []
        current: Optional[date] = base_date
        iterations = 0
        max_iterations = count * 10

        while current is not None and len(dates) < count and iterations < max_iterations:
            iterations += 1
            if rule.end_date is not None and current > rule.end_date:
                break
            if not rule.is_exception(current):
                dates.append(current)
            following = next_occurrence(current, rule)
            if following is None or following <= current:
                break
            current = following

        return dates
