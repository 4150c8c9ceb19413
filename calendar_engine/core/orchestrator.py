# File: calendar_engine/core/orchestrator.py
"""
Orchestrator for the calendar engine.
Wires expansion, layout and scheduling into the two request flows the
calendar uses: rendering a visible window and suggesting a schedule.
"""

import datetime
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from calendar_engine.utils.logger import setup_logger
from calendar_engine.processors.recurrence_processor import RecurrenceExpander
from calendar_engine.processors.layout_processor import OverlapLayoutEngine
from calendar_engine.processors.schedule_processor import SlotScheduler, FixedEvents
from calendar_engine.models import (
    EventTemplate, Occurrence, TimedEvent, DayLayout, DayWindow, SchedulerOptions,
    WorkItem, ScheduleSuggestion,
)

logger = setup_logger(__name__)


@dataclass
class DayView:
    """Everything needed to render one date."""
    date: datetime.date
    occurrences: List[Occurrence] = field(default_factory=list)
    layout: DayLayout = field(default_factory=DayLayout)
    truncated: bool = False

    def to_dict(self) -> dict:
        return {
            'date': self.date.isoformat(),
            'occurrences': [o.to_dict() for o in self.occurrences],
            'layout': self.layout.to_dict(),
            'truncated': self.truncated,
        }


def occurrence_to_timed_event(occurrence: Occurrence) -> TimedEvent:
    return TimedEvent(
        id=str(occurrence.id),
        start_time=occurrence.start_time,
        end_time=occurrence.end_time,
        title=occurrence.title,
    )


class CalendarOrchestrator:
    """
    Coordinates the engines for the calendar view and schedule suggestions.

    All state lives in the arguments; an instance may be shared across threads.
    """

    def __init__(self,
                 expander: Optional[RecurrenceExpander] = None,
                 layout_engine: Optional[OverlapLayoutEngine] = None,
                 scheduler: Optional[SlotScheduler] = None):
        self.expander = expander or RecurrenceExpander()
        self.layout_engine = layout_engine or OverlapLayoutEngine()
        self.scheduler = scheduler or SlotScheduler()

    def build_range_view(self,
                         templates: Iterable[EventTemplate],
                         window_start: datetime.date,
                         window_end: datetime.date) -> Dict[datetime.date, DayView]:
        """
        Expand templates over [window_start, window_end] and lay out each day.
        Every date in the window gets a DayView, even when empty.
        """
        logger.info(f"Building calendar view for {window_start} to {window_end}")
        expansion = self.expander.expand_templates(templates, window_start, window_end)

        views: Dict[datetime.date, DayView] = {}
        day = window_start
        while day <= window_end:
            views[day] = DayView(date=day, truncated=expansion.truncated)
            day += datetime.timedelta(days=1)

        for occurrence in expansion.occurrences:
            views[occurrence.date].occurrences.append(occurrence)

        for view in views.values():
            timed = [occurrence_to_timed_event(o) for o in view.occurrences
                     if o.start_time is not None and o.end_time is not None]
            view.layout = self.layout_engine.layout(timed)
            if view.layout.has_overlaps:
                logger.debug(f"Overlaps on {view.date}: {view.layout.details()}")

        if expansion.truncated:
            logger.warning("Calendar view is incomplete: an expansion hit its iteration ceiling")
        return views

    def build_day_view(self, templates: Iterable[EventTemplate], day: datetime.date) -> DayView:
        """Expand and lay out a single date."""
        return self.build_range_view(templates, day, day)[day]

    def suggest_schedule(self,
                         items: List[Union[WorkItem, dict]],
                         day_window: DayWindow,
                         fixed_events: Optional[FixedEvents] = None,
                         options: Optional[SchedulerOptions] = None,
                         today: Optional[datetime.date] = None) -> ScheduleSuggestion:
        """
        Run the slot scheduler, then re-validate its proposals against the
        fixed events before handing them back.
        """
        today = today or datetime.date.today()
        logger.info(f"Suggesting schedule for {len(items)} items starting {today}")

        suggestion = self.scheduler.schedule(items, day_window, fixed_events, options, today)
        validated = self.scheduler.filter_conflicting_placements(suggestion.placements, fixed_events)

        dropped = len(suggestion.placements) - len(validated)
        if dropped:
            logger.warning(f"Re-validation dropped {dropped} placements")
            suggestion.placements = validated
            suggestion.summary = self.scheduler.summarize(validated, suggestion.conflicts)
        return suggestion
