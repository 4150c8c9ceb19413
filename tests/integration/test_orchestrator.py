# File: tests/integration/test_orchestrator.py
"""
Integration tests for the CalendarOrchestrator pipeline.
Tests expansion, layout and scheduling working together.
"""

import pytest
from unittest.mock import patch
from datetime import date, timedelta

from calendar_engine.core.orchestrator import CalendarOrchestrator, DayView, occurrence_to_timed_event
from calendar_engine.processors.recurrence_processor import RecurrenceExpander
from calendar_engine.models import (
    EventTemplate, RecurrenceRule, RecurrenceKind, TimedEvent, TimeOfDay, Placement,
    ScheduleSuggestion, SchedulerOptions, WorkItem, TaskPriority,
)


@pytest.fixture
def orchestrator():
    return CalendarOrchestrator()


class TestCalendarView:
    """Expansion feeding the layout engine."""

    def test_day_view_lays_out_overlapping_occurrences(self, orchestrator, sample_templates):
        view = orchestrator.build_day_view(sample_templates, date(2024, 1, 8))

        assert [str(o.id) for o in view.occurrences] == [
            "standup_2024-01-08", "review_2024-01-08", "focus_2024-01-08",
        ]
        layout = view.layout.to_dict()
        assert layout["standup_2024-01-08"] == {'columnIndex': 0, 'totalColumns': 2}
        assert layout["review_2024-01-08"] == {'columnIndex': 1, 'totalColumns': 2}
        assert layout["focus_2024-01-08"] == {'columnIndex': 0, 'totalColumns': 2}
        assert view.truncated is False

    def test_range_view_covers_every_day(self, orchestrator, sample_templates):
        views = orchestrator.build_range_view(sample_templates, date(2024, 1, 1), date(2024, 1, 7))

        assert list(views) == [date(2024, 1, 1) + timedelta(days=i) for i in range(7)]
        assert [o.template_id for o in views[date(2024, 1, 1)].occurrences] == ["standup", "focus"]
        assert views[date(2024, 1, 3)].occurrences == []
        assert len(views[date(2024, 1, 3)].layout) == 0
        assert views[date(2024, 1, 1)].layout.has_overlaps is False

    def test_untimed_occurrences_are_listed_but_not_laid_out(self, orchestrator):
        birthday = EventTemplate(
            id="birthday",
            title="Birthday",
            date=date(2024, 1, 1),
            recurrence=RecurrenceRule(kind=RecurrenceKind.DAILY),
        )
        view = orchestrator.build_day_view([birthday], date(2024, 1, 2))
        assert [str(o.id) for o in view.occurrences] == ["birthday_2024-01-02"]
        assert "birthday_2024-01-02" not in view.layout

    def test_fields_survive_to_the_view(self, orchestrator, sample_templates):
        view = orchestrator.build_day_view(sample_templates, date(2024, 1, 15))
        standup = view.occurrences[0]
        assert standup.fields == {'category': 'work'}
        assert view.to_dict()['occurrences'][0]['category'] == 'work'

    def test_truncation_is_reported_on_every_day(self, sample_templates):
        orchestrator = CalendarOrchestrator(expander=RecurrenceExpander(max_iterations=3))
        views = orchestrator.build_range_view(sample_templates, date(2024, 1, 1), date(2024, 1, 10))
        assert all(view.truncated for view in views.values())

    def test_inverted_window_is_empty(self, orchestrator, sample_templates):
        assert orchestrator.build_range_view(sample_templates, date(2024, 1, 5), date(2024, 1, 1)) == {}

    def test_day_view_serializes(self, orchestrator, sample_templates):
        data = orchestrator.build_day_view(sample_templates, date(2024, 1, 8)).to_dict()
        assert data['date'] == "2024-01-08"
        assert set(data['layout']) == {o['id'] for o in data['occurrences']}

    def test_empty_day_view(self):
        view = DayView(date=date(2024, 1, 1))
        assert view.to_dict() == {'date': "2024-01-01", 'occurrences': [], 'layout': {}, 'truncated': False}

    def test_occurrence_to_timed_event(self, orchestrator, sample_templates):
        occurrence = orchestrator.build_day_view(sample_templates, date(2024, 1, 8)).occurrences[1]
        event = occurrence_to_timed_event(occurrence)
        assert event == TimedEvent("review_2024-01-08", TimeOfDay.of(9, 30), TimeOfDay.of(10, 30), "Design Review")


class TestScheduleSuggestion:
    """Scheduling against fixed events, with re-validation."""

    def test_schedule_avoids_fixed_events(self, orchestrator, monday, work_window, sample_items):
        fixed = {monday: [TimedEvent("standup", "09:00", "10:00", "Standup")]}
        suggestion = orchestrator.suggest_schedule(sample_items, work_window, fixed, today=monday)

        urgent, normal = suggestion.placements
        assert urgent.item.id == "urgent_1"
        assert urgent.start_time == TimeOfDay.of(10)
        assert urgent.conflict_resolved is True
        assert normal.start_time == TimeOfDay.of(11, 15)
        assert suggestion.conflicts == []
        assert suggestion.summary.total_hours == 1.5

    def test_accepts_plain_dicts(self, orchestrator, monday, work_window):
        suggestion = orchestrator.suggest_schedule(
            [{'id': 't1', 'title': 'Write docs', 'durationMinutes': 90, 'priority': 'high'}],
            work_window,
            today=monday,
        )
        assert suggestion.placements[0].item.priority == TaskPriority.HIGH
        assert suggestion.placements[0].end_time == TimeOfDay.of(10, 30)

    def test_revalidation_drops_colliding_placements(self, orchestrator, monday, work_window):
        item = WorkItem("x", "Sneaky", 60)
        bad = Placement(item, monday, TimeOfDay.of(9), TimeOfDay.of(10), 80)
        fixed = {monday: [TimedEvent("standup", "09:30", "10:00")]}

        with patch.object(orchestrator.scheduler, 'schedule', return_value=ScheduleSuggestion(placements=[bad])):
            suggestion = orchestrator.suggest_schedule([item], work_window, fixed, today=monday)

        assert suggestion.placements == []
        assert suggestion.summary.efficiency == 50

    def test_weekend_option_passes_through(self, orchestrator, saturday, work_window, urgent_item):
        suggestion = orchestrator.suggest_schedule(
            [urgent_item], work_window, options=SchedulerOptions(allow_weekends=True), today=saturday
        )
        assert suggestion.placements[0].date == saturday
