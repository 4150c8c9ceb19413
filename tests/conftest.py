# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable test data for all tests.
"""

import pytest
from datetime import date
from pathlib import Path
import sys

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from calendar_engine.models import (
    RecurrenceKind, RecurrenceRule, EventTemplate, TimeOfDay, TimedEvent,
    DayWindow, WorkItem, TaskPriority,
)


# ==================== Date Fixtures ====================

@pytest.fixture
def monday():
    """2024-01-01 is a Monday."""
    return date(2024, 1, 1)


@pytest.fixture
def friday():
    return date(2024, 1, 5)


@pytest.fixture
def saturday():
    return date(2024, 1, 6)


# ==================== Recurrence Fixtures ====================

@pytest.fixture
def weekly_rule():
    """Weekly rule ending 2024-01-22 with 2024-01-08 excluded."""
    return RecurrenceRule(
        kind=RecurrenceKind.WEEKLY,
        interval=1,
        end_date=date(2024, 1, 22),
        exceptions=frozenset({date(2024, 1, 8)}),
    )


@pytest.fixture
def daily_rule():
    return RecurrenceRule(kind=RecurrenceKind.DAILY, interval=1)


@pytest.fixture
def sample_templates():
    """A weekly standup, a one-off review and a daily focus block."""
    return [
        EventTemplate(
            id="standup",
            title="Team Standup",
            date=date(2024, 1, 1),
            start_time=TimeOfDay.of(9, 0),
            end_time=TimeOfDay.of(10, 0),
            recurrence=RecurrenceRule(kind=RecurrenceKind.WEEKLY, interval=1),
            fields={'category': 'work'},
        ),
        EventTemplate(
            id="review",
            title="Design Review",
            date=date(2024, 1, 8),
            start_time=TimeOfDay.of(9, 30),
            end_time=TimeOfDay.of(10, 30),
        ),
        EventTemplate(
            id="focus",
            title="Focus Block",
            date=date(2024, 1, 1),
            start_time=TimeOfDay.of(10, 0),
            end_time=TimeOfDay.of(11, 0),
            recurrence=RecurrenceRule(
                kind=RecurrenceKind.DAILY,
                interval=1,
                exceptions=frozenset({date(2024, 1, 3)}),
            ),
        ),
    ]


# ==================== Layout Fixtures ====================

@pytest.fixture
def staggered_events():
    """A[09:00,10:00), B[09:30,10:30), C[10:00,11:00)."""
    return [
        TimedEvent("A", TimeOfDay.of(9, 0), TimeOfDay.of(10, 0)),
        TimedEvent("B", TimeOfDay.of(9, 30), TimeOfDay.of(10, 30)),
        TimedEvent("C", TimeOfDay.of(10, 0), TimeOfDay.of(11, 0)),
    ]


# ==================== Scheduling Fixtures ====================

@pytest.fixture
def work_window():
    return DayWindow(TimeOfDay.of(9, 0), TimeOfDay.of(18, 0))


@pytest.fixture
def urgent_item():
    return WorkItem(
        id="urgent_1",
        title="Prepare Report",
        duration_minutes=60,
        priority=TaskPriority.HIGH,
        deadline=date(2024, 1, 2),
    )


@pytest.fixture
def normal_item():
    return WorkItem(
        id="normal_1",
        title="Clean Inbox",
        duration_minutes=30,
        priority=TaskPriority.LOW,
    )


@pytest.fixture
def sample_items(urgent_item, normal_item):
    """Collection of sample work items."""
    return [normal_item, urgent_item]
