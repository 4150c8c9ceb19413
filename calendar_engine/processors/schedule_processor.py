# File: calendar_engine/processors/schedule_processor.py
"""
Schedule processing module.
Greedy slot placement of ranked work items, conflict detection against
fixed events, and re-validation of proposed placements.
"""

import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from calendar_engine.core.config_manager import Config
from calendar_engine.utils.logger import setup_logger
from calendar_engine.processors.task_processor import TaskProcessor
from calendar_engine.models import (
    TimeOfDay, TimedEvent, intervals_overlap, DayWindow, EfficiencyBand, SchedulerOptions,
    DEFAULT_EFFICIENCY_BANDS, DEFAULT_EFFICIENCY, WorkItem, Placement, SchedulingConflict,
    ScheduleSummary, ScheduleSuggestion, format_date, is_weekend,
)

logger = setup_logger(__name__)

FixedEvents = Mapping[date, Iterable[TimedEvent]]

ENERGY_PER_HOUR = 20
CONFLICT_PENALTY = 30


def efficiency_for_hour(hour: int,
                        bands: Sequence[EfficiencyBand] = DEFAULT_EFFICIENCY_BANDS,
                        default: float = DEFAULT_EFFICIENCY) -> float:
    """Work-suitability weight of a start hour: first matching band wins."""
    for band in bands:
        if band.covers(hour):
            return band.weight
    return default


def next_working_day(day: date, allow_weekends: bool) -> date:
    """The day after ``day``, skipping Saturday/Sunday unless allowed."""
    following = day + timedelta(days=1)
    while not allow_weekends and is_weekend(following):
        following += timedelta(days=1)
    return following


class SlotScheduler:
    """Places work items into free slots of a daily work window."""

    def __init__(self,
                 bands: Sequence[EfficiencyBand] = DEFAULT_EFFICIENCY_BANDS,
                 default_efficiency: float = DEFAULT_EFFICIENCY):
        """
        Initialize the scheduler.

        Args:
            bands: Ordered efficiency table; the first band covering an hour wins
            default_efficiency: Weight for hours outside every band
        """
        self.bands = tuple(bands)
        self.default_efficiency = default_efficiency

    def efficiency(self, hour: int) -> float:
        return efficiency_for_hour(hour, self.bands, self.default_efficiency)

    def schedule(self,
                 items: List[Union[WorkItem, dict]],
                 day_window: DayWindow,
                 fixed_events: Optional[FixedEvents] = None,
                 options: Optional[SchedulerOptions] = None,
                 today: Optional[date] = None) -> ScheduleSuggestion:
        """
        Rank items and place them one by one, starting at ``today``.

        Items that cannot be placed become SchedulingConflict entries; only
        malformed fixed events raise (InvalidIntervalError), before any work.
        """
        options = options or SchedulerOptions()
        today = today or date.today()
        fixed = self._normalize_fixed_events(fixed_events)

        break_minutes = Config.DEFAULT_BREAK_MINUTES if options.break_minutes is None else options.break_minutes
        step = Config.SEARCH_STEP_MINUTES if options.search_step_minutes is None else options.search_step_minutes
        ranked = TaskProcessor(options.max_items).process_items(items, today)

        placements: List[Placement] = []
        conflicts: List[SchedulingConflict] = []

        current_date = today
        if not options.allow_weekends and is_weekend(current_date):
            current_date = next_working_day(current_date, False)
        current_time = day_window.start
        energy = Config.DAILY_ENERGY

        for item in ranked:
            duration = item.duration_minutes
            if duration > day_window.length_minutes():
                conflicts.append(SchedulingConflict(
                    item=item,
                    reason=(f"'{item.title}' needs {duration} minutes but the working window "
                            f"{day_window.start}-{day_window.end} only has {day_window.length_minutes()}"),
                    suggestions=[
                        "Split the task into smaller parts",
                        "Widen the daily working window",
                    ],
                ))
                continue

            energy_required = math.ceil(duration / 60) * item.priority.complexity * ENERGY_PER_HOUR
            fits_today = current_time.add_minutes(duration) <= day_window.end
            tired = energy < energy_required and energy < Config.DAILY_ENERGY
            if not fits_today or tired:
                current_date = next_working_day(current_date, options.allow_weekends)
                current_time = day_window.start
                energy = Config.DAILY_ENERGY

            start, efficiency = self._best_start(current_time, duration, day_window)
            day_events = fixed.get(current_date, [])
            blocker = self._first_blocker(start, start.add_minutes(duration), day_events)

            resolved = False
            if blocker is not None:
                free_start = self._search_free_start(start, duration, day_window, day_events, step)
                if free_start is None:
                    conflicts.append(self._conflict_for(
                        item, current_date, start, duration, blocker, day_window, options
                    ))
                    logger.warning(f"Could not place '{item.title}' on {current_date}: blocked by '{blocker.id}'")
                    continue
                start = free_start
                efficiency = self.efficiency(start.hour)
                resolved = True

            end = start.add_minutes(duration)
            score = self._quality_score(efficiency, item, energy, resolved)
            placements.append(Placement(
                item=item,
                date=current_date,
                start_time=start,
                end_time=end,
                quality_score=score,
                efficiency=efficiency,
                conflict_resolved=resolved,
                reasoning=(f"Placed in a {round(efficiency * 100)}% efficiency slot. "
                           f"{'Shifted to avoid a fixed event. ' if resolved else ''}"
                           f"Energy used: {round(energy_required)}%"),
            ))
            logger.debug(f"Placed '{item.title}' on {current_date} {start}-{end} (score {score})")

            energy -= energy_required
            current_time = end.add_minutes(break_minutes)

        suggestion = ScheduleSuggestion(
            placements=placements,
            conflicts=conflicts,
            summary=self.summarize(placements, conflicts),
        )
        logger.info(f"Scheduled {len(placements)} items with {len(conflicts)} conflicts")
        return suggestion

    def filter_conflicting_placements(self,
                                      placements: List[Placement],
                                      fixed_events: Optional[FixedEvents]) -> List[Placement]:
        """
        Remove placements that overlap fixed events on the same date or fall
        outside [00:00, 24:00). Uses the same strict predicate as the layout engine.
        """
        fixed = self._normalize_fixed_events(fixed_events)
        filtered: List[Placement] = []
        for placement in placements:
            if placement.end_time <= placement.start_time or placement.end_time.overflows:
                logger.warning(f"Dropping placement with invalid time range: {placement.item.title}")
                continue
            blocker = self._first_blocker(
                placement.start_time, placement.end_time, fixed.get(placement.date, [])
            )
            if blocker is not None:
                logger.warning(
                    f"Dropping '{placement.item.title}' {placement.start_time}-{placement.end_time}: "
                    f"blocked by '{blocker.id}'"
                )
                continue
            filtered.append(placement)
        return filtered

    def summarize(self, placements: List[Placement],
                  conflicts: List[SchedulingConflict]) -> ScheduleSummary:
        total_minutes = sum(p.duration_minutes() for p in placements)
        if placements:
            average = sum(p.quality_score for p in placements) / len(placements)
        else:
            average = 50
        stress = max(10, min(90, 50 - average + len(conflicts) * 15))
        return ScheduleSummary(
            total_hours=round(total_minutes / 60, 2),
            efficiency=round(average),
            stress=round(stress),
        )

    # ---------------- Internal helpers ----------------

    def _normalize_fixed_events(self, fixed_events: Optional[FixedEvents]) -> Dict[date, List[TimedEvent]]:
        normalized: Dict[date, List[TimedEvent]] = {}
        for day, events in (fixed_events or {}).items():
            events = list(events)
            for event in events:
                event.validate()
            normalized[day] = events
        return normalized

    def _best_start(self, earliest: TimeOfDay, duration: int,
                    day_window: DayWindow) -> Tuple[TimeOfDay, float]:
        """Highest-efficiency start at or after ``earliest``; the earliest start wins ties."""
        best = earliest
        best_efficiency = self.efficiency(earliest.hour)
        candidate = TimeOfDay((earliest.hour + 1) * 60)
        while candidate.add_minutes(duration) <= day_window.end:
            efficiency = self.efficiency(candidate.hour)
            if efficiency > best_efficiency:
                best, best_efficiency = candidate, efficiency
            candidate = candidate.add_minutes(60)
        return best, best_efficiency

    def _first_blocker(self, start: TimeOfDay, end: TimeOfDay,
                       events: Iterable[TimedEvent]) -> Optional[TimedEvent]:
        for event in events:
            if intervals_overlap(start, end, event.start_time, event.end_time):
                return event
        return None

    def _search_free_start(self, start: TimeOfDay, duration: int, day_window: DayWindow,
                           events: List[TimedEvent], step: int) -> Optional[TimeOfDay]:
        candidate = start.add_minutes(step)
        while candidate.add_minutes(duration) <= day_window.end:
            if self._first_blocker(candidate, candidate.add_minutes(duration), events) is None:
                return candidate
            candidate = candidate.add_minutes(step)
        return None

    def _conflict_for(self, item: WorkItem, day: date, start: TimeOfDay, duration: int,
                      blocker: TimedEvent, day_window: DayWindow,
                      options: SchedulerOptions) -> SchedulingConflict:
        end = start.add_minutes(duration)
        blocker_name = blocker.title or blocker.id
        alternative = next_working_day(day, options.allow_weekends)
        return SchedulingConflict(
            item=item,
            reason=(f"{format_date(day)} {start}-{end} collides with '{blocker_name}' "
                    f"and no free slot remains before {day_window.end}"),
            suggestions=[
                f"Try {format_date(alternative)} from {day_window.start}",
                "Shift the task to a different time",
                "Adjust the existing event",
            ],
            date=day,
        )

    def _quality_score(self, efficiency: float, item: WorkItem,
                       energy: float, resolved: bool) -> int:
        energy_score = max(0.0, energy) / Config.DAILY_ENERGY * 20
        penalty = CONFLICT_PENALTY if resolved else 0
        raw = efficiency * 100 + item.priority.bonus + energy_score - penalty
        return int(round(max(0.0, min(100.0, raw))))
