# File: calendar_engine/processors/layout_processor.py
"""
Overlap layout module.
Assigns side-by-side columns to the timed events of one date.
"""

from typing import Dict, Iterable, List, Tuple

from calendar_engine.utils.logger import LoggerMixin
from calendar_engine.models import TimedEvent, OverlapPlacement, DayLayout


def find_conflicts(events: Iterable[TimedEvent]) -> List[Tuple[str, str]]:
    """Return every pair of event ids whose time ranges strictly overlap."""
    events = list(events)
    pairs = []
    for i, first in enumerate(events):
        for second in events[i + 1:]:
            if first.overlaps_with(second):
                pairs.append((first.id, second.id))
    return pairs


class OverlapLayoutEngine(LoggerMixin):
    """Greedy interval partitioning over one day's events."""

    def layout(self, events: Iterable[TimedEvent]) -> DayLayout:
        """
        Compute a column placement for every event.

        Raises:
            InvalidIntervalError: if any event does not start before it ends
            ValueError: if two events share an id
        """
        events = list(events)
        by_id: Dict[str, TimedEvent] = {}
        for event in events:
            event.validate()
            if event.id in by_id:
                raise ValueError(f"Duplicate event id in layout request: {event.id}")
            by_id[event.id] = event

        if not events:
            return DayLayout()

        # Input position breaks ties between identical time ranges
        ordered = sorted(
            enumerate(events),
            key=lambda pair: (pair[1].start_time, pair[1].end_time, pair[0])
        )

        column_ends = []  # end time currently held by each column
        columns: Dict[str, int] = {}
        clusters: List[List[str]] = []
        cluster_end = None

        for _, event in ordered:
            if cluster_end is None or event.start_time >= cluster_end:
                clusters.append([])
                cluster_end = event.end_time
            else:
                cluster_end = max(cluster_end, event.end_time)
            clusters[-1].append(event.id)

            for index, held_end in enumerate(column_ends):
                if held_end <= event.start_time:
                    column_ends[index] = event.end_time
                    columns[event.id] = index
                    break
            else:
                columns[event.id] = len(column_ends)
                column_ends.append(event.end_time)

        placements: Dict[str, OverlapPlacement] = {}
        for cluster in clusters:
            total = max(columns[event_id] for event_id in cluster) + 1
            for event_id in cluster:
                placements[event_id] = OverlapPlacement(columns[event_id], total)

        result = DayLayout(
            placements=placements,
            events=by_id,
            clusters=[tuple(c) for c in clusters],
        )
        self.logger.debug(
            f"Laid out {len(events)} events in {len(clusters)} clusters "
            f"(widest: {max(p.total_columns for p in placements.values())} columns)"
        )
        return result
