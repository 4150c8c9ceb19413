# File: calendar_engine/processors/task_processor.py
import math
from datetime import date
from typing import List, Optional, Tuple, Union

from calendar_engine.core.config_manager import Config
from calendar_engine.utils.logger import setup_logger
from calendar_engine.models import WorkItem, work_item_from_dict

logger = setup_logger(__name__)


class TaskProcessor:
    def __init__(self, max_items: int = None):
        self.max_items = Config.MAX_SCHEDULED_ITEMS if max_items is None else max_items

    def process_items(self, items: List[Union[WorkItem, dict]], today: date) -> List[WorkItem]:
        """Convert, rank and cap work items for placement.
        Items past the cap are dropped; callers re-invoke for the rest.
        """
        processed_input: List[WorkItem] = []
        for item in items:
            if isinstance(item, dict):
                processed_input.append(work_item_from_dict(item))
            else:
                processed_input.append(item)
        logger.info(f"Processing {len(processed_input)} work items")

        ranked = self.rank_items(processed_input, today)
        final_items = ranked[:self.max_items]
        if len(ranked) > len(final_items):
            logger.info(f"Capped to {len(final_items)} items; {len(ranked) - len(final_items)} left unscheduled")
        return final_items

    def days_until_deadline(self, item: WorkItem, today: date) -> Optional[int]:
        """Days left before the deadline; None when the item has none."""
        if not item.deadline:
            return None
        return (item.deadline - today).days

    def composite_score(self, item: WorkItem, today: date) -> float:
        """Priority dominates, then deadline closeness, then longer items first.
        An undated item is infinitely far from its deadline.
        """
        days = self.days_until_deadline(item, today)
        return (item.priority.weight * 1000
                - (math.inf if days is None else days)
                + item.duration_minutes / 60)

    def rank_items(self, items: List[WorkItem], today: date) -> List[WorkItem]:
        """Highest composite score first; undated items follow every dated item
        of their priority, longest first. Ties keep input order.
        """
        keyed: List[Tuple[tuple, WorkItem]] = []
        for position, item in enumerate(items):
            key = (
                -item.priority.weight,
                item.deadline is None,
                -self.composite_score(item, today),
                -item.duration_minutes,
                position,
            )
            keyed.append((key, item))
        keyed.sort(key=lambda entry: entry[0])
        return [item for _, item in keyed]
