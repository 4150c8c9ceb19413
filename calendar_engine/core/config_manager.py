# File: calendar_engine/core/config_manager.py
"""
Centralized configuration management for the calendar engine.
Loads settings from environment variables (and a local .env file).
"""

import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv

from calendar_engine.models.common import parse_time_of_day

# Load environment variables
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ['1', 'true', 'yes', 'y', 'on']


class Config:
    """Application configuration singleton."""

    # Base directories
    BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from calendar_engine/core/
    LOGS_DIR = BASE_DIR / "logs"

    # Recurrence expansion
    # Hard ceiling on walk steps per expansion; hitting it marks the result truncated.
    MAX_EXPANSION_ITERATIONS = _env_int("CALENDAR_MAX_ITERATIONS", 1000)
    MIN_RULE_INTERVAL = 1
    MAX_RULE_INTERVAL = 365
    PREVIEW_COUNT = 10

    # Slot scheduling
    MAX_SCHEDULED_ITEMS = _env_int("CALENDAR_MAX_SCHEDULED_ITEMS", 8)
    DEFAULT_DAY_START = os.getenv("CALENDAR_DAY_START", "09:00")
    DEFAULT_DAY_END = os.getenv("CALENDAR_DAY_END", "18:00")
    DEFAULT_BREAK_MINUTES = _env_int("CALENDAR_BREAK_MINUTES", 15)
    SEARCH_STEP_MINUTES = _env_int("CALENDAR_SEARCH_STEP_MINUTES", 60)
    DAILY_ENERGY = 100

    # Logging
    LOG_LEVEL = os.getenv("CALENDAR_LOG_LEVEL", "INFO").upper()
    LOG_TO_FILE = _env_bool("CALENDAR_LOG_TO_FILE", False)

    @classmethod
    def validate(cls) -> bool:
        """Validate that the loaded configuration is usable."""
        errors: List[str] = []

        if cls.MAX_EXPANSION_ITERATIONS < 1:
            errors.append("CALENDAR_MAX_ITERATIONS must be at least 1")

        if cls.MAX_SCHEDULED_ITEMS < 1:
            errors.append("CALENDAR_MAX_SCHEDULED_ITEMS must be at least 1")

        if cls.DEFAULT_BREAK_MINUTES < 0:
            errors.append("CALENDAR_BREAK_MINUTES cannot be negative")

        if cls.SEARCH_STEP_MINUTES < 1:
            errors.append("CALENDAR_SEARCH_STEP_MINUTES must be at least 1")

        start = parse_time_of_day(cls.DEFAULT_DAY_START)
        end = parse_time_of_day(cls.DEFAULT_DAY_END)
        if start is None:
            errors.append(f"CALENDAR_DAY_START is not a valid HH:MM time: {cls.DEFAULT_DAY_START}")
        if end is None:
            errors.append(f"CALENDAR_DAY_END is not a valid HH:MM time: {cls.DEFAULT_DAY_END}")
        if start is not None and end is not None and start >= end:
            errors.append("CALENDAR_DAY_START must be before CALENDAR_DAY_END")

        if errors:
            for error in errors:
                print(f"Configuration Error: {error}")
            return False

        return True
