"""
Command-line entry point for the calendar engine.

Reads a JSON request file and prints the JSON response:

    python scripts/plan.py expand request.json
    python scripts/plan.py layout request.json
    python scripts/plan.py suggest request.json
"""

import argparse
import json
import sys
import time
from collections import defaultdict
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from calendar_engine.core.config_manager import Config
from calendar_engine.core.orchestrator import CalendarOrchestrator
from calendar_engine.processors.layout_processor import OverlapLayoutEngine
from calendar_engine.utils.logger import setup_logger
from calendar_engine.models import (
    CalendarEngineError, DayWindow, SchedulerOptions, template_from_dict,
    timed_event_from_dict, parse_iso_date,
)

logger = setup_logger(__name__)


def _require_date(payload: dict, key: str):
    value = parse_iso_date(payload.get(key))
    if value is None:
        raise ValueError(f"'{key}' must be a YYYY-MM-DD date")
    return value


def run_expand(payload: dict) -> dict:
    """{templates: [...], windowStart, windowEnd} -> occurrences per request window."""
    orchestrator = CalendarOrchestrator()
    templates = [template_from_dict(t) for t in payload.get('templates', [])]
    result = orchestrator.expander.expand_templates(
        templates, _require_date(payload, 'windowStart'), _require_date(payload, 'windowEnd')
    )
    return result.to_dict()


def run_layout(payload: dict) -> dict:
    """{events: [{id, startTime, endTime}]} -> {id: {columnIndex, totalColumns}}."""
    events = [timed_event_from_dict(e) for e in payload.get('events', [])]
    return OverlapLayoutEngine().layout(events).to_dict()


def run_suggest(payload: dict) -> dict:
    """{items, dayWindow, fixedEvents: [{date, id, startTime, endTime}], options, today?}."""
    window_data = payload.get('dayWindow') or {}
    day_window = DayWindow(
        window_data.get('start', Config.DEFAULT_DAY_START),
        window_data.get('end', Config.DEFAULT_DAY_END),
    )

    fixed_events = defaultdict(list)
    for raw in payload.get('fixedEvents', []):
        fixed_events[_require_date(raw, 'date')].append(timed_event_from_dict(raw))

    today = parse_iso_date(payload.get('today'))
    suggestion = CalendarOrchestrator().suggest_schedule(
        payload.get('items', []),
        day_window,
        dict(fixed_events),
        SchedulerOptions.from_dict(payload.get('options')),
        today,
    )
    return suggestion.to_dict()


COMMANDS = {
    'expand': run_expand,
    'layout': run_layout,
    'suggest': run_suggest,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Expand, lay out or schedule calendar events.")
    parser.add_argument("command", choices=sorted(COMMANDS), help="Operation to run.")
    parser.add_argument("request", help="Path to the JSON request file.")
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indentation of the JSON output (default: 2).",
    )
    args = parser.parse_args(argv)

    if not Config.validate():
        logger.error("Configuration validation failed")
        return 1

    start_time = time.time()
    try:
        with open(args.request, 'r', encoding='utf-8') as f:
            payload = json.load(f)

        response = COMMANDS[args.command](payload)
        print(json.dumps(response, indent=args.indent, ensure_ascii=False))
        return 0

    except FileNotFoundError as e:
        logger.error(f"Could not find: {e.filename}")
        return 1

    except json.JSONDecodeError as e:
        logger.error(f"Request is not valid JSON: {e}")
        return 1

    except (CalendarEngineError, ValueError, KeyError) as e:
        logger.error(f"Invalid request: {e}")
        return 1

    finally:
        elapsed = time.time() - start_time
        logger.debug(f"'{args.command}' finished in {elapsed:.3f} seconds")


if __name__ == "__main__":
    raise SystemExit(main())
