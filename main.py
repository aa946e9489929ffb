"""Entry point — prints the month layout of an events file as text."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace

from calendar_logic import DAY_ABBR, CalendarLayoutError, parse_date
from events import Event
from month_layout import MonthLayout, layout_month
from settings import load_config

logger = logging.getLogger(__name__)


def load_events(path: str) -> list[Event]:
    """Read a JSON list of event objects."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of events")
    events = []
    for item in raw:
        try:
            events.append(Event.from_dict(item))
        except (CalendarLayoutError, KeyError, TypeError) as exc:
            logger.warning("skipping malformed event %r: %s", item, exc)
    return events


def format_layout(layout: MonthLayout) -> str:
    grid = layout.grid
    first = grid.first_day_of_week
    header = " ".join(DAY_ABBR[(first + i) % 7] for i in range(7))
    lines = [grid.month_start.strftime("%B %Y"), "      " + header]
    for week in layout.weeks:
        days = " ".join(
            "   " if grid.hide_extra_days and grid.is_extra_day(d) else f"{d.day:>3}"
            for d in week.row.days
        )
        prefix = f"W{week.row.iso_week:<3} " if grid.show_week_numbers else "      "
        lines.append(prefix + days)
        parts = []
        for seg in week.segments:
            if seg.is_gap:
                parts.append(f"[{seg.weight:g}]")
            else:
                label = seg.text or "-"
                parts.append(f"<{seg.weight:g} {label}>")
        lines.append("      " + " ".join(parts))
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the month event layout for an events file.")
    parser.add_argument("events", help="JSON file holding a list of events")
    parser.add_argument("--month", required=True, help="visible month, YYYY-MM")
    parser.add_argument("--config", help="JSON settings file")
    parser.add_argument("--first-day", type=int, choices=(0, 1), help="0=Sunday, 1=Monday")
    parser.add_argument("--width", type=float, help="viewport width in pixels")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.first_day is not None:
        config = replace(config, first_day_of_week=args.first_day)
    if args.width is not None:
        config = replace(config, viewport_width_px=args.width)

    try:
        month = parse_date(args.month)
        events = load_events(args.events)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(format_layout(layout_month(events, month, config)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
