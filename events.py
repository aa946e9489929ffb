"""Event model and selection of the events visible in a month."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from calendar_logic import CalendarLayoutError, month_bounds, parse_date

logger = logging.getLogger(__name__)

# Fallback bar colours, cycled by position in the filtered month list.
PALETTE: tuple[str, ...] = (
    "#2e7d32",
    "#f9a825",
    "#c62828",
    "#6a1b9a",
    "#1565c0",
)


class InvalidRange(CalendarLayoutError, ValueError):
    """An event whose end date precedes its start date."""

    def __init__(self, event: "Event") -> None:
        super().__init__(f"event {event.id!r} ends ({event.end}) before it starts ({event.start})")
        self.event = event


@dataclass(frozen=True)
class Event:
    id: Any
    start: date
    end: date
    text: str = ""
    color: str | None = None
    leading_decoration: Any = None
    trailing_decoration: Any = None

    def __post_init__(self) -> None:
        if self.text is None:
            object.__setattr__(self, "text", "")

    @property
    def span_days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1

    def overlaps(self, first: date, last: date) -> bool:
        return not (self.end < first or self.start > last)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Event":
        """Build an event from a JSON-style mapping.

        ``start``/``end`` may be dates or ISO strings; ``end`` defaults to
        ``start`` for single-day events.
        """
        start = parse_date(data["start"])
        end = parse_date(data["end"]) if data.get("end") is not None else start
        return cls(
            id=data.get("id"),
            start=start,
            end=end,
            text=str(data.get("text") or ""),
            color=data.get("color") or None,
            leading_decoration=data.get("before", data.get("leading_decoration")),
            trailing_decoration=data.get("after", data.get("trailing_decoration")),
        )


def check_range(event: Event) -> Event:
    """Return ``event`` unchanged, or raise ``InvalidRange``."""
    if event.end < event.start:
        raise InvalidRange(event)
    return event


def filter_month_events(
    events: Iterable[Event],
    visible_month: date,
    palette: Sequence[str] = PALETTE,
) -> list[Event]:
    """Return the events overlapping ``visible_month``, sorted by start.

    The sort is stable, so events sharing a start date keep their input
    order.  Events without a colour get ``palette[i % len(palette)]`` where
    ``i`` is their position in the returned list.  Events ending before
    they start are logged and skipped.
    """
    month_start, month_end = month_bounds(visible_month)
    kept: list[Event] = []
    for event in events:
        try:
            check_range(event)
        except InvalidRange as exc:
            logger.warning("skipping event: %s", exc)
            continue
        if event.overlaps(month_start, month_end):
            kept.append(event)
    kept.sort(key=lambda e: e.start)

    result: list[Event] = []
    for index, event in enumerate(kept):
        if not event.color:
            event = replace(event, color=palette[index % len(palette)])
        result.append(event)
    return result
