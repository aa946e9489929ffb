"""Month layout pipeline: grid, filtering, placement and per-row segments."""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Sequence

from calendar_logic import MonthGrid, WeekRow, month_grid, parse_date
from events import Event, filter_month_events
from placement import PlacedEvent, plan_events
from settings import LayoutConfig
from week_layout import WeekSegment, layout_week_row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeekLayout:
    row: WeekRow
    segments: tuple[WeekSegment, ...]

    @property
    def weight(self) -> float:
        return sum(s.weight for s in self.segments)


@dataclass(frozen=True)
class MonthLayout:
    grid: MonthGrid
    events: tuple[PlacedEvent, ...]
    weeks: tuple[WeekLayout, ...]


def layout_month(
    events: Iterable[Event],
    visible_month: date | datetime | str,
    config: LayoutConfig | None = None,
) -> MonthLayout:
    """Lay out ``events`` on the grid of ``visible_month``.

    Pure function of its arguments: the inputs are not modified and
    nothing is remembered between calls.
    """
    config = config or LayoutConfig()
    month = parse_date(visible_month)
    grid = month_grid(
        month,
        config.first_day_of_week,
        marking_type=config.marking_type,
        show_week_numbers=config.show_week_numbers,
        hide_extra_days=config.hide_extra_days,
    )
    visible = filter_month_events(events, month, config.palette)
    placed = plan_events(visible, grid, config)
    weeks = tuple(
        WeekLayout(row=row, segments=tuple(layout_week_row(row, placed, grid, config)))
        for row in grid.rows
    )
    logger.debug(
        "laid out %d events for %s across %d weeks",
        len(placed), grid.month_start.strftime("%Y-%m"), len(weeks),
    )
    return MonthLayout(grid=grid, events=tuple(placed), weeks=weeks)


def events_fingerprint(events: Sequence[Event]) -> tuple:
    """Hashable summary of an event collection, in input order."""
    return tuple(
        (
            repr(e.id), e.start, e.end, e.text, e.color,
            repr(e.leading_decoration), repr(e.trailing_decoration),
        )
        for e in events
    )


class LayoutCache:
    """Small LRU memo for ``layout_month`` results.

    Keyed by (month, events fingerprint, config); the config carries the
    viewport width and first day of week.  Not thread-safe.
    """

    def __init__(self, maxsize: int = 12) -> None:
        self.maxsize = maxsize
        self._entries: OrderedDict[tuple, MonthLayout] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(
        self,
        events: Sequence[Event],
        visible_month: date | datetime | str,
        config: LayoutConfig | None = None,
    ) -> MonthLayout:
        config = config or LayoutConfig()
        month = parse_date(visible_month).replace(day=1)
        events = list(events)
        key = (month, events_fingerprint(events), config)
        cached = self._entries.get(key)
        if cached is not None:
            self._entries.move_to_end(key)
            return cached
        result = layout_month(events, month, config)
        self._entries[key] = result
        if len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)
        return result

    def clear(self) -> None:
        self._entries.clear()
