"""Turns the placed events of one week row into weighted bar segments.

Positions are measured in day columns from the row's first day, so a
whole row is 7.0 wide.  Segments are emitted left to right; their weights
always add up to exactly 7.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Sequence

from calendar_logic import MonthGrid, WeekRow, days_between
from events import Event
from placement import PlacedEvent
from settings import LayoutConfig

ROW_WEIGHT = 7.0


class SegmentKind(Enum):
    GAP = "gap"
    EVENT = "event"


@dataclass(frozen=True)
class WeekSegment:
    kind: SegmentKind
    weight: float
    event: Event | None = None
    color: str | None = None
    text: str = ""
    truncated: bool = False
    leading_decoration: Any = None
    trailing_decoration: Any = None

    @property
    def is_gap(self) -> bool:
        return self.kind is SegmentKind.GAP


def _gap(weight: float) -> WeekSegment:
    return WeekSegment(kind=SegmentKind.GAP, weight=weight)


def clip_to_row(
    placed: PlacedEvent, row: WeekRow, grid: MonthGrid, config: LayoutConfig,
) -> tuple[float, float]:
    """Return the event's (start, end) columns inside ``row``.

    In the grid's first and last rows, a part of the event lying in the
    neighbouring month's padding days is replaced by a half-day stub
    (``config.boundary_bias``) reaching toward that month.
    """
    start = max(placed.start, row.first)
    end = min(placed.end, row.last)
    lead_bias = trail_bias = 0.0

    if (
        row.index == grid.first_row.index
        and placed.start < grid.month_start
        and row.first < grid.month_start <= end
    ):
        start = grid.month_start
        lead_bias = config.boundary_bias
    if (
        row.index == grid.last_row.index
        and placed.end > grid.month_end
        and start <= grid.month_end < row.last
    ):
        end = grid.month_end
        trail_bias = config.boundary_bias

    start_col = max(0.0, days_between(row.first, start) - lead_bias)
    end_col = min(ROW_WEIGHT, days_between(row.first, end) + 1 + trail_bias)
    return float(start_col), float(end_col)


def render_label(placed: PlacedEvent, config: LayoutConfig) -> str:
    text = placed.event.text
    if placed.should_ellipsis:
        return text[:config.ellipsis_chars] + config.ellipsis_marker
    return text


def _event_segment(
    placed: PlacedEvent, weight: float, row: WeekRow, grid: MonthGrid, config: LayoutConfig,
) -> WeekSegment:
    owned = placed.owns_row(row, grid)
    show_text = (
        owned
        and row.week_number == placed.label_week_index
        and weight > config.label_min_weight
    )
    leading = trailing = None
    if owned and row.week_number == placed.week_start_index:
        leading = placed.event.leading_decoration
    if owned and row.week_number == placed.week_end_index:
        trailing = placed.event.trailing_decoration
    return WeekSegment(
        kind=SegmentKind.EVENT,
        weight=weight,
        event=placed.event,
        color=placed.color,
        text=render_label(placed, config) if show_text else "",
        truncated=show_text and placed.should_ellipsis,
        leading_decoration=leading,
        trailing_decoration=trailing,
    )


def layout_week_row(
    row: WeekRow,
    placed_events: Sequence[PlacedEvent],
    grid: MonthGrid,
    config: LayoutConfig,
) -> list[WeekSegment]:
    """Lay out one row as gaps and event spans, in start order.

    Overlapping events are not stacked: a span never starts before the
    previous span's end, so an event fully covered by earlier ones gets a
    zero-weight span.
    """
    clipped = [
        (clip_to_row(placed, row, grid, config), placed)
        for placed in placed_events
        if placed.event.overlaps(row.first, row.last)
    ]
    clipped.sort(key=lambda item: item[0][0])

    segments: list[WeekSegment] = []
    cursor = 0.0
    for (start, end), placed in clipped:
        if start > cursor:
            segments.append(_gap(start - cursor))
            cursor = start
        weight = max(0.0, end - cursor)
        segments.append(_event_segment(placed, weight, row, grid, config))
        cursor = max(cursor, end)

    remaining = ROW_WEIGHT - sum(s.weight for s in segments)
    if remaining > 0:
        segments.append(_gap(remaining))
    elif remaining < 0:
        # drift past the row edge comes off the last span
        last = segments[-1]
        segments[-1] = replace(last, weight=max(0.0, last.weight + remaining))
    return segments


def row_weight(segments: Sequence[WeekSegment]) -> float:
    return sum(s.weight for s in segments)
