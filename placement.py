"""Per-event placement: week span, label row, ellipsis and cross-month ownership.

Week indexes used here are row keys (see ``calendar_logic.row_key``), so
they can be compared directly with ``WeekRow.week_number``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from calendar_logic import (
    MonthGrid,
    WeekRow,
    column_of,
    day_of_week,
    row_key,
    week_number,
)
from events import Event
from settings import LayoutConfig


@dataclass(frozen=True)
class CrossMonthOwner:
    """Whether the visible month owns the event in its first/last grid row."""

    leading: bool = True
    trailing: bool = True


@dataclass(frozen=True)
class PlacedEvent:
    event: Event
    week_start_index: int
    week_end_index: int
    label_week_index: int
    should_ellipsis: bool
    color: str
    cross_month_owner: CrossMonthOwner

    @property
    def start(self) -> date:
        return self.event.start

    @property
    def end(self) -> date:
        return self.event.end

    def owns_row(self, row: WeekRow, grid: MonthGrid) -> bool:
        """True unless a neighbouring month owns the event in this boundary row."""
        if row.index == grid.first_row.index and not self.cross_month_owner.leading:
            return False
        if row.index == grid.last_row.index and not self.cross_month_owner.trailing:
            return False
        return True


# ------------------------------------------------------------------
# Rules
# ------------------------------------------------------------------

def default_label_week(start: date) -> int:
    """Week an event is labeled in before any width check.

    An event starting on Sunday is labeled one week after ``week_number``
    of its start: that is its own row in a Sunday-first grid, and the next
    row in a Monday-first grid where Sunday leaves a single column.
    """
    return week_number(start) + (1 if day_of_week(start) == 0 else 0)


def relocate_label(
    start_row: int,
    end_row: int,
    start_room: float,
    end_room: float,
    text_width: float,
    day_width: float,
) -> tuple[int, bool] | None:
    """Pick a roomier row for a label that does not fit its start row.

    Returns ``(label_week, should_ellipsis)`` or None to keep the default.
    The row right after the start row wins whenever it is wider, and the
    ellipsis is cleared there; otherwise the end row is used if it has more
    trailing room than the start row has leading room.
    """
    if start_row == end_row:
        return None
    next_row = start_row + 1
    next_room = end_room if next_row == end_row else day_width * 7
    if next_room > start_room:
        return next_row, False
    if end_room > start_room:
        return end_row, end_room < text_width
    return None


def boundary_owner(event: Event, row: WeekRow, month_start: date, month_end: date, leading: bool) -> bool:
    """Decide whether the visible month owns ``event`` in a boundary row.

    Counts the event's days inside ``row`` that belong to the visible month
    against those of the neighbouring month.  Ties go to the earlier month:
    the previous month on the leading row, the visible month on the
    trailing row.
    """
    ours = theirs = 0
    for d in row.days:
        if not (event.start <= d <= event.end):
            continue
        if month_start <= d <= month_end:
            ours += 1
        else:
            theirs += 1
    if theirs == 0:
        return True
    if leading:
        return ours > theirs
    return ours >= theirs


def cross_month_owner(event: Event, grid: MonthGrid) -> CrossMonthOwner:
    return CrossMonthOwner(
        leading=boundary_owner(event, grid.first_row, grid.month_start, grid.month_end, leading=True),
        trailing=boundary_owner(event, grid.last_row, grid.month_start, grid.month_end, leading=False),
    )


def is_short_event(event: Event, config: LayoutConfig) -> bool:
    return event.span_days <= config.short_event_days


# ------------------------------------------------------------------
# Planner
# ------------------------------------------------------------------

def plan_event(event: Event, grid: MonthGrid, config: LayoutConfig, index: int = 0) -> PlacedEvent:
    """Compute the placement of one (already filtered) event."""
    first_day = grid.first_day_of_week
    day_width = config.day_width_px
    text_width = config.text_width(event.text, config.font_size_px) + config.label_padding_px

    week_start = row_key(event.start, first_day)
    week_end = row_key(event.end, first_day)
    label_week = default_label_week(event.start)

    start_room = day_width * (7 - column_of(event.start, first_day))
    end_room = day_width * (column_of(event.end, first_day) + 1)
    should_ellipsis = start_room < text_width

    if should_ellipsis:
        moved = relocate_label(week_start, week_end, start_room, end_room, text_width, day_width)
        if moved is not None:
            label_week, should_ellipsis = moved

    if is_short_event(event, config) or day_width <= 0:
        should_ellipsis = True

    return PlacedEvent(
        event=event,
        week_start_index=week_start,
        week_end_index=week_end,
        label_week_index=label_week,
        should_ellipsis=should_ellipsis,
        color=event.color or config.palette[index % len(config.palette)],
        cross_month_owner=cross_month_owner(event, grid),
    )


def plan_events(events: Sequence[Event], grid: MonthGrid, config: LayoutConfig) -> list[PlacedEvent]:
    return [plan_event(event, grid, config, index) for index, event in enumerate(events)]
