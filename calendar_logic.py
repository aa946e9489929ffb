"""Pure calendar calculations — no UI dependencies.

Day-of-week numbering is 0=Sunday .. 6=Saturday throughout.  Week rows of a
month grid are identified by ``row_key``: the absolute week number of the
row's last day, which is the same for Sunday-first and Monday-first grids.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

DAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

SUNDAY = 0
MONDAY = 1


class CalendarLayoutError(Exception):
    """Base class for layout input errors."""


class InvalidDate(CalendarLayoutError, ValueError):
    """Raised when a value cannot be interpreted as a calendar day."""


class MarkingType(Enum):
    """Day-cell variant the renderer should use for the whole grid."""

    SIMPLE = "simple"
    PERIOD = "period"
    MULTI_DOT = "multi-dot"
    MULTI_PERIOD = "multi-period"
    CUSTOM = "custom"


# ------------------------------------------------------------------
# Date arithmetic
# ------------------------------------------------------------------

def parse_date(value: date | datetime | str) -> date:
    """Return ``value`` as a ``date``.

    Accepts ``date``, ``datetime`` (time part dropped) and ISO strings,
    either ``YYYY-MM-DD`` or ``YYYY-MM`` (first of the month).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 7:
                return date.fromisoformat(text + "-01")
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise InvalidDate(f"not an ISO date: {value!r}") from exc
    raise InvalidDate(f"unsupported date value: {value!r}")


def day_of_week(d: date) -> int:
    """Return 0 for Sunday through 6 for Saturday."""
    return d.isoweekday() % 7


def week_number(d: date) -> int:
    """Return an absolute Monday-based week counter.

    Unlike ISO week numbers this never wraps at the turn of the year, so
    weeks compare and subtract correctly across December/January.
    """
    return (d.toordinal() - 1) // 7


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last))


def days_between(a: date, b: date) -> int:
    """Return ``b - a`` in days (negative when ``b`` is earlier)."""
    return (b - a).days


def month_bounds(d: date) -> tuple[date, date]:
    """Return (first day, last day) of the month containing ``d``."""
    last = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=1), d.replace(day=last)


def _check_first_day(first_day_of_week: int) -> None:
    if first_day_of_week not in (SUNDAY, MONDAY):
        raise ValueError(f"first_day_of_week must be 0 or 1, got {first_day_of_week!r}")


def column_of(d: date, first_day_of_week: int = SUNDAY) -> int:
    """Return the 0-based column of ``d`` inside its grid row."""
    return (day_of_week(d) - first_day_of_week) % 7


def row_start(d: date, first_day_of_week: int = SUNDAY) -> date:
    """Return the first day of the grid row containing ``d``."""
    return add_days(d, -column_of(d, first_day_of_week))


def row_key(d: date, first_day_of_week: int = SUNDAY) -> int:
    """Return the week number identifying the grid row that contains ``d``."""
    return week_number(add_days(row_start(d, first_day_of_week), 6))


# ------------------------------------------------------------------
# Month grid
# ------------------------------------------------------------------

@dataclass(frozen=True)
class WeekRow:
    """One 7-day slice of the month grid."""

    index: int
    days: tuple[date, ...]
    week_number: int
    iso_week: int

    @property
    def first(self) -> date:
        return self.days[0]

    @property
    def last(self) -> date:
        return self.days[-1]

    def contains(self, d: date) -> bool:
        return self.days[0] <= d <= self.days[-1]


@dataclass(frozen=True)
class MonthGrid:
    month_start: date
    month_end: date
    first_day_of_week: int
    rows: tuple[WeekRow, ...]
    marking_type: MarkingType = MarkingType.SIMPLE
    show_week_numbers: bool = False
    hide_extra_days: bool = False

    @property
    def first_row(self) -> WeekRow:
        return self.rows[0]

    @property
    def last_row(self) -> WeekRow:
        return self.rows[-1]

    def days(self) -> list[date]:
        return [d for row in self.rows for d in row.days]

    def is_extra_day(self, d: date) -> bool:
        """True for padding days that belong to a neighbouring month."""
        return not (self.month_start <= d <= self.month_end)

    def row_for(self, d: date) -> WeekRow | None:
        for row in self.rows:
            if row.contains(d):
                return row
        return None


def month_days(visible_month: date, first_day_of_week: int = SUNDAY) -> list[date]:
    """Return the month's days padded with neighbour days to whole weeks.

    The list starts on the last ``first_day_of_week`` on or before the 1st
    and ends on the day before the next ``first_day_of_week`` after the
    month's last day, so its length is always a multiple of 7.
    """
    _check_first_day(first_day_of_week)
    # calendar.Calendar counts Monday=0 .. Sunday=6
    cal = calendar.Calendar(firstweekday=6 if first_day_of_week == SUNDAY else 0)
    return list(cal.itermonthdates(visible_month.year, visible_month.month))


def month_grid(
    visible_month: date,
    first_day_of_week: int = SUNDAY,
    marking_type: MarkingType = MarkingType.SIMPLE,
    show_week_numbers: bool = False,
    hide_extra_days: bool = False,
) -> MonthGrid:
    """Partition ``month_days`` into week rows."""
    days = month_days(visible_month, first_day_of_week)
    rows: list[WeekRow] = []
    for i in range(0, len(days), 7):
        chunk = tuple(days[i:i + 7])
        rows.append(WeekRow(
            index=len(rows),
            days=chunk,
            week_number=week_number(chunk[-1]),
            iso_week=chunk[-1].isocalendar()[1],
        ))
    start, end = month_bounds(visible_month)
    return MonthGrid(
        month_start=start,
        month_end=end,
        first_day_of_week=first_day_of_week,
        rows=tuple(rows),
        marking_type=marking_type,
        show_week_numbers=show_week_numbers,
        hide_extra_days=hide_extra_days,
    )


def iso_week_numbers(grid: MonthGrid) -> list[str]:
    """Return the ISO week label for each grid row (week-number column)."""
    return [str(row.iso_week) for row in grid.rows]
