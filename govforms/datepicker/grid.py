"""Month grid for the calendar surface.

The grid always has 6 rows of 7 days, Monday first, whatever the month
and the locale.  A fixed shape keeps the surface from changing height
when paging between a four-week February and a six-week month.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator, NamedTuple

from ._layout_sizes import GRID_CELLS

# Dec 9999 would need cells in year 10000; Jan 0001 starts on a Monday.
_MIN_ORDINAL_MONTH = 1 * 12 + 0
_MAX_ORDINAL_MONTH = 9999 * 12 + 10


class ViewMonth(NamedTuple):
    """The (year, month) shown by the calendar grid."""

    year: int
    month: int

    @classmethod
    def of(cls, value: date) -> ViewMonth:
        return cls._from_ordinal(value.year * 12 + value.month - 1)

    @classmethod
    def _from_ordinal(cls, ordinal: int) -> ViewMonth:
        ordinal = max(_MIN_ORDINAL_MONTH, min(ordinal, _MAX_ORDINAL_MONTH))
        year, month0 = divmod(ordinal, 12)
        return cls(year, month0 + 1)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def shifted(self, months: int) -> ViewMonth:
        """Move by *months*, staying inside the representable range."""
        return self._from_ordinal(self.year * 12 + self.month - 1 + months)

    def contains(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month

    def clamp_day(self, day: int) -> date:
        """The *day*-th of this month, clamped to the month's last day."""
        return date(self.year, self.month, max(1, min(day, self.days_in_month)))


class GridCell(NamedTuple):
    date: date
    in_current_month: bool


class MonthGrid:
    """Restartable 42-cell sequence for one :class:`ViewMonth`.

    Cells are computed on every iteration; nothing is cached.
    """

    __slots__ = ("view",)

    def __init__(self, view: ViewMonth) -> None:
        self.view = view

    def __iter__(self) -> Iterator[GridCell]:
        first = self.view.first_day
        # date.weekday() is 0 for Monday, which is exactly the back-fill count.
        start = first - timedelta(days=first.weekday())
        for offset in range(GRID_CELLS):
            day = start + timedelta(days=offset)
            yield GridCell(day, self.view.contains(day))

    def __len__(self) -> int:
        return GRID_CELLS

    def __repr__(self) -> str:
        return f"MonthGrid({self.view.year}-{self.view.month:02d})"


def build_grid(view: ViewMonth) -> MonthGrid:
    return MonthGrid(view)
