"""Open/closed state, focused cell and view month of the calendar picker.

:class:`CalendarNavigator` knows nothing about Textual.  The widget feeds
it key names and pointer targets and reads back what to render and what
to commit, which keeps every transition testable without an app.

Focus is allowed to land on a date outside the bounds; the grid marks
such a cell as both focused and disabled, and committing it does nothing.
"""

from __future__ import annotations

import enum
import logging
from datetime import date, timedelta
from typing import Callable, NamedTuple, Optional

from .constraints import UNBOUNDED, Bounds, is_selectable
from .grid import ViewMonth

logger = logging.getLogger(__name__)

KEY_DELTAS = {
    "left": -1,
    "right": 1,
    "up": -7,
    "down": 7,
}
COMMIT_KEYS = frozenset({"enter", "space"})
CLOSE_KEYS = frozenset({"escape"})
OPEN_KEY = "down"


class PointerTarget(enum.Enum):
    """Where a pointer-down landed, relative to the widget."""

    FIELD = "field"
    TOGGLE = "toggle"
    SURFACE = "surface"
    OUTSIDE = "outside"


class KeyOutcome(NamedTuple):
    handled: bool
    commit: Optional[date] = None


_UNHANDLED = KeyOutcome(False)
_HANDLED = KeyOutcome(True)


class CalendarNavigator:
    """State machine with two states, ``Closed`` and ``Open``."""

    def __init__(
        self,
        bounds: Bounds = UNBOUNDED,
        *,
        disabled: bool = False,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.bounds = bounds
        self.disabled = disabled
        self._today = today
        self.is_open = False
        self.focused: Optional[date] = None
        self.view_month = ViewMonth.of(today())

    def today(self) -> date:
        return self._today()

    # ── transitions ──────────────────────────────────────────

    def open(self, current: Optional[date]) -> bool:
        if self.disabled or self.is_open:
            return False
        anchor = current or self.today()
        self.is_open = True
        self.focused = anchor
        self.view_month = ViewMonth.of(anchor)
        logger.debug("calendar opened on %s", anchor)
        return True

    def close(self) -> bool:
        if not self.is_open:
            return False
        self.is_open = False
        self.focused = None
        logger.debug("calendar closed")
        return True

    def toggle(self, current: Optional[date]) -> bool:
        if self.disabled:
            return False
        if self.is_open:
            return self.close()
        return self.open(current)

    def follow_value(self, value: date) -> None:
        """Keep the grid on a value typed into the field."""
        self.view_month = ViewMonth.of(value)
        if self.is_open:
            self.focused = value

    # ── focus movement ───────────────────────────────────────

    def move_focus(self, days: int) -> None:
        if self.disabled or not self.is_open:
            return
        current = self.focused or self.today()
        try:
            target = current + timedelta(days=days)
        except OverflowError:
            target = date.max if days > 0 else date.min
        self.focused = target
        if not self.view_month.contains(target):
            self.view_month = ViewMonth.of(target)

    def shift_view(self, months: int) -> None:
        """Page the grid by *months* (12 for a year).

        The focused cell keeps its day of month, clamped to the length of
        the month it lands in (31 Jan + 1 month is 29 Feb in a leap year).
        """
        if self.disabled or not self.is_open:
            return
        self.view_month = self.view_month.shifted(months)
        if self.focused is not None:
            self.focused = self.view_month.clamp_day(self.focused.day)

    # ── commits ──────────────────────────────────────────────

    def select(self, day: date) -> Optional[date]:
        """Commit *day*, closing the picker, unless the bounds reject it."""
        if self.disabled or not is_selectable(day, self.bounds):
            return None
        self.close()
        return day

    def commit(self) -> Optional[date]:
        if not self.is_open:
            return None
        return self.select(self.focused or self.today())

    def go_to_today(self) -> Optional[date]:
        return self.select(self.today())

    # ── input events ─────────────────────────────────────────

    def handle_key(self, key: str, current: Optional[date]) -> KeyOutcome:
        """Apply a key press; ``handled`` tells the field to swallow it."""
        if self.disabled:
            return _UNHANDLED
        if not self.is_open:
            if key == OPEN_KEY:
                self.open(current)
                return _HANDLED
            return _UNHANDLED
        if key in KEY_DELTAS:
            self.move_focus(KEY_DELTAS[key])
            return _HANDLED
        if key in COMMIT_KEYS:
            return KeyOutcome(True, self.commit())
        if key in CLOSE_KEYS:
            self.close()
            return _HANDLED
        return _UNHANDLED

    def pointer_down(self, target: PointerTarget) -> bool:
        """Close on a pointer-down outside the field, toggle and surface."""
        if target is PointerTarget.OUTSIDE:
            return self.close()
        return False

    # ── rendering helpers ────────────────────────────────────

    def is_disabled_day(self, day: date) -> bool:
        return not is_selectable(day, self.bounds)
