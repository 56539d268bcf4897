"""Datepicker — Textual widget combining a typed field and a calendar grid.

Usage::

    # uncontrolled: the widget owns the date
    yield Datepicker(label="Datum narození", initial_value=date(1990, 1, 1))

    # controlled: the host owns the date and feeds it back
    yield Datepicker(label="Datum", value=None, id="start")

    @on(Datepicker.Changed, "#start")
    def _start_changed(self, event: Datepicker.Changed) -> None:
        event.datepicker.value = event.value
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Grid, Horizontal, Vertical
from textual.errors import NoWidget
from textual.geometry import Region
from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Static

from ._layout_sizes import (
    CELL_WIDTH,
    DIGIT_COUNT,
    DISPLAY_LENGTH,
    GRID_CELLS,
    SURFACE_HEIGHT,
    SURFACE_WIDTH,
)
from .constraints import Bounds
from .codec import (
    auto_format_keystroke,
    caret_after_digits,
    delete_after_caret,
    delete_before_caret,
    digits_of,
    format_date,
    insert_at_caret,
)
from .grid import GridCell, ViewMonth, build_grid
from .models import DEFAULT_PLACEHOLDER, DatepickerOptions
from .navigation import (
    CLOSE_KEYS,
    COMMIT_KEYS,
    KEY_DELTAS,
    OPEN_KEY,
    CalendarNavigator,
    PointerTarget,
)
from .resolver import ValueResolver, reconcile_blur, reconcile_edit

logger = logging.getLogger(__name__)

NAVIGATION_KEYS = frozenset(KEY_DELTAS) | COMMIT_KEYS | CLOSE_KEYS


# ── Text field ───────────────────────────────────────────────


class DateField(Input):
    """An Input that only accepts digits and inserts the dots itself.

    While the calendar is open the arrow keys, Enter, Space and Escape
    belong to the calendar and are handed to the owning Datepicker.
    """

    # Keys that should pass through to the default Input handler.
    _PASSTHROUGH_KEYS = frozenset(
        {"left", "right", "home", "end", "tab", "shift+tab", "enter", "escape"}
    )

    class Edited(Message):
        """The user changed the text (already normalized)."""

        def __init__(self, field: DateField, text: str) -> None:
            super().__init__()
            self.field = field
            self.text = text

        @property
        def control(self) -> DateField:
            return self.field

    class NavigationKey(Message):
        """A key meant for the calendar rather than the text."""

        def __init__(self, field: DateField, key: str) -> None:
            super().__init__()
            self.field = field
            self.key = key

        @property
        def control(self) -> DateField:
            return self.field

    class Entered(Message):
        def __init__(self, field: DateField) -> None:
            super().__init__()
            self.field = field

    class Left(Message):
        def __init__(self, field: DateField) -> None:
            super().__init__()
            self.field = field

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("max_length", DISPLAY_LENGTH)
        kwargs.setdefault("placeholder", DEFAULT_PLACEHOLDER)
        super().__init__(**kwargs)
        self.picker_open = False
        self._caret_digits = 0
        self._edit_serial = 0

    # ── programmatic text ────────────────────────────────────

    def replace_text(self, text: str) -> None:
        """Show *text* without reporting it as a user edit."""
        self._edit_serial += 1
        with self.prevent(Input.Changed):
            self.value = text
        self.cursor_position = len(text)

    # ── user edits ───────────────────────────────────────────

    def _apply_edit(self, edit: tuple[str, int]) -> None:
        text, digits = edit
        self._caret_digits = digits
        self.value = text
        self.cursor_position = caret_after_digits(text, digits)
        # Input may move the caret again when it renders the new value.
        self.call_after_refresh(self._restore_caret, self._edit_serial)

    def _restore_caret(self, serial: int) -> None:
        if serial != self._edit_serial:
            return
        self.cursor_position = caret_after_digits(self.value, self._caret_digits)

    async def _on_key(self, event: events.Key) -> None:
        key = event.key
        self._edit_serial += 1

        if key in NAVIGATION_KEYS and (self.picker_open or key == OPEN_KEY):
            event.prevent_default()
            event.stop()
            self.post_message(self.NavigationKey(self, key))
            return

        # Let navigation keys pass through to the parent handler.
        if key in self._PASSTHROUGH_KEYS:
            return

        event.prevent_default()
        event.stop()

        if key == "backspace":
            self._apply_edit(delete_before_caret(self.value, self.cursor_position))
        elif key == "delete":
            self._apply_edit(delete_after_caret(self.value, self.cursor_position))
        elif len(key) == 1 and key.isdigit():
            if len(digits_of(self.value)) >= DIGIT_COUNT:
                return
            self._apply_edit(insert_at_caret(self.value, self.cursor_position, key))

    async def _on_paste(self, event: events.Paste) -> None:
        event.prevent_default()
        event.stop()
        self._edit_serial += 1
        self._apply_edit(insert_at_caret(self.value, self.cursor_position, event.text))

    @on(Input.Changed)
    def _on_self_changed(self, event: Input.Changed) -> None:
        if event.input is not self:
            return
        normalized = auto_format_keystroke(event.value)
        if normalized != event.value:
            # edited through one of Input's own bindings (cut, delete word…)
            before = len(digits_of(event.value[: self.cursor_position]))
            self._apply_edit((normalized, min(before, len(digits_of(normalized)))))
            return
        self.post_message(self.Edited(self, normalized))

    def on_focus(self, event: events.Focus) -> None:
        self.post_message(self.Entered(self))

    def on_blur(self, event: events.Blur) -> None:
        self.post_message(self.Left(self))


class CalendarToggle(Button, can_focus=False):
    """Button beside the field that opens and closes the calendar."""


# ── Calendar surface ─────────────────────────────────────────


class DayCell(Static):
    """One of the 42 grid cells.  Cells are reused as the month changes."""

    def __init__(self, **kw: Any) -> None:
        super().__init__("", **kw)
        self.styles.width = CELL_WIDTH
        self.date: Optional[date] = None

    def assign(
        self,
        cell: GridCell,
        *,
        today: bool,
        selected: bool,
        disabled: bool,
        focused: bool,
    ) -> None:
        self.date = cell.date
        self.update(f"{cell.date.day:>2}")
        self.set_class(not cell.in_current_month, "-other-month")
        self.set_class(today, "-today")
        self.set_class(selected, "-selected")
        self.set_class(disabled, "-disabled")
        self.set_class(focused, "-focused")


class NavButton(Static):
    """Pages the grid by ``months`` (±1 month, ±12 for a year)."""

    def __init__(self, label: str, months: int, **kw: Any) -> None:
        super().__init__(label, **kw)
        self.months = months


class TodayButton(Static):
    """Commits today's date."""


class CalendarSurface(Vertical):
    """Container for the header, weekday row, day grid and footer."""

    def __init__(self, **kw: Any) -> None:
        super().__init__(**kw)
        self.styles.width = SURFACE_WIDTH
        self.styles.height = SURFACE_HEIGHT


# ── Datepicker ───────────────────────────────────────────────


class Datepicker(Widget):
    """Date entry: a ``DD.MM.YYYY`` field plus a keyboard-driven calendar.

    Options are those of :class:`DatepickerOptions`, given either as an
    ``options`` object or as keyword arguments.
    """

    DEFAULT_CSS = """
    Datepicker {
        width: auto;
        height: auto;
    }

    Datepicker .datepicker--label {
        text-style: bold;
    }

    Datepicker .datepicker--input-row {
        width: auto;
        height: 3;
    }

    Datepicker DateField {
        width: 16;
    }

    Datepicker.-invalid DateField {
        border: tall $error;
    }

    Datepicker CalendarToggle {
        width: 5;
        min-width: 5;
    }

    /* ── calendar surface (see _layout_sizes.py) ─── */
    Datepicker CalendarSurface {
        display: none;
        overlay: screen;
        constrain: none inside;
        padding: 0 1;
        border: round $primary;
        background: $surface;
    }

    Datepicker.-open CalendarSurface {
        display: block;
    }

    CalendarSurface .calendar-header,
    CalendarSurface .calendar-weekdays,
    CalendarSurface .calendar-footer {
        height: 1;
    }

    CalendarSurface NavButton {
        width: 3;
        text-align: center;
        color: $accent;
    }

    CalendarSurface .calendar-title {
        width: 1fr;
        text-align: center;
        text-style: bold;
    }

    CalendarSurface .calendar-weekday {
        text-align: center;
        color: $text-muted;
    }

    CalendarSurface .calendar-days {
        grid-size: 7 6;
        grid-gutter: 0;
        height: 6;
    }

    DayCell {
        height: 1;
        text-align: center;
    }
    DayCell.-other-month {
        color: $text-disabled;
    }
    DayCell.-today {
        text-style: bold underline;
    }
    DayCell.-selected {
        background: $primary;
        color: $text;
    }
    DayCell.-disabled {
        color: $error 60%;
        text-style: strike;
    }
    DayCell.-focused {
        background: $accent;
        color: $text;
        text-style: bold;
    }
    DayCell.-focused.-disabled {
        background: $error 30%;
    }

    CalendarSurface TodayButton {
        width: 1fr;
        text-align: center;
        color: $accent;
        text-style: bold;
    }

    Datepicker .datepicker--message {
        height: auto;
        color: $text-muted;
    }
    Datepicker .datepicker--message.-empty {
        display: none;
    }
    Datepicker.-invalid .datepicker--message {
        color: $error;
    }
    """

    invalid: reactive[bool] = reactive(False, init=False)
    invalid_message: reactive[str] = reactive("", init=False)
    helper_text: reactive[str] = reactive("", init=False)

    class Changed(Message):
        """Posted with the new date, or ``None`` for "no date"."""

        def __init__(self, datepicker: Datepicker, value: Optional[date]) -> None:
            super().__init__()
            self.datepicker = datepicker
            self.value = value

        @property
        def control(self) -> Datepicker:
            return self.datepicker

    def __init__(
        self,
        options: Optional[DatepickerOptions] = None,
        *,
        today: Optional[Callable[[], date]] = None,
        name: Optional[str] = None,
        id: Optional[str] = None,
        classes: Optional[str] = None,
        **settings: Any,
    ) -> None:
        if options is None:
            options = DatepickerOptions(**settings)
        elif settings:
            options = DatepickerOptions(
                **{**options.model_dump(exclude_unset=True), **settings}
            )
        self.options = options
        self._locale = options.locale_table
        self._resolver = ValueResolver(options.value_source())
        self._navigator = CalendarNavigator(
            options.bounds,
            disabled=options.disabled,
            today=today or date.today,
        )
        if self._resolver.current is not None:
            self._navigator.view_month = ViewMonth.of(self._resolver.current)
        self._ready = False

        super().__init__(name=name, id=id, classes=classes, disabled=options.disabled)

        self.set_reactive(Datepicker.invalid, options.invalid)
        self.set_reactive(Datepicker.invalid_message, options.invalid_message)
        self.set_reactive(Datepicker.helper_text, options.helper_text)

        self._field = DateField(placeholder=options.placeholder, classes="datepicker--field")
        self._toggle = CalendarToggle("▦", classes="datepicker--toggle")
        self._toggle.tooltip = self._locale.open_calendar
        self._title_label = Static("", classes="calendar-title")
        self._cells = [DayCell(classes="calendar-day") for _ in range(GRID_CELLS)]
        self._surface = CalendarSurface(classes="calendar-surface")
        self._message_line = Static("", classes="datepicker--message -empty")

    # ── public API ───────────────────────────────────────────

    @property
    def value(self) -> Optional[date]:
        return self._resolver.current

    @value.setter
    def value(self, value: Optional[date]) -> None:
        if not self._resolver.receive(value):
            return
        if value is not None and not self._navigator.is_open:
            self._navigator.view_month = ViewMonth.of(value)
        self._sync_text()
        self._render_state()

    @property
    def controlled(self) -> bool:
        return self._resolver.controlled

    @property
    def navigator(self) -> CalendarNavigator:
        return self._navigator

    @property
    def field(self) -> DateField:
        return self._field

    @property
    def is_open(self) -> bool:
        return self._navigator.is_open

    @property
    def bounds(self) -> Bounds:
        return self._navigator.bounds

    @bounds.setter
    def bounds(self, bounds: Bounds) -> None:
        """Replace the selectable range; the current value is left untouched."""
        self._navigator.bounds = bounds
        self._render_state()

    def open(self) -> None:
        if self._navigator.open(self.value):
            self._field.focus()
        self._render_state()

    def close(self) -> None:
        self._navigator.close()
        self._render_state()

    def toggle(self) -> None:
        if self._navigator.toggle(self.value) and self._navigator.is_open:
            self._field.focus()
        self._render_state()

    def clear(self) -> None:
        """Explicitly set "no date" and notify."""
        if self.disabled:
            return
        self._notify(self._resolver.propose(None))
        self._sync_text()

    # ── compose / lifecycle ──────────────────────────────────

    def compose(self) -> ComposeResult:
        if self.options.label:
            marker = " *" if self.options.required else ""
            yield Label(f"{self.options.label}{marker}", classes="datepicker--label")
        with Horizontal(classes="datepicker--input-row"):
            yield self._field
            yield self._toggle
        with self._surface:
            with Horizontal(classes="calendar-header"):
                yield self._nav_button("«", -12, self._locale.previous_year)
                yield self._nav_button("‹", -1, self._locale.previous_month)
                yield self._title_label
                yield self._nav_button("›", 1, self._locale.next_month)
                yield self._nav_button("»", 12, self._locale.next_year)
            with Horizontal(classes="calendar-weekdays"):
                for name in self._locale.weekdays:
                    weekday = Static(name, classes="calendar-weekday")
                    weekday.styles.width = CELL_WIDTH
                    yield weekday
            with Grid(classes="calendar-days"):
                yield from self._cells
            with Horizontal(classes="calendar-footer"):
                yield TodayButton(self._locale.today)
        yield self._message_line

    @staticmethod
    def _nav_button(label: str, months: int, tooltip: str) -> NavButton:
        button = NavButton(label, months)
        button.tooltip = tooltip
        return button

    def on_mount(self) -> None:
        self._ready = True
        self._sync_text()
        self._render_message()
        self.set_class(self.invalid, "-invalid")
        self._render_state()
        self.watch(self, "disabled", self._disabled_changed, init=False)

    def on_unmount(self) -> None:
        self.release_mouse()

    # ── reactive watchers ────────────────────────────────────

    def _disabled_changed(self, disabled: bool) -> None:
        self._navigator.disabled = disabled
        if disabled and self._navigator.close():
            self._render_state()

    def watch_invalid(self, invalid: bool) -> None:
        self.set_class(invalid, "-invalid")
        self._render_message()

    def watch_invalid_message(self) -> None:
        self._render_message()

    def watch_helper_text(self) -> None:
        self._render_message()

    # ── field events ─────────────────────────────────────────

    @on(DateField.Edited)
    def _on_field_edited(self, event: DateField.Edited) -> None:
        event.stop()
        result = reconcile_edit(event.text, self._resolver)
        if result.notify and result.value is not None:
            self._navigator.follow_value(result.value)
            self._notify(result.value)
            self._render_state()

    @on(DateField.Left)
    def _on_field_left(self, event: DateField.Left) -> None:
        event.stop()
        result = reconcile_blur(self._field.value, self._resolver)
        if result.text != self._field.value:
            self._field.replace_text(result.text)
        if result.notify:
            self._notify(result.value)
            self._render_state()

    @on(DateField.Entered)
    def _on_field_entered(self, event: DateField.Entered) -> None:
        event.stop()
        if self.options.auto_open_on_focus and self._navigator.open(self.value):
            self._render_state()

    @on(DateField.NavigationKey)
    def _on_navigation_key(self, event: DateField.NavigationKey) -> None:
        event.stop()
        outcome = self._navigator.handle_key(event.key, self.value)
        if outcome.commit is not None:
            self._commit(outcome.commit)
        self._render_state()

    @on(Button.Pressed, ".datepicker--toggle")
    def _on_toggle_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.toggle()

    # ── pointer handling while open ──────────────────────────
    #
    # While the calendar is open the widget holds the mouse capture, so
    # every pointer event on the screen arrives here.  Clicks inside the
    # surface are routed to the cell or control under the pointer.  A
    # pointer-down anywhere else closes the calendar, releases the capture
    # and is passed on to the widget under the pointer.  Losing the capture
    # to another widget closes the calendar as well.

    def _hit(self, event: events.MouseEvent) -> tuple[Optional[Widget], Optional[Region]]:
        try:
            return self.screen.get_widget_at(event.screen_x, event.screen_y)
        except NoWidget:
            return None, None

    def _widget_at(self, event: events.MouseEvent) -> Optional[Widget]:
        return self._hit(event)[0]

    def _pointer_target(self, widget: Optional[Widget]) -> PointerTarget:
        if widget is None:
            return PointerTarget.OUTSIDE
        chain = widget.ancestors_with_self
        if self._toggle in chain:
            return PointerTarget.TOGGLE
        if self._field in chain:
            return PointerTarget.FIELD
        if self._surface in chain:
            return PointerTarget.SURFACE
        return PointerTarget.OUTSIDE

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if not self._navigator.is_open or self.app.mouse_captured is not self:
            return
        event.stop()
        widget, region = self._hit(event)
        if not self._navigator.pointer_down(self._pointer_target(widget)):
            return
        self._render_state()
        if widget is not None and region is not None:
            # hand the pointer-down on to whatever was actually clicked
            widget.post_message(
                event._apply_offset(
                    event.screen_x - region.x - event.x,
                    event.screen_y - region.y - event.y,
                )
            )

    def on_mouse_release(self, event: events.MouseRelease) -> None:
        # another widget (usually a second datepicker opening) took the capture
        if self._navigator.close():
            logger.debug("%s closed, mouse capture lost", self.id or "datepicker")
            self._render_state()

    def on_click(self, event: events.Click) -> None:
        if not self._navigator.is_open or self.app.mouse_captured is not self:
            return
        event.stop()
        widget = self._widget_at(event)
        if isinstance(widget, DayCell) and widget.date is not None:
            self._commit(self._navigator.select(widget.date))
        elif isinstance(widget, NavButton):
            self._navigator.shift_view(widget.months)
        elif isinstance(widget, TodayButton):
            self._commit(self._navigator.go_to_today())
        elif self._pointer_target(widget) is PointerTarget.TOGGLE:
            self._navigator.close()
        self._render_state()

    # ── state → screen ───────────────────────────────────────

    def _commit(self, value: Optional[date]) -> None:
        if value is None:
            return
        self._notify(self._resolver.propose(value))
        self._sync_text()
        self._field.focus()

    def _notify(self, value: Optional[date]) -> None:
        logger.debug("%s changed to %s", self.id or "datepicker", format_date(value) or "no date")
        self.post_message(self.Changed(self, value))

    def _sync_text(self) -> None:
        if not self._ready:
            return
        text = format_date(self.value)
        if self._field.value != text:
            self._field.replace_text(text)

    def _render_message(self) -> None:
        if not self._ready:
            return
        # helper text gives way to the error while invalid
        if self.invalid:
            text = f"⚠ {self.invalid_message}" if self.invalid_message else ""
        else:
            text = self.helper_text
        self._message_line.update(text)
        self._message_line.set_class(not text, "-empty")

    def _render_state(self) -> None:
        if not self._ready:
            return
        is_open = self._navigator.is_open
        self.set_class(is_open, "-open")
        self._field.picker_open = is_open
        if is_open:
            self.capture_mouse()
            self._render_calendar()
        else:
            self.release_mouse()

    def _render_calendar(self) -> None:
        nav = self._navigator
        view = nav.view_month
        today = nav.today()
        selected = self.value
        self._title_label.update(self._locale.title(view.year, view.month))
        for widget, cell in zip(self._cells, build_grid(view)):
            widget.assign(
                cell,
                today=cell.date == today,
                selected=cell.date == selected,
                disabled=nav.is_disabled_day(cell.date),
                focused=cell.date == nav.focused,
            )
