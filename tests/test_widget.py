"""Tests for the Datepicker widget: typing, blur, keyboard and pointer handling."""

from __future__ import annotations

from datetime import date
from typing import Any

from textual import on
from textual.app import App, ComposeResult
from textual.widgets import Button, Input, Label

from govforms.datepicker._layout_sizes import CELL_WIDTH, SURFACE_HEIGHT, SURFACE_WIDTH
from govforms.datepicker.grid import ViewMonth
from govforms.datepicker.widget import (
    CalendarSurface,
    Datepicker,
    DayCell,
    NavButton,
    TodayButton,
)

TODAY = date(2024, 6, 15)


_CSS = """
#outside, #submit {
    dock: bottom;
}
"""


class _PickerApp(App):
    """Minimal app with one Datepicker, a second input to move focus to,
    and a label and a button to click outside the picker."""

    CSS = _CSS

    def __init__(self, **options: Any) -> None:
        super().__init__()
        self.options = options
        self.changes: list[date | None] = []
        self.submitted = 0

    def compose(self) -> ComposeResult:
        yield Datepicker(id="picker", today=lambda: TODAY, **self.options)
        yield Input(id="other")
        yield Label("outside", id="outside")
        yield Button("Submit", id="submit")

    def on_datepicker_changed(self, event: Datepicker.Changed) -> None:
        self.changes.append(event.value)

    @on(Button.Pressed, "#submit")
    def _submit(self) -> None:
        self.submitted += 1


class _TwoPickerApp(App):
    """Two Datepickers on one screen."""

    CSS = _CSS

    def compose(self) -> ComposeResult:
        yield Datepicker(id="first", today=lambda: TODAY)
        yield Datepicker(id="second", today=lambda: TODAY)
        yield Label("outside", id="outside")


def _cell(app: App, day: date) -> DayCell:
    return next(cell for cell in app.query(DayCell) if cell.date == day)


def _nav_button(app: App, months: int) -> NavButton:
    return next(button for button in app.query(NavButton) if button.months == months)


async def _focus_field(app: App, pilot) -> Datepicker:
    picker = app.query_one("#picker", Datepicker)
    picker.field.focus()
    await pilot.pause()
    return picker


class TestTyping:
    async def test_full_date_notifies(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"01011990")
            await pilot.pause()
            assert picker.field.value == "01.01.1990"
            assert app.changes == [date(1990, 1, 1)]
            assert picker.value == date(1990, 1, 1)

    async def test_letters_are_blocked(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("a", "full_stop", "1")
            assert picker.field.value == "1"

    async def test_ninth_digit_is_ignored(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"010119905")
            assert picker.field.value == "01.01.1990"

    async def test_backspace_after_separator(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("0", "1")
            assert picker.field.value == "01."
            await pilot.press("backspace")
            assert picker.field.value == "0"

    async def test_caret_skips_inserted_separator(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"0101")
            await pilot.pause()
            assert picker.field.value == "01.01."
            assert picker.field.cursor_position == 6

    async def test_caret_after_insert_in_middle(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"0101")
            await pilot.press("home", "right", "5")
            await pilot.pause()
            assert picker.field.value == "05.10.1"
            assert picker.field.cursor_position == 3

    async def test_stale_caret_correction_is_skipped(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"0101")
            await pilot.pause()
            field = picker.field
            field.cursor_position = 0
            field._restore_caret(field._edit_serial - 1)
            assert field.cursor_position == 0
            field._restore_caret(field._edit_serial)
            assert field.cursor_position == 6

    async def test_invalid_complete_date_does_not_notify(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"30022024")
            await pilot.pause()
            assert picker.field.value == "30.02.2024"
            assert app.changes == []

    async def test_controlled_waits_for_host(self):
        app = _PickerApp(value=None)
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"01011990")
            await pilot.pause()
            assert app.changes == [date(1990, 1, 1)]
            assert picker.value is None
            picker.value = date(1990, 1, 1)
            assert picker.field.value == "01.01.1990"


class TestBlur:
    async def test_partial_without_value_clears_silently(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*"0101")
            await pilot.press("tab")
            await pilot.pause()
            assert picker.field.value == ""
            assert app.changes == []

    async def test_partial_reverts_to_value(self):
        app = _PickerApp(initial_value=date(2020, 5, 5))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            assert picker.field.value == "05.05.2020"
            await pilot.press("backspace", "backspace")
            await pilot.press("tab")
            await pilot.pause()
            assert picker.field.value == "05.05.2020"
            assert app.changes == []

    async def test_emptied_field_clears_value(self):
        app = _PickerApp(initial_value=date(2020, 5, 5))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press(*["backspace"] * 8)
            assert picker.field.value == ""
            await pilot.press("tab")
            await pilot.pause()
            assert app.changes == [None]
            assert picker.value is None


class TestKeyboardCalendar:
    async def test_down_opens_and_moves_a_week(self):
        app = _PickerApp(initial_value=date(2024, 1, 31))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            assert picker.is_open
            assert picker.navigator.focused == date(2024, 1, 31)
            await pilot.press("down")
            assert picker.navigator.focused == date(2024, 2, 7)
            assert picker.navigator.view_month == ViewMonth(2024, 2)
            assert _cell(app, date(2024, 2, 7)).has_class("-focused")

    async def test_enter_commits(self):
        app = _PickerApp(initial_value=date(2024, 1, 31))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down", "down", "enter")
            await pilot.pause()
            assert not picker.is_open
            assert app.changes == [date(2024, 2, 7)]
            assert picker.field.value == "07.02.2024"

    async def test_escape_closes_without_commit(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            assert picker.is_open
            assert picker.navigator.focused == TODAY
            await pilot.press("left", "escape")
            await pilot.pause()
            assert not picker.is_open
            assert app.changes == []
            assert picker.field.value == ""

    async def test_disabled_day_is_not_committed(self):
        app = _PickerApp(max_date=TODAY)
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down", "right")
            cell = _cell(app, date(2024, 6, 16))
            assert cell.has_class("-focused") and cell.has_class("-disabled")
            await pilot.press("enter")
            await pilot.pause()
            assert picker.is_open
            assert app.changes == []

    async def test_auto_open_on_focus(self):
        app = _PickerApp(auto_open_on_focus=True)
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            assert picker.is_open


class TestPointer:
    async def test_click_day_commits(self):
        app = _PickerApp(initial_value=date(2024, 1, 31))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            await pilot.click(_cell(app, date(2024, 1, 15)))
            await pilot.pause()
            assert app.changes == [date(2024, 1, 15)]
            assert not picker.is_open
            assert app.mouse_captured is None

    async def test_click_outside_closes(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            assert app.mouse_captured is picker
            await pilot.click("#outside")
            await pilot.pause()
            assert not picker.is_open
            assert app.mouse_captured is None
            assert app.changes == []

    async def test_click_outside_reaches_its_target(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            await pilot.click("#submit")
            await pilot.pause()
            assert not picker.is_open
            assert app.submitted == 1

    async def test_opening_second_picker_closes_first(self):
        app = _TwoPickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            first = app.query_one("#first", Datepicker)
            second = app.query_one("#second", Datepicker)
            first.field.focus()
            await pilot.pause()
            await pilot.press("down")
            assert first.is_open
            second.field.focus()
            await pilot.pause()
            await pilot.press("down")
            await pilot.pause()
            assert second.is_open
            assert not first.is_open
            assert app.mouse_captured is second
            await pilot.click("#outside")
            await pilot.pause()
            assert not second.is_open
            assert app.mouse_captured is None

    async def test_month_and_year_paging(self):
        app = _PickerApp(initial_value=date(2024, 1, 31))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            await pilot.click(_nav_button(app, 1))
            await pilot.pause()
            assert picker.navigator.view_month == ViewMonth(2024, 2)
            assert picker.navigator.focused == date(2024, 2, 29)
            await pilot.click(_nav_button(app, 12))
            await pilot.pause()
            assert picker.navigator.view_month == ViewMonth(2025, 2)
            assert picker.navigator.focused == date(2025, 2, 28)
            await pilot.click(_nav_button(app, -1))
            await pilot.click(_nav_button(app, -12))
            await pilot.pause()
            assert picker.navigator.view_month == ViewMonth(2024, 1)
            assert picker.is_open
            assert app.changes == []

    async def test_today_button_commits(self):
        app = _PickerApp(initial_value=date(2024, 1, 31))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            await pilot.click(TodayButton)
            await pilot.pause()
            assert app.changes == [TODAY]
            assert not picker.is_open
            assert picker.field.value == "15.06.2024"

    async def test_toggle_button(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = app.query_one("#picker", Datepicker)
            await pilot.click(".datepicker--toggle")
            await pilot.pause()
            assert picker.is_open
            picker.close()
            await pilot.pause()
            assert app.mouse_captured is None


class TestStates:
    async def test_disabled_never_opens(self):
        app = _PickerApp(disabled=True, initial_value=date(2024, 1, 1))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = app.query_one("#picker", Datepicker)
            picker.open()
            picker.toggle()
            await pilot.pause()
            assert not picker.is_open
            assert picker.field.is_disabled
            assert picker.field.value == "01.01.2024"

    async def test_disabling_closes(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = app.query_one("#picker", Datepicker)
            picker.open()
            await pilot.pause()
            assert picker.is_open
            picker.disabled = True
            await pilot.pause()
            assert not picker.is_open

    async def test_invalid_flag(self):
        app = _PickerApp(invalid=True, invalid_message="Chyba", helper_text="Nápověda")
        async with app.run_test(size=(100, 50)) as pilot:
            picker = app.query_one("#picker", Datepicker)
            message = picker.query_one(".datepicker--message")
            assert picker.has_class("-invalid")
            assert not message.has_class("-empty")
            picker.invalid_message = ""
            await pilot.pause()
            assert message.has_class("-empty")
            picker.invalid = False
            await pilot.pause()
            assert not picker.has_class("-invalid")
            assert not message.has_class("-empty")

    async def test_clear_notifies(self):
        app = _PickerApp(initial_value=date(2024, 1, 1))
        async with app.run_test(size=(100, 50)) as pilot:
            picker = app.query_one("#picker", Datepicker)
            picker.clear()
            await pilot.pause()
            assert app.changes == [None]
            assert picker.field.value == ""

    async def test_surface_size_follows_layout_constants(self):
        app = _PickerApp()
        async with app.run_test(size=(100, 50)) as pilot:
            picker = await _focus_field(app, pilot)
            await pilot.press("down")
            await pilot.pause()
            surface = picker.query_one(CalendarSurface)
            assert surface.outer_size == (SURFACE_WIDTH, SURFACE_HEIGHT)
            assert _cell(app, TODAY).outer_size.width == CELL_WIDTH
