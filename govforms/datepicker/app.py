"""Datepicker gallery — Textual demo application.

Launch with:  python -m govforms.datepicker
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Callable, Optional

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Footer, Header, Log

from .codec import format_date
from .constraints import Bounds
from .models import DatepickerOptions
from .widget import Datepicker

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────

ADULT_AGE = 18
_MSG_UNDER_AGE = "Žadatel musí být starší 18 let"
_MSG_END_BEFORE_START = "Konec akce nesmí předcházet začátku"

# ── Utility ──────────────────────────────────────────────────


def years_before(day: date, years: int) -> date:
    """*day* shifted back by whole *years*; 29 Feb lands on 28 Feb."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def is_adult(birth: date, today: date) -> bool:
    return birth <= years_before(today, ADULT_AGE)


# ── Section ──────────────────────────────────────────────────


class GallerySection(Vertical):
    """A titled group of pickers."""

    def __init__(self, title: str, *children: Any, **kw: Any) -> None:
        super().__init__(*children, **kw)
        self.border_title = title


# ── Main App ─────────────────────────────────────────────────


class DatepickerGalleryApp(App[None]):
    """Every configuration of the datepicker on one screen, with an event log."""

    TITLE = "Datepicker"
    SUB_TITLE = "DD.MM.YYYY"

    CSS = """
    #main {
        height: 1fr;
    }

    #gallery {
        width: 1fr;
        padding: 0 1;
    }

    GallerySection {
        height: auto;
        border: round $primary;
        padding: 0 1;
        margin-bottom: 1;
    }

    GallerySection Horizontal {
        height: auto;
    }

    GallerySection Datepicker {
        margin-right: 2;
        margin-bottom: 1;
    }

    #event-log {
        width: 48;
        border: round $accent;
    }
    """

    BINDINGS = [
        Binding("ctrl+l", "clear_log", "Clear Log"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        playground: Optional[DatepickerOptions] = None,
        *,
        today: Callable[[], date] = date.today,
        **kw: Any,
    ) -> None:
        super().__init__(**kw)
        self.playground = playground or DatepickerOptions(
            value=None, label="Playground"
        )
        self._today = today

    # ── compose ──────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        today = self._today()
        picker = self._picker
        yield Header()
        with Horizontal(id="main"):
            with VerticalScroll(id="gallery"):
                with GallerySection("Playground"):
                    yield picker(self.playground, id="playground")
                with GallerySection("States"):
                    with Horizontal():
                        yield picker(
                            label="Uncontrolled",
                            initial_value=date(1990, 1, 1),
                            id="uncontrolled",
                        )
                        yield picker(
                            label="Disabled",
                            initial_value=today,
                            disabled=True,
                            id="disabled",
                        )
                    with Horizontal():
                        yield picker(
                            label="Invalid",
                            invalid=True,
                            invalid_message="Zadejte platné datum",
                            id="invalid",
                        )
                        yield picker(
                            label="Datum podání",
                            required=True,
                            helper_text="Formát dd.mm.rrrr",
                            id="required",
                        )
                with GallerySection("Locale and range"):
                    with Horizontal():
                        yield picker(label="Date (English)", locale="en", id="english")
                        yield picker(
                            label="Termín schůzky",
                            min_date=today - timedelta(days=7),
                            max_date=today + timedelta(days=30),
                            helper_text=(
                                f"{format_date(today - timedelta(days=7))}"
                                f" až {format_date(today + timedelta(days=30))}"
                            ),
                            id="range",
                        )
                with GallerySection("Datum narození"):
                    yield picker(
                        label="Datum narození",
                        value=None,
                        max_date=today,
                        required=True,
                        invalid_message=_MSG_UNDER_AGE,
                        id="birth",
                    )
                with GallerySection("Rezervace akce"):
                    with Horizontal():
                        yield picker(
                            label="Začátek", value=None, min_date=today, id="event-start"
                        )
                        yield picker(
                            label="Konec",
                            value=None,
                            min_date=today,
                            invalid_message=_MSG_END_BEFORE_START,
                            id="event-end",
                        )
            yield Log(id="event-log", max_lines=200)
        yield Footer()

    def _picker(
        self, options: Optional[DatepickerOptions] = None, **kw: Any
    ) -> Datepicker:
        return Datepicker(options, today=self._today, **kw)

    def on_mount(self) -> None:
        self.query_one("#event-log", Log).border_title = "Changed"

    # ── handlers ─────────────────────────────────────────────

    def on_datepicker_changed(self, event: Datepicker.Changed) -> None:
        picker = event.datepicker
        if picker.controlled:
            picker.value = event.value
        line = f"{picker.id}: {format_date(event.value) or '(prázdné)'}"
        self.query_one("#event-log", Log).write_line(line)
        logger.info(line)

    @on(Datepicker.Changed, "#birth")
    def _birth_changed(self, event: Datepicker.Changed) -> None:
        event.datepicker.invalid = event.value is not None and not is_adult(
            event.value, self._today()
        )

    @on(Datepicker.Changed, "#event-start")
    def _event_start_changed(self, event: Datepicker.Changed) -> None:
        end = self.query_one("#event-end", Datepicker)
        start = event.value or self._today()
        end.bounds = Bounds(min_date=start)
        self._check_event_range(event.value, end.value)

    @on(Datepicker.Changed, "#event-end")
    def _event_end_changed(self, event: Datepicker.Changed) -> None:
        start = self.query_one("#event-start", Datepicker)
        self._check_event_range(start.value, event.value)

    def _check_event_range(self, start: Optional[date], end: Optional[date]) -> None:
        self.query_one("#event-end", Datepicker).invalid = (
            start is not None and end is not None and end < start
        )

    # ── actions ──────────────────────────────────────────────

    def action_clear_log(self) -> None:
        self.query_one("#event-log", Log).clear()
        self.notify("Log cleared")
