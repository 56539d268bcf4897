"""Pydantic models for the datepicker.

Widget options and the per-locale label tables.  The ``DD.MM.YYYY``
pattern itself never depends on the locale.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constraints import Bounds, DateOption
from .resolver import Controlled, Uncontrolled, ValueSource

DEFAULT_LOCALE = "cs"
DEFAULT_PLACEHOLDER = "dd.mm.rrrr"


class LocaleTable(BaseModel):
    """Month names, weekday abbreviations and control labels for one language."""

    model_config = ConfigDict(frozen=True)

    months: tuple[str, ...] = Field(min_length=12, max_length=12)
    weekdays: tuple[str, ...] = Field(
        min_length=7, max_length=7, description="Monday first"
    )
    today: str
    open_calendar: str
    calendar: str
    previous_year: str
    previous_month: str
    next_month: str
    next_year: str

    def title(self, year: int, month: int) -> str:
        return f"{self.months[month - 1]} {year}"


LOCALES: dict[str, LocaleTable] = {
    "cs": LocaleTable(
        months=(
            "Leden", "Únor", "Březen", "Duben", "Květen", "Červen",
            "Červenec", "Srpen", "Září", "Říjen", "Listopad", "Prosinec",
        ),
        weekdays=("Po", "Út", "St", "Čt", "Pá", "So", "Ne"),
        today="Dnes",
        open_calendar="Otevřít kalendář",
        calendar="Kalendář",
        previous_year="Předchozí rok",
        previous_month="Předchozí měsíc",
        next_month="Další měsíc",
        next_year="Další rok",
    ),
    "en": LocaleTable(
        months=(
            "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ),
        weekdays=("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"),
        today="Today",
        open_calendar="Open calendar",
        calendar="Calendar",
        previous_year="Previous year",
        previous_month="Previous month",
        next_month="Next month",
        next_year="Next year",
    ),
}


def get_locale(code: Optional[str]) -> LocaleTable:
    """Look up *code*, falling back to Czech for anything unknown."""
    return LOCALES.get((code or "").lower(), LOCALES[DEFAULT_LOCALE])


class DatepickerOptions(BaseModel):
    """Everything a host can configure on a :class:`Datepicker`.

    Passing ``value`` (even ``None``) makes the widget controlled; this is
    read from ``model_fields_set``, so leave it out entirely for an
    uncontrolled widget.
    """

    model_config = ConfigDict(frozen=True)

    value: DateOption = None
    initial_value: DateOption = None
    min_date: DateOption = None
    max_date: DateOption = None
    locale: str = DEFAULT_LOCALE
    disabled: bool = False
    auto_open_on_focus: bool = False

    # advisory only - never enforced by the widget
    required: bool = False
    invalid: bool = False
    invalid_message: str = ""
    helper_text: str = ""

    label: str = ""
    placeholder: str = DEFAULT_PLACEHOLDER

    @property
    def controlled(self) -> bool:
        return "value" in self.model_fields_set

    @property
    def bounds(self) -> Bounds:
        return Bounds(min_date=self.min_date, max_date=self.max_date)

    @property
    def locale_table(self) -> LocaleTable:
        return get_locale(self.locale)

    def value_source(self) -> ValueSource:
        if self.controlled:
            return Controlled(self.value)
        return Uncontrolled(self.initial_value)
