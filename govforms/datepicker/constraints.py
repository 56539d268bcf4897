"""Min/max date constraints."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict

from .codec import parse_strict


def coerce_date(value: Any) -> Any:
    """Accept ``DD.MM.YYYY`` strings wherever a date option is expected."""
    if isinstance(value, str):
        return parse_strict(value)
    return value


# a date option that also accepts DD.MM.YYYY text
DateOption = Annotated[Optional[date], BeforeValidator(coerce_date)]


class Bounds(BaseModel):
    """Inclusive selectable range.  Either end may be open.

    ``min_date > max_date`` is not checked; every date is then rejected.
    """

    model_config = ConfigDict(frozen=True)

    min_date: DateOption = None
    max_date: DateOption = None


UNBOUNDED = Bounds()


def is_selectable(value: date, bounds: Bounds = UNBOUNDED) -> bool:
    if bounds.min_date is not None and value < bounds.min_date:
        return False
    if bounds.max_date is not None and value > bounds.max_date:
        return False
    return True
