"""Controlled / uncontrolled value ownership and text reconciliation.

The source of the value is decided once, when the widget is built:

* ``Controlled`` - the host owns the value.  Edits only produce
  notifications; the host feeds the accepted value back through
  :meth:`ValueResolver.receive`.
* ``Uncontrolled`` - the widget owns the value, seeded from
  ``initial_value`` and replaced by every accepted edit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import NamedTuple, Optional, Union

from ._layout_sizes import DISPLAY_LENGTH
from .codec import format_date, parse_complete

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Controlled:
    value: Optional[date] = None


@dataclass(frozen=True)
class Uncontrolled:
    value: Optional[date] = None


ValueSource = Union[Controlled, Uncontrolled]


class ValueResolver:
    """Single place that knows who owns the current date."""

    def __init__(self, source: ValueSource) -> None:
        self._source = source

    @property
    def controlled(self) -> bool:
        return isinstance(self._source, Controlled)

    @property
    def current(self) -> Optional[date]:
        return self._source.value

    def receive(self, value: Optional[date]) -> bool:
        """Take a value from outside (host update).  Returns True if it changed."""
        if value == self._source.value:
            return False
        self._source = type(self._source)(value)
        return True

    def propose(self, value: Optional[date]) -> Optional[date]:
        """Apply an edit made inside the widget and return the payload to notify.

        In controlled mode the current value is left alone until the host
        calls :meth:`receive`.
        """
        if not self.controlled:
            self._source = Uncontrolled(value)
        logger.debug(
            "value proposed: %s (%s)",
            format_date(value) or "no date",
            "controlled" if self.controlled else "uncontrolled",
        )
        return value


# ── text ↔ value policy ─────────────────────────────────────


class Reconciliation(NamedTuple):
    """What the field should show, and whether to notify with ``value``."""

    text: str
    notify: bool = False
    value: Optional[date] = None


def reconcile_edit(text: str, resolver: ValueResolver) -> Reconciliation:
    """Policy for every keystroke: only a complete, valid date is applied."""
    if len(text) != DISPLAY_LENGTH:
        return Reconciliation(text)
    parsed = parse_complete(text)
    if parsed is None:
        return Reconciliation(text)
    return Reconciliation(text, True, resolver.propose(parsed))


def reconcile_blur(text: str, resolver: ValueResolver) -> Reconciliation:
    """Policy when the field loses focus.

    A valid date is canonicalized and applied.  Anything else that is not
    empty reverts to the current value.  An empty field clears the value,
    notifying only when there was one to clear.
    """
    if not text:
        if resolver.current is None:
            return Reconciliation("")
        return Reconciliation("", True, resolver.propose(None))
    parsed = parse_complete(text)
    if parsed is None:
        return Reconciliation(format_date(resolver.current))
    return Reconciliation(format_date(parsed), True, resolver.propose(parsed))
