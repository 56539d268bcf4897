"""Conversion between calendar dates and the ``DD.MM.YYYY`` display text.

Everything here is pure: the text field calls these helpers on every
keystroke and the widget calls them on blur, so none of them may raise
on user input.  Only :func:`parse_strict` raises, and it is meant for
configuration values and host-side restoration of stored strings.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from ._layout_sizes import DIGIT_COUNT

SEPARATOR = "."
DISPLAY_PATTERN = "DD.MM.YYYY"

_COMPLETE_RE = re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$")
_NON_DIGIT_RE = re.compile(r"\D")


# ── Formatting / parsing ─────────────────────────────────────


def format_date(value: Optional[date]) -> str:
    """Render *value* as ``DD.MM.YYYY``; ``None`` renders as ``""``."""
    if value is None:
        return ""
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def parse_complete(text: str) -> Optional[date]:
    """Parse a complete ``DD.MM.YYYY`` string, or return ``None``.

    Days that do not exist in the given month (``30.02.2024``,
    ``29.02.2023``, ``00.01.2024``) are rejected instead of being rolled
    over into the following month.
    """
    m = _COMPLETE_RE.match(text or "")
    if not m:
        return None
    day, month, year = (int(g) for g in m.groups())
    if not 1 <= month <= 12:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_strict(text: str) -> date:
    """Like :func:`parse_complete` but raises ``ValueError`` on bad input."""
    parsed = parse_complete(text.strip())
    if parsed is None:
        raise ValueError(f"{text!r} is not a valid date (expected {DISPLAY_PATTERN})")
    return parsed


# ── Keystroke normalization ──────────────────────────────────


def digits_of(text: str) -> str:
    return _NON_DIGIT_RE.sub("", text)


def auto_format_keystroke(raw: str) -> str:
    """Normalize the field's raw text into the ``DD.MM.YYYY`` shape.

    Non-digits are dropped, at most 8 digits are kept and the separators
    are re-inserted once 2 and 4 digits are present.  Calendar validity
    is not checked here.
    """
    digits = digits_of(raw)[:DIGIT_COUNT]
    formatted = digits[:2]
    if len(digits) >= 2:
        formatted += SEPARATOR
    if len(digits) > 2:
        formatted += digits[2:4]
        if len(digits) >= 4:
            formatted += SEPARATOR
        formatted += digits[4:]
    return formatted


def caret_after_digits(text: str, count: int) -> int:
    """Caret index just after the *count*-th digit of *text*.

    A separator directly after that digit is stepped over, so typing the
    second digit of the day leaves the caret after the auto-inserted dot.
    """
    if count <= 0:
        return 0
    seen = 0
    for index, char in enumerate(text):
        if char.isdigit():
            seen += 1
            if seen == count:
                caret = index + 1
                if text[caret:caret + 1] == SEPARATOR:
                    caret += 1
                return caret
    return len(text)


# ── Edit operations used by the text field ───────────────────
#
# Each returns (normalized_text, digits_before_caret).  The caller turns
# the digit count back into a caret index with caret_after_digits() once
# the new text is on screen.


def insert_at_caret(text: str, caret: int, inserted: str) -> tuple[str, int]:
    raw = text[:caret] + inserted + text[caret:]
    formatted = auto_format_keystroke(raw)
    before = len(digits_of(text[:caret] + inserted))
    return formatted, min(before, len(digits_of(formatted)))


def delete_before_caret(text: str, caret: int) -> tuple[str, int]:
    """Backspace: drop the digit left of the caret, skipping separators."""
    digits = digits_of(text)
    before = len(digits_of(text[:caret]))
    if before == 0:
        return auto_format_keystroke(text), 0
    digits = digits[:before - 1] + digits[before:]
    return auto_format_keystroke(digits), before - 1


def delete_after_caret(text: str, caret: int) -> tuple[str, int]:
    """Delete key: drop the digit right of the caret, skipping separators."""
    digits = digits_of(text)
    before = len(digits_of(text[:caret]))
    digits = digits[:before] + digits[before + 1:]
    return auto_format_keystroke(digits), before
