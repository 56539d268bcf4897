"""Layout size reference for the Datepicker widget.

Textual renders in a terminal grid of rows × columns.
This file documents every element's size so the DEFAULT_CSS in
widget.py and the grid builder agree on the calendar's shape.

─── Vertical stack (top → bottom) ─────────────────────────────

Layer                  Lines   Notes
─────────────────────  ─────   ────────────────────────────────
Label                      1   Only when a label is given
Input row                  3   border-top(1) + text(1) + border-bottom(1)
Calendar surface         11†  Only while open; an overlay
  Header                   1   « ‹  title  › »
  Weekday row              1   Po Út St Čt Pá So Ne
  Day grid                 6   GRID_ROWS × 1 line
  Footer                   1   "Dnes" / "Today" button
  Border                   2   round border top + bottom
Message line               1   helper text or invalid message
─────────────────────  ─────

† fixed regardless of month length, so opening the picker on a
  four-week February does not make the layout jump.
  The surface is drawn as a screen overlay, so it covers the message
  line and whatever follows instead of pushing it down.

─── Horizontal ────────────────────────────────────────────────

  CELL_WIDTH       →  4   two digits + one column padding each side
  GRID_COLUMNS     →  7   Monday first, Sunday last
  Surface width    →  GRID_COLUMNS × CELL_WIDTH + 2 (border) + 2 (padding)
"""

from __future__ import annotations

GRID_COLUMNS = 7
GRID_ROWS = 6
GRID_CELLS = GRID_COLUMNS * GRID_ROWS

CELL_WIDTH = 4
SURFACE_WIDTH = GRID_COLUMNS * CELL_WIDTH + 4
SURFACE_HEIGHT = GRID_ROWS + 5

# DD.MM.YYYY
DISPLAY_LENGTH = 10
DIGIT_COUNT = 8
