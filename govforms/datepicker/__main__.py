"""Entry point: python -m govforms.datepicker [--locale cs|en] [--min D] [--max D] [--value D]"""

from __future__ import annotations

import argparse
import logging
from datetime import date

from textual.logging import TextualHandler

from .codec import DISPLAY_PATTERN, parse_strict
from .models import LOCALES, DatepickerOptions


def _date_arg(text: str) -> date:
    try:
        return parse_strict(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m govforms.datepicker",
        description="Datepicker gallery: every datepicker configuration in one TUI",
    )
    parser.add_argument(
        "--locale",
        choices=sorted(LOCALES),
        default="cs",
        help="Language of the playground calendar (default: cs)",
    )
    parser.add_argument(
        "--min", dest="min_date", type=_date_arg, default=None,
        help=f"Earliest selectable date ({DISPLAY_PATTERN})",
    )
    parser.add_argument(
        "--max", dest="max_date", type=_date_arg, default=None,
        help=f"Latest selectable date ({DISPLAY_PATTERN})",
    )
    parser.add_argument(
        "--value", type=_date_arg, default=None,
        help=f"Initial playground value ({DISPLAY_PATTERN})",
    )
    parser.add_argument(
        "--auto-open",
        action="store_true",
        help="Open the playground calendar when its field gets focus",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level sent to the Textual devtools console (default: WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # visible with `textual console` when the app runs under `textual run --dev`
    logging.basicConfig(level=args.log_level, handlers=[TextualHandler()])

    playground = DatepickerOptions(
        value=args.value,
        min_date=args.min_date,
        max_date=args.max_date,
        locale=args.locale,
        auto_open_on_focus=args.auto_open,
        label="Playground",
        helper_text=f"--locale {args.locale}",
    )

    from .app import DatepickerGalleryApp

    app = DatepickerGalleryApp(playground)
    app.run()


if __name__ == "__main__":
    main()
