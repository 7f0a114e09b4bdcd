from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .api import convert_xlsx_to_html
from .errors import SheetHtmlError
from .model import ConvertOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render one .xlsx worksheet as an HTML table")
    parser.add_argument("input", type=Path, help="Input .xlsx file")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output path")
    parser.add_argument(
        "--sheet",
        help="Sheet name or 1-based index (default: first sheet)",
    )
    parser.add_argument("--title", help="Document title (default: sheet name)")
    parser.add_argument(
        "--skip-hidden-sheets",
        action="store_true",
        help="Ignore hidden sheets when selecting by index",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics to stderr")
    return parser


def parse_sheet_selector(raw: str | None) -> str | int | None:
    if raw is None:
        return None
    if raw.isdigit():
        return int(raw)
    return raw


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = ConvertOptions(
        include_hidden_sheets=not args.skip_hidden_sheets,
        document_title=args.title,
    )
    try:
        html = convert_xlsx_to_html(args.input, parse_sheet_selector(args.sheet), options=options)
    except SheetHtmlError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    args.output.write_text(html, encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
