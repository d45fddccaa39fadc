#!/usr/bin/env python3
"""Command-line interface for htmliterator."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TextIO

from .iterator import HtmlIterator, IteratorOpts
from .taginfo import TagInfo


def _get_version() -> str:
    try:
        return version("htmliterator")
    except PackageNotFoundError:  # pragma: no cover
        return "dev"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="htmliterator",
        description="Walk HTML and print one line per iterator event.",
        epilog=(
            "Examples:\n"
            "  htmliterator page.html\n"
            "  curl -s https://example.com | htmliterator -\n"
            "  htmliterator page.html --skip head --skip nav --collapse-whitespace\n"
            "  htmliterator page.html --classify\n"
            "\n"
            "If you don't have the 'htmliterator' command available, use:\n"
            "  python -m htmliterator ...\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "path",
        nargs="?",
        help="HTML file to iterate, or '-' to read from stdin",
    )
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="TAG",
        help="Do not descend into TAG (repeatable)",
    )
    parser.add_argument(
        "--collapse-whitespace",
        action="store_true",
        help="Collapse whitespace in text outside <pre> and drop blank runs",
    )
    parser.add_argument(
        "--resolve-closing",
        action="store_true",
        help="Report closing tag offsets for pair tags",
    )
    parser.add_argument(
        "--classify",
        action="store_true",
        help="Only print whether the input is a full document or a fragment",
    )
    parser.add_argument(
        "--errors",
        action="store_true",
        help="Print recovered parse errors to stderr",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log iterator internals to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"htmliterator {_get_version()}",
    )

    args = parser.parse_args(argv)

    if not args.path:
        parser.print_help(sys.stderr)
        raise SystemExit(1)

    return args


def _read_html(path: str) -> str:
    if path == "-":
        return sys.stdin.read()

    return Path(path).read_text()


def _format_tag(tag: TagInfo) -> str:
    parts = [tag.tag]
    parts.extend(f'{name}="{value}"' if value else name for name, value in tag.attributes.items())
    return " ".join(parts)


class _PrintingObserver:
    __slots__ = ("out", "skip")

    def __init__(self, out: TextIO, skip: set[str]) -> None:
        self.out = out
        self.skip = skip

    def on_content_text(self, text: str) -> None:
        self.out.write(f"text    {text!r}\n")

    def on_single_tag(self, tag: TagInfo) -> None:
        self.out.write(f"single  {_format_tag(tag)}\n")

    def on_script(self, tag: TagInfo) -> None:
        self.out.write(f"script  {_format_tag(tag)}\n")

    def on_pair_tag(
        self,
        tag: TagInfo,
        opening_start: int,
        opening_end: int,
        closing_start: int,
        closing_end: int,
    ) -> bool:
        entered = tag.tag not in self.skip
        kind = "enter" if entered else "skip"
        span = f"[{opening_start}:{opening_end}]"
        if closing_start != -1:
            span += f" [{closing_start}:{closing_end}]"
        self.out.write(f"{kind:<8}{_format_tag(tag)} {span}\n")
        return entered

    def on_leaving_pair_tag(self, tag: TagInfo) -> None:
        self.out.write(f"leave   {tag.tag}\n")


def main() -> None:
    args = _parse_args(sys.argv[1:])
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    html = _read_html(args.path)
    opts = IteratorOpts(
        collapse_whitespace=args.collapse_whitespace,
        resolve_closing_indices=args.resolve_closing,
    )
    observer = _PrintingObserver(sys.stdout, {name.lower() for name in args.skip})
    iterator = HtmlIterator(observer, opts=opts, debug=args.debug, collect_errors=args.errors)
    iterator.set_content(html)

    if args.classify:
        sys.stdout.write("document\n" if iterator.is_full_html_document else "fragment\n")
        return

    iterator.iterate()

    if args.errors:
        for error in iterator.errors:
            print(str(error), file=sys.stderr)


if __name__ == "__main__":
    main()
