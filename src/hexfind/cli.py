from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.text import Text

from hexfind.config import ConfigError, Settings, load_settings
from hexfind.core.dump import MAX_CONTEXT, build_dump
from hexfind.core.io import PagedReader
from hexfind.core.pattern import InvalidPattern, Pattern, compile_pattern
from hexfind.core.render import match_banner, render_dump
from hexfind.core.search import find_all, find_first
from hexfind.ui.palette import PALETTE

log = logging.getLogger("hexfind")

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def _context_arg(value: str) -> int:
    n = int(value)
    if not 0 <= n <= MAX_CONTEXT:
        raise argparse.ArgumentTypeError(f"must be between 0 and {MAX_CONTEXT}")
    return n


def _width_arg(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hexfind", description="Search arbitrary bytes in a file and hex dump the hits"
    )
    parser.add_argument(
        "-e",
        "--endian",
        choices=["big", "little"],
        default=None,
        help="byte order of a 0x-prefixed word (default: big)",
    )
    parser.add_argument("-w", "--width", type=_width_arg, default=None, help="bytes per line")
    parser.add_argument(
        "-C", "--context", type=_context_arg, default=None, help="lines of context (0-10)"
    )
    parser.add_argument("--first", action="store_true", help="stop at the first match per file")
    parser.add_argument("--no-color", action="store_true", help="disable highlighting")
    parser.add_argument("--config", default=None, help="settings file (YAML)")
    parser.add_argument("--browse", action="store_true", help="browse matches interactively")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument(
        "bytes",
        help='hex bytes, either "1f 8b 08" or one 0x word honouring --endian, e.g. 0x088b1f',
    )
    parser.add_argument("files", nargs="+", metavar="file", help="file(s) to search")
    return parser


def _fail(msg: str) -> None:
    print(f"hexfind: {msg}", file=sys.stderr)


def scan_file(
    console: Console,
    path: str,
    pattern: Pattern,
    settings: Settings,
    *,
    first_only: bool = False,
) -> int:
    """Search one file and print a dump per match. Returns the match count."""
    style = settings.highlight_style if settings.color else None
    with PagedReader(path) as reader:
        if first_only:
            hit = find_first(reader, pattern, chunk_size=settings.chunk_size)
            offsets = [] if hit is None else [hit]
        else:
            offsets = find_all(reader, pattern, chunk_size=settings.chunk_size)
        log.debug("%s: %d match(es)", path, len(offsets))

        for offset in offsets:
            entries = build_dump(
                reader,
                offset,
                len(pattern),
                width=settings.line_width,
                context=settings.context,
            )
            lines, omitted = render_dump(
                entries,
                settings.line_width,
                highlight_style=style,
                eof_style=PALETTE.eof_fg if settings.color else None,
            )
            console.print(
                match_banner(offset, style=PALETTE.banner_fg if settings.color else None),
                soft_wrap=True,
            )
            for text in lines:
                console.print(text, soft_wrap=True)
            console.print(Text(""))
            for skipped in omitted:
                log.warning("%s: line %08x omitted: %s", path, skipped.offset, skipped.reason)
    return len(offsets)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.browse and len(args.files) > 1:
        parser.error("--browse takes exactly one file")
    if args.browse and args.first:
        parser.error("--browse lists every match; it cannot be combined with --first")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config).merged(
            line_width=args.width,
            context=args.context,
            endian=args.endian,
            color=False if args.no_color else None,
        )
    except ConfigError as exc:
        _fail(str(exc))
        return EXIT_ERROR

    try:
        pattern = compile_pattern(args.bytes, settings.endian)
    except InvalidPattern as exc:
        _fail(str(exc))
        return EXIT_ERROR

    if args.browse:
        # Import lazily; Textual is only needed for the browser
        from hexfind.app import MatchBrowserApp

        try:
            app = MatchBrowserApp(args.files[0], pattern, settings)
        except OSError as exc:
            _fail(str(exc))
            return EXIT_ERROR
        app.run()
        return EXIT_FOUND if app.match_count else EXIT_NOT_FOUND

    console = Console(highlight=False, no_color=not settings.color)
    found = 0
    errors = 0
    multi = len(args.files) > 1
    for path in args.files:
        if multi:
            console.print(Text(f"==> {path} <=="), soft_wrap=True)
        try:
            count = scan_file(console, path, pattern, settings, first_only=args.first)
        except OSError as exc:
            _fail(str(exc))
            errors += 1
            continue
        if count == 0:
            _fail(f"cannot find the bytes {pattern} in {path}")
        found += count

    if errors:
        return EXIT_ERROR
    return EXIT_FOUND if found else EXIT_NOT_FOUND


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
