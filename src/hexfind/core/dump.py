"""Line layout for a hex dump around one match.

Everything here is geometry plus reads through `PagedReader`; turning lines into
styled text lives in `hexfind.core.render`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Union

from hexfind.core.io import PagedReader

log = logging.getLogger(__name__)

DEFAULT_LINE_WIDTH = 16
MAX_CONTEXT = 10

LineKind = Literal["before", "match", "after"]


@dataclass(frozen=True)
class DumpLine:
    offset: int  # width-aligned line start
    data: bytes  # bytes actually read; short on the last line of the file
    highlight: tuple[int, int] = (0, 0)  # column range, end exclusive
    kind: LineKind = "match"

    def highlighted(self, col: int) -> bool:
        start, end = self.highlight
        return start <= col < end


@dataclass(frozen=True)
class LineOmitted:
    """A line that could not be read; the dump carries on without it."""

    offset: int
    reason: str


@dataclass(frozen=True)
class EndOfFile:
    offset: int


DumpEntry = Union[DumpLine, LineOmitted, EndOfFile]


def check_geometry(width: int, context: int) -> None:
    if width < 1:
        raise ValueError(f"line width must be >= 1, got {width}")
    if not 0 <= context <= MAX_CONTEXT:
        raise ValueError(f"context must be between 0 and {MAX_CONTEXT}, got {context}")


def line_start(offset: int, width: int) -> int:
    return offset - offset % width


def match_spans(offset: int, length: int, width: int) -> list[tuple[int, int, int]]:
    """(line_offset, start_col, end_col) for every line a match covers.

    >>> match_spans(14, 4, 16)
    [(0, 14, 16), (16, 0, 2)]
    """
    if offset < 0:
        raise ValueError("offset must be >= 0")
    if length < 1:
        raise ValueError("length must be >= 1")
    if width < 1:
        raise ValueError("width must be >= 1")

    first = line_start(offset, width)
    col = offset - first
    n_lines = -(-(col + length) // width)
    last_end = (offset + length) % width or width

    spans = []
    for i in range(n_lines):
        start = col if i == 0 else 0
        end = last_end if i == n_lines - 1 else width
        spans.append((first + i * width, start, end))
    return spans


def _read_line(
    reader: PagedReader,
    offset: int,
    width: int,
    highlight: tuple[int, int],
    kind: LineKind,
) -> DumpLine | LineOmitted:
    try:
        data = reader.read(offset, width)
    except (OSError, ValueError) as exc:
        log.debug("line %#010x unreadable: %s", offset, exc)
        return LineOmitted(offset, str(exc) or type(exc).__name__)
    return DumpLine(offset, data, highlight, kind)


def build_dump(
    reader: PagedReader,
    offset: int,
    length: int,
    *,
    width: int = DEFAULT_LINE_WIDTH,
    context: int = 0,
) -> list[DumpEntry]:
    """Lines to show for the match of `length` bytes at `offset`.

    Up to `context` lines precede the first match line (fewer near the start of
    the file), then every line the match touches, then up to `context` lines
    after it. Trailing context stops with an `EndOfFile` marker once the next
    line would begin at or past the end of the file.
    """
    check_geometry(width, context)
    spans = match_spans(offset, length, width)
    first = spans[0][0]
    last = spans[-1][0]

    entries: list[DumpEntry] = []
    for i in range(context, 0, -1):
        line = first - i * width
        if line < 0:
            continue
        entries.append(_read_line(reader, line, width, (0, 0), "before"))

    for line, start, end in spans:
        entries.append(_read_line(reader, line, width, (start, end), "match"))

    for i in range(1, context + 1):
        line = last + i * width
        if line >= reader.size:
            entries.append(EndOfFile(line))
            break
        entries.append(_read_line(reader, line, width, (0, 0), "after"))

    return entries
