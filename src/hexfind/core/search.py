from __future__ import annotations

import logging
from collections.abc import Iterator

from hexfind.core.io import PagedReader
from hexfind.core.pattern import InvalidPattern, Pattern

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024


def iter_matches(
    reader: PagedReader,
    pattern: Pattern,
    *,
    start: int = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[int]:
    """Yield the absolute offset of every non-overlapping occurrence of `pattern`.

    The file is scanned in windows of `chunk_size` bytes (widened to the pattern
    length if smaller). Consecutive windows overlap by len(pattern)-1 bytes, so an
    occurrence straddling a window boundary lies whole inside the next window,
    while one already reported can never be seen again. Offsets come out in
    ascending order; read errors propagate to the caller.
    """
    if not isinstance(pattern, Pattern):
        raise InvalidPattern(f"expected a Pattern, got {type(pattern).__name__}")
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    needle = pattern.data
    k = len(needle)
    window_size = max(chunk_size, k)
    overlap = k - 1
    pos = max(0, start)
    # matches may not begin before this offset
    floor = pos

    while True:
        window = reader.read(pos, window_size)
        n = len(window)
        if n == 0:
            return
        if n < k:
            # Too short for a fresh match; the previous window already covered it.
            return

        log.debug("scan window %#x..%#x", pos, pos + n)
        idx = window.find(needle, max(0, floor - pos))
        while idx != -1:
            yield pos + idx
            floor = pos + idx + k
            idx = window.find(needle, idx + k)

        end = pos + n
        if end >= reader.size:
            return
        pos = max(end - overlap, floor)


def find_first(
    reader: PagedReader,
    pattern: Pattern,
    *,
    start: int = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int | None:
    """Offset of the first occurrence at or after `start`, or None."""
    return next(iter_matches(reader, pattern, start=start, chunk_size=chunk_size), None)


def find_all(
    reader: PagedReader,
    pattern: Pattern,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[int]:
    """All non-overlapping occurrences, ascending."""
    return list(iter_matches(reader, pattern, chunk_size=chunk_size))
