from __future__ import annotations

import logging
import os
import stat
from collections import OrderedDict
from contextlib import suppress

try:
    import mmap as _mmap_mod  # type: ignore
except Exception:  # pragma: no cover - platform-specific
    _mmap_mod = None  # type: ignore

log = logging.getLogger(__name__)


class InvalidOffset(ValueError):
    """Raised when a negative offset or length is requested."""


class ShortRead(OSError):
    """The file ended before the size recorded when it was opened."""


class _PageCache:
    """Least-recently-used store of fixed-size pages keyed by page index."""

    def __init__(self, limit: int) -> None:
        self._limit = limit
        self._pages: OrderedDict[int, bytes] = OrderedDict()

    def get(self, index: int) -> bytes | None:
        data = self._pages.get(index)
        if data is not None:
            self._pages.move_to_end(index)
        return data

    def put(self, index: int, data: bytes) -> None:
        self._pages[index] = data
        if len(self._pages) > self._limit:
            self._pages.popitem(last=False)

    def clear(self) -> None:
        self._pages.clear()


class PagedReader:
    """Random-access, read-only view of a file: "give me `n` bytes at `o`".

    The size is fixed when the file is opened and every read is bounded by it.
    Bytes the file should hold but no longer does are an I/O failure
    (`ShortRead`), not an early EOF. Reads go through an `mmap` when one can be
    created, otherwise through pages kept in a small LRU cache; the whole file
    is never held in memory.
    """

    def __init__(
        self,
        path: str,
        *,
        page_size: int = 64 * 1024,
        cache_pages: int = 16,
        use_mmap: bool = True,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if cache_pages <= 0:
            raise ValueError("cache_pages must be positive")

        self._path = path
        try:
            fh = open(path, "rb", buffering=0)  # noqa: SIM115
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {path}") from None
        try:
            st = os.fstat(fh.fileno())
            if not stat.S_ISREG(st.st_mode):
                raise OSError(f"Not a regular file: {path}")
        except BaseException:
            fh.close()
            raise

        self._fh = fh
        self._size = int(st.st_size)
        self._page_size = int(page_size)
        self._cache = _PageCache(int(cache_pages))
        self._mmap = self._map() if use_mmap else None

    def _map(self):
        if _mmap_mod is None or self._size == 0:
            return None
        try:
            return _mmap_mod.mmap(self._fh.fileno(), length=0, access=_mmap_mod.ACCESS_READ)
        except (OSError, ValueError) as exc:
            log.debug("mmap unavailable for %s (%s); using paged reads", self._path, exc)
            return None

    def close(self) -> None:
        if self._mmap is not None:
            with suppress(Exception):
                self._mmap.close()
            self._mmap = None
        self._cache.clear()
        with suppress(Exception):
            self._fh.close()

    def __enter__(self) -> PagedReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def size(self) -> int:
        """File size in bytes, taken when the reader was opened."""
        return self._size

    @property
    def path(self) -> str:
        return self._path

    @property
    def mapped(self) -> bool:
        return self._mmap is not None

    def _fill(self, start: int, n: int) -> bytes:
        """Exactly `n` bytes at `start`, or `ShortRead`."""
        self._fh.seek(start)
        buf = bytearray()
        while len(buf) < n:
            got = self._fh.read(n - len(buf))
            if not got:
                raise ShortRead(
                    f"{self._path}: expected {n} bytes at {start:#x}, "
                    f"file ended after {len(buf)}"
                )
            buf += got
        return bytes(buf)

    def _page(self, index: int) -> bytes:
        data = self._cache.get(index)
        if data is None:
            start = index * self._page_size
            data = self._fill(start, min(self._page_size, self._size - start))
            self._cache.put(index, data)
        return data

    def read(self, offset: int, length: int) -> bytes:
        """Read up to `length` bytes starting at `offset`.

        - Negative `offset` or `length` raises `InvalidOffset`.
        - At or past the recorded size the result is b"".
        - A request running past the recorded size is truncated, never padded.
        - A file that shrank since opening raises `ShortRead`; any other
          `OSError` propagates unchanged.
        """
        if offset < 0:
            raise InvalidOffset("offset must be >= 0")
        if length < 0:
            raise InvalidOffset("length must be >= 0")
        if length == 0 or offset >= self._size:
            return b""

        end = min(self._size, offset + length)
        if self._mmap is not None:
            return bytes(self._mmap[offset:end])

        first = offset // self._page_size
        last = (end - 1) // self._page_size
        joined = b"".join(self._page(i) for i in range(first, last + 1))
        skip = offset - first * self._page_size
        return joined[skip : skip + (end - offset)]
