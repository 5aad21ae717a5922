"""Byte patterns and the compiler that turns user hex text into one."""

from __future__ import annotations

import string
from collections.abc import Iterable
from dataclasses import dataclass

from hexfind.core.endian import DEFAULT_ENDIAN, Endian, normalize_endian, to_memory_order

_HEX_DIGITS = frozenset(string.hexdigits.lower())


class InvalidPattern(ValueError):
    """Raised when user input cannot become a literal byte pattern."""


@dataclass(frozen=True)
class Pattern:
    """Immutable, non-empty sequence of byte values to search for."""

    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            raise InvalidPattern(f"pattern data must be bytes, not {type(self.data).__name__}")
        if not self.data:
            raise InvalidPattern("pattern must contain at least one byte")

    @classmethod
    def from_values(cls, values: Iterable[int]) -> Pattern:
        vals = list(values)
        for v in vals:
            if not isinstance(v, int) or not 0 <= v <= 255:
                raise InvalidPattern(f"{v!r} isn't a byte value (0-255)")
        return cls(bytes(vals))

    def __len__(self) -> int:
        return len(self.data)

    def hex(self) -> str:
        """Space-separated lowercase hex, e.g. '1f 8b 08'."""
        return " ".join(f"{b:02x}" for b in self.data)

    def __str__(self) -> str:
        return self.hex()


def _is_hex(token: str) -> bool:
    return bool(token) and all(c in _HEX_DIGITS for c in token)


def _parse_word(word: str, endian: Endian) -> bytes:
    if len(word) % 2:
        word = "0" + word
    if not _is_hex(word):
        raise InvalidPattern(f"0x{word} isn't a hexadecimal word.")
    return to_memory_order(bytes.fromhex(word), endian)


def _parse_tokens(text: str) -> bytes:
    out = bytearray()
    for token in text.split():
        if len(token) > 2 or not _is_hex(token):
            raise InvalidPattern(f"{token} isn't a hexadecimal byte.")
        out.append(int(token, 16))
    return bytes(out)


def compile_pattern(text: str, endian: str | None = DEFAULT_ENDIAN) -> Pattern:
    """Compile user hex text into a Pattern.

    Two forms are accepted:

    - whitespace separated bytes, one or two hex digits each: ``"1f 8b 08"``
    - a single ``0x`` word written most significant byte first: ``"0x088b1f"``;
      an odd digit count is left-padded with ``0`` and ``endian="little"``
      reverses the resulting bytes

    Raises `InvalidPattern` for anything that is not hex, and for empty input.
    """
    try:
        order = normalize_endian(endian)
    except ValueError as exc:
        raise InvalidPattern(str(exc)) from None

    cleaned = text.strip().lower()
    if not cleaned:
        raise InvalidPattern("no bytes given")

    if cleaned.startswith("0x"):
        word = cleaned[2:]
        if not word:
            raise InvalidPattern("0x isn't a hexadecimal word.")
        return Pattern(_parse_word(word, order))

    return Pattern(_parse_tokens(cleaned))
