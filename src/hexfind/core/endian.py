"""Byte-order handling for hex-word patterns."""

from __future__ import annotations

from typing import Literal

Endian = Literal["little", "big"]

DEFAULT_ENDIAN: Endian = "big"


def normalize_endian(value: str | None) -> Endian:
    """Normalize a user-supplied byte order.

    Args:
        value: "big" or "little" in any case, or None for the default

    Returns:
        The normalized Endian value

    Raises:
        ValueError: If value is neither 'little' nor 'big'
    """
    if value is None:
        return DEFAULT_ENDIAN

    value_lower = value.strip().lower()
    if value_lower not in ("little", "big"):
        raise ValueError(f"Invalid endian '{value}'. Expected 'little' or 'big'.")

    return value_lower  # type: ignore[return-value]


def to_memory_order(word: bytes, endian: Endian) -> bytes:
    """Return the bytes of a big-endian written word as they sit in memory.

    A hex word is always written most significant byte first, so a little-endian
    target stores it reversed. Single bytes have no order to swap.
    """
    if endian == "little" and len(word) > 1:
        return word[::-1]
    return bytes(word)
