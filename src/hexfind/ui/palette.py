from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    match_style: str
    banner_fg: str
    eof_fg: str
    # Browser roles
    list_border: str
    dump_border: str
    status_fg: str
    status_bg: str


DEFAULT = Palette(
    match_style="bold bright_red",
    banner_fg="#5ea1ff",
    eof_fg="#6b7280",
    list_border="#3b4252",
    dump_border="#ffa657",
    status_fg="#d8dee9",
    status_bg="#1f2430",
)

PALETTE = DEFAULT
