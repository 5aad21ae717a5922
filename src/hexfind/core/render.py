from __future__ import annotations

from collections.abc import Iterable

from rich.text import Text

from hexfind.core.dump import DumpEntry, DumpLine, EndOfFile, LineOmitted
from hexfind.ui.palette import PALETTE

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E

EOF_MARKER = "(end of file)"


def ascii_glyph(b: int) -> str:
    return chr(b) if PRINTABLE_MIN <= b <= PRINTABLE_MAX else "."


def render_line(
    line: DumpLine,
    width: int,
    *,
    highlight_style: str | None = PALETTE.match_style,
) -> Text:
    """Format one dump line as `offset  hex cells  |ascii|`.

    Cells past the bytes actually read are blank, never "00". Highlighted cells
    carry `highlight_style` on the digits/character only, so the style always
    ends before the next cell starts. Pass None to render without styling.
    """
    group = width // 2 if width > 1 else 0
    data = line.data

    text = Text(f"{line.offset:08x}")
    for col in range(width):
        if col == 0 or (group and col % group == 0):
            text.append(" ")
        text.append(" ")
        if col >= len(data):
            text.append("  ")
            continue
        style = highlight_style if line.highlighted(col) else None
        text.append(f"{data[col]:02x}", style=style)

    text.append("  |")
    for col in range(width):
        if col >= len(data):
            text.append(" ")
            continue
        style = highlight_style if line.highlighted(col) else None
        text.append(ascii_glyph(data[col]), style=style)
    text.append("|")
    return text


def match_banner(offset: int, *, style: str | None = None) -> Text:
    return Text(f"offset: {offset} ({offset:08x})", style=style or "")


def render_dump(
    entries: Iterable[DumpEntry],
    width: int,
    *,
    highlight_style: str | None = PALETTE.match_style,
    eof_style: str | None = PALETTE.eof_fg,
) -> tuple[list[Text], list[LineOmitted]]:
    """Format a `build_dump` result.

    Returns the printable lines and, separately, the lines that had to be left
    out so the caller can report them.
    """
    lines: list[Text] = []
    omitted: list[LineOmitted] = []
    for entry in entries:
        if isinstance(entry, DumpLine):
            lines.append(render_line(entry, width, highlight_style=highlight_style))
        elif isinstance(entry, EndOfFile):
            lines.append(Text(EOF_MARKER, style=eof_style or ""))
        else:
            omitted.append(entry)
    return lines, omitted
