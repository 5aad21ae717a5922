from __future__ import annotations

import logging
import os

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, ScrollableContainer
from textual.widgets import Footer, Header, Label, ListItem, ListView, Static

from hexfind.config import Settings
from hexfind.core.dump import build_dump
from hexfind.core.io import PagedReader
from hexfind.core.pattern import Pattern
from hexfind.core.render import match_banner, render_dump
from hexfind.core.search import find_all
from hexfind.ui.palette import PALETTE

log = logging.getLogger(__name__)


class MatchBrowserApp(App):
    """Browse every match of one pattern in one file.

    Offsets on the left, the dump of the highlighted match on the right. The
    scan runs once, up front; dumps are rendered on demand.
    """

    CSS = f"""
    #matches {{
        width: 16;
        border: solid {PALETTE.list_border};
    }}
    #dump-pane {{
        border: solid {PALETTE.dump_border};
    }}
    #status {{
        height: 1;
        color: {PALETTE.status_fg};
        background: {PALETTE.status_bg};
    }}
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("n", "next_match", "Next Match"),
        ("p", "prev_match", "Prev Match"),
    ]

    def __init__(self, path: str, pattern: Pattern, settings: Settings | None = None) -> None:
        super().__init__()
        self._path = path
        self._pattern = pattern
        self._settings = settings or Settings()
        self._reader = PagedReader(path)
        try:
            self.offsets: list[int] = find_all(
                self._reader, pattern, chunk_size=self._settings.chunk_size
            )
        except BaseException:
            self._reader.close()
            raise
        self._index = 0
        self.title = f"hexfind - {os.path.basename(path)}"
        self.sub_title = f"{pattern} | {len(self.offsets)} match(es)"
        self.status = Static(id="status")

    @property
    def match_count(self) -> int:
        return len(self.offsets)

    def compose(self) -> ComposeResult:  # noqa: D401 - Textual API
        yield Header()
        with Horizontal():
            yield ListView(
                *[ListItem(Label(f"{off:08x}")) for off in self.offsets],
                id="matches",
            )
            with ScrollableContainer(id="dump-pane"):
                yield Static(id="dump")
        yield self.status
        yield Footer()

    def on_mount(self) -> None:
        if self.offsets:
            self.show_match(0)
        else:
            self.query_one("#dump", Static).update(
                Text(f"cannot find the bytes {self._pattern}")
            )
            self.status.update("no matches")

    def on_unmount(self) -> None:
        self.close_reader()

    def close_reader(self) -> None:
        """Release the file; safe to call more than once."""
        self._reader.close()

    def dump_text(self, index: int) -> Text:
        """Banner plus dump lines for match `index`, joined into one Text."""
        s = self._settings
        offset = self.offsets[index]
        entries = build_dump(
            self._reader, offset, len(self._pattern), width=s.line_width, context=s.context
        )
        lines, omitted = render_dump(
            entries,
            s.line_width,
            highlight_style=s.highlight_style if s.color else None,
        )
        for skipped in omitted:
            log.warning("line %08x omitted: %s", skipped.offset, skipped.reason)

        text = match_banner(offset, style=PALETTE.banner_fg if s.color else None)
        for line in lines:
            text.append("\n")
            text.append_text(line)
        return text

    def show_match(self, index: int) -> None:
        self._index = index
        self.query_one("#dump", Static).update(self.dump_text(index))
        self.status.update(f"match {index + 1}/{len(self.offsets)}")

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        index = event.list_view.index
        if event.item is None or index is None:
            return
        if index != self._index:
            self.show_match(index)

    def _step(self, delta: int) -> None:
        if not self.offsets:
            return
        target = max(0, min(len(self.offsets) - 1, self._index + delta))
        self.query_one("#matches", ListView).index = target
        self.show_match(target)

    def action_next_match(self) -> None:
        self._step(1)

    def action_prev_match(self) -> None:
        self._step(-1)
