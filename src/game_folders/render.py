"""Screen rendering for the browser.

Builds a Rich renderable with three regions from a state snapshot: a search
header, the scrolling game list and a status footer. Rendering never touches
the browser state; the only thing kept between frames is the list's scroll
offset.
"""

from __future__ import annotations

from rich.console import Group
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from .state import Snapshot
from .themes import DEFAULT_THEME, Theme

SEARCH_TITLE_ACTIVE = "Search (type to search, Enter to exit)"
SEARCH_TITLE_IDLE = "Search (press '/' to enter search mode)"
NO_QUERY_TEXT = "No search query"


def list_title(shown: int, total: int) -> str:
    return f"Games ({shown}/{total}, ↑/↓ to navigate, Enter to open, q to quit)"


def header_text(snapshot: Snapshot) -> str:
    """Text for the search panel: the query, or a placeholder when idle."""
    if not snapshot.filter_text and not snapshot.search_active:
        return NO_QUERY_TEXT
    return snapshot.filter_text


def calculate_window(
    cursor: int | None, total: int, max_visible: int, offset: int
) -> tuple[int, int]:
    """Return (offset, end) of the list slice that keeps the cursor on screen."""
    if total == 0:
        return 0, 0
    max_visible = max(1, max_visible)
    if cursor is not None:
        cursor = max(0, min(cursor, total - 1))
        if cursor < offset:
            offset = cursor
        elif cursor >= offset + max_visible:
            offset = cursor - max_visible + 1
    offset = max(0, min(offset, max(0, total - max_visible)))
    return offset, min(offset + max_visible, total)


class Renderer:
    """Turns snapshots into renderables sized for the current terminal."""

    def __init__(self, theme: Theme | None = None):
        self.theme = theme or DEFAULT_THEME
        self.window_offset = 0

    def _header(self, snapshot: Snapshot) -> Panel:
        theme = self.theme
        title = SEARCH_TITLE_ACTIVE if snapshot.search_active else SEARCH_TITLE_IDLE
        placeholder = not snapshot.filter_text and not snapshot.search_active
        body = Text(header_text(snapshot), style=theme.dim_color if placeholder else theme.text_color)
        if snapshot.search_active:
            body.append("█", style=theme.text_color)
        border = theme.search_border_color if snapshot.search_active else theme.border_color
        return Panel(body, title=title, title_align="left", border_style=border)

    def _list(self, snapshot: Snapshot, max_rows: int) -> Panel:
        theme = self.theme
        items = snapshot.visible
        self.window_offset, end = calculate_window(
            snapshot.cursor, len(items), max_rows, self.window_offset
        )

        rows: list[Text] = []
        if self.window_offset > 0:
            rows.append(
                Text(f"  {theme.scroll_up_icon} {self.window_offset} more above", style=theme.dim_color)
            )

        blank = " " * len(theme.cursor_icon)
        for index in range(self.window_offset, end):
            item = items[index]
            if index == snapshot.cursor:
                rows.append(Text(f"{theme.cursor_icon}{item.label}", style=theme.highlight_style))
            else:
                rows.append(Text(f"{blank}{item.label}", style=theme.text_color))

        below = len(items) - end
        if below > 0:
            rows.append(Text(f"  {theme.scroll_down_icon} {below} more below", style=theme.dim_color))

        return Panel(
            Group(*rows),
            title=list_title(len(items), snapshot.total),
            title_align="left",
            border_style=theme.border_color,
        )

    def _footer(self, snapshot: Snapshot) -> Panel:
        return Panel(
            Text(snapshot.status, style=self.theme.status_color),
            border_style=self.theme.border_color,
        )

    def render(self, snapshot: Snapshot, height: int) -> Layout:
        """Build the full screen for a terminal of the given height."""
        theme = self.theme
        # Panel borders take two lines; scroll hints take up to two more.
        list_height = height - theme.header_height - theme.footer_height
        max_rows = max(theme.min_visible_items, list_height - 4)

        layout = Layout()
        layout.split_column(
            Layout(self._header(snapshot), name="header", size=theme.header_height),
            Layout(self._list(snapshot, max_rows), name="list"),
            Layout(self._footer(snapshot), name="footer", size=theme.footer_height),
        )
        return layout
