"""Browser state: the filtered list, cursor, search mode and status line.

Two modes exist. In navigate mode the cursor moves and items are opened; in
search mode keystrokes edit the filter text. Every change to the filter text
goes through recompute_visible(), which is also the only place the cursor is
brought back into range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .types import Catalog, Item

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Use '/' to search, 'q' to exit."
STATUS_OPENED_PREFIX = "Opened prefix folder."
STATUS_OPENED_GAME = "Opened game folder."
STATUS_NOT_FOUND = "Folder does not exist."

Opener = Callable[[Path], None]


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the browser handed to the renderer."""

    filter_text: str
    search_active: bool
    visible: tuple[Item, ...]
    cursor: int | None
    status: str
    total: int


def _noop_opener(path: Path) -> None:
    return None


class BrowserState:
    """Mutable view over an immutable catalog.

    Args:
        catalog: Items to browse, in display order.
        opener: Called with a folder path that exists on disk. Its outcome is
            never inspected.
    """

    def __init__(self, catalog: Catalog, opener: Opener | None = None):
        self.catalog: Catalog = tuple(catalog)
        self.opener = opener or _noop_opener
        self.filter_text = ""
        self.search_active = False
        self.visible: tuple[Item, ...] = self.catalog
        self.cursor: int | None = 0 if self.catalog else None
        self.status = DEFAULT_STATUS

    @property
    def current(self) -> Item | None:
        """The highlighted item, if any."""
        if self.cursor is None:
            return None
        return self.visible[self.cursor]

    def recompute_visible(self) -> None:
        """Rebuild the visible items from filter_text and repair the cursor."""
        query = self.filter_text
        self.visible = tuple(item for item in self.catalog if item.matches(query))

        # Out of range goes back to the top, not to the new last row.
        if self.cursor is not None and self.cursor >= len(self.visible):
            self.cursor = 0 if self.visible else None
        elif self.cursor is None and self.visible:
            self.cursor = 0

    def enter_search(self) -> None:
        self.search_active = True

    def exit_search(self) -> None:
        """Leave search mode; the filter is cleared and the full list returns."""
        self.search_active = False
        self.filter_text = ""
        self.recompute_visible()

    def append_char(self, char: str) -> None:
        if not self.search_active:
            return
        self.filter_text += char
        self.recompute_visible()

    def remove_last_char(self) -> None:
        if not self.search_active:
            return
        self.filter_text = self.filter_text[:-1]
        self.recompute_visible()

    def move_next(self) -> None:
        """Move the cursor down one row, wrapping to the top."""
        if self.search_active or not self.visible:
            return
        if self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = (self.cursor + 1) % len(self.visible)

    def move_previous(self) -> None:
        """Move the cursor up one row, wrapping to the bottom."""
        if self.search_active or not self.visible:
            return
        if self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = (self.cursor - 1) % len(self.visible)

    def open_current(self) -> None:
        """Open the highlighted item's folder if it exists.

        A missing folder only updates the status line. The opener is
        fire-and-forget: once it has been called the request counts as done.
        """
        if self.search_active:
            return
        item = self.current
        if item is None:
            return

        if not item.folder_path.exists():
            logger.info("Folder missing for %s: %s", item.display_name, item.folder_path)
            self.status = STATUS_NOT_FOUND
            return

        self.opener(item.folder_path)
        self.status = STATUS_OPENED_PREFIX if item.is_proxied else STATUS_OPENED_GAME

    def snapshot(self) -> Snapshot:
        return Snapshot(
            filter_text=self.filter_text,
            search_active=self.search_active,
            visible=self.visible,
            cursor=self.cursor,
            status=self.status,
            total=len(self.catalog),
        )
