"""Type definitions for game-folders.

Items are the rows of the browser. A catalog is the immutable, ordered tuple
of items handed to the browser once at startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

PROXIED_PREFIX = "Non-Steam: "


@dataclass(frozen=True)
class Item:
    """One browsable game entry.

    Attributes:
        display_name: Name shown in the list and matched by the filter.
        identifier: Steam app id (or shortcut app id for proxied items).
        is_proxied: True when folder_path is a synthesized Wine prefix
            rather than the game's own install directory.
        folder_path: Folder opened for this item; resolved once at
            catalog-build time and may not exist on disk.
    """

    display_name: str
    identifier: int
    is_proxied: bool
    folder_path: Path

    @property
    def label(self) -> str:
        """Row text, e.g. ``Non-Steam: Foo (App ID: 123)``."""
        prefix = PROXIED_PREFIX if self.is_proxied else ""
        return f"{prefix}{self.display_name} (App ID: {self.identifier})"

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against the display name."""
        return query.casefold() in self.display_name.casefold()


Catalog = tuple[Item, ...]


def build_catalog(direct: Iterable[Item], proxied: Iterable[Item] = ()) -> Catalog:
    """Merge direct items followed by proxied items into a catalog.

    Items with an empty display name are dropped.
    """
    return tuple(item for item in (*direct, *proxied) if item.display_name)
