"""Exception hierarchy for game-folders.

Missing folders and failed opener launches are reported through the status
line, not raised. Everything here is fatal at the top level.
"""

from __future__ import annotations


class GameFoldersError(RuntimeError):
    """Base error for game-folders failures."""


class DiscoveryError(GameFoldersError):
    """Raised when the game catalog cannot be enumerated."""


class SteamNotFoundError(DiscoveryError):
    """Raised when no Steam installation can be located."""

    def __init__(self, searched: list[str] | None = None):
        self.searched = list(searched or [])
        detail = f" (searched: {', '.join(self.searched)})" if self.searched else ""
        super().__init__(f"Steam installation not found{detail}")


class TerminalError(GameFoldersError):
    """Raised when the interactive terminal session cannot be set up."""


class ConfigError(GameFoldersError):
    """Raised for an unreadable or malformed config file."""
