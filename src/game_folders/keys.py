"""Keyboard input helpers.

Keys arrive as the strings produced by ``readchar.readkey()``. These helpers
keep the loop's dispatch readable and absorb terminal variations.
"""

from __future__ import annotations

import readchar


def is_enter(key: str) -> bool:
    """Check if key is Enter/Return."""
    return key in (readchar.key.ENTER, "\r", "\n")


def is_backspace(key: str) -> bool:
    """Check if key is backspace (handles terminal variations)."""
    return key in (readchar.key.BACKSPACE, "\x7f", "\b")


def is_up(key: str) -> bool:
    return key == readchar.key.UP


def is_down(key: str) -> bool:
    return key == readchar.key.DOWN


def is_quit(key: str) -> bool:
    """Check if key is the quit key.

    Only a lowercase q quits; in search mode q is just a character.
    """
    return key == "q"


def is_search(key: str) -> bool:
    return key == "/"


def is_printable(key: str) -> bool:
    """Check if key is a single printable character."""
    return len(key) == 1 and key.isprintable()
