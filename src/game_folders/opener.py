"""Open a folder in the system file manager.

Launches are detached and never waited on: a slow or hanging file manager
must not block the browser. Launch failures are logged and otherwise
ignored.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


def default_open_command(platform: str | None = None) -> list[str] | None:
    """Return the folder-open command for a platform.

    Returns None on Windows, where ``os.startfile`` is used instead.
    """
    platform = platform or sys.platform
    if platform == "darwin":
        return ["open"]
    if platform.startswith("win"):
        return None
    return ["xdg-open"]


def _normalize_command(command: str | Sequence[str] | None) -> list[str] | None:
    if command is None:
        return None
    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command]


class FolderOpener:
    """Callable that opens a folder with a detached process.

    Args:
        command: Command to run with the folder appended. A string is split
            shell-style. None picks the platform default.
    """

    def __init__(self, command: str | Sequence[str] | None = None):
        self.command = _normalize_command(command)
        if self.command is None:
            self.command = default_open_command()

    def __call__(self, path: Path) -> None:
        if not self.command:
            self._startfile(path)
            return

        cmd = [*self.command, str(path)]
        try:
            subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.warning("Failed to launch %s: %s", cmd[0], e)
            return
        logger.info("Opened %s with %s", path, cmd[0])

    def _startfile(self, path: Path) -> None:
        try:
            os.startfile(str(path))  # type: ignore[attr-defined]
        except (AttributeError, OSError) as e:
            logger.warning("Failed to open %s: %s", path, e)
            return
        logger.info("Opened %s", path)
