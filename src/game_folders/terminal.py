"""Terminal session for the browser.

Owns the input-mode lifecycle and the Rich alternate screen, and provides
the poll-with-timeout key primitive the event loop is built on. The session
is a context manager: whatever happens inside the ``with`` block, the
terminal is put back the way it was found.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import tty
from typing import TextIO

from rich.console import Console, RenderableType
from rich.errors import ConsoleError
from rich.live import Live

from .errors import TerminalError

logger = logging.getLogger(__name__)

ESC_SEQUENCE_TIMEOUT_MS = 25


class TerminalSession:
    """Cbreak input plus a full-screen Rich Live display.

    Args:
        console: Console to draw on (a new one if None).
        stdin: Stream keys are read from. Must be a TTY.
    """

    def __init__(self, console: Console | None = None, stdin: TextIO | None = None):
        self.console = console or Console(highlight=False)
        self.stdin = stdin or sys.stdin
        self._saved_tty_state: list | None = None
        self._pending: list[bytes] = []
        self._live: Live | None = None

    @property
    def height(self) -> int:
        return self.console.size.height

    def __enter__(self) -> "TerminalSession":
        if not self.stdin.isatty():
            raise TerminalError("game-folders needs an interactive terminal (stdin is not a TTY)")
        fd = self.stdin.fileno()
        try:
            self._saved_tty_state = termios.tcgetattr(fd)
            tty.setcbreak(fd, termios.TCSANOW)
        except termios.error as e:
            raise TerminalError(f"Could not set terminal mode: {e}") from e

        try:
            self._live = Live(
                "",
                console=self.console,
                screen=True,
                auto_refresh=False,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start()
        except BaseException:
            self._restore_tty()
            raise
        logger.debug("Terminal session started")
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if self._live is not None:
                self._live.stop()
                self._live = None
        finally:
            self._restore_tty()
            logger.debug("Terminal session restored")
        return False

    def _restore_tty(self) -> None:
        if self._saved_tty_state is None:
            return
        try:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved_tty_state)
        finally:
            self._saved_tty_state = None

    def draw(self, renderable: RenderableType) -> None:
        """Replace the screen contents."""
        if self._live is None:
            raise TerminalError("Terminal session is not active")
        try:
            self._live.update(renderable, refresh=True)
        except (OSError, ConsoleError) as e:
            raise TerminalError(f"Could not draw the screen: {e}") from e

    def poll_key(self, timeout: float) -> str | None:
        """Wait up to ``timeout`` seconds for one key press.

        Bytes are read straight from the file descriptor; the session already
        holds the terminal in cbreak mode.

        Returns:
            The key, using the same strings as ``readchar.key`` (arrows come
            back as their escape sequence), or None when nothing arrived in
            time.
        """
        try:
            return self._read_key(self.stdin.fileno(), timeout)
        except OSError as e:
            raise TerminalError(f"Could not read input: {e}") from e

    def _read_byte(self, fd: int, timeout: float) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout))
        if not ready:
            return None
        return os.read(fd, 1) or None

    def _read_key(self, fd: int, timeout: float) -> str | None:
        ch = self._read_byte(fd, timeout)
        if ch is None:
            return None
        if ch == b"\x1b":
            return self._read_escape(fd)

        # UTF-8 lead byte: pull in the continuation bytes of the character.
        lead = ch[0]
        extra = 3 if lead >= 0xF0 else 2 if lead >= 0xE0 else 1 if lead >= 0xC0 else 0
        for _ in range(extra):
            nxt = self._read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS / 1000)
            if nxt is None:
                break
            ch += nxt
        return ch.decode("utf-8", errors="replace")

    def _read_escape(self, fd: int) -> str:
        """Collect an escape sequence such as ``ESC [ A``; a lone ESC is returned as is."""
        timeout = ESC_SEQUENCE_TIMEOUT_MS / 1000
        seq = self._read_byte(fd, timeout)
        if seq is None:
            return "\x1b"
        if seq not in (b"[", b"O"):
            self._pending.append(seq)
            return "\x1b"

        buf = b"\x1b" + seq
        while True:
            nxt = self._read_byte(fd, timeout)
            if nxt is None:
                break
            buf += nxt
            # Final byte of a CSI/SS3 sequence.
            if 0x40 <= nxt[0] <= 0x7E:
                break
        # Application cursor mode sends ESC O A; report it like ESC [ A.
        if seq == b"O" and len(buf) == 3:
            buf = b"\x1b[" + buf[2:]
        return buf.decode("ascii", errors="replace")
