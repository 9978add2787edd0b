"""Render, poll and dispatch loop for the browser."""

from __future__ import annotations

import logging
from typing import Callable

from .keys import is_backspace, is_down, is_enter, is_printable, is_quit, is_search, is_up
from .state import BrowserState, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_POLL_TIMEOUT = 0.1

RenderFn = Callable[[Snapshot], None]
PollFn = Callable[[float], "str | None"]


class EventLoop:
    """Drive a BrowserState from key presses until the user quits.

    Each iteration renders the current snapshot, waits at most
    ``poll_timeout`` seconds for one key, and applies it. Render and poll
    errors are not caught.

    Args:
        state: Browser state to drive.
        render: Draws a snapshot. Must not mutate anything.
        poll: Returns one key, or None when the timeout passes.
        poll_timeout: Seconds to wait for input per iteration.
        search_enabled: When False, '/' is ignored and the list is
            navigate-only.
    """

    def __init__(
        self,
        state: BrowserState,
        render: RenderFn,
        poll: PollFn,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
        search_enabled: bool = True,
    ):
        self.state = state
        self.render = render
        self.poll = poll
        self.poll_timeout = poll_timeout
        self.search_enabled = search_enabled
        self.running = False

    def handle_key(self, key: str) -> None:
        """Apply one key press to the state (or stop the loop)."""
        state = self.state
        if state.search_active:
            if is_enter(key):
                state.exit_search()
            elif is_backspace(key):
                state.remove_last_char()
            elif is_printable(key):
                state.append_char(key)
            return

        if is_quit(key):
            self.running = False
        elif is_search(key):
            if self.search_enabled:
                state.enter_search()
        elif is_down(key):
            state.move_next()
        elif is_up(key):
            state.move_previous()
        elif is_enter(key):
            state.open_current()

    def step(self) -> None:
        """Run one render/poll/dispatch iteration."""
        self.render(self.state.snapshot())
        key = self.poll(self.poll_timeout)
        if key is not None:
            self.handle_key(key)

    def run(self) -> None:
        """Loop until 'q' is pressed in navigate mode."""
        self.running = True
        logger.debug("Event loop started with %d items", len(self.state.catalog))
        while self.running:
            self.step()
        logger.debug("Event loop finished")
