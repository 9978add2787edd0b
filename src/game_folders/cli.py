"""CLI entry point for game-folders."""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from typing import Any, Callable

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from . import __version__
from . import config
from .discovery import SteamDir, discover
from .errors import GameFoldersError
from .loop import EventLoop
from .opener import FolderOpener
from .render import Renderer
from .state import BrowserState
from .terminal import TerminalSession
from .types import Catalog

logger = logging.getLogger("game_folders")

NO_GAMES_MESSAGE = "No games found."
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="game-folders",
        description="Search Steam games and non-Steam Wine prefixes and open their folders.",
    )
    parser.add_argument("--version", action="version", version=f"game-folders {__version__}")
    parser.add_argument("--steam-dir", help="Steam root directory (default: auto-detect)")
    parser.add_argument(
        "--proxied-only",
        action="store_true",
        default=None,
        help="Only list non-Steam games with a Wine prefix",
    )
    parser.add_argument(
        "--no-search",
        dest="search_enabled",
        action="store_false",
        default=None,
        help="Disable '/' search mode",
    )
    parser.add_argument("--poll-ms", type=int, help="Input poll timeout in milliseconds")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help=f"Write a debug log to {config.get_log_path()}",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the discovered games and exit without starting the browser",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default config file if none exists, then exit",
    )
    return parser


def resolve_settings(args: argparse.Namespace, cfg: dict[str, Any]) -> dict[str, Any]:
    """Overlay command-line flags on the loaded config."""
    settings = dict(cfg)
    if args.steam_dir is not None:
        settings["steam_dir"] = args.steam_dir
    if args.proxied_only is not None:
        settings["proxied_only"] = args.proxied_only
    if args.search_enabled is not None:
        settings["search_enabled"] = args.search_enabled
    if args.poll_ms is not None:
        settings["poll_interval_ms"] = args.poll_ms
    if args.debug is not None:
        settings["debug"] = args.debug
    return config.validate_config(settings)


def setup_logging(debug: bool) -> logging.Handler:
    """Attach a handler to the package logger.

    Debug mode logs everything to the debug log file, since the terminal is
    taken over by the browser. Otherwise warnings go to stderr.
    """
    if debug:
        log_path = config.get_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
        logger.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


@contextlib.contextmanager
def _silence_stream_handlers():
    """Keep stderr log lines from drawing over the full-screen display."""
    muted = [
        (h, h.level)
        for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    for handler, _ in muted:
        handler.setLevel(logging.CRITICAL + 1)
    try:
        yield
    finally:
        for handler, level in muted:
            handler.setLevel(level)


def print_catalog(catalog: Catalog) -> None:
    """Print each game with its folder, one game per line."""
    for item in catalog:
        style = "green" if item.folder_path.exists() else "red"
        console.print(
            Text.assemble((item.label, "bold"), "  ", (str(item.folder_path), style)),
            soft_wrap=True,
        )
    console.print(f"{len(catalog)} games")


def run_browser(
    catalog: Catalog,
    settings: dict[str, Any],
    session_factory: Callable[[], TerminalSession] = TerminalSession,
) -> None:
    """Run the interactive browser until the user quits.

    The terminal session wraps the whole loop, so the terminal is restored
    however the loop ends.
    """
    state = BrowserState(catalog, opener=FolderOpener(settings.get("open_command")))
    renderer = Renderer()

    with _silence_stream_handlers(), session_factory() as session:
        loop = EventLoop(
            state,
            render=lambda snapshot: session.draw(renderer.render(snapshot, session.height)),
            poll=session.poll_key,
            poll_timeout=settings["poll_interval_ms"] / 1000,
            search_enabled=settings["search_enabled"],
        )
        loop.run()


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        path = config.get_config_path()
        if path.exists():
            console.print(f"Config already exists: {path}")
        else:
            config.save_config(config.DEFAULT_CONFIG, path)
            console.print(f"Wrote default config: {path}")
        return 0

    handler = None
    try:
        settings = resolve_settings(args, config.load_config())
        handler = setup_logging(settings["debug"])

        steam = SteamDir.locate(settings["steam_dir"])
        catalog = discover(steam, proxied_only=settings["proxied_only"])

        if not catalog:
            console.print(NO_GAMES_MESSAGE)
            return 0

        if args.list:
            print_catalog(catalog)
            return 0

        run_browser(catalog, settings)
        return 0
    except (GameFoldersError, OSError) as e:
        logger.debug("Fatal error", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1
    except KeyboardInterrupt:
        console.print()
        return 130
    finally:
        if handler is not None:
            logger.removeHandler(handler)
            handler.close()
