"""Steam discovery: build the game catalog from a local Steam install.

Direct items are installed Steam apps, found through the library folders
and their app manifests. Proxied items are non-Steam shortcuts that have a
compatibility tool assigned; their folder is the Wine prefix Steam creates
under ``steamapps/compatdata/<appid>/pfx``.

VDF files (text and binary) are parsed with the ``vdf`` package.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterator

import vdf

from .errors import DiscoveryError, SteamNotFoundError
from .types import Catalog, Item, build_catalog

logger = logging.getLogger(__name__)

STEAM_DIR_CANDIDATES = [
    "~/.steam/steam",
    "~/.local/share/Steam",
    "~/.var/app/com.valvesoftware.Steam/.local/share/Steam",
    "~/Library/Application Support/Steam",
    "C:\\Program Files (x86)\\Steam",
]


def locate_steam_dir(explicit: str | Path | None = None) -> Path:
    """Find the Steam root directory.

    Args:
        explicit: Path to use instead of searching the usual locations.

    Raises:
        SteamNotFoundError: If no candidate directory exists.
    """
    if explicit is not None:
        path = Path(os.path.expanduser(str(explicit)))
        if path.is_dir():
            return path.resolve()
        raise SteamNotFoundError([str(path)])

    searched = []
    for candidate in STEAM_DIR_CANDIDATES:
        path = Path(os.path.expanduser(candidate))
        searched.append(str(path))
        if path.is_dir():
            return path.resolve()
    raise SteamNotFoundError(searched)


def _get_ci(mapping: Any, key: str) -> Any:
    """Case-insensitive dict lookup (Steam is inconsistent about key case)."""
    if not isinstance(mapping, dict):
        return None
    if key in mapping:
        return mapping[key]
    lowered = key.lower()
    for k, v in mapping.items():
        if str(k).lower() == lowered:
            return v
    return None


def _load_text_vdf(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return vdf.load(f)
    except (SyntaxError, ValueError, OSError) as e:
        raise DiscoveryError(f"Could not parse {path}: {e}") from e


def _load_binary_vdf(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return vdf.binary_load(f)
    except (SyntaxError, ValueError, OSError) as e:
        raise DiscoveryError(f"Could not parse {path}: {e}") from e


class SteamDir:
    """A located Steam installation."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def locate(cls, explicit: str | Path | None = None) -> "SteamDir":
        return cls(locate_steam_dir(explicit))

    def libraries(self) -> list[Path]:
        """Library roots, starting with the Steam root itself.

        Reads ``steamapps/libraryfolders.vdf``. Both the current layout
        (``{"0": {"path": ...}}``) and the legacy one (``{"1": "/path"}``)
        are understood. Libraries that no longer exist are skipped.
        """
        libraries = [self.path]
        folders_file = self.path / "steamapps" / "libraryfolders.vdf"
        if not folders_file.exists():
            return libraries

        data = _get_ci(_load_text_vdf(folders_file), "libraryfolders") or {}
        if not isinstance(data, dict):
            raise DiscoveryError(f"Unexpected structure in {folders_file}")
        for key, value in data.items():
            if not str(key).isdigit():
                continue
            raw = _get_ci(value, "path") if isinstance(value, dict) else value
            if not raw:
                continue
            library = Path(raw)
            if not library.is_dir():
                logger.debug("Skipping missing library %s", library)
                continue
            if any(_same_path(library, known) for known in libraries):
                continue
            libraries.append(library)
        return libraries

    def apps(self, library: Path) -> Iterator[Item]:
        """Installed apps in one library, as direct items."""
        steamapps = library / "steamapps"
        if not steamapps.is_dir():
            return
        for manifest in sorted(steamapps.glob("appmanifest_*.acf")):
            state = _get_ci(_load_text_vdf(manifest), "AppState")
            if not isinstance(state, dict):
                logger.debug("Skipping %s: no AppState", manifest)
                continue
            name = _get_ci(state, "name")
            if not name:
                logger.debug("Skipping %s: no name", manifest)
                continue
            try:
                app_id = int(_get_ci(state, "appid"))
            except (TypeError, ValueError) as e:
                raise DiscoveryError(f"Invalid appid in {manifest}") from e
            installdir = _get_ci(state, "installdir")
            if not installdir:
                logger.debug("Skipping %s: no installdir", manifest)
                continue
            yield Item(
                display_name=name,
                identifier=app_id,
                is_proxied=False,
                folder_path=steamapps / "common" / installdir,
            )

    def compat_tool_mapping(self) -> dict[int, dict]:
        """App ids with a compatibility tool assigned, from config.vdf."""
        config_file = self.path / "config" / "config.vdf"
        if not config_file.exists():
            return {}

        node: Any = _load_text_vdf(config_file)
        for key in ("InstallConfigStore", "Software", "Valve", "Steam", "CompatToolMapping"):
            node = _get_ci(node, key)
            if node is None:
                return {}

        if not isinstance(node, dict):
            raise DiscoveryError(f"Unexpected structure in {config_file}")

        mapping = {}
        for key, value in node.items():
            try:
                mapping[int(key)] = value if isinstance(value, dict) else {}
            except ValueError:
                logger.debug("Ignoring compat mapping key %r", key)
        return mapping

    def shortcuts(self) -> Iterator[tuple[str, int]]:
        """(name, app id) for every non-Steam shortcut of every user."""
        userdata = self.path / "userdata"
        if not userdata.is_dir():
            return
        for shortcuts_file in sorted(userdata.glob("*/config/shortcuts.vdf")):
            data = _get_ci(_load_binary_vdf(shortcuts_file), "shortcuts") or {}
            if not isinstance(data, dict):
                raise DiscoveryError(f"Unexpected structure in {shortcuts_file}")
            for entry in data.values():
                if not isinstance(entry, dict):
                    continue
                raw_id = _get_ci(entry, "appid")
                name = _get_ci(entry, "AppName")
                if raw_id is None or not name:
                    continue
                try:
                    app_id = int(raw_id)
                except (TypeError, ValueError) as e:
                    raise DiscoveryError(f"Invalid appid in {shortcuts_file}") from e
                # Stored as a signed int32; Steam uses the unsigned value.
                yield name, app_id & 0xFFFFFFFF

    def prefix_path(self, app_id: int) -> Path:
        return self.path / "steamapps" / "compatdata" / str(app_id) / "pfx"


def _same_path(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return a == b


def discover(steam: SteamDir, proxied_only: bool = False) -> Catalog:
    """Build the catalog: installed games, then shortcuts run through a compat tool.

    Args:
        steam: Steam installation to read.
        proxied_only: Skip installed Steam games and list only prefixes.

    Raises:
        DiscoveryError: If a library or shortcut file cannot be read.
    """
    direct: list[Item] = []
    if not proxied_only:
        for library in steam.libraries():
            direct.extend(steam.apps(library))

    compat = steam.compat_tool_mapping()
    proxied = [
        Item(
            display_name=name,
            identifier=app_id,
            is_proxied=True,
            folder_path=steam.prefix_path(app_id),
        )
        for name, app_id in steam.shortcuts()
        if app_id in compat
    ]

    logger.info(
        "Discovered %d Steam games and %d non-Steam prefixes in %s",
        len(direct),
        len(proxied),
        steam.path,
    )
    return build_catalog(direct, proxied)
