"""Pytest fixtures for game-folders tests."""

from pathlib import Path

import pytest
import vdf

from game_folders.types import Item, build_catalog


def _make_item(name, identifier=1, is_proxied=False, folder_path=None):
    return Item(
        display_name=name,
        identifier=identifier,
        is_proxied=is_proxied,
        folder_path=Path(folder_path) if folder_path else Path("/nonexistent") / name,
    )


@pytest.fixture
def make_item():
    """Factory for items; folders default to a path that does not exist."""
    return _make_item


@pytest.fixture
def catalog():
    """Five games, the last two proxied."""
    return build_catalog(
        [
            _make_item("Portal 2", 620),
            _make_item("Half-Life 2", 220),
            _make_item("Hades", 1145360),
        ],
        [
            _make_item("Battle.net", 3060399406, is_proxied=True),
            _make_item("Epic Games Launcher", 2854031234, is_proxied=True),
        ],
    )


def write_text_vdf(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(vdf.dumps(data, pretty=True))
    return path


def write_binary_vdf(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(vdf.binary_dumps(data))
    return path


@pytest.fixture
def steam_tree(tmp_path):
    """A fake Steam install with two libraries, three shortcuts and compat mappings.

    Sets up:
    - root library with Portal 2 (installed) and a manifest with no name
    - second library with Hades (install dir missing on disk)
    - shortcuts for Battle.net (mapped, prefix exists), Notepad (unmapped)
      and Epic (mapped, no prefix yet)
    """
    root = tmp_path / "Steam"
    extra = tmp_path / "games"

    write_text_vdf(
        root / "steamapps" / "libraryfolders.vdf",
        {
            "libraryfolders": {
                "0": {"path": str(root), "label": ""},
                "1": {"path": str(extra), "label": ""},
                "2": {"path": str(tmp_path / "unplugged-drive")},
            }
        },
    )
    write_text_vdf(
        root / "steamapps" / "appmanifest_620.acf",
        {"AppState": {"appid": "620", "name": "Portal 2", "installdir": "Portal 2"}},
    )
    (root / "steamapps" / "common" / "Portal 2").mkdir(parents=True)
    write_text_vdf(
        root / "steamapps" / "appmanifest_228980.acf",
        {"AppState": {"appid": "228980", "installdir": "Steamworks Shared"}},
    )
    write_text_vdf(
        extra / "steamapps" / "appmanifest_1145360.acf",
        {"AppState": {"appid": "1145360", "name": "Hades", "installdir": "Hades"}},
    )

    write_binary_vdf(
        root / "userdata" / "12345" / "config" / "shortcuts.vdf",
        {
            "shortcuts": {
                "0": {"appid": -1234567890, "AppName": "Battle.net", "Exe": '"bnet.exe"'},
                "1": {"appid": -5, "AppName": "Notepad", "Exe": "notepad"},
                "2": {"appid": -1440936062, "appname": "Epic Games Launcher"},
            }
        },
    )
    write_text_vdf(
        root / "config" / "config.vdf",
        {
            "InstallConfigStore": {
                "Software": {
                    "valve": {
                        "Steam": {
                            "CompatToolMapping": {
                                "0": {"name": "", "config": "", "priority": "75"},
                                "3060399406": {"name": "proton_9", "config": "", "priority": "250"},
                                "2854031234": {"name": "GE-Proton9-20", "config": "", "priority": "250"},
                            }
                        }
                    }
                }
            }
        },
    )
    (root / "steamapps" / "compatdata" / "3060399406" / "pfx").mkdir(parents=True)
    return root
