"""YAML-based configuration for game-folders.

The config lives at ~/.config/game-folders/config.yaml (respecting
XDG_CONFIG_HOME). GAME_FOLDERS_CONFIG points at a different file.
Command-line flags override anything set here.
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "steam_dir": None,
    "poll_interval_ms": 100,
    "open_command": None,
    "proxied_only": False,
    "search_enabled": True,
    "debug": False,
}


def get_config_dir() -> Path:
    """Get the game-folders config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(xdg_config) / "game-folders"


def get_config_path() -> Path:
    """Get the path to the config file."""
    override = os.environ.get("GAME_FOLDERS_CONFIG")
    if override:
        return Path(os.path.expanduser(override))
    return get_config_dir() / "config.yaml"


def get_log_path() -> Path:
    """Get the path to the debug log file."""
    return get_config_dir() / "debug.log"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def validate_config(cfg: dict[str, Any]) -> dict[str, Any]:
    """Check value types, raising ConfigError on the first bad one."""
    poll = cfg.get("poll_interval_ms")
    if isinstance(poll, bool) or not isinstance(poll, int) or poll <= 0:
        raise ConfigError(f"poll_interval_ms must be a positive integer, got {poll!r}")

    for key in ("proxied_only", "search_enabled", "debug"):
        if not isinstance(cfg.get(key), bool):
            raise ConfigError(f"{key} must be true or false, got {cfg.get(key)!r}")

    steam_dir = cfg.get("steam_dir")
    if steam_dir is not None and not isinstance(steam_dir, str):
        raise ConfigError(f"steam_dir must be a path string, got {steam_dir!r}")

    command = cfg.get("open_command")
    if command is not None:
        if isinstance(command, list):
            if not command or not all(isinstance(part, str) for part in command):
                raise ConfigError("open_command must be a non-empty list of strings")
        elif not isinstance(command, str) or not command.strip():
            raise ConfigError(f"open_command must be a string or list, got {command!r}")
    return cfg


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load the config, merged over the defaults.

    A missing file gives the defaults. A file that is not valid YAML, or not
    a mapping, is skipped with a warning.
    """
    config_path = path or get_config_path()
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return copy.deepcopy(DEFAULT_CONFIG)
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    if data is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping", config_path)
        return copy.deepcopy(DEFAULT_CONFIG)

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning("Unknown config keys in %s: %s", config_path, ", ".join(unknown))

    return validate_config(_deep_merge(copy.deepcopy(DEFAULT_CONFIG), data))


def save_config(cfg: dict[str, Any], path: Path | None = None) -> None:
    """Write the config as YAML."""
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.dump(cfg, f, default_flow_style=False, sort_keys=False)
