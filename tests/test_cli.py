"""Tests for the CLI entry point."""

import pytest

from game_folders import cli
from game_folders.errors import TerminalError


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("GAME_FOLDERS_CONFIG", raising=False)


@pytest.fixture
def no_terminal(monkeypatch):
    """Fail the test if the interactive browser is started."""

    def forbidden(*args, **kwargs):
        raise AssertionError("terminal session must not start")

    monkeypatch.setattr(cli, "run_browser", forbidden)


class TestArgParsing:
    def setup_method(self):
        self.parser = cli.build_parser()

    def test_defaults_leave_config_alone(self):
        args = self.parser.parse_args([])
        assert args.steam_dir is None
        assert args.proxied_only is None
        assert args.search_enabled is None
        assert args.poll_ms is None
        assert args.debug is None
        assert args.list is False

    def test_flags(self):
        args = self.parser.parse_args(
            ["--steam-dir", "/s", "--proxied-only", "--no-search", "--poll-ms", "50", "--debug"]
        )
        assert args.steam_dir == "/s"
        assert args.proxied_only is True
        assert args.search_enabled is False
        assert args.poll_ms == 50
        assert args.debug is True

    def test_flags_override_config(self):
        args = self.parser.parse_args(["--no-search", "--poll-ms", "250"])
        settings = cli.resolve_settings(args, dict(cli.config.DEFAULT_CONFIG, proxied_only=True))
        assert settings["search_enabled"] is False
        assert settings["poll_interval_ms"] == 250
        assert settings["proxied_only"] is True


class TestMain:
    def test_empty_catalog_exits_zero_without_terminal(self, tmp_path, no_terminal, capsys):
        steam = tmp_path / "Steam"
        steam.mkdir()
        assert cli.main(["--steam-dir", str(steam)]) == 0
        assert cli.NO_GAMES_MESSAGE in capsys.readouterr().out

    def test_missing_steam_exits_one(self, tmp_path, no_terminal, capsys):
        assert cli.main(["--steam-dir", str(tmp_path / "missing")]) == 1
        assert "Steam installation not found" in capsys.readouterr().err

    def test_bad_poll_value_exits_one(self, tmp_path, no_terminal, capsys):
        assert cli.main(["--steam-dir", str(tmp_path), "--poll-ms", "0"]) == 1
        assert "poll_interval_ms" in capsys.readouterr().err

    def test_list_prints_catalog(self, steam_tree, no_terminal, capsys):
        assert cli.main(["--steam-dir", str(steam_tree), "--list"]) == 0
        out = capsys.readouterr().out
        assert "Portal 2 (App ID: 620)" in out
        assert "Non-Steam: Battle.net" in out

    def test_runs_browser_with_settings(self, steam_tree, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, "run_browser", lambda catalog, settings: calls.append((catalog, settings)))
        assert cli.main(["--steam-dir", str(steam_tree), "--proxied-only", "--no-search"]) == 0
        catalog, settings = calls[0]
        assert [item.display_name for item in catalog] == ["Battle.net", "Epic Games Launcher"]
        assert settings["search_enabled"] is False

    def test_terminal_error_exits_one(self, steam_tree, monkeypatch, capsys):
        def fail(catalog, settings):
            raise TerminalError("stdin is not a TTY")

        monkeypatch.setattr(cli, "run_browser", fail)
        assert cli.main(["--steam-dir", str(steam_tree)]) == 1
        assert "stdin is not a TTY" in capsys.readouterr().err

    def test_input_failure_exits_one(self, steam_tree, monkeypatch, capsys):
        def fail(catalog, settings):
            raise OSError("read failed")

        monkeypatch.setattr(cli, "run_browser", fail)
        assert cli.main(["--steam-dir", str(steam_tree)]) == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "read failed" in err

    def test_keyboard_interrupt_exits_130(self, steam_tree, monkeypatch):
        def interrupted(catalog, settings):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "run_browser", interrupted)
        assert cli.main(["--steam-dir", str(steam_tree)]) == 130

    def test_init_config(self, tmp_path, capsys):
        assert cli.main(["--init-config"]) == 0
        path = tmp_path / "xdg" / "game-folders" / "config.yaml"
        assert path.exists()
        assert cli.main(["--init-config"]) == 0
        assert "already exists" in capsys.readouterr().out

    def test_debug_writes_log_file(self, steam_tree, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "run_browser", lambda catalog, settings: None)
        assert cli.main(["--steam-dir", str(steam_tree), "--debug"]) == 0
        log = (tmp_path / "xdg" / "game-folders" / "debug.log").read_text()
        assert "Discovered 2 Steam games and 2 non-Steam prefixes" in log


class FakeSession:
    def __init__(self, keys):
        self.keys = list(keys)
        self.frames = []
        self.entered = False
        self.exited = False
        self.height = 24

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, *exc):
        self.exited = True
        return False

    def draw(self, renderable):
        self.frames.append(renderable)

    def poll_key(self, timeout):
        return self.keys.pop(0)


class TestRunBrowser:
    def test_quits_and_releases_session(self, catalog):
        session = FakeSession([None, "\x1b[B", "q"])
        cli.run_browser(catalog, dict(cli.config.DEFAULT_CONFIG), session_factory=lambda: session)
        assert session.entered and session.exited
        assert len(session.frames) == 3

    def test_releases_session_on_error(self, catalog):
        session = FakeSession([])
        with pytest.raises(IndexError):
            cli.run_browser(catalog, dict(cli.config.DEFAULT_CONFIG), session_factory=lambda: session)
        assert session.exited
