"""Unit tests for main.py, the CLI entry point.

Tests focus on:
- --help and the registered sub-commands
- the history and version commands against a tmp config dir
- the UI launch path (with the full-screen loop patched out)
"""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from fokus import __version__
from fokus.config import ConfigManager
from fokus.main import app, main
from fokus.utils.exit_codes import ERROR_ALREADY_RUNNING, ERROR_INVALID_ARGS, ERROR_STORAGE

runner = CliRunner()


@pytest.fixture()
def manager(tmp_path, mocker):
    """ConfigManager rooted in tmp_path, injected into fokus.main."""
    mgr = ConfigManager(config_dir=tmp_path)
    mocker.patch("fokus.main.get_config_manager", return_value=mgr)
    mocker.patch("fokus.main.get_logger")
    return mgr


@pytest.fixture()
def fake_run(mocker):
    return mocker.patch("fokus.main.TimerDisplay.run", return_value="quit")


def _invoke(*args):
    return runner.invoke(app, list(args))


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------


class TestHelp:
    def test_help_flag_exits_zero(self):
        result = _invoke("--help")
        assert result.exit_code == 0
        assert "fokus" in result.output.lower()

    def test_help_lists_commands(self):
        output = _invoke("--help").output.lower()
        assert "history" in output
        assert "version" in output

    def test_help_mentions_quit_behaviour(self):
        assert "Quitting" in _invoke("--help").output

    @pytest.mark.parametrize("subcommand", ["history", "version"])
    def test_subcommand_help(self, subcommand):
        result = _invoke(subcommand, "--help")
        assert result.exit_code == 0
        assert "Usage" in result.output


# ---------------------------------------------------------------------------
# version / history
# ---------------------------------------------------------------------------


class TestVersionCommand:
    def test_prints_version(self):
        result = _invoke("version")
        assert result.exit_code == 0
        assert __version__ in result.output


class TestHistoryCommand:
    def test_empty_history(self, manager):
        result = _invoke("history")
        assert result.exit_code == 0
        assert "No focused minutes" in result.output

    def test_lists_days_newest_first(self, manager):
        manager.history_file.write_text(json.dumps({"2024-05-01": 47, "2024-05-02": 120}))
        result = _invoke("history")
        assert result.exit_code == 0
        assert result.output.index("2024-05-02") < result.output.index("2024-05-01")
        assert "167" in result.output

    def test_limit(self, manager):
        manager.history_file.write_text(json.dumps({"2024-05-01": 47, "2024-05-02": 120}))
        result = _invoke("history", "--limit", "1")
        assert "2024-05-02" in result.output
        assert "2024-05-01" not in result.output

    def test_corrupt_history_warns(self, manager):
        manager.history_file.write_text("{nope")
        result = _invoke("history")
        assert result.exit_code == 0
        assert "corrupt" in result.output
        assert list(manager.config_dir.glob("*.bak")) == []
        assert manager.history_file.read_text() == "{nope"


# ---------------------------------------------------------------------------
# UI launch
# ---------------------------------------------------------------------------


class TestRun:
    def test_runs_ui_and_releases_lock(self, manager, fake_run):
        result = _invoke()
        assert result.exit_code == 0
        fake_run.assert_called_once()
        assert not manager.lock_file.exists()

    def test_uses_configured_duration(self, manager, fake_run):
        manager.config_dir.mkdir(parents=True, exist_ok=True)
        manager.config_file.write_text("default_timer_duration = 40\ntick_interval_ms = 200\n")
        _invoke()
        controller = fake_run.call_args.args[0]
        assert controller.engine.target_minutes == 40
        assert fake_run.call_args.kwargs["tick_interval"] == pytest.approx(0.2)

    def test_duration_option_overrides_config(self, manager, fake_run):
        _invoke("--duration", "10")
        controller = fake_run.call_args.args[0]
        assert controller.engine.target_minutes == 10

    @pytest.mark.parametrize("value", ["0", "1000"])
    def test_duration_out_of_range(self, manager, fake_run, value):
        result = _invoke("-d", value)
        assert result.exit_code == ERROR_INVALID_ARGS
        fake_run.assert_not_called()

    def test_refuses_second_instance(self, manager, fake_run):
        manager.lock_file.write_text(str(os.getppid()))
        result = _invoke()
        assert result.exit_code == ERROR_ALREADY_RUNNING
        fake_run.assert_not_called()
        assert "Another fokus instance is already running" in result.output
        assert manager.lock_file.exists()

    def test_unusable_config_dir_exits_with_storage_code(self, manager, fake_run, mocker):
        mocker.patch.object(ConfigManager, "load_config", side_effect=PermissionError("denied"))
        result = _invoke()
        assert result.exit_code == ERROR_STORAGE
        assert "Config or history storage is not usable" in result.output
        fake_run.assert_not_called()

    def test_stale_lock_is_replaced(self, manager, fake_run, mocker):
        manager.lock_file.write_text("999999")
        mocker.patch("fokus.utils.lock.pid_alive", return_value=False)
        result = _invoke()
        assert result.exit_code == 0
        fake_run.assert_called_once()

    def test_corrupt_history_shows_notice(self, manager, fake_run):
        manager.history_file.write_text("[]")
        _invoke()
        controller = fake_run.call_args.args[0]
        assert controller.view_model().notice is not None
        assert manager.history_file.read_text() == "[]"


class TestMainEntryPoint:
    def test_main_invokes_app(self):
        with patch("fokus.main.app") as mock_app:
            main()
            mock_app.assert_called_once()
