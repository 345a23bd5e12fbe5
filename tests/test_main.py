"""Tests for the TomatoStats main entry point."""

import json
from unittest.mock import MagicMock, patch

import pytest

from tomatostats.main import build_parser, main


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "database_path": str(tmp_path / "stats.db"),
        "first_weekday": 0,
        "log_level": "WARNING",
    }), encoding="utf-8")
    return str(path)


class TestBuildParser:
    """Tests for CLI argument parsing."""

    def test_no_args_defaults(self):
        parsed = build_parser().parse_args([])
        assert parsed.today is False
        assert parsed.week is False
        assert parsed.add is None
        assert parsed.offset == 0
        assert parsed.kind == "work"

    def test_week_with_offset(self):
        parsed = build_parser().parse_args(["--week", "--offset", "-1"])
        assert parsed.week is True
        assert parsed.offset == -1

    def test_add_with_kind(self):
        parsed = build_parser().parse_args(["--add", "5m", "--kind", "shortBreak"])
        assert parsed.add == "5m"
        assert parsed.kind == "shortBreak"

    def test_modes_mutually_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--week", "--month"])

    def test_unknown_kind_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--add", "5m", "--kind", "nap"])


class TestMainCommands:
    def test_add_then_today(self, config_path, capsys):
        assert main(["--config", config_path, "--add", "25m"]) == 0
        out = capsys.readouterr().out
        assert "Recorded 25m work" in out

        assert main(["--config", config_path]) == 0
        assert "25m" in capsys.readouterr().out

    def test_break_not_counted_today(self, config_path, capsys):
        main(["--config", config_path, "--add", "5m", "--kind", "shortBreak"])
        capsys.readouterr()
        main(["--config", config_path, "--today"])
        assert capsys.readouterr().out.rstrip().endswith(": 0m")

    def test_week_month_year_reports(self, config_path, capsys):
        main(["--config", config_path, "--add", "1h"])
        capsys.readouterr()

        assert main(["--config", config_path, "--week"]) == 0
        assert "Total: 1h" in capsys.readouterr().out
        assert main(["--config", config_path, "--month"]) == 0
        assert capsys.readouterr().out.startswith("Month: ")
        assert main(["--config", config_path, "--year"]) == 0
        assert capsys.readouterr().out.startswith("Year: ")

    def test_previous_week_is_empty(self, config_path, capsys):
        main(["--config", config_path, "--add", "1h"])
        capsys.readouterr()
        main(["--config", config_path, "--week", "--offset", "-1"])
        assert "Total: 0m" in capsys.readouterr().out

    def test_config_without_database_path_keeps_records(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("tomatostats.core.config.get_data_directory", lambda: tmp_path)
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"first_weekday": 0, "log_level": "WARNING"}))

        assert main(["--config", str(path), "--add", "25m"]) == 0
        capsys.readouterr()
        assert main(["--config", str(path), "--today"]) == 0
        assert capsys.readouterr().out.rstrip().endswith(": 25m")

    def test_bad_duration_returns_error(self, config_path, capsys):
        assert main(["--config", config_path, "--add", "soon"]) == 1
        assert "Invalid duration format" in capsys.readouterr().err

    def test_bad_config_returns_2(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"database_path": ":memory:", "first_weekday": 12}))
        assert main(["--config", str(path)]) == 2

    @patch("tomatostats.ui.web.serve")
    def test_serve_uses_web_config(self, mock_serve, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "database_path": ":memory:",
            "web": {"host": "0.0.0.0", "port": 9000},
        }))
        assert main(["--config", str(path), "--serve"]) == 0
        _, kwargs = mock_serve.call_args
        assert kwargs == {"host": "0.0.0.0", "port": 9000}

    @patch("tomatostats.main.StatsManager")
    @patch("tomatostats.main.load_config")
    @patch("tomatostats.main.get_default_config_path")
    def test_default_config_path_used(self, mock_path, mock_load, MockManager):
        mock_path.return_value = "/tmp/config.json"
        mock_load.return_value = {"database_path": ":memory:"}
        MockManager.from_config.return_value = MagicMock()

        main(["--today"])

        mock_load.assert_called_once_with("/tmp/config.json")
        MockManager.from_config.assert_called_once_with({"database_path": ":memory:"})
