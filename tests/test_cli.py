"""Tests for the root occasion CLI."""

import json
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from occasion import __version__
from occasion.cli import cli
from tests.conftest import rule_for_day, write_config


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "occasion" in result.output
    assert "--check" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_does_not_touch_config(cli_runner: CliRunner, config_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(config_path), "--help"])
    assert result.exit_code == 0
    assert not config_path.exists()


# --- Bare invocation ---


def test_prints_todays_message(cli_runner: CliRunner, config_path: Path, today: date) -> None:
    write_config(config_path, dates=[rule_for_day("hai :3", today)])
    result = cli_runner.invoke(cli, ["-c", str(config_path)])
    assert result.exit_code == 0
    assert result.stdout == "hai :3\n"


def test_env_var_config(cli_runner: CliRunner, config_path: Path, today: date) -> None:
    write_config(config_path, dates=[rule_for_day("from env", today)])
    result = cli_runner.invoke(cli, [], env={"OCCASION_CONFIG": str(config_path)})
    assert result.exit_code == 0
    assert result.stdout == "from env\n"


def test_flag_beats_env_var(
    cli_runner: CliRunner, config_path: Path, tmp_path: Path, today: date
) -> None:
    write_config(config_path, dates=[rule_for_day("flag", today)])
    other = write_config(tmp_path / "other.json", dates=[rule_for_day("env", today)])
    result = cli_runner.invoke(
        cli, ["-c", str(config_path)], env={"OCCASION_CONFIG": str(other)}
    )
    assert result.stdout == "flag\n"


def test_missing_config_created(cli_runner: CliRunner, config_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(config_path)])
    assert result.exit_code == 0
    assert result.stdout == "\n"
    assert config_path.is_file()


def test_broken_config_is_silent(cli_runner: CliRunner, config_path: Path) -> None:
    config_path.write_text("{", encoding="utf-8")
    result = cli_runner.invoke(cli, ["-c", str(config_path)])
    assert result.exit_code == 0
    assert result.stdout == ""
    assert result.stderr == ""


def test_check_reports_broken_config(cli_runner: CliRunner, config_path: Path) -> None:
    config_path.write_text("{", encoding="utf-8")
    result = cli_runner.invoke(cli, ["--check", "-c", str(config_path)])
    assert result.exit_code == 1
    assert result.stdout == ""
    assert "ERROR: resolve" in result.stderr


def test_check_env_var(cli_runner: CliRunner, config_path: Path) -> None:
    config_path.write_text("[]", encoding="utf-8")
    result = cli_runner.invoke(
        cli, ["-c", str(config_path)], env={"OCCASION_CHECK": "1"}
    )
    assert result.exit_code == 1


def test_skipped_import_hidden_without_check(
    cli_runner: CliRunner, config_path: Path, today: date
) -> None:
    write_config(config_path, dates=[rule_for_day("hai", today)], imports=["missing.json"])
    result = cli_runner.invoke(cli, ["-c", str(config_path)])
    assert result.exit_code == 0
    assert result.stdout == "hai\n"
    assert "WARNING" not in result.stderr


def test_skipped_import_shown_with_check(
    cli_runner: CliRunner, config_path: Path, today: date
) -> None:
    write_config(config_path, dates=[rule_for_day("hai", today)], imports=["missing.json"])
    result = cli_runner.invoke(cli, ["--check", "-c", str(config_path)])
    assert result.exit_code == 0
    assert result.stdout == "hai\n"
    assert "WARNING: cannot import config file at" in result.stderr


def test_json_output(cli_runner: CliRunner, config_path: Path, today: date) -> None:
    write_config(config_path, dates=[rule_for_day("hai", today)])
    result = cli_runner.invoke(cli, ["--json", "-c", str(config_path)])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["op"] == "resolve"
    assert data["data"] == {"output": "hai", "matched": 1}


def test_json_check_error(cli_runner: CliRunner, config_path: Path) -> None:
    config_path.write_text("{", encoding="utf-8")
    result = cli_runner.invoke(cli, ["--json", "--check", "-c", str(config_path)])
    assert result.exit_code == 1
    data = json.loads(result.stderr)
    assert data["error"]["code"] == "DESERIALIZE_ERROR"


def test_undeterminable_location(
    cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("occasion.config.discovery.click.get_app_dir", lambda name: "")
    result = cli_runner.invoke(cli, ["--check"])
    assert result.exit_code == 1
    assert "OCCASION_CONFIG" in result.stderr


# --- Global flags ---


def test_verbose_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-v", "--version"])
    assert result.exit_code == 0


def test_log_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--log-json", "--version"])
    assert result.exit_code == 0
