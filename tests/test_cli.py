"""Tests for the root blackmamba CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from blackmamba import __version__
from blackmamba.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "blackmamba" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_in_project")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--json", "--version"])
    assert result.exit_code == 0


def test_quiet_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-q", "--version"])
    assert result.exit_code == 0


def test_verbose_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-v", "--version"])
    assert result.exit_code == 0


def test_log_json_flag_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--log-json", "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "test.toml"
    config.write_text("")
    result = cli_runner.invoke(cli, ["-c", str(config), "--version"])
    assert result.exit_code == 0


def test_missing_config_file_rejected(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "missing.toml"), "exec", "a", "b"])
    assert result.exit_code == 2
    assert "does not exist" in result.stderr


def test_root_examples(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--examples"])
    assert result.exit_code == 0
    assert result.output.startswith("Examples for 'cli':")
    assert "\n  blackmamba exec greeter greet John\n" in result.output


# --- Commands registered ---

EXPECTED_GROUPS = ["inspect"]

EXPECTED_COMMANDS = ["exec", "run"]


@pytest.mark.parametrize("name", EXPECTED_GROUPS)
def test_group_registered(name: str) -> None:
    assert name in cli.commands
    assert hasattr(cli.commands[name], "commands")


@pytest.mark.parametrize("name", EXPECTED_COMMANDS)
def test_command_registered(name: str) -> None:
    assert name in cli.commands


def test_help_lists_commands(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    for name in EXPECTED_GROUPS + EXPECTED_COMMANDS:
        assert name in result.output


@pytest.mark.usefixtures("_in_project")
def test_explicit_config_path(cli_runner: CliRunner, project: Path) -> None:
    config = project / "custom.toml"
    config.write_text('[fallback]\napp = "greeter"\ncmd = "greet"\ndata = "Cfg"\n')
    result = cli_runner.invoke(
        cli, ["-c", str(config), "-q", "exec", "ghost", "greet", "x", "--fallback"]
    )
    assert result.exit_code == 0
    assert result.stdout.strip() == "Hello Cfg"
