"""Tests for the --examples flag on the root group and its commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from occasion.cli import cli

EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["occasion --check", "OCCASION_CONFIG="]),
    (["init", "--examples"], ["occasion init"]),
    (["validate", "--examples"], ["occasion validate", "occasion --json validate"]),
]


@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples_output(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


def test_examples_listed_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["validate", "--help"])
    assert "--examples" in result.output
