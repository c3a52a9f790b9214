"""Root CLI group for occasion with global flags and command registration.

A bare ``occasion`` resolves today's message and prints it; subcommands
manage the config file.
"""

from __future__ import annotations

import click

from occasion import __version__
from occasion.commands import register_commands
from occasion.commands._base import examples_option
from occasion.commands._context import AppContext
from occasion.config.settings import OccasionSettings


@click.group(invoke_without_command=True)
@examples_option(
    """\
  occasion
  occasion --check
  occasion --json
  OCCASION_CONFIG=~/dotfiles/occasions.json occasion"""
)
@click.version_option(version=__version__, prog_name="occasion")
@click.option(
    "--check",
    is_flag=True,
    help="Print any error messages instead of failing silently.",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Config file path (overrides $OCCASION_CONFIG).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    check: bool,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """occasion: print the message for today's occasion."""
    settings = OccasionSettings.from_cli(
        config_path=config_path,
        check=check,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        ctx.obj.run("resolve", lambda svc: svc.resolve(), line=True)


register_commands(cli)
