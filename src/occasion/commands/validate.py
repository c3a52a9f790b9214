"""Command: load the configuration tree and report on it."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from occasion.commands._base import examples_option

if TYPE_CHECKING:
    from occasion.commands._context import AppContext


@click.command()
@examples_option(
    """\
  occasion validate
  occasion --json validate
  OCCASION_CONFIG=./occasions.json occasion validate"""
)
@click.pass_obj
def validate(app: AppContext) -> None:
    """Check that the config and all its imports load."""
    app.run("validate", lambda svc: svc.validate())
