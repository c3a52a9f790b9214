"""Command: write a default configuration document."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from occasion.commands._base import examples_option

if TYPE_CHECKING:
    from occasion.commands._context import AppContext


@click.command("init")
@examples_option(
    """\
  occasion init
  occasion -c ./occasions.json init"""
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the config file with an empty rule list if it is missing."""
    app.run("init", lambda svc: svc.init())
