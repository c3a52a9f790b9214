"""Subcommand modules for occasion.

Provides register_commands() which uses deferred imports so the common
path (a bare ``occasion`` in a shell prompt) loads as little as possible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from occasion.commands.init_cmd import init_cmd
    from occasion.commands.validate import validate

    cli.add_command(init_cmd)
    cli.add_command(validate)
