"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to subcommands via
``@click.pass_obj``. Owns logging setup, the lazily built ConfigStore, and
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from occasion.errors import ConfigError
from occasion.output.formatters import format_result, render_error, render_warnings
from occasion.services.result import ServiceResult

if TYPE_CHECKING:
    from occasion.config.settings import OccasionSettings
    from occasion.infrastructure.store import ConfigStore
    from occasion.services.resolve import OccasionService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is created on first use so ``--help`` and ``--version`` never
    touch the filesystem.
    """

    def __init__(self, settings: OccasionSettings) -> None:
        self.settings = settings
        self._store: ConfigStore | None = None

        from occasion.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            check=settings.check,
        )

    @property
    def store(self) -> ConfigStore:
        """The config store (raises if no config location can be determined)."""
        if self._store is None:
            from occasion.infrastructure.store import ConfigStore

            self._store = ConfigStore(self.settings.config_file())
        return self._store

    def run(
        self,
        op: str,
        action: Callable[[OccasionService], ServiceResult],
        *,
        line: bool = False,
    ) -> None:
        """Build the service, run *action*, and emit its result."""
        from occasion.services.resolve import OccasionService

        try:
            service = OccasionService(self.store)
        except ConfigError as exc:
            self.emit(ServiceResult.failure(op, exc), line=line)
            return
        self.emit(action(service), line=line)

    def emit(self, result: ServiceResult, *, line: bool = False) -> None:
        """Output a ServiceResult with the right exit semantics.

        *line* marks the prompt path: success prints only
        ``result.data["output"]``, warnings appear only in check mode, and a
        failure is silent (exit 0) unless check mode is on.

        * Success: writes to stdout, returns normally. Warnings go to stderr
          so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        json_output = self.settings.json_output
        color = sys.stderr.isatty()
        if result.ok:
            if json_output:
                click.echo(format_result(result, json_output=True))
            elif line:
                click.echo(result.data.get("output", ""))
            else:
                click.echo(format_result(result))
            if result.warnings and not json_output and (self.settings.check or not line):
                click.echo(render_warnings(result, color=color), err=True)
            return

        if line and not self.settings.check:
            return
        if json_output:
            click.echo(format_result(result, json_output=True), err=True)
        else:
            click.echo(render_error(result, color=color), err=True)
        raise SystemExit(1)
