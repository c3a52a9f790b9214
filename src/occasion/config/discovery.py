"""Config file location.

The override (``$OCCASION_CONFIG`` or ``--config``) is always passed in by
the caller; nothing here reads the environment for it. Without an override
the file lives in the platform config directory.
"""

from __future__ import annotations

from pathlib import Path

import click

from occasion.errors import UndeterminableLocationError

APP_NAME = "occasion"
CONFIG_FILENAME = "occasions.json"


def default_config_dir() -> Path:
    """Platform config directory for occasion (e.g. ``~/.config/occasion``)."""
    app_dir = click.get_app_dir(APP_NAME)
    if not app_dir or app_dir.startswith("~"):
        raise UndeterminableLocationError
    return Path(app_dir)


def resolve_config_path(
    override: str | Path | None = None,
    app_dir: Path | None = None,
) -> Path:
    """Return *override* if given, else ``<config dir>/occasions.json``."""
    if override:
        return Path(override).expanduser()
    return (app_dir or default_config_dir()) / CONFIG_FILENAME
