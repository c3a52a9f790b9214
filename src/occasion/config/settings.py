"""Unified settings: CLI flags and ``OCCASION_*`` env vars in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``OCCASION_*`` prefix (``OCCASION_CONFIG`` is the path
     override)
  3. Code defaults

Only the settings object touches the environment. The resolved config path
is handed to :class:`~occasion.infrastructure.store.ConfigStore` explicitly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings

from occasion.config.discovery import resolve_config_path


class OccasionSettings(BaseSettings):
    """Settings for one ``occasion`` invocation, frozen after construction.

    Attributes:
        config: Explicit config file path, or None for the platform default.
        check: Surface load errors on stderr with a non-zero exit.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "OCCASION_",
    }

    config: str | None = None
    check: bool = False
    verbose: bool = False
    log_json: bool = False
    json_output: bool = False

    @classmethod
    def from_cli(cls, *, config_path: str | None = None, **cli_flags: Any) -> OccasionSettings:
        """Construct settings from a CLI invocation.

        Flags left at their defaults do not shadow environment values.
        """
        overrides = {name: value for name, value in cli_flags.items() if value}
        if config_path:
            overrides["config"] = config_path
        return cls(**overrides)

    def config_file(self) -> Path:
        """Resolve the root config path (may raise UndeterminableLocationError)."""
        return resolve_config_path(self.config)
