"""Shared pytest fixtures and test helpers for occasion tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from occasion.config.discovery import CONFIG_FILENAME


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own OCCASION_* variables out of every test."""
    for name in ("CONFIG", "CHECK", "VERBOSE", "LOG_JSON", "JSON_OUTPUT"):
        monkeypatch.delenv(f"OCCASION_{name}", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Root config path inside a temp directory (not yet written)."""
    return tmp_path / CONFIG_FILENAME


@pytest.fixture
def today() -> date:
    return date.today()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_config(path: Path, **document: Any) -> Path:
    """Write *document* as JSON to *path* (``dates`` defaults to empty)."""
    document.setdefault("dates", [])
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


def rule_for_day(message: str, when: date) -> dict[str, Any]:
    """A rule matching exactly *when* by day of month, month and year."""
    return {
        "message": message,
        "time": {
            "day_of": {"month": [when.day]},
            "month": [when.strftime("%B")],
            "year": [when.year],
        },
    }


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by the CLI or by a test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    occasion = logging.getLogger("occasion")
    occasion_level = occasion.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    occasion.setLevel(occasion_level)
