"""ConfigStore: load a tree of ``occasions.json`` documents into a RuleSet.

Imports are resolved relative to the importing document's canonical
directory and merged recursively. Depth is bounded (root = 0, deepest
allowed = 2); there is no visited set, so a cycle simply re-merges the same
document until the depth bound stops it.

Merge precedence (easy to invert by mistake):

* imports fold left to right, so an earlier import's singular options win
  over a later import's;
* the importing document's own options win over the folded imports;
* rules concatenate: importer first, then imports in order.

A failing import is a warning, never a load failure.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from occasion.domain.models import ConfigDocument, RuleSet
from occasion.errors import (
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    DeserializeError,
    MaxRecursionDepthError,
    NotAFileError,
)

logger = logging.getLogger(__name__)

SCHEMA_URL = (
    "https://raw.githubusercontent.com/itscrystalline/occasion/"
    "refs/heads/main/occasions.schema.json"
)
SCHEMA_KEY = "$schema"
MAX_IMPORT_DEPTH = 2


def default_document() -> dict[str, Any]:
    """The JSON written for a fresh configuration."""
    body = ConfigDocument().model_dump(mode="json", exclude_none=True)
    return {SCHEMA_KEY: SCHEMA_URL, **body}


def parse_document(raw: str, *, source: Path | str = "<string>") -> ConfigDocument:
    """Decode and validate one document. ``$schema`` is ignored."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"cannot parse {source}: {exc}"
        raise DeserializeError(msg) from exc
    if not isinstance(data, dict):
        msg = f"cannot parse {source}: top level must be a JSON object"
        raise DeserializeError(msg)
    data.pop(SCHEMA_KEY, None)
    try:
        return ConfigDocument.model_validate(data)
    except ValidationError as exc:
        msg = f"cannot parse {source}: {exc}"
        raise DeserializeError(msg) from exc


class ConfigStore:
    """Reads (and, for a missing root, creates) the configuration tree.

    Attributes:
        path: Root document path, already resolved by the caller.
        warnings: Skipped imports from the most recent load.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.warnings: list[str] = []

    def load(self) -> RuleSet:
        """Load the root document and everything it imports."""
        self.warnings = []
        document = self.load_document(self.path, depth=0)
        return RuleSet.from_document(document)

    def load_or_create(self) -> RuleSet:
        """Like :meth:`load`, writing a default document if the root is missing.

        The load is retried exactly once after writing.
        """
        try:
            return self.load()
        except ConfigNotFoundError:
            logger.info("No config at %s, writing default", self.path)
            self.save_default()
            return self.load()

    def save_default(self) -> None:
        """Write the default document to :attr:`path`, creating parents."""
        rendered = json.dumps(default_document(), indent=2) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(rendered, encoding="utf-8")
        except OSError as exc:
            msg = f"cannot write {self.path}: {exc}"
            raise ConfigIOError(msg) from exc

    def load_document(self, path: Path, depth: int = 0) -> ConfigDocument:
        """Load *path* at import *depth* and merge its imports into it."""
        if depth > MAX_IMPORT_DEPTH:
            msg = f"import depth {depth} exceeds {MAX_IMPORT_DEPTH} at {path}"
            raise MaxRecursionDepthError(msg)

        document = parse_document(self._read(path), source=path)
        if not document.imports:
            return document

        base_dir = path.resolve().parent
        imported: ConfigDocument | None = None
        for relative in document.imports:
            target = base_dir / relative
            try:
                child = self.load_document(target, depth + 1)
            except ConfigError as exc:
                warning = f"cannot import config file at {target}: {exc}"
                logger.warning("Skipping import %s: %s", target, exc)
                self.warnings.append(warning)
                continue
            imported = child if imported is None else imported.merged_with(child)

        if imported is None:
            return document
        return document.merged_with(imported)

    @staticmethod
    def _read(path: Path) -> str:
        if path.exists() and not path.is_file():
            msg = f"{path} is not a file"
            raise NotAFileError(msg)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            msg = f"i/o error: {path} does not exist"
            raise ConfigNotFoundError(msg) from exc
        except UnicodeDecodeError as exc:
            msg = f"cannot parse {path}: not valid UTF-8"
            raise DeserializeError(msg) from exc
        except OSError as exc:
            msg = f"i/o error: {exc}"
            raise ConfigIOError(msg) from exc
