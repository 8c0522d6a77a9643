"""Namespaced access to the shared ``copy-paste.json`` settings document.

Several copy-paste tools may share one settings file. This store owns exactly
one top-level key (``crabSafe`` by default) and leaves every other key, and
the order of keys, untouched.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from copy_crab.config import AppConfig
from copy_crab.errors import FilesystemError, InvalidSettingsError
from copy_crab.models import ProjectChoices
from copy_crab.utils import read_json, write_json

logger = logging.getLogger(__name__)


class SettingsStore:
    """Reads, writes and clears this tool's record in the settings document."""

    def __init__(self, path: str | Path, key: str) -> None:
        self.path = Path(path)
        self.key = key

    @classmethod
    def from_config(cls, config: AppConfig) -> "SettingsStore":
        return cls(config.settings_file, config.settings_key)

    # -- Public API --------------------------------------------------------

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[ProjectChoices]:
        """Return the stored choices, or ``None`` on a first run.

        ``None`` means either the settings file does not exist yet or another
        tool is using it without a ``crabSafe`` record.

        Raises:
            InvalidSettingsError: The record is present but cannot be parsed,
                or the document itself is not a JSON object.
        """
        if not self.exists():
            logger.info("Settings file %s does not exist", self.path)
            return None

        document = self._read_document()
        if self.key not in document:
            logger.info("%s not found in %s", self.key, self.path)
            return None

        try:
            return ProjectChoices.model_validate(document[self.key])
        except ValidationError as exc:
            raise InvalidSettingsError(
                self.path, self.key, f"{exc.error_count()} validation error(s)"
            ) from exc

    def save(self, choices: ProjectChoices) -> None:
        """Create or replace this tool's record, preserving all other keys."""
        document: dict[str, Any] = self._read_document() if self.exists() else {}
        document[self.key] = choices.model_dump(mode="json")
        self._write_document(document)
        logger.debug("Saved %s to %s", self.key, self.path)

    def remove_key(self) -> None:
        """Delete this tool's record.

        The whole file is removed when no other key remains. A missing file
        or missing key leaves the disk untouched.
        """
        if not self.exists():
            logger.debug("Settings file %s already absent", self.path)
            return

        document = self._read_document()
        if self.key not in document:
            logger.debug("%s already absent from %s", self.key, self.path)
            return

        del document[self.key]
        if document:
            self._write_document(document)
            logger.debug("Removed %s from %s", self.key, self.path)
            return

        try:
            self.path.unlink()
        except OSError as exc:
            raise FilesystemError(self.path, "delete", str(exc)) from exc
        logger.debug("Deleted %s, no keys left", self.path)

    # -- Internals ---------------------------------------------------------

    def _read_document(self) -> dict[str, Any]:
        try:
            document = read_json(self.path)
        except json.JSONDecodeError as exc:
            raise InvalidSettingsError(self.path, self.key, f"not valid JSON: {exc.msg}") from exc
        except UnicodeDecodeError as exc:
            raise InvalidSettingsError(self.path, self.key, "not valid UTF-8") from exc
        except OSError as exc:
            raise FilesystemError(self.path, "read", str(exc)) from exc

        if not isinstance(document, dict):
            raise InvalidSettingsError(self.path, self.key, "document is not a JSON object")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        try:
            write_json(document, self.path)
        except OSError as exc:
            raise FilesystemError(self.path, "write", str(exc)) from exc
