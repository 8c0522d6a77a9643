"""Exception hierarchy for copy-crab.

Every error the tool raises on purpose derives from ``CopyCrabError`` so the
CLI can surface it with one handler and exit non-zero.
"""

from __future__ import annotations

from pathlib import Path


class CopyCrabError(Exception):
    """Base class for all copy-crab failures."""


class MissingFieldError(CopyCrabError):
    """Raised by ``ProjectBuilder.build`` when a required choice was never set."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Cannot build project choices: '{field}' was not set")


class InvalidSettingsError(CopyCrabError):
    """Raised when the settings file holds a record that cannot be parsed."""

    def __init__(self, path: Path, key: str, reason: str = "") -> None:
        self.path = path
        self.key = key
        self.reason = reason
        message = (
            f"A key of {key} was found in {path}, but it contained invalid "
            f"configuration settings. Please delete the key-value pair if you "
            f"want to import this library from this tool"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class DirectoryExistsError(CopyCrabError):
    """Raised when a split-file artifact directory is already present."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Directory already exists: {path}")


class FilesystemError(CopyCrabError):
    """Wraps an ``OSError`` raised while reading, writing or removing files."""

    def __init__(self, path: Path, operation: str, reason: str = "") -> None:
        self.path = path
        self.operation = operation
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to {operation} {path}{detail}")


class PromptCancelledError(CopyCrabError):
    """Raised when the user cancels or refuses an interactive prompt."""

    def __init__(self, question: str) -> None:
        self.question = question
        super().__init__(f"No answer given for: {question}")
