"""copy-crab configuration.

Typed configuration for where settings live and what the generated artifact
is called. Uses a Pydantic v2 model so values are validated at construction
time and can be overridden from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_SETTINGS_FILE = "copy-paste.json"
DEFAULT_SETTINGS_KEY = "crabSafe"


class AppConfig(BaseModel):
    """Global copy-crab configuration.

    Created once by the CLI entry point and handed to the settings store and
    the artifact generator.
    """

    settings_file: Path = Field(
        default=Path(DEFAULT_SETTINGS_FILE),
        description="Shared JSON settings document, relative to the working directory",
    )
    settings_key: str = Field(
        default=DEFAULT_SETTINGS_KEY,
        min_length=1,
        description="Top-level key owned by this tool inside the settings document",
    )
    artifact_name: str = Field(
        default="crabSafe",
        min_length=1,
        description="Base name of the merged file or split directory",
    )
    extension: str = Field(default="ts", min_length=1, description="Extension of the merged file")

    # ------------------------------------------------------------------
    # Derived names
    # ------------------------------------------------------------------

    @property
    def single_file_name(self) -> str:
        """Filename of the merged artifact, e.g. ``crabSafe.ts``."""
        return f"{self.artifact_name}.{self.extension}"

    @property
    def split_dir_name(self) -> str:
        """Directory name of the split artifact, e.g. ``crabSafe``."""
        return self.artifact_name

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build an ``AppConfig`` from environment variables.

        Recognised variables (all optional):
            COPY_CRAB_SETTINGS_FILE, COPY_CRAB_SETTINGS_KEY.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("COPY_CRAB_SETTINGS_FILE"):
            kwargs["settings_file"] = Path(os.environ["COPY_CRAB_SETTINGS_FILE"])
        if os.environ.get("COPY_CRAB_SETTINGS_KEY"):
            kwargs["settings_key"] = os.environ["COPY_CRAB_SETTINGS_KEY"]
        return cls(**kwargs)
