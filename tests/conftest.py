"""Shared pytest fixtures for the copy-crab test suite.

Provides reusable fixtures for:
- An isolated settings file and project directory per test
- Configured SettingsStore / ArtifactGenerator instances
- A factory for ProjectChoices
- A scripted prompter that replays canned answers
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable
from unittest.mock import MagicMock

import pytest

from copy_crab.config import AppConfig
from copy_crab.models import (
    ChosenFeatures,
    Feature,
    FeatureSet,
    Modularity,
    ProjectChoices,
    Runtime,
)
from copy_crab.prompts import Prompter
from copy_crab.scaffolder.generator import ArtifactGenerator
from copy_crab.settings import SettingsStore


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Directory the artifact gets written into (auto-cleanup)."""
    directory = tmp_path / "host-project"
    directory.mkdir()
    return directory


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    """Location of the shared settings file. Not created."""
    return tmp_path / "copy-paste.json"


@pytest.fixture
def write_settings(settings_path: Path) -> Callable[[Any], Path]:
    """Write an arbitrary JSON document to the settings file."""

    def _write(document: Any) -> Path:
        settings_path.write_text(json.dumps(document), encoding="utf-8")
        return settings_path

    return _write


@pytest.fixture
def read_settings(settings_path: Path) -> Callable[[], Any]:
    """Parse the settings file back."""

    def _read() -> Any:
        return json.loads(settings_path.read_text(encoding="utf-8"))

    return _read


# ---------------------------------------------------------------------------
# Core objects
# ---------------------------------------------------------------------------

@pytest.fixture
def app_config(settings_path: Path) -> AppConfig:
    return AppConfig(settings_file=settings_path)


@pytest.fixture
def store(app_config: AppConfig) -> SettingsStore:
    return SettingsStore.from_config(app_config)


@pytest.fixture
def generator(app_config: AppConfig, store: SettingsStore) -> ArtifactGenerator:
    return ArtifactGenerator(app_config, store)


@pytest.fixture
def make_choices(project_dir: Path) -> Callable[..., ProjectChoices]:
    """Build ProjectChoices pointing at ``project_dir``.

    ``features`` may be a FeatureSet (preset) or an iterable of Feature
    (custom).
    """

    def _make(
        runtime: Runtime = Runtime.DENO,
        features: FeatureSet | Iterable[Feature] = FeatureSet.ALL,
        modularity: Modularity = Modularity.SINGLE_FILE,
        directory: Path | None = None,
    ) -> ProjectChoices:
        if isinstance(features, FeatureSet):
            feature_set = ChosenFeatures.from_preset(features)
        else:
            feature_set = ChosenFeatures.custom(features)
        return ProjectChoices(
            runtime=runtime,
            chosen_directory=str(directory or project_dir),
            feature_set=feature_set,
            modularity=modularity,
        )

    return _make


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

@pytest.fixture
def scripted_console() -> Callable[[Iterable[str]], MagicMock]:
    """A console double whose ``input`` replays the given answers in order.

    Running out of answers raises EOFError, like a closed stdin.
    """

    def _make(answers: Iterable[str]) -> MagicMock:
        console = MagicMock()
        console.input.side_effect = list(answers) + [EOFError()]
        return console

    return _make


@pytest.fixture
def scripted_prompter(scripted_console) -> Callable[[Iterable[str]], Prompter]:
    def _make(answers: Iterable[str]) -> Prompter:
        return Prompter(console=scripted_console(answers))

    return _make
