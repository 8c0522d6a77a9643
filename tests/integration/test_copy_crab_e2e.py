"""Integration tests for a full crabSafe lifecycle.

Each test runs ``main`` several times against one project directory and one
shared settings file, the way a user would across separate invocations:
first run, one or more modifications, then deletion. The bundled TypeScript
payloads are used as shipped.

No external services are required.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from copy_crab.cli import EXIT_OK, main
from copy_crab.prompts import Prompter


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _invoke(settings_path: Path, answers: list[str]) -> int:
    """Run one CLI invocation answering prompts with *answers*."""
    console = MagicMock()
    console.input.side_effect = answers + [EOFError()]
    with patch.dict(os.environ, {}, clear=True), \
            patch("copy_crab.cli.configure_logging"), \
            patch("copy_crab.cli.Prompter", return_value=Prompter(console=console)):
        return main(["--settings-file", str(settings_path)])


def _record(settings_path: Path) -> dict[str, Any]:
    return json.loads(settings_path.read_text(encoding="utf-8"))["crabSafe"]


def _files(directory: Path) -> set[str]:
    return {p.name for p in directory.iterdir()}


@pytest.fixture
def shared_settings(tmp_path: Path) -> Path:
    """Settings file already used by another tool."""
    path = tmp_path / "copy-paste.json"
    path.write_text(json.dumps({"otherTool": {"enabled": True}}), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestSplitFilesLifecycle:
    def test_create_modify_delete(self, shared_settings: Path, project_dir: Path) -> None:
        split_dir = project_dir / "crabSafe"

        # First run: Deno, every feature, one file per feature.
        assert _invoke(shared_settings, ["Deno", str(project_dir), "1", "All", "2"]) == EXIT_OK
        assert _files(split_dir) == {"core.ts", "example.ts", "option.ts", "result.ts", "parsers.ts"}
        assert _record(shared_settings)["feature_set"] == {"Preset": {"preset_name": "All"}}

        # Remove Example and Parsers.
        assert _invoke(shared_settings, ["1", "2", "Example, Parsers", "y"]) == EXIT_OK
        assert _files(split_dir) == {"core.ts", "option.ts", "result.ts"}
        assert _record(shared_settings)["feature_set"] == {
            "Custom": {"features": ["Core", "Option", "Result"]}
        }

        # Add Parsers back; it is appended after the existing features.
        assert _invoke(shared_settings, ["1", "1", "Parsers", "y"]) == EXIT_OK
        assert _files(split_dir) == {"core.ts", "option.ts", "result.ts", "parsers.ts"}
        assert _record(shared_settings)["feature_set"]["Custom"]["features"][-1] == "Parsers"

        # Delete everything; the other tool's key survives.
        assert _invoke(shared_settings, ["2", "y"]) == EXIT_OK
        assert not split_dir.exists()
        assert json.loads(shared_settings.read_text(encoding="utf-8")) == {
            "otherTool": {"enabled": True}
        }


@pytest.mark.integration
class TestSingleFileLifecycle:
    def test_nodejs_merge_then_remove_everything(self, tmp_path: Path, project_dir: Path) -> None:
        settings_path = tmp_path / "copy-paste.json"
        target = project_dir / "crabSafe.ts"

        assert _invoke(settings_path, ["NodeJS", str(project_dir), "Custom", "1,3,4,5", "Same file"]) == EXIT_OK
        content = target.read_text(encoding="utf-8")
        assert "deno_dom" not in content
        assert "export type DataType" not in content
        for line in content.split("\n"):
            if line.strip().startswith("import"):
                assert '"./' not in line
        assert _record(settings_path)["runtime"] == "NodeJs"

        # Removing every feature and accepting the default deletes the artifact.
        assert _invoke(settings_path, ["1", "2", "1,2,3,4", ""]) == EXIT_OK
        assert not target.exists()
        assert not settings_path.exists()

    def test_deno_keeps_remote_import(self, tmp_path: Path, project_dir: Path) -> None:
        settings_path = tmp_path / "copy-paste.json"
        assert _invoke(settings_path, ["Deno", str(project_dir), "1", "1", "1"]) == EXIT_OK
        content = (project_dir / "crabSafe.ts").read_text(encoding="utf-8")
        first_line = content.split("\n")[0]
        assert first_line.startswith("import")
        assert "deno_dom" in content
        assert "export type DataType" in content
