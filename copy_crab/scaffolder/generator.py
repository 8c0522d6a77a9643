"""Artifact materialization.

Turns a ``ProjectChoices`` into files on disk (one merged ``crabSafe.ts`` or a
``crabSafe/`` directory with one file per feature), re-derives the artifact
after features are added or removed, and deletes it again. Every operation
that changes the artifact writes the settings record last, so an interrupted
run leaves at worst an artifact with a stale record rather than a record that
points at nothing.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from copy_crab.config import AppConfig
from copy_crab.errors import DirectoryExistsError, FilesystemError
from copy_crab.models import Feature, Modularity, ProjectChoices, Runtime
from copy_crab.scaffolder.catalog import FeatureCatalog
from copy_crab.settings import SettingsStore

logger = logging.getLogger(__name__)

IMPORT_KEYWORD = "import"
REMOTE_IMPORT_MARKER = "http"
LOCAL_IMPORT_MARKER = '"./'


# ---------------------------------------------------------------------------
# Removal result
# ---------------------------------------------------------------------------


class RemovalOutcome(str, Enum):
    """What ``ArtifactGenerator.remove_features`` ended up doing."""
    UPDATED = "updated"
    DELETED = "deleted"
    ABORTED = "aborted"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class RemovalResult:
    outcome: RemovalOutcome
    choices: Optional[ProjectChoices]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ArtifactGenerator:
    """Writes, rewrites and deletes the crabSafe artifact for a project.

    Given a ``ProjectChoices``, produces either:
    - ``<chosen_directory>/crabSafe.ts``: all payloads merged, with import
      lines hoisted and filtered for the target runtime
    - ``<chosen_directory>/crabSafe/``: one untouched payload per feature
    """

    def __init__(
        self,
        config: AppConfig,
        store: SettingsStore,
        catalog: FeatureCatalog | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.catalog = catalog or FeatureCatalog()

    # -- Paths -------------------------------------------------------------

    def single_file_path(self, choices: ProjectChoices) -> Path:
        return Path(choices.chosen_directory) / self.config.single_file_name

    def split_dir_path(self, choices: ProjectChoices) -> Path:
        return Path(choices.chosen_directory) / self.config.split_dir_name

    def artifact_path(self, choices: ProjectChoices) -> Path:
        """The merged file or the split directory, depending on modularity."""
        if choices.modularity == Modularity.SINGLE_FILE:
            return self.single_file_path(choices)
        return self.split_dir_path(choices)

    def destination_paths(self, choices: ProjectChoices) -> list[Path]:
        """Every path the artifact for *choices* consists of.

        For split files the directory comes first, followed by one file per
        resolved feature.
        """
        if choices.modularity == Modularity.SINGLE_FILE:
            return [self.single_file_path(choices)]

        split_dir = self.split_dir_path(choices)
        return [split_dir] + [
            split_dir / self.catalog.filename(feature)
            for feature in choices.resolved_features()
        ]

    # -- Rendering ---------------------------------------------------------

    def single_file_features(self, choices: ProjectChoices) -> list[Feature]:
        """Resolved features, minus Deno-only modules for other runtimes."""
        features = choices.resolved_features()
        if choices.runtime == Runtime.DENO:
            return features
        return [f for f in features if not self.catalog.is_deno_only(f)]

    def render_single_file(self, choices: ProjectChoices) -> str:
        """Merge the payloads into one file body.

        Lines starting with ``import`` are pulled out of every payload. Remote
        imports are dropped unless the runtime is Deno, and relative imports
        are always dropped since the modules they point at are now inlined.
        Identical import lines are kept as they are, not collapsed.
        """
        import_lines: list[str] = []
        bodies: list[str] = []
        for feature in self.single_file_features(choices):
            kept: list[str] = []
            for line in self.catalog.payload(feature).split("\n"):
                if line.strip().startswith(IMPORT_KEYWORD):
                    import_lines.append(line)
                else:
                    kept.append(line)
            bodies.append("\n".join(kept))

        if choices.runtime != Runtime.DENO:
            import_lines = [line for line in import_lines if REMOTE_IMPORT_MARKER not in line]
        import_lines = [line for line in import_lines if LOCAL_IMPORT_MARKER not in line]

        header = "\n".join(import_lines)
        header = f"{header}\n\n" if header.strip() else ""
        return header + "".join(bodies).strip()

    # -- Materialization ---------------------------------------------------

    def materialize(self, choices: ProjectChoices, *, replace: bool = False) -> list[Path]:
        """Write the artifact for *choices*, then save *choices* as the settings record.

        Args:
            choices: What to write.
            replace: Accept an existing split directory. Callers pass this only
                after emptying the directory with ``recreate_split_directory``.

        Returns:
            The files written.

        Raises:
            DirectoryExistsError: Split mode, the directory exists and
                *replace* is false.
            FilesystemError: Any I/O failure.
        """
        if choices.modularity == Modularity.SINGLE_FILE:
            written = [self._write_single_file(choices)]
        else:
            written = self._write_split_files(choices, replace=replace)

        self.store.save(choices)
        return written

    def _write_single_file(self, choices: ProjectChoices) -> Path:
        target = self.single_file_path(choices)
        if not self.single_file_features(choices):
            logger.warning(
                "No feature of %s applies to a %s project; %s will be empty",
                ", ".join(f.value for f in choices.resolved_features()),
                choices.runtime.value,
                target,
            )
        _write_text(target, self.render_single_file(choices))
        logger.info("Wrote %s", target)
        return target

    def _write_split_files(self, choices: ProjectChoices, *, replace: bool) -> list[Path]:
        split_dir = self.split_dir_path(choices)
        if split_dir.exists():
            if not replace:
                raise DirectoryExistsError(split_dir)
        else:
            try:
                split_dir.mkdir()
            except OSError as exc:
                raise FilesystemError(split_dir, "create directory", str(exc)) from exc

        written: list[Path] = []
        for feature in choices.resolved_features():
            target = split_dir / self.catalog.filename(feature)
            _write_text(target, self.catalog.payload(feature))
            written.append(target)
        logger.info("Wrote %d file(s) to %s", len(written), split_dir)
        return written

    def recreate_split_directory(self, path: str | Path) -> None:
        """Remove *path* recursively and recreate it empty."""
        directory = Path(path)
        try:
            if directory.exists():
                shutil.rmtree(directory)
            directory.mkdir(parents=True)
        except OSError as exc:
            raise FilesystemError(directory, "recreate directory", str(exc)) from exc
        logger.debug("Recreated %s", directory)

    # -- Deletion ----------------------------------------------------------

    def delete_artifact(self, choices: ProjectChoices) -> bool:
        """Remove the artifact and this tool's settings record.

        An artifact that is already gone (deleted or renamed by hand) counts
        as success.

        Returns:
            ``True`` if something was removed from disk, ``False`` if the
            artifact was already absent.
        """
        target = self.artifact_path(choices)
        removed = True
        try:
            if choices.modularity == Modularity.SINGLE_FILE:
                target.unlink()
            else:
                shutil.rmtree(target)
        except FileNotFoundError:
            logger.warning("%s was already removed, clearing settings only", target)
            removed = False
        except OSError as exc:
            raise FilesystemError(target, "delete", str(exc)) from exc

        self.store.remove_key()
        return removed

    # -- Modification ------------------------------------------------------

    def add_features(self, choices: ProjectChoices, new_features: Iterable[Feature]) -> ProjectChoices:
        """Add features that are not yet part of *choices* and rewrite the artifact.

        Features already present are ignored. The result is always a custom
        feature list: the current features in order, then the additions in
        catalog order.

        Returns:
            The updated choices, or *choices* itself when nothing was added.
        """
        current = choices.resolved_features()
        requested = set(new_features)
        additions = [f for f in self.catalog.complement(current) if f in requested]
        if not additions:
            logger.info("No new features to add")
            return choices

        updated = choices.with_features(current + additions)
        self._rematerialize(updated)
        return updated

    def remove_features(
        self,
        choices: ProjectChoices,
        to_remove: Iterable[Feature],
        confirm_delete: Callable[[], bool],
    ) -> RemovalResult:
        """Remove features from *choices* and rewrite the artifact.

        Removing every feature would leave an empty artifact, so in that case
        nothing is written: *confirm_delete* decides between deleting the
        whole artifact and aborting.
        """
        dropped = set(to_remove)
        current = choices.resolved_features()
        remainder = [f for f in current if f not in dropped]

        if len(remainder) == len(current):
            logger.info("None of the selected features are present")
            return RemovalResult(RemovalOutcome.UNCHANGED, choices)

        if not remainder:
            if confirm_delete():
                self.delete_artifact(choices)
                return RemovalResult(RemovalOutcome.DELETED, None)
            logger.info("Removal aborted, artifact left as is")
            return RemovalResult(RemovalOutcome.ABORTED, choices)

        updated = choices.with_features(remainder)
        self._rematerialize(updated)
        return RemovalResult(RemovalOutcome.UPDATED, updated)

    def _rematerialize(self, choices: ProjectChoices) -> None:
        # Split directories are emptied first so no per-feature file is orphaned;
        # the single file is simply overwritten.
        if choices.modularity == Modularity.SPLIT_FILES:
            self.recreate_split_directory(self.split_dir_path(choices))
        self.materialize(choices, replace=True)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(path, "write", str(exc)) from exc
