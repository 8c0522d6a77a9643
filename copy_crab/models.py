"""Pydantic v2 models describing what the user chose.

Defines the closed enumerations (features, presets, runtimes, modularity),
the ``ChosenFeatures`` tagged union, the immutable ``ProjectChoices`` record
that gets persisted to the settings file, and the ``ProjectBuilder`` that
assembles it from individual answers.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_serializer,
    model_validator,
)

from copy_crab.errors import MissingFieldError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Feature(str, Enum):
    """A selectable crabSafe template module. Declaration order is catalog order."""
    CORE = "Core"
    EXAMPLE = "Example"
    OPTION = "Option"
    RESULT = "Result"
    PARSERS = "Parsers"


class FeatureSet(str, Enum):
    """Named preset bundles of features."""
    ALL = "All"
    CORE = "Core"
    CORE_PLUS = "CorePlus"

    def features(self) -> list[Feature]:
        """Expand the preset to its fixed, catalog-ordered feature list."""
        if self is FeatureSet.ALL:
            return list(Feature)
        if self is FeatureSet.CORE:
            return [Feature.CORE]
        return [Feature.CORE, Feature.OPTION, Feature.RESULT]


class Runtime(str, Enum):
    """Where the generated TypeScript will run."""
    DENO = "Deno"
    NODE_JS = "NodeJs"
    CLIENT_SIDE = "ClientSide"


class Modularity(str, Enum):
    """Whether the artifact is one merged file or one file per feature."""
    SINGLE_FILE = "SingleFile"
    SPLIT_FILES = "SplitFiles"


# ---------------------------------------------------------------------------
# Chosen features
# ---------------------------------------------------------------------------

class ChosenFeatures(BaseModel):
    """Either a named preset or an explicit list of features.

    Serialises to the externally tagged form used in ``copy-paste.json``::

        {"Preset": {"preset_name": "CorePlus"}}
        {"Custom": {"features": ["Core", "Option"]}}

    Custom lists keep their order but drop repeated entries, so a resolved
    feature list never names the same module twice. An empty custom list is
    rejected. Instances are only built from the tagged form; the
    ``from_preset`` and ``custom`` constructors go through it too.
    """

    model_config = ConfigDict(frozen=True)

    preset: Optional[FeatureSet] = Field(default=None, description="Preset name, if chosen from a preset")
    features: Optional[tuple[Feature, ...]] = Field(
        default=None, description="Explicit feature list, if chosen by hand"
    )

    @classmethod
    def from_preset(cls, preset: FeatureSet) -> "ChosenFeatures":
        return cls.model_validate({"Preset": {"preset_name": preset}})

    @classmethod
    def custom(cls, features: Iterable[Feature]) -> "ChosenFeatures":
        return cls.model_validate({"Custom": {"features": list(features)}})

    @model_validator(mode="before")
    @classmethod
    def _from_tagged(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if len(data) != 1 or next(iter(data)) not in ("Preset", "Custom"):
            raise ValueError("expected exactly one of 'Preset' or 'Custom'")
        if "Preset" in data:
            body = data["Preset"]
            if not isinstance(body, dict) or "preset_name" not in body:
                raise ValueError("'Preset' must be an object with a 'preset_name'")
            return {"preset": body["preset_name"]}
        body = data["Custom"]
        if not isinstance(body, dict) or not isinstance(body.get("features"), list):
            raise ValueError("'Custom' must be an object with a 'features' list")
        return {"features": body["features"]}

    @field_validator("features")
    @classmethod
    def _drop_duplicates(cls, value: Optional[tuple[Feature, ...]]) -> Optional[tuple[Feature, ...]]:
        if value is None:
            return None
        return tuple(dict.fromkeys(value))

    @model_validator(mode="after")
    def _exactly_one_variant(self) -> "ChosenFeatures":
        if (self.preset is None) == (self.features is None):
            raise ValueError("exactly one of 'Preset' or 'Custom' must be given")
        if self.features is not None and not self.features:
            raise ValueError("'Custom' must name at least one feature")
        return self

    @model_serializer(mode="plain")
    def _to_tagged(self) -> dict[str, Any]:
        if self.preset is not None:
            return {"Preset": {"preset_name": self.preset.value}}
        return {"Custom": {"features": [f.value for f in self.features or ()]}}

    @property
    def is_preset(self) -> bool:
        return self.preset is not None

    def resolve(self) -> list[Feature]:
        """Return the ordered feature list this choice stands for."""
        if self.preset is not None:
            return self.preset.features()
        return list(self.features or ())


# ---------------------------------------------------------------------------
# Project choices
# ---------------------------------------------------------------------------

class ProjectChoices(BaseModel):
    """Everything needed to (re)generate one crabSafe artifact.

    This is the unit persisted under the ``crabSafe`` key of the settings
    file. Instances are immutable; ``with_features`` returns a modified copy.
    """

    model_config = ConfigDict(frozen=True)

    runtime: Runtime = Field(..., description="Target runtime of the host project")
    chosen_directory: str = Field(..., description="Directory the artifact is written into")
    feature_set: ChosenFeatures = Field(..., description="Preset or custom feature selection")
    modularity: Modularity = Field(..., description="Single merged file or split files")

    def resolved_features(self) -> list[Feature]:
        return self.feature_set.resolve()

    def with_features(self, features: Iterable[Feature]) -> "ProjectChoices":
        """Return a copy whose feature set is ``Custom(features)``."""
        return self.model_copy(update={"feature_set": ChosenFeatures.custom(features)})


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class ProjectBuilder:
    """Staged accumulator for ``ProjectChoices``.

    Each setter returns the builder so answers can be chained::

        choices = (
            ProjectBuilder()
            .set_runtime(Runtime.DENO)
            .set_chosen_dir("/tmp/app")
            .set_feature_set(ChosenFeatures.from_preset(FeatureSet.ALL))
            .set_modularity(Modularity.SINGLE_FILE)
            .build()
        )
    """

    def __init__(self) -> None:
        self.runtime: Optional[Runtime] = None
        self.chosen_directory: Optional[str] = None
        self.feature_set: Optional[ChosenFeatures] = None
        self.modularity: Optional[Modularity] = None

    def set_runtime(self, runtime: Runtime) -> "ProjectBuilder":
        self.runtime = runtime
        return self

    def set_chosen_dir(self, chosen_directory: str) -> "ProjectBuilder":
        self.chosen_directory = chosen_directory
        return self

    def set_feature_set(self, feature_set: ChosenFeatures) -> "ProjectBuilder":
        self.feature_set = feature_set
        return self

    def set_modularity(self, modularity: Modularity) -> "ProjectBuilder":
        self.modularity = modularity
        return self

    def build(self) -> ProjectChoices:
        """Return the finished choices.

        Raises:
            MissingFieldError: naming the first unset field, checked in the
                order runtime, chosen_directory, feature_set, modularity.
        """
        if self.runtime is None:
            raise MissingFieldError("runtime")
        if self.chosen_directory is None:
            raise MissingFieldError("chosen_directory")
        if self.feature_set is None:
            raise MissingFieldError("feature_set")
        if self.modularity is None:
            raise MissingFieldError("modularity")

        return ProjectChoices(
            runtime=self.runtime,
            chosen_directory=self.chosen_directory,
            feature_set=self.feature_set,
            modularity=self.modularity,
        )
