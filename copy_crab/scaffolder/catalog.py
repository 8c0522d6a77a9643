"""Static registry of crabSafe features.

Maps each ``Feature`` to the filename it is written under and to its
template payload. The set of features is closed; nothing is registered at
runtime.
"""

from __future__ import annotations

from typing import Iterable

from copy_crab.models import Feature
from copy_crab.scaffolder.templates import TemplateLoader

FEATURE_FILENAMES: dict[Feature, str] = {
    Feature.CORE: "core.ts",
    Feature.EXAMPLE: "example.ts",
    Feature.OPTION: "option.ts",
    Feature.RESULT: "result.ts",
    Feature.PARSERS: "parsers.ts",
}

# Only valid under Deno: imports deno_dom from a remote URL.
DENO_ONLY_FILENAME = FEATURE_FILENAMES[Feature.PARSERS]


class FeatureCatalog:
    """Lookup of filename and payload per feature."""

    def __init__(self, loader: TemplateLoader | None = None) -> None:
        self.loader = loader or TemplateLoader()

    def filename(self, feature: Feature) -> str:
        return FEATURE_FILENAMES[feature]

    def payload(self, feature: Feature) -> str:
        return self.loader.source(FEATURE_FILENAMES[feature])

    def all(self) -> list[Feature]:
        """Every feature in catalog order."""
        return list(Feature)

    def complement(self, included: Iterable[Feature]) -> list[Feature]:
        """Every feature not in *included*, in catalog order."""
        excluded = set(included)
        return [feature for feature in Feature if feature not in excluded]

    def is_deno_only(self, feature: Feature) -> bool:
        return self.filename(feature) == DENO_ONLY_FILENAME
