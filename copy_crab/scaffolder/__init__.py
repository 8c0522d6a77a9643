"""copy-crab scaffolder -- writes the crabSafe TypeScript modules into a project.

Quick usage::

    from copy_crab.config import AppConfig
    from copy_crab.settings import SettingsStore
    from copy_crab.scaffolder import ArtifactGenerator

    config = AppConfig()
    generator = ArtifactGenerator(config, SettingsStore.from_config(config))
    generator.materialize(choices)
"""

from copy_crab.scaffolder.catalog import FeatureCatalog
from copy_crab.scaffolder.generator import ArtifactGenerator, RemovalOutcome, RemovalResult
from copy_crab.scaffolder.templates import TemplateLoader

__all__ = [
    "ArtifactGenerator",
    "FeatureCatalog",
    "RemovalOutcome",
    "RemovalResult",
    "TemplateLoader",
]
