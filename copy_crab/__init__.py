"""copy-crab -- interactive scaffolder for the crabSafe TypeScript helpers."""

__version__ = "0.1.0"
