"""copy-crab command line entry point.

On the first run (no ``crabSafe`` record in the settings file) asks for the
runtime, directory, features and modularity and writes the artifact. On
later runs offers to add features, remove features or delete the artifact.

Usage::

    python -m copy_crab
    python -m copy_crab --settings-file ../copy-paste.json --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from copy_crab.config import AppConfig
from copy_crab.errors import CopyCrabError
from copy_crab.prompts import Prompter
from copy_crab.scaffolder.generator import ArtifactGenerator
from copy_crab.session import ModifySession
from copy_crab.settings import SettingsStore
from copy_crab.utils import configure_logging, console, print_error, print_summary_table

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copy-crab",
        description="copy-crab -- copy the crabSafe TypeScript helpers into a project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m copy_crab\n"
            "  python -m copy_crab --settings-file ./copy-paste.json\n"
        ),
    )
    parser.add_argument(
        "--settings-file",
        default=None,
        help="Shared settings JSON file (default: ./copy-paste.json)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every file operation",
    )
    return parser


def run(config: AppConfig, prompter: Prompter) -> None:
    """Run one first-time or modify session against *config*."""
    store = SettingsStore.from_config(config)
    generator = ArtifactGenerator(config, store)

    found = store.load()
    if found is not None:
        ModifySession(found, generator, prompter).run()
        return

    if not store.exists():
        console.print(
            f"File {config.settings_file} doesn't exist. "
            "A file will be created after choosing your settings",
            markup=False,
        )
    else:
        console.print(
            f"{config.settings_key} not found in {config.settings_file}. "
            "A file will be created after choosing your settings.",
            markup=False,
        )

    choices = prompter.ask_first_time()
    generator.materialize(choices)
    print_summary_table(
        {
            "Runtime": choices.runtime.value,
            "Directory": choices.chosen_directory,
            "Features": ", ".join(f.value for f in choices.resolved_features()),
            "Modularity": choices.modularity.value,
        },
        title="crabSafe",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for ``python -m copy_crab``. Returns the exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    config = AppConfig.from_env()
    if args.settings_file:
        config = config.model_copy(update={"settings_file": Path(args.settings_file)})

    try:
        run(config, Prompter())
    except CopyCrabError as exc:
        logger.debug("Aborting", exc_info=exc)
        print_error(f"Error: {exc}")
        return EXIT_ERROR
    except KeyboardInterrupt:
        print_error("Interrupted.")
        return EXIT_INTERRUPTED

    console.print("Done!")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
