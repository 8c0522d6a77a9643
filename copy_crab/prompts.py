"""Rich console prompts for copy-crab.

Asks the interactive questions and maps the chosen labels to strongly typed
values, so nothing past this module ever sees a UI label. Selections are
numbered lists answered by number or (case-insensitive) label. Cancelling
with ``q``, Ctrl+C or end-of-input raises ``PromptCancelledError``.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Generic, Optional, Sequence, TypeVar

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from copy_crab.errors import PromptCancelledError
from copy_crab.models import (
    ChosenFeatures,
    Feature,
    FeatureSet,
    Modularity,
    ProjectBuilder,
    ProjectChoices,
    Runtime,
)
from copy_crab.utils import console as default_console

T = TypeVar("T")

CANCEL_WORDS = ("q", "quit", "cancel")


class Option(Generic[T]):
    """A labelled value offered in a selection."""

    def __init__(self, label: str, value: T) -> None:
        self.label = label
        self.value = value


class NextStep(str, Enum):
    MODIFY = "modify"
    DELETE = "delete"


class ModifyAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    BACK = "back"


RUNTIME_OPTIONS: list[Option[Runtime]] = [
    Option("Deno", Runtime.DENO),
    Option("NodeJS", Runtime.NODE_JS),
    Option("client-side (React, Svelte, Vue, etc)", Runtime.CLIENT_SIDE),
]

PRESET_OPTIONS: list[Option[FeatureSet]] = [
    Option("All", FeatureSet.ALL),
    Option("Core", FeatureSet.CORE),
    Option("Core + Option and Result", FeatureSet.CORE_PLUS),
]

MODULARITY_OPTIONS: list[Option[Modularity]] = [
    Option("Same file", Modularity.SINGLE_FILE),
    Option("Separate files", Modularity.SPLIT_FILES),
]


def feature_options(features: Sequence[Feature]) -> list[Option[Feature]]:
    return [Option(feature.value, feature) for feature in features]


class Prompter:
    """Interactive question-asker bound to a Rich console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or default_console

    # -- Primitives --------------------------------------------------------

    def _input(self, prompt: str, question: str) -> str:
        try:
            return self.console.input(Text(prompt, style="cyan"))
        except (KeyboardInterrupt, EOFError) as exc:
            self.console.print()
            raise PromptCancelledError(question) from exc

    def _show_options(self, question: str, options: Sequence[Option[T]]) -> None:
        self.console.print()
        self.console.print(Text(question, style="bold bright_cyan"))
        table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        table.add_column("Num", style="cyan", width=4)
        table.add_column("Name", style="white")
        for i, opt in enumerate(options, 1):
            table.add_row(f"{i}.", escape(opt.label))
        self.console.print(table)

    def _match(self, answer: str, options: Sequence[Option[T]]) -> Optional[Option[T]]:
        try:
            idx = int(answer) - 1
        except ValueError:
            idx = -1
        if 0 <= idx < len(options):
            return options[idx]

        lowered = answer.lower()
        for opt in options:
            if opt.label.lower() == lowered:
                return opt
        return None

    def select(self, question: str, options: Sequence[Option[T]]) -> T:
        """Ask for exactly one of *options* and return its value."""
        self._show_options(question, options)
        while True:
            answer = self._input("Enter number or name: ", question).strip()
            if not answer or answer.lower() in CANCEL_WORDS:
                raise PromptCancelledError(question)

            match = self._match(answer, options)
            if match is not None:
                return match.value
            self.console.print(
                Text(f"Invalid choice. Enter 1-{len(options)} or option name.", style="bold red")
            )

    def multi_select(
        self,
        question: str,
        options: Sequence[Option[T]],
        min_selected: int = 0,
    ) -> list[T]:
        """Ask for any number of *options*, comma separated.

        An empty answer selects nothing. Values come back in option order.
        """
        self._show_options(question, options)
        while True:
            answer = self._input("Enter numbers or names, comma separated: ", question).strip()
            if answer.lower() in CANCEL_WORDS:
                raise PromptCancelledError(question)

            parts = [part.strip() for part in answer.split(",") if part.strip()]
            matches = [self._match(part, options) for part in parts]
            if any(m is None for m in matches):
                self.console.print(Text("Invalid choice in selection.", style="bold red"))
                continue

            chosen = {id(m) for m in matches}
            selected = [opt.value for opt in options if id(opt) in chosen]
            if len(selected) < min_selected:
                self.console.print(
                    Text(f"Select at least {min_selected} option(s).", style="bold red")
                )
                continue
            return selected

    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question. An empty answer returns *default*."""
        suffix = " [Y/n] " if default else " [y/N] "
        answer = self._input(message + suffix, message).strip().lower()
        if not answer:
            return default
        return answer in ("y", "yes")

    def text(self, message: str) -> str:
        answer = self._input(f"{message} ", message).strip()
        if not answer:
            raise PromptCancelledError(message)
        return answer

    # -- First run ---------------------------------------------------------

    def ask_runtime(self) -> Runtime:
        return self.select("What project are you bringing crabSafe into?", RUNTIME_OPTIONS)

    def ask_chosen_dir(self) -> str:
        """Ask for a directory path until an existing directory is entered."""
        path = self.text("Enter path to directory:")
        while not Path(path).is_dir():
            self.console.print(Text(f"Invalid directory: {path}", style="bold red"))
            path = self.text("Enter path to directory:")
        return path

    def ask_feature_set(self) -> ChosenFeatures:
        from_preset = self.select(
            "How would you like to choose features?",
            [Option("From Preset", True), Option("Custom", False)],
        )
        if from_preset:
            preset = self.select("Which crab-safe features do you want?", PRESET_OPTIONS)
            return ChosenFeatures.from_preset(preset)

        features = self.multi_select(
            "Select which features you want",
            feature_options(list(Feature)),
            min_selected=1,
        )
        return ChosenFeatures.custom(features)

    def ask_modularity(self) -> Modularity:
        return self.select(
            "Do you want the crabSafe implementations to be in separate files or in the same file?",
            MODULARITY_OPTIONS,
        )

    def ask_first_time(self) -> ProjectChoices:
        return (
            ProjectBuilder()
            .set_runtime(self.ask_runtime())
            .set_chosen_dir(self.ask_chosen_dir())
            .set_feature_set(self.ask_feature_set())
            .set_modularity(self.ask_modularity())
            .build()
        )

    # -- Later runs --------------------------------------------------------

    def ask_next_step(self) -> NextStep:
        return self.select(
            "What would you like to do?",
            [Option("Modify package", NextStep.MODIFY), Option("Delete crabSafe", NextStep.DELETE)],
        )

    def ask_modify_action(self) -> ModifyAction:
        return self.select(
            "Choose aspect to modify",
            [
                Option("Add package", ModifyAction.ADD),
                Option("Remove package", ModifyAction.REMOVE),
                Option("Go back", ModifyAction.BACK),
            ],
        )

    def ask_features(self, question: str, features: Sequence[Feature]) -> list[Feature]:
        return self.multi_select(question, feature_options(features))
