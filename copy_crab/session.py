"""Modify/delete flow for runs that find an existing crabSafe record.

``ModifySession`` owns the current ``ProjectChoices`` for the length of one
run and threads it through the add, remove and delete handlers. Each handler
that changes the choices rewrites (or deletes) the artifact before returning.
"""

from __future__ import annotations

import logging
from typing import Optional

from copy_crab.models import ProjectChoices
from copy_crab.prompts import ModifyAction, NextStep, Prompter
from copy_crab.scaffolder.generator import ArtifactGenerator, RemovalOutcome
from copy_crab.utils import print_info, print_success, print_warning

logger = logging.getLogger(__name__)

OVERWRITE_WARNING = (
    "Warning: Doing this will overwrite the crabSafe implementation. "
    "Are you sure you want to do this?"
)
DELETE_WARNING = (
    "WARN: Doing this will remove the entire crabSafe implementation. "
    "Make sure to remove all local code that depends on these methods! "
    "Are you sure you want to do this?"
)


class ModifySession:
    """Interactive session over one previously saved configuration.

    Attributes:
        choices: The current configuration, or ``None`` once deleted.
        generator: Writes and removes the artifact and settings record.
        prompter: Source of the user's answers.
    """

    def __init__(
        self,
        choices: ProjectChoices,
        generator: ArtifactGenerator,
        prompter: Prompter,
    ) -> None:
        self.choices: Optional[ProjectChoices] = choices
        self.generator = generator
        self.prompter = prompter

    def run(self) -> Optional[ProjectChoices]:
        """Ask what to do until an action completes. Returns the final choices."""
        print_info(f"Found previous configuration settings for {self.choices.runtime.value} project")
        while True:
            step = self.prompter.ask_next_step()
            if step == NextStep.DELETE:
                self.handle_delete()
                return self.choices

            action = self.prompter.ask_modify_action()
            logger.debug("Modify action chosen: %s", action.value)
            if action == ModifyAction.BACK:
                continue
            if action == ModifyAction.ADD:
                self.handle_add()
            else:
                self.handle_remove()
            return self.choices

    # -- Handlers ----------------------------------------------------------

    def handle_add(self) -> None:
        current = self.choices.resolved_features()
        available = self.generator.catalog.complement(current)
        if not available:
            print_warning("Every feature is already included.")
            return

        selected = self.prompter.ask_features("Select which features you want to add", available)
        if not selected:
            print_warning("Nothing selected.")
            return
        if not self.prompter.confirm(OVERWRITE_WARNING, default=False):
            return

        print_success("Changing data")
        self.choices = self.generator.add_features(self.choices, selected)

    def handle_remove(self) -> None:
        current = self.choices.resolved_features()
        selected = self.prompter.ask_features("Select packages to remove", current)
        if not selected:
            print_warning("Nothing selected.")
            return

        if len(selected) < len(current) and not self.prompter.confirm(OVERWRITE_WARNING, default=False):
            return

        result = self.generator.remove_features(self.choices, selected, self._confirm_delete_empty)
        if result.outcome == RemovalOutcome.UPDATED:
            print_success("Changing data")
        elif result.outcome == RemovalOutcome.DELETED:
            print_success("crabSafe removed")
        self.choices = result.choices

    def handle_delete(self) -> None:
        if not self.prompter.confirm(DELETE_WARNING, default=False):
            return
        self.generator.delete_artifact(self.choices)
        self.choices = None
        print_success("crabSafe removed")

    def _confirm_delete_empty(self) -> bool:
        return self.prompter.confirm(
            "No features exist on this package. Do you want to delete the whole package instead?",
            default=True,
        )
