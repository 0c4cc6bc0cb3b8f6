"""Command hints for the current mode and selection."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

from branchdeck.action import Action
from branchdeck.components.branch_list import BranchListController, Mode
from branchdeck.keys import KeyEvent

SEPARATOR = " | "


@dataclass(frozen=True)
class Instruction:
    key: str
    description: str

    def __str__(self) -> str:
        return f"{self.key}: {self.description}"


class InstructionFooter:
    """Reads the controller, never mutates it."""

    def __init__(self, controller: BranchListController) -> None:
        self._controller = controller

    def instructions(self) -> list[Instruction]:
        controller = self._controller
        if controller.mode == Mode.INPUT:
            hints = []
            if controller.name_input.can_submit:
                hints.append(Instruction("⏎", "Create"))
            hints.append(Instruction("esc", "Cancel"))
            return hints

        hints = [
            Instruction("q", "Quit"),
            Instruction("↑/↓", "Move"),
            Instruction("c", "Checkout"),
            Instruction("⇧c", "New branch"),
        ]
        selected = controller.selected_item
        if selected is not None and not selected.is_head:
            if selected.staged_for_deletion:
                hints.append(Instruction("d", "Unstage"))
                hints.append(Instruction("⇧d", "Unstage"))
            else:
                hints.append(Instruction("d", "Stage for deletion"))
        if selected is not None:
            hints.append(Instruction("⌫", "Delete branch"))
        staged = controller.staged_count
        if staged:
            hints.append(Instruction("^d", f"Delete staged ({staged})"))
        hints.append(Instruction("r", "Refresh"))
        return hints

    def handle_key_event(self, key: KeyEvent) -> Action | None:
        return None

    async def update(self, action: Action) -> Action | None:
        return None

    def render(self) -> Text:
        return Text(SEPARATOR.join(str(hint) for hint in self.instructions()), style="dim")
