"""Free-text entry of a new branch name with incremental validation."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from rich.text import Text

from branchdeck import keys
from branchdeck.action import Action, ActionKind
from branchdeck.errors import BackendError
from branchdeck.keys import KeyEvent

logger = py_logging.getLogger(__name__)

GrammarValidator = Callable[[str], Awaitable[bool]]


@dataclass
class InputState:
    draft_value: str | None = None
    is_valid: bool | None = None


class NameInput:
    def __init__(
        self,
        validate_grammar: GrammarValidator,
        existing_names: Callable[[], Iterable[str]],
    ) -> None:
        self._validate_grammar = validate_grammar
        self._existing_names = existing_names
        self.state = InputState()

    @property
    def draft(self) -> str:
        return self.state.draft_value or ""

    @property
    def can_submit(self) -> bool:
        return self.state.is_valid is True

    def start(self) -> None:
        self.state = InputState(draft_value="", is_valid=None)

    def clear(self) -> None:
        self.state = InputState()

    def handle_key_event(self, key: KeyEvent) -> Action | None:
        if key.code == keys.ENTER:
            return Action(ActionKind.SUBMIT)
        if key.code == keys.ESCAPE:
            return Action(ActionKind.CANCEL)
        if key.code in (keys.BACKSPACE, keys.DELETE):
            return Action(ActionKind.INPUT_BACKSPACE)
        text = key.text
        if text is not None:
            return Action(ActionKind.INPUT_CHAR, text)
        return None

    async def update(self, action: Action) -> Action | None:
        if action.kind == ActionKind.INPUT_CHAR:
            self.state.draft_value = self.draft + action.text
        elif action.kind == ActionKind.INPUT_BACKSPACE:
            self.state.draft_value = self.draft[:-1]
        else:
            return None
        await self.revalidate()
        return None

    async def revalidate(self) -> bool:
        """Recompute validity: non-empty, not an existing name, accepted by git."""
        draft = self.draft
        if not draft:
            valid = False
        elif draft in set(self._existing_names()):
            valid = False
        else:
            try:
                valid = await self._validate_grammar(draft)
            except BackendError as exc:
                logger.warning("Branch name validation failed name=%s error=%s", draft, exc.message)
                valid = False
        self.state.is_valid = valid
        return valid

    def render(self) -> Text:
        line = Text("New branch: ", style="bold")
        style = "green" if self.can_submit else "red"
        line.append(self.draft, style=style)
        line.append("▏", style="blink")
        return line
