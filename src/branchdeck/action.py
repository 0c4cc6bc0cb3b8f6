"""Actions produced by key handling and consumed by component updates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActionKind(str, Enum):
    SELECT_NEXT = "select-next"
    SELECT_PREVIOUS = "select-previous"
    CHECKOUT = "checkout"
    START_CREATE = "start-create"
    TOGGLE_STAGE = "toggle-stage"
    UNSTAGE = "unstage"
    DELETE_SELECTED = "delete-selected"
    DELETE_STAGED = "delete-staged"
    REFRESH = "refresh"
    INPUT_CHAR = "input-char"
    INPUT_BACKSPACE = "input-backspace"
    SUBMIT = "submit"
    CANCEL = "cancel"
    QUIT = "quit"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    text: str = ""

    def __str__(self) -> str:
        if self.text:
            return f"{self.kind.value}({self.text!r})"
        return self.kind.value
