"""Capability interface shared by the widgets the application composes."""

from __future__ import annotations

from typing import Protocol

from rich.console import RenderableType

from branchdeck.action import Action
from branchdeck.keys import KeyEvent


class Component(Protocol):
    def handle_key_event(self, key: KeyEvent) -> Action | None:
        """Map a key to an action, or None when the component ignores it."""
        ...

    async def update(self, action: Action) -> Action | None:
        """Apply an action; may return a follow-up action for the shell."""
        ...

    def render(self) -> RenderableType: ...
