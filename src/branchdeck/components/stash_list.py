"""Read-only stash panel."""

from __future__ import annotations

import logging as py_logging

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from branchdeck.action import Action, ActionKind
from branchdeck.errors import BackendError
from branchdeck.git.backend import BranchBackend
from branchdeck.git.models import StashRef
from branchdeck.keys import KeyEvent

logger = py_logging.getLogger(__name__)


class StashList:
    def __init__(self, backend: BranchBackend) -> None:
        self._backend = backend
        self.stashes: list[StashRef] = []
        self.error: str | None = None

    async def load(self) -> None:
        try:
            self.stashes = await self._backend.list_stashes()
        except BackendError as exc:
            logger.warning("Failed to list stashes: %s", exc.message)
            self.error = f"Failed to list stashes: {exc.message}"
            return
        self.error = None

    def handle_key_event(self, key: KeyEvent) -> Action | None:
        return None

    async def update(self, action: Action) -> Action | None:
        if action.kind == ActionKind.REFRESH:
            await self.load()
        return None

    def render(self) -> Panel:
        lines: list[Text] = []
        for stash in self.stashes:
            line = Text(str(stash.index))
            line.append(f" {stash.message}", style="dim")
            if stash.stash_id:
                line.append(f" ({stash.short_id})", style="dim")
            lines.append(line)
        if self.error:
            lines.append(Text(self.error, style="red"))
        if not lines:
            lines.append(Text("No stashes", style="dim"))
        return Panel(Group(*lines), title="Stashes", title_align="left")
