"""Textual shell around the branch list controller."""

from __future__ import annotations

import logging as py_logging

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.widgets import Static

from branchdeck.action import ActionKind
from branchdeck.components.base import Component
from branchdeck.components.branch_list import BranchListController
from branchdeck.components.footer import InstructionFooter
from branchdeck.components.stash_list import StashList
from branchdeck.keys import key_event_from_textual

logger = py_logging.getLogger(__name__)


class BranchDeckApp(App[int]):
    TITLE = "branchdeck"

    CSS = """
    Screen {
        layout: vertical;
    }

    #branches {
        height: 1fr;
    }

    #stashes {
        height: auto;
        max-height: 12;
    }

    #error {
        height: auto;
        color: $error;
        padding: 0 1;
    }

    #footer {
        dock: bottom;
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        controller: BranchListController,
        *,
        stash_list: StashList | None = None,
    ) -> None:
        super().__init__()
        self.controller = controller
        self.stash_list = stash_list
        self.instruction_footer = InstructionFooter(controller)
        self._followers: list[Component] = [self.instruction_footer]
        if stash_list is not None:
            self._followers.append(stash_list)

    def compose(self) -> ComposeResult:
        yield Static(id="branches")
        if self.stash_list is not None:
            yield Static(id="stashes")
        yield Static(id="error")
        yield Static(id="footer")

    async def on_mount(self) -> None:
        if self.stash_list is not None:
            await self.stash_list.load()
        self.refresh_view()

    def refresh_view(self) -> None:
        self.query_one("#branches", Static).update(self.controller.render())
        if self.stash_list is not None:
            self.query_one("#stashes", Static).update(self.stash_list.render())
        error = self.controller.error
        self.query_one("#error", Static).update(Text(error) if error else "")
        self.query_one("#footer", Static).update(self.instruction_footer.render())

    async def on_key(self, event: events.Key) -> None:
        key = key_event_from_textual(event.key, event.character)
        if self.controller.handle_key_event(key) is None:
            return
        event.stop()
        event.prevent_default()

        follow_up = await self.controller.dispatch(key)
        if follow_up is not None:
            if follow_up.kind == ActionKind.QUIT:
                logger.info("Quit requested")
                self.exit(0)
                return
            for component in self._followers:
                await component.update(follow_up)
        self.refresh_view()
