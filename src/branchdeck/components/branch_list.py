"""Branch list controller: selection, staging, input mode and git mutations.

The controller owns the item list, the cursor, the mode and the error slot.
Each ``update`` runs to completion, awaiting its backend calls one after the
other, before the shell delivers the next key; nothing else mutates the list.
"""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from branchdeck import keys
from branchdeck.action import Action, ActionKind
from branchdeck.components.branch_item import BranchItem
from branchdeck.components.name_input import NameInput
from branchdeck.errors import BackendError
from branchdeck.git.backend import BranchBackend
from branchdeck.git.models import BranchRef
from branchdeck.keys import KeyEvent

logger = py_logging.getLogger(__name__)

SELECTED_SYMBOL = "→ "
UNSELECTED_SYMBOL = "  "


class Mode(str, Enum):
    SELECTION = "selection"
    INPUT = "input"


@dataclass
class BranchListState:
    items: list[BranchItem] = field(default_factory=list)
    selected_index: int | None = None
    mode: Mode = Mode.SELECTION
    error: str | None = None


class BranchListController:
    def __init__(self, backend: BranchBackend, *, show_upstream: bool = True) -> None:
        self._backend = backend
        self.show_upstream = show_upstream
        self.state = BranchListState()
        self.name_input = NameInput(backend.validate_branch_name, self._names)

    # Read-only views for rendering.

    @property
    def items(self) -> list[BranchItem]:
        return self.state.items

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def error(self) -> str | None:
        return self.state.error

    @property
    def selected_index(self) -> int | None:
        return self.state.selected_index

    @property
    def selected_item(self) -> BranchItem | None:
        index = self._clamped_selection()
        if index is None:
            return None
        return self.state.items[index]

    @property
    def staged_count(self) -> int:
        return sum(1 for item in self.state.items if item.staged_for_deletion)

    @property
    def draft_item(self) -> BranchItem | None:
        if self.state.mode != Mode.INPUT:
            return None
        return BranchItem.draft(self.name_input.draft, is_valid=self.name_input.can_submit)

    def _names(self) -> list[str]:
        return [item.name for item in self.state.items]

    # Loading.

    async def load(self, *, keep_selection: bool = False) -> None:
        """Replace the items with the backend's local branches.

        With ``keep_selection`` the cursor and the stage flags follow their
        branch names into the new list. Raises ``BackendError`` when the
        branches cannot be listed.
        """
        previous = self.selected_item.name if keep_selection and self.selected_item else None
        staged = {item.name for item in self.state.items if item.staged_for_deletion}
        branches = await self._backend.list_local_branches()
        self.state.items = [BranchItem(branch=branch) for branch in branches]
        if keep_selection:
            for item in self.state.items:
                if item.name in staged:
                    item.stage_for_deletion(True)
        self.state.selected_index = 0 if self.state.items else None
        if previous is not None:
            for index, item in enumerate(self.state.items):
                if item.name == previous:
                    self.state.selected_index = index
                    break
        logger.debug("Loaded %s branches", len(self.state.items))

    async def refresh(self) -> bool:
        try:
            await self.load(keep_selection=True)
        except BackendError as exc:
            self._fail(f"Failed to list branches: {exc.message}")
            return False
        return True

    # Key handling and dispatch.

    def handle_key_event(self, key: KeyEvent) -> Action | None:
        if self.state.mode == Mode.INPUT:
            return self.name_input.handle_key_event(key)

        if key.code == keys.DOWN:
            return Action(ActionKind.SELECT_NEXT)
        if key.code == keys.UP:
            return Action(ActionKind.SELECT_PREVIOUS)
        if key.code in (keys.DELETE, keys.BACKSPACE):
            return Action(ActionKind.DELETE_SELECTED)
        if key.is_char("c"):
            return Action(ActionKind.CHECKOUT)
        if key.is_char("c", shift=True):
            return Action(ActionKind.START_CREATE)
        if key.is_char("d"):
            return Action(ActionKind.TOGGLE_STAGE)
        if key.is_char("d", shift=True):
            return Action(ActionKind.UNSTAGE)
        if key.is_char("d", ctrl=True):
            return Action(ActionKind.DELETE_STAGED)
        if key.is_char("r"):
            return Action(ActionKind.REFRESH)
        if key.is_char("q"):
            return Action(ActionKind.QUIT)
        return None

    async def dispatch(self, key: KeyEvent) -> Action | None:
        action = self.handle_key_event(key)
        if action is None:
            return None
        self.state.error = None
        return await self.update(action)

    async def update(self, action: Action) -> Action | None:
        logger.debug("Applying action=%s mode=%s", action, self.state.mode.value)
        kind = action.kind

        if self.state.mode == Mode.INPUT:
            if kind == ActionKind.SUBMIT:
                await self.submit_draft()
            elif kind == ActionKind.CANCEL:
                self.cancel_create()
            else:
                await self.name_input.update(action)
            return None

        if kind == ActionKind.SELECT_NEXT:
            self.select_next()
        elif kind == ActionKind.SELECT_PREVIOUS:
            self.select_previous()
        elif kind == ActionKind.CHECKOUT:
            await self.checkout_selected()
        elif kind == ActionKind.START_CREATE:
            self.start_create()
        elif kind == ActionKind.TOGGLE_STAGE:
            self.toggle_stage()
        elif kind == ActionKind.UNSTAGE:
            self.stage_for_deletion(False)
        elif kind == ActionKind.DELETE_SELECTED:
            await self.delete_selected()
        elif kind == ActionKind.DELETE_STAGED:
            await self.delete_staged()
        elif kind == ActionKind.REFRESH:
            await self.refresh()
            return action
        elif kind == ActionKind.QUIT:
            return action
        return None

    # Cursor.

    def _clamped_selection(self) -> int | None:
        count = len(self.state.items)
        if count == 0:
            return None
        index = self.state.selected_index
        if index is None or index < 0:
            return 0
        return min(index, count - 1)

    def _clamp_selection(self) -> None:
        self.state.selected_index = self._clamped_selection()

    def select_next(self) -> None:
        index = self._clamped_selection()
        if index is None:
            return
        self.state.selected_index = (index + 1) % len(self.state.items)

    def select_previous(self) -> None:
        index = self._clamped_selection()
        if index is None:
            return
        self.state.selected_index = (index - 1) % len(self.state.items)

    # Staging.

    def stage_for_deletion(self, flag: bool) -> None:
        item = self.selected_item
        if item is None:
            return
        if not item.stage_for_deletion(flag):
            logger.debug("Refusing to stage the checked-out branch name=%s", item.name)

    def toggle_stage(self) -> None:
        item = self.selected_item
        if item is None:
            return
        self.stage_for_deletion(not item.staged_for_deletion)

    # Mutations.

    def _fail(self, message: str) -> None:
        logger.warning("Surfacing error: %s", message)
        self.state.error = message

    def _mark_head(self, name: str) -> None:
        for item in self.state.items:
            item.set_head(item.name == name)

    async def checkout_selected(self) -> bool:
        item = self.selected_item
        if item is None:
            return False
        try:
            await self._backend.checkout(item.name)
        except BackendError as exc:
            self._fail(f"Failed to checkout {item.name}: {exc.message}")
            return False
        self._mark_head(item.name)
        return True

    async def delete_selected(self) -> bool:
        index = self._clamped_selection()
        if index is None:
            return False
        item = self.state.items[index]
        try:
            await self._backend.delete_branch(item.name)
        except BackendError as exc:
            self._fail(f"Failed to delete {item.name}: {exc.message}")
            return False
        del self.state.items[index]
        self.state.selected_index = index
        self._clamp_selection()
        return True

    async def delete_staged(self) -> int:
        """Delete every staged branch, one backend call at a time.

        Failed items stay in place and keep their stage flag. Returns the
        number of branches removed.
        """
        staged = [
            (index, item) for index, item in enumerate(self.state.items) if item.staged_for_deletion
        ]
        if not staged:
            return 0

        deleted: list[int] = []
        failures: list[str] = []
        for index, item in staged:
            try:
                await self._backend.delete_branch(item.name)
            except BackendError as exc:
                failures.append(f"{item.name}: {exc.message}")
                continue
            deleted.append(index)

        # Highest index first so pending indices stay valid.
        for index in sorted(deleted, reverse=True):
            del self.state.items[index]
        self._clamp_selection()

        if failures:
            summary = "; ".join(failures)
            self._fail(f"Failed to delete {len(failures)} of {len(staged)} staged branches: {summary}")
        logger.info("Deleted %s of %s staged branches", len(deleted), len(staged))
        return len(deleted)

    def start_create(self) -> None:
        self.name_input.start()
        self.state.mode = Mode.INPUT

    def cancel_create(self) -> None:
        self.name_input.clear()
        self.state.mode = Mode.SELECTION

    async def submit_draft(self) -> bool:
        if not self.name_input.can_submit:
            return False
        name = self.name_input.draft
        if not await self._is_creatable(name):
            self.name_input.state.is_valid = False
            return False
        self.cancel_create()
        return await self._create_validated(name)

    async def _is_creatable(self, name: str) -> bool:
        if not name or name in self._names():
            return False
        try:
            return await self._backend.validate_branch_name(name)
        except BackendError as exc:
            logger.warning("Branch name validation failed name=%s error=%s", name, exc.message)
            return False

    async def create_branch(self, name: str) -> bool:
        """Create ``name`` from HEAD, insert it sorted, then check it out.

        Invalid or duplicate names return False without calling the backend
        to create anything.
        """
        if not await self._is_creatable(name):
            return False
        return await self._create_validated(name)

    async def _create_validated(self, name: str) -> bool:
        try:
            await self._backend.create_branch(name)
        except BackendError as exc:
            self._fail(f"Failed to create {name}: {exc.message}")
            return False

        created = BranchItem(branch=BranchRef(name=name))
        self.state.items.append(created)
        self.state.items.sort(key=attrgetter("name"))
        self.state.selected_index = next(
            index for index, item in enumerate(self.state.items) if item is created
        )

        try:
            await self._backend.checkout(name)
        except BackendError as exc:
            self._fail(f"Created {name} but checkout failed: {exc.message}")
            return True
        self._mark_head(name)
        return True

    # Rendering.

    def render(self) -> Panel:
        selected = self._clamped_selection()
        lines: list[Text] = []
        for index, item in enumerate(self.state.items):
            row = item.render(show_upstream=self.show_upstream)
            if index == selected and self.state.mode == Mode.SELECTION:
                row = Text(SELECTED_SYMBOL) + row
                row.stylize("bold italic")
            else:
                row = Text(UNSELECTED_SYMBOL) + row
            lines.append(row)

        draft = self.draft_item
        if draft is not None:
            lines.append(Text(SELECTED_SYMBOL) + draft.render())
        if not lines:
            lines.append(Text("No local branches", style="dim"))
        subtitle = self.name_input.render() if self.state.mode == Mode.INPUT else None
        return Panel(
            Group(*lines),
            title="Local Branches",
            title_align="left",
            subtitle=subtitle,
            subtitle_align="left",
        )
