from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from branchdeck.components.branch_list import BranchListController
from branchdeck.errors import BackendError
from branchdeck.git.models import BranchRef, StashRef


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)


class FakeBackend:
    """In-memory stand-in for git that records every call."""

    def __init__(self, names: list[str], *, head: str | None = None) -> None:
        self.branches = [BranchRef(name=name, is_head=name == head) for name in names]
        self.stashes: list[StashRef] = []
        self.failures: dict[tuple[str, str], str] = {}
        self.invalid_names: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def fail(self, operation: str, name: str = "", message: str = "boom") -> None:
        self.failures[(operation, name)] = message

    def _record(self, operation: str, name: str = "") -> None:
        self.calls.append((operation, name))
        message = self.failures.get((operation, name))
        if message is not None:
            raise BackendError(message)

    def calls_for(self, operation: str) -> list[str]:
        return [name for op, name in self.calls if op == operation]

    async def list_local_branches(self) -> list[BranchRef]:
        self._record("list")
        return list(self.branches)

    async def checkout(self, name: str) -> None:
        self._record("checkout", name)
        self.branches = [branch.with_head(branch.name == name) for branch in self.branches]

    async def validate_branch_name(self, name: str) -> bool:
        self._record("validate", name)
        return bool(name) and name not in self.invalid_names and " " not in name and ".." not in name

    async def create_branch(self, name: str) -> None:
        self._record("create", name)
        self.branches.append(BranchRef(name=name))

    async def delete_branch(self, name: str) -> None:
        self._record("delete", name)
        self.branches = [branch for branch in self.branches if branch.name != name]

    async def list_stashes(self) -> list[StashRef]:
        self._record("stashes")
        return list(self.stashes)


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    return FakeBackend


@pytest.fixture
def make_controller() -> Callable[..., tuple[BranchListController, FakeBackend]]:
    def _make(
        names: list[str],
        *,
        head: str | None = None,
        selected: int | None = None,
    ) -> tuple[BranchListController, FakeBackend]:
        backend = FakeBackend(names, head=head)
        controller = BranchListController(backend)
        asyncio.run(controller.load())
        if selected is not None:
            controller.state.selected_index = selected
        backend.calls.clear()
        return controller, backend

    return _make
