"""Branch backend contract and its git command-line implementation."""

from __future__ import annotations

import asyncio
import logging as py_logging
import re
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from branchdeck.errors import BackendError
from branchdeck.git.models import BranchRef, RemoteBranchRef, StashRef

logger = py_logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

_BRANCH_FORMAT = "%(HEAD)%00%(refname:short)%00%(upstream:short)%00%(upstream:track)"
_STASH_INDEX = re.compile(r"stash@\{(?P<index>\d+)\}")
_STASH_FORMAT = "%gd%x00%H%x00%s"


class BranchBackend(Protocol):
    """Operations the branch list needs from the version-control tool.

    Every call is independent and raises ``BackendError`` with a readable
    message when the tool refuses or cannot run it.
    """

    async def list_local_branches(self) -> list[BranchRef]: ...

    async def checkout(self, name: str) -> None: ...

    async def validate_branch_name(self, name: str) -> bool: ...

    async def create_branch(self, name: str) -> None: ...

    async def delete_branch(self, name: str) -> None: ...

    async def list_stashes(self) -> list[StashRef]: ...


def parse_branch_lines(output: str) -> list[BranchRef]:
    branches: list[BranchRef] = []
    """Parse ``git branch --format`` output.

    Each line holds the HEAD marker, short name, upstream and tracking state
    separated by NUL bytes.
    """
    branches: list[BranchRef] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\x00")
        if len(fields) != 4:
            logger.error("Failed to capture git branch information for: %s", line.strip())
            branches.append(BranchRef(name=line.strip()))
            continue
        head, name, upstream_name, track = (field.strip() for field in fields)
        if name.startswith("("):
            logger.debug("Skipping detached HEAD entry: %s", name)
            continue
        upstream = None
        if upstream_name:
            upstream = RemoteBranchRef(name=upstream_name, gone=track == "[gone]")
        branches.append(BranchRef(name=name, is_head=head == "*", upstream=upstream))
    return branches


def parse_stash_lines(output: str) -> list[StashRef]:
    stashes: list[StashRef] = []
    for position, line in enumerate(output.splitlines()):
        if not line.strip():
            continue
        selector, _, rest = line.partition("\x00")
        stash_id, _, message = rest.partition("\x00")
        match = _STASH_INDEX.search(selector)
        index = int(match.group("index")) if match else position
        stashes.append(StashRef(index=index, message=message.strip(), stash_id=stash_id.strip()))
    return stashes


class GitCliBackend:
    def __init__(
        self,
        repo_path: str | Path = ".",
        *,
        runner: Runner = subprocess.run,
        force_delete: bool = True,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.force_delete = force_delete
        self._runner = runner

    def _command(self, args: list[str]) -> list[str]:
        return ["git", "-C", str(self.repo_path), *args]

    def _run_sync(self, args: list[str]) -> subprocess.CompletedProcess:
        rendered = " ".join(args)
        logger.info("Running `git %s` repo=%s", rendered, self.repo_path)
        try:
            return self._runner(self._command(args), capture_output=True, text=True, check=False)
        except OSError as exc:
            logger.error("Failed to run `git %s`, error: %s", rendered, exc)
            raise BackendError(
                f"Failed to run git: {exc}",
                hint="Ensure git is installed and available on PATH.",
            ) from exc

    async def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        return await asyncio.to_thread(self._run_sync, args)

    async def _run_checked(self, args: list[str]) -> str:
        result = await self._run(args)
        if result.returncode != 0:
            rendered = " ".join(args)
            message = (result.stderr or "").strip() or (result.stdout or "").strip()
            if not message:
                message = f"git {rendered} failed with exit code {result.returncode}"
            logger.error("Failed to run `git %s`, error: %s", rendered, message)
            raise BackendError(message)
        stdout = result.stdout or ""
        logger.debug("Received git cli reply:\n%s", stdout.strip())
        return stdout

    async def list_local_branches(self) -> list[BranchRef]:
        output = await self._run_checked(["branch", "--list", f"--format={_BRANCH_FORMAT}"])
        branches = parse_branch_lines(output)
        logger.debug("Discovered %s local branches repo=%s", len(branches), self.repo_path)
        return branches

    async def checkout(self, name: str) -> None:
        await self._run_checked(["checkout", name])

    async def validate_branch_name(self, name: str) -> bool:
        result = await self._run(["check-ref-format", "--branch", name])
        return result.returncode == 0

    async def create_branch(self, name: str) -> None:
        await self._run_checked(["branch", name])

    async def delete_branch(self, name: str) -> None:
        flag = "-D" if self.force_delete else "-d"
        await self._run_checked(["branch", flag, name])

    async def list_stashes(self) -> list[StashRef]:
        output = await self._run_checked(["stash", "list", f"--format={_STASH_FORMAT}"])
        return parse_stash_lines(output)
