"""Branch and stash references reported by the git backend."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteBranchRef:
    name: str
    gone: bool = False


@dataclass(frozen=True)
class BranchRef:
    name: str
    is_head: bool = False
    upstream: RemoteBranchRef | None = None

    def with_head(self, is_head: bool) -> BranchRef:
        if is_head == self.is_head:
            return self
        return BranchRef(name=self.name, is_head=is_head, upstream=self.upstream)


@dataclass(frozen=True)
class StashRef:
    index: int
    message: str
    stash_id: str = ""

    @property
    def short_id(self) -> str:
        return self.stash_id[:7]
