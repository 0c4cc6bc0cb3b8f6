"""One row of the branch list and its staging rules."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text

from branchdeck.git.models import BranchRef

HEAD_MARKER = "*"
DRAFT_MARKER = "+"


@dataclass
class BranchItem:
    branch: BranchRef
    staged_for_deletion: bool = False
    staged_for_creation: bool = False
    is_valid_name: bool = False

    @classmethod
    def draft(cls, name: str = "", *, is_valid: bool = False) -> BranchItem:
        return cls(branch=BranchRef(name=name), staged_for_creation=True, is_valid_name=is_valid)

    @property
    def name(self) -> str:
        return self.branch.name

    @property
    def is_head(self) -> bool:
        return self.branch.is_head

    def stage_for_deletion(self, flag: bool) -> bool:
        """Set the deletion stage flag; the checked-out branch can never be staged.

        Returns whether the flag was applied.
        """
        if flag and self.is_head:
            return False
        self.staged_for_deletion = flag
        return True

    def toggle_for_deletion(self) -> bool:
        return self.stage_for_deletion(not self.staged_for_deletion)

    def set_head(self, is_head: bool) -> None:
        self.branch = self.branch.with_head(is_head)
        if is_head:
            self.staged_for_deletion = False

    def render(self, *, show_upstream: bool = True) -> Text:
        if self.staged_for_creation:
            style = "green" if self.is_valid_name else "red"
            return Text.assemble(
                (f"{DRAFT_MARKER} ", "bold"),
                (self.name or " ", f"underline {style}"),
            )

        line = Text()
        line.append(f"{HEAD_MARKER} " if self.is_head else "  ", style="bold green")
        line.append(self.name, style="red strike" if self.staged_for_deletion else "")
        upstream = self.branch.upstream
        if show_upstream and upstream is not None:
            label = f" [{upstream.name}: gone]" if upstream.gone else f" [{upstream.name}]"
            line.append(label, style="dim")
        return line
