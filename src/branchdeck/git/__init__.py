"""Git access for the branch list."""

from .backend import BranchBackend, GitCliBackend, parse_branch_lines, parse_stash_lines
from .models import BranchRef, RemoteBranchRef, StashRef

__all__ = [
    "BranchBackend",
    "BranchRef",
    "GitCliBackend",
    "parse_branch_lines",
    "parse_stash_lines",
    "RemoteBranchRef",
    "StashRef",
]
