"""Renderable, key-handling pieces of the branch screen."""

from .base import Component
from .branch_item import BranchItem
from .branch_list import BranchListController, BranchListState, Mode
from .footer import Instruction, InstructionFooter
from .name_input import InputState, NameInput
from .stash_list import StashList

__all__ = [
    "BranchItem",
    "BranchListController",
    "BranchListState",
    "Component",
    "Instruction",
    "InstructionFooter",
    "InputState",
    "Mode",
    "NameInput",
    "StashList",
]
