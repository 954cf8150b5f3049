"""Domain layer definitions."""

from .documents import (
    ActionItem,
    ActionKind,
    ActionTag,
    DocumentContent,
    DocumentSlot,
    DocumentState,
    WizardState,
)

__all__ = [
    "ActionItem",
    "ActionKind",
    "ActionTag",
    "DocumentContent",
    "DocumentSlot",
    "DocumentState",
    "WizardState",
]
