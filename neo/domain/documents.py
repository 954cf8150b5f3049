"""Domain entities for the planning documents and their action items."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class DocumentSlot(str, Enum):
    """The four fixed planning documents."""

    CANVAS = "Canvas"
    STRATEGY = "Strategy"
    FINANCIAL_PROJECTION = "Financial Projection"
    OKRS = "OKRs"

    @property
    def storage_key(self) -> str:
        """Key used for the slot inside persisted project records."""

        return _STORAGE_KEYS[self]

    @classmethod
    def from_storage_key(cls, key: str) -> "DocumentSlot | None":
        for slot, storage_key in _STORAGE_KEYS.items():
            if storage_key == key:
                return slot
        return None


_STORAGE_KEYS: dict[DocumentSlot, str] = {
    DocumentSlot.CANVAS: "canvas",
    DocumentSlot.STRATEGY: "strategy",
    DocumentSlot.FINANCIAL_PROJECTION: "financial",
    DocumentSlot.OKRS: "okrs",
}


class ActionKind(str, Enum):
    SUGGESTION = "suggestion"
    INCONSISTENCY = "inconsistency"


class ActionTag(str, Enum):
    """Closed set of actions the catalog may advertise."""

    STRATEGY_PRIORITIES = 'Add a "Key Strategic Priorities" section with customer acquisition channels'
    STRATEGY_COMPETITIVE_ANALYSIS = "Add competitive analysis section"
    OKR_CUSTOMER_SATISFACTION = "Add customer satisfaction KR"
    OKR_PRODUCT_DEVELOPMENT = "Add product development OKR"
    FINANCIAL_SENSITIVITY = "Add sensitivity analysis section"
    FINANCIAL_MRR_TARGET = "Adjust MRR target"
    CANVAS_ACQUISITION = "Add acquisition strategies to Canvas"
    CANVAS_RISK_MANAGEMENT = "Add risk management section"
    OKR_ALIGN_CUSTOMER_SATISFACTION = "Add customer satisfaction KR to align with Strategy"
    CANVAS_ALIGN_ACQUISITION = "Add acquisition strategies to align with OKR targets"
    FINANCIAL_ALIGN_MRR = "Adjust MRR target or subscription distribution"
    CANVAS_CHANNELS = "Add channels section to Canvas"


@dataclass(slots=True)
class DocumentContent:
    """Rendered markup of a document plus its raw structured form."""

    html: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class DocumentState:
    """Current content and inconsistency counter of one slot."""

    slot: DocumentSlot
    content: DocumentContent
    inconsistency_count: int = 0
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class ActionItem:
    """A catalog entry describing a potential edit of a document."""

    id: str
    text: str
    target_slot: DocumentSlot
    action: ActionTag
    kind: ActionKind
    listed_under: DocumentSlot


@dataclass(slots=True)
class WizardState:
    """Progress of the guided strategy wizard. ``step == 0`` means inactive."""

    active: bool = False
    step: int = 0
    answers: dict[int, str] = field(default_factory=dict)
