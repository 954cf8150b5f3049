from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

from neo.core.content import default_documents
from neo.domain import DocumentContent, DocumentSlot, DocumentState


@dataclass
class TranscriptEntry:
    entry_id: int
    response: str


@dataclass
class Transcript:
    """Assistant messages emitted during the session, oldest first."""

    entries: list[TranscriptEntry] = field(default_factory=list)

    def add(self, response: str) -> TranscriptEntry:
        entry = TranscriptEntry(entry_id=len(self.entries) + 1, response=response)
        self.entries.append(entry)
        return entry

    def latest(self) -> str | None:
        return self.entries[-1].response if self.entries else None

    def reset(self) -> None:
        self.entries.clear()


class DocumentStateStore:
    """Holds the content and inconsistency counter of every document slot."""

    def __init__(
        self,
        documents: Mapping[DocumentSlot, DocumentContent] | None = None,
        counts: Mapping[DocumentSlot, int] | None = None,
    ) -> None:
        seeded = dict(documents) if documents is not None else default_documents()
        self._states: dict[DocumentSlot, DocumentState] = {}
        for slot in DocumentSlot:
            content = seeded.get(slot) or DocumentContent(html="", raw={})
            count = max(0, int((counts or {}).get(slot, 0)))
            self._states[slot] = DocumentState(slot=slot, content=content, inconsistency_count=count)
        self._implemented: list[str] = []

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def get(self, slot: DocumentSlot) -> DocumentState:
        """Return a snapshot; mutating it does not touch the store."""

        return copy.deepcopy(self._states[slot])

    def snapshot(self) -> dict[DocumentSlot, DocumentState]:
        return {slot: self.get(slot) for slot in DocumentSlot}

    def inconsistency_counts(self) -> dict[DocumentSlot, int]:
        return {slot: state.inconsistency_count for slot, state in self._states.items()}

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def replace_all(
        self,
        contents: Mapping[DocumentSlot, DocumentContent],
        counts: Mapping[DocumentSlot, int],
    ) -> None:
        """Replace every slot's content and counter in a single update."""

        missing = [slot.value for slot in DocumentSlot if slot not in contents or slot not in counts]
        if missing:
            raise ValueError(f"replace_all requires every slot, missing: {', '.join(missing)}")

        updated = {
            slot: DocumentState(
                slot=slot,
                content=copy.deepcopy(contents[slot]),
                inconsistency_count=max(0, int(counts[slot])),
            )
            for slot in DocumentSlot
        }
        self._states = updated

    def patch(self, slot: DocumentSlot, content: DocumentContent) -> None:
        state = self._states[slot]
        state.content = copy.deepcopy(content)

    def adjust_inconsistency(self, slot: DocumentSlot, delta: int) -> int:
        state = self._states[slot]
        state.inconsistency_count = max(0, state.inconsistency_count + delta)
        return state.inconsistency_count

    def set_inconsistency(self, slot: DocumentSlot, count: int) -> None:
        self._states[slot].inconsistency_count = max(0, count)

    def mark_persisted(self, slot: DocumentSlot, when: datetime) -> None:
        self._states[slot].last_modified = when

    # ------------------------------------------------------------------
    # implemented action items
    # ------------------------------------------------------------------
    def is_implemented(self, item_id: str) -> bool:
        return item_id in self._implemented

    def mark_implemented(self, item_id: str) -> bool:
        if item_id in self._implemented:
            return False
        self._implemented.append(item_id)
        return True

    def implemented(self) -> list[str]:
        return list(self._implemented)
