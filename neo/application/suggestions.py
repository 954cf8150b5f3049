"""Application of catalog action items to the document state."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from neo.core.mutations import find_mutation
from neo.core.state import DocumentStateStore, Transcript
from neo.domain import ActionItem, DocumentContent


logger = logging.getLogger(__name__)

CONFIRMATION_TEMPLATE = (
    "I've implemented the suggested change to {slot}: {action}. This maintains strategic coherence by "
    "ensuring alignment between your documents. The changes have been highlighted in the document."
)

PROMPT_TEMPLATE = """INSTRUCTION: Please implement the following change to maintain strategic coherence across documents.

DOCUMENT TO MODIFY: {slot}
ACTION REQUIRED: {action}
CONTEXT: This change is needed to {context}

Please implement this change while maintaining alignment with all other strategic documents."""

DocumentPersister = Callable[[ActionItem, DocumentContent], None]


@dataclass(frozen=True)
class ApplyOutcome:
    item_id: str
    confirmation_text: str
    inconsistency_delta: int
    mutated: bool


def implementation_prompt(item: ActionItem) -> str:
    return PROMPT_TEMPLATE.format(slot=item.target_slot.value, action=item.action.value, context=item.text.lower())


class SuggestionEngine:
    """Applies an action item and keeps the inconsistency counters in sync.

    Callers gate re-application; the engine itself assumes ``item.id`` has not
    been implemented yet.  Persistence is best effort: a failing persister is
    logged and the in-memory change stays in place.
    """

    def __init__(
        self,
        documents: DocumentStateStore,
        transcript: Transcript,
        persister: DocumentPersister | None = None,
    ) -> None:
        self._documents = documents
        self._transcript = transcript
        self._persister = persister

    def apply(self, item: ActionItem) -> ApplyOutcome:
        mutation = find_mutation(item.target_slot, item.action)
        delta = 0
        if mutation is not None:
            current = self._documents.get(item.target_slot).content
            updated = mutation.transform(current)
            self._documents.patch(item.target_slot, updated)
            delta = mutation.inconsistency_delta
            if delta:
                self._documents.adjust_inconsistency(item.target_slot, delta)
            self._persist(item, updated)
        else:
            logger.info("no content change wired for %s (%s)", item.id, item.action.value)

        confirmation = CONFIRMATION_TEMPLATE.format(slot=item.target_slot.value, action=item.action.value)
        self._transcript.add(confirmation)
        self._documents.mark_implemented(item.id)
        logger.info("implemented %s on %s (delta %d)", item.id, item.target_slot.value, delta)
        return ApplyOutcome(
            item_id=item.id,
            confirmation_text=confirmation,
            inconsistency_delta=delta,
            mutated=mutation is not None,
        )

    def _persist(self, item: ActionItem, content: DocumentContent) -> None:
        if self._persister is None:
            return
        try:
            self._persister(item, content)
        except Exception:
            logger.exception("failed to persist %s after applying %s", item.target_slot.value, item.id)
