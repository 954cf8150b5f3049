"""Cross-document consistency checks over the raw document content."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from neo.domain import DocumentContent, DocumentSlot


@dataclass(frozen=True)
class SyncFinding:
    id: str
    text: str
    severity: str
    target_slot: DocumentSlot
    action: str


def _strings(values: Any) -> list[str]:
    if not isinstance(values, list):
        return []
    return [str(value) for value in values if isinstance(value, str)]


def _contains_customer_satisfaction_goal(strategy: DocumentContent) -> bool:
    goals = _strings(strategy.raw.get("businessGoals"))
    if goals:
        return any("customer satisfaction" in goal.lower() and "90%" in goal for goal in goals)
    return "customer satisfaction" in strategy.html and "90%" in strategy.html


def _objectives(okrs: DocumentContent) -> list[dict[str, Any]]:
    objectives = okrs.raw.get("objectives")
    if not isinstance(objectives, list):
        return []
    return [objective for objective in objectives if isinstance(objective, dict)]


def _has_customer_satisfaction_okr(okrs: DocumentContent) -> bool:
    objectives = _objectives(okrs)
    if not objectives:
        return "Customer Satisfaction" in okrs.html and "90%" in okrs.html
    for objective in objectives:
        if "customer satisfaction" in str(objective.get("title", "")).lower():
            return True
        for result in _strings(objective.get("keyResults")):
            if "customer satisfaction" in result.lower() and "90%" in result:
                return True
    return False


def _has_subscriber_target(okrs: DocumentContent) -> bool:
    objectives = _objectives(okrs)
    if not objectives:
        return "subscriber" in okrs.html and "300" in okrs.html
    return any(
        "subscriber" in result and "300" in result
        for objective in objectives
        for result in _strings(objective.get("keyResults"))
    )


def _has_acquisition_strategies(canvas: DocumentContent) -> bool:
    if canvas.raw:
        return bool(canvas.raw.get("customerAcquisition") or canvas.raw.get("acquisition"))
    return "acquisition" in canvas.html or "customer channel" in canvas.html


def check_synchronization(documents: Mapping[DocumentSlot, DocumentContent]) -> dict[DocumentSlot, list[SyncFinding]]:
    """Report misalignments between the documents, keyed by the slot they are raised on."""

    findings: dict[DocumentSlot, list[SyncFinding]] = {slot: [] for slot in DocumentSlot}
    canvas = documents.get(DocumentSlot.CANVAS)
    strategy = documents.get(DocumentSlot.STRATEGY)
    okrs = documents.get(DocumentSlot.OKRS)

    if strategy and okrs and _contains_customer_satisfaction_goal(strategy) and not _has_customer_satisfaction_okr(okrs):
        findings[DocumentSlot.STRATEGY].append(
            SyncFinding(
                id="sync-strategy-okr",
                text="Strategy mentions 90% customer satisfaction target, but no corresponding KR exists in OKRs",
                severity="high",
                target_slot=DocumentSlot.OKRS,
                action="Add customer satisfaction KR to align with Strategy",
            )
        )

    if canvas and okrs and _has_subscriber_target(okrs) and not _has_acquisition_strategies(canvas):
        findings[DocumentSlot.OKRS].append(
            SyncFinding(
                id="sync-okr-canvas",
                text="OKRs target 300 subscribers, but specific acquisition strategies are undefined in Canvas",
                severity="medium",
                target_slot=DocumentSlot.CANVAS,
                action="Add acquisition strategies to align with OKR targets",
            )
        )
        findings[DocumentSlot.CANVAS].append(
            SyncFinding(
                id="sync-canvas-okr",
                text="Canvas lacks channel strategy but OKRs assume specific acquisition metrics",
                severity="medium",
                target_slot=DocumentSlot.CANVAS,
                action="Add channels section to Canvas",
            )
        )

    return findings
