import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neo.core.content import default_documents
from neo.core.mutations import add_customer_satisfaction_kr
from neo.core.sync import check_synchronization
from neo.domain import DocumentContent, DocumentSlot


def test_seeded_documents_report_both_gaps():
    findings = check_synchronization(default_documents())
    assert [finding.id for finding in findings[DocumentSlot.STRATEGY]] == ["sync-strategy-okr"]
    assert findings[DocumentSlot.STRATEGY][0].severity == "high"
    assert findings[DocumentSlot.STRATEGY][0].target_slot is DocumentSlot.OKRS
    assert [finding.id for finding in findings[DocumentSlot.OKRS]] == ["sync-okr-canvas"]
    assert [finding.id for finding in findings[DocumentSlot.CANVAS]] == ["sync-canvas-okr"]
    assert findings[DocumentSlot.FINANCIAL_PROJECTION] == []


def test_customer_satisfaction_kr_resolves_strategy_gap():
    documents = default_documents()
    documents[DocumentSlot.OKRS] = add_customer_satisfaction_kr(documents[DocumentSlot.OKRS])
    findings = check_synchronization(documents)
    assert findings[DocumentSlot.STRATEGY] == []


def test_acquisition_section_in_canvas_resolves_subscriber_gap():
    documents = default_documents()
    canvas = documents[DocumentSlot.CANVAS]
    documents[DocumentSlot.CANVAS] = DocumentContent(
        html=canvas.html, raw={**canvas.raw, "customerAcquisition": ["Partnerships"]}
    )
    findings = check_synchronization(documents)
    assert findings[DocumentSlot.OKRS] == []
    assert findings[DocumentSlot.CANVAS] == []
