"""Templated document generation from the guided wizard answers."""
from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Mapping

from neo.core.content import bullet_list
from neo.domain import DocumentContent, DocumentSlot


GENERATED_COUNTS: dict[DocumentSlot, int] = {
    DocumentSlot.CANVAS: 1,
    DocumentSlot.STRATEGY: 1,
    DocumentSlot.FINANCIAL_PROJECTION: 1,
    DocumentSlot.OKRS: 2,
}

COMPLETION_MESSAGE = (
    "I've created your strategy documents! You can view and edit them using the tabs on the left. "
    "I've also identified some potential improvements and inconsistencies that you might want to "
    "address to strengthen your strategy."
)


@dataclass(frozen=True)
class SynthesisResult:
    contents: dict[DocumentSlot, DocumentContent]
    counts: dict[DocumentSlot, int]


def _strategy(goals: str, challenges: str, opportunities: str, value_proposition: str) -> DocumentContent:
    html = (
        '<h2 class="text-xl font-bold mb-4">Strategy Document</h2>'
        '<h3 class="text-lg font-semibold mb-2">Vision &amp; Goals</h3>'
        f'<div class="mb-4 bg-blue-50 p-3 rounded"><p class="mb-2">{escape(goals)}</p></div>'
        '<h3 class="text-lg font-semibold mb-2">Market Analysis</h3>'
        '<div class="grid grid-cols-2 gap-4 mb-4">'
        f'<div class="bg-red-50 p-3 rounded"><h4 class="font-medium mb-2">Challenges</h4><p>{escape(challenges)}</p></div>'
        f'<div class="bg-green-50 p-3 rounded"><h4 class="font-medium mb-2">Opportunities</h4><p>{escape(opportunities)}</p></div>'
        "</div>"
        '<h3 class="text-lg font-semibold mb-2">Value Proposition</h3>'
        f'<div class="mb-4 bg-purple-50 p-3 rounded"><p>{escape(value_proposition)}</p></div>'
    )
    raw = {
        "visionAndGoals": goals,
        "marketAnalysis": {"challenges": challenges, "opportunities": opportunities},
        "valueProposition": value_proposition,
    }
    return DocumentContent(html=html, raw=raw)


def _canvas(goals: str, value_proposition: str) -> DocumentContent:
    html = (
        '<h2 class="text-xl font-bold mb-4">Enhanced Strategy Canvas - Generated</h2>'
        '<h3 class="text-lg font-semibold mb-2">Business Model (Value Creation &amp; Economic Viability)</h3>'
        '<div class="mb-4"><h4 class="font-medium">Customer Segments</h4>'
        f"{bullet_list(['Segment derived from: ' + goals])}</div>"
        '<div class="mb-4"><h4 class="font-medium">Value Proposition</h4>'
        f"{bullet_list([value_proposition, 'Additional value proposition based on analysis'])}</div>"
        '<div class="mb-4"><h4 class="font-medium">Revenue Model</h4>'
        f"{bullet_list(['Revenue stream based on the value proposition', 'Additional revenue opportunities identified'])}</div>"
    )
    raw = {
        "customerSegments": [goals],
        "valueProposition": [value_proposition],
        "revenueModel": ["Revenue stream based on the value proposition"],
    }
    return DocumentContent(html=html, raw=raw)


def _okrs(goals: str, opportunities: str) -> DocumentContent:
    objectives = [
        {
            "title": "Deliver on the stated vision",
            "rationale": goals,
            "keyResults": ["Specific metric based on user input"] * 3,
        },
        {
            "title": "Capture the identified opportunities",
            "rationale": opportunities,
            "keyResults": ["Specific metric based on user input"] * 3,
        },
    ]
    blocks = "".join(
        '<div class="mb-4">'
        f'<h3 class="text-lg font-semibold mb-2">Objective {index}: {escape(objective["title"])}</h3>'
        f'<p class="italic mb-2">Rationale: {escape(objective["rationale"])}</p>'
        f"{bullet_list([f'KR{n}: {kr}' for n, kr in enumerate(objective['keyResults'], start=1)])}"
        "</div>"
        for index, objective in enumerate(objectives, start=1)
    )
    return DocumentContent(html='<h2 class="text-xl font-bold mb-4">OKRs - Generated</h2>' + blocks, raw={"objectives": objectives})


def _financial() -> DocumentContent:
    scenarios = ["Optimistic", "Expected", "Conservative"]
    rows = "".join(
        f'<tr><td class="border p-2">{name}</td>'
        + '<td class="border p-2">€XXX,XXX</td>' * 3
        + "</tr>"
        for name in scenarios
    )
    html = (
        '<h2 class="text-xl font-bold mb-4">Financial Projection - Generated</h2>'
        '<div class="mb-4"><h3 class="text-lg font-semibold mb-2">Revenue Forecasts</h3>'
        "<p>Based on financial goals from the value proposition step</p>"
        '<table class="min-w-full border mt-2"><thead><tr><th class="border p-2">Scenario</th>'
        '<th class="border p-2">Year 1</th><th class="border p-2">Year 2</th><th class="border p-2">Year 3</th>'
        f"</tr></thead><tbody>{rows}</tbody></table></div>"
        '<div class="mb-4"><h3 class="text-lg font-semibold mb-2">Cost Structure</h3>'
        "<p>Derived from the business model</p></div>"
    )
    raw = {"revenueForecasts": {name.lower(): None for name in scenarios}}
    return DocumentContent(html=html, raw=raw)


def create_strategy_documents(answers: Mapping[int, str]) -> SynthesisResult:
    """Build all four documents from the wizard answers keyed by step 1..4."""

    goals = answers.get(1, "")
    challenges = answers.get(2, "")
    opportunities = answers.get(3, "")
    value_proposition = answers.get(4, "")

    contents = {
        DocumentSlot.CANVAS: _canvas(goals, value_proposition),
        DocumentSlot.STRATEGY: _strategy(goals, challenges, opportunities, value_proposition),
        DocumentSlot.FINANCIAL_PROJECTION: _financial(),
        DocumentSlot.OKRS: _okrs(goals, opportunities),
    }
    return SynthesisResult(contents=contents, counts=dict(GENERATED_COUNTS))
