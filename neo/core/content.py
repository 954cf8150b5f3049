"""Seeded document content and import placeholders.

The seeded documents describe the NEO demo company.  Each slot carries both
the markup shown to the user and a raw structured form that the sync checker
and persistence layer consume.
"""
from __future__ import annotations

import json
from html import escape

from neo.core.schema import IngestionRecord
from neo.domain import DocumentContent, DocumentSlot


VISION = (
    "To become the standard integrated platform that continuously aligns a company's strategic plan, "
    "financial projections, and operational metrics, guiding both startups and their investors towards "
    "sustainable, data-driven success."
)
MISSION = (
    "NEO empowers startups and VCs to jointly create, track, and adapt cohesive strategies in real time. "
    "By merging systems thinking, strategy formulation, and financial modeling, we ensure every business "
    "decision is dynamic, evidence-based, and future-resilient."
)
BUSINESS_GOALS = [
    "Profit Every Year: Reach operational profitability within 2 years",
    "Continuous growth in profit margins and net profit",
    "Demonstrate 50% reduction in planning cycle times for users",
    "Attain customer satisfaction rating over 90% within 18 months",
]

CUSTOMER_SEGMENTS = [
    "Early-to Growth-Stage Startups",
    "SMEs / Mittelstand",
    "Boutique Consultancies",
]
VALUE_PROPOSITION = [
    "Integrated AI for Strategy, Systems Thinking & Finance",
    "Minimal Effort, High Impact",
    "High-Touch + Self-Serve",
]

SUBSCRIPTIONS = [
    {"tier": "Basic", "price": 49, "target": 180},
    {"tier": "Pro", "price": 99, "target": 90},
    {"tier": "Enterprise", "price": 299, "target": 30},
]
PILOTS = {"count": "8-10", "price": "€5-10k", "total": "€60-80k"}

OBJECTIVES = [
    {
        "title": "Achieve €100K in Total First-Year Revenue",
        "rationale": "Secure short-term financial viability, build investor confidence, and lay the foundation for scaling.",
        "keyResults": [
            "Generate a minimum of €8,300 in Monthly Recurring Revenue (MRR) by Month 12.",
            "Close at least 8 high-ticket pilot engagements or consulting deals (≥ €5,000 each) within Year 1.",
            "Convert at least 40% of new signups to Pro (€99/mo) or Enterprise (€299/mo) tiers on an annual plan.",
        ],
    },
    {
        "title": "Grow Subscription Base & Reduce Churn",
        "rationale": "Establish strong, recurring subscription income and foster stable user retention, particularly for high-value tiers.",
        "keyResults": [
            "Reach 300 total paying subscribers by end of Year 1 (across all tiers).",
            "Maintain a monthly churn rate below 5% after the first 3 months of launch.",
            "Attain ≥ 40% of subscribers on Pro or Enterprise plans within 6 months.",
        ],
    },
]

PREVIEW_LIMIT = 500


def bullet_list(items: list[str], css: str = "list-disc pl-5") -> str:
    rendered = "".join(f"<li>{escape(item)}</li>" for item in items)
    return f'<ul class="{css}">{rendered}</ul>'


def render_objective(index: int, objective: dict) -> str:
    results = [f"KR{number}: {text}" for number, text in enumerate(objective["keyResults"], start=1)]
    return (
        '<div class="mb-4">'
        f'<h3 class="text-lg font-semibold mb-2">Objective {index}: {escape(objective["title"])}</h3>'
        f'<p class="italic mb-2">Rationale: {escape(objective["rationale"])}</p>'
        f"{bullet_list(results)}"
        "</div>"
    )


def _canvas() -> DocumentContent:
    html = (
        '<h2 class="text-xl font-bold mb-4">Enhanced Strategy Canvas - NEO</h2>'
        '<h3 class="text-lg font-semibold mb-2">Business Model (Value Creation &amp; Economic Viability)</h3>'
        '<div class="mb-4"><h4 class="font-medium">Customer Segments</h4>'
        f"{bullet_list(CUSTOMER_SEGMENTS)}</div>"
        '<div class="mb-4"><h4 class="font-medium">Value Proposition</h4>'
        f"{bullet_list(VALUE_PROPOSITION)}</div>"
    )
    raw = {
        "customerSegments": list(CUSTOMER_SEGMENTS),
        "valueProposition": list(VALUE_PROPOSITION),
    }
    return DocumentContent(html=html, raw=raw)


def _strategy() -> DocumentContent:
    html = (
        '<h2 class="text-xl font-bold mb-4">Strategy Document - NEO</h2>'
        '<h3 class="text-lg font-semibold mb-2">Vision</h3>'
        f'<p class="mb-4">{escape(VISION)}</p>'
        '<h3 class="text-lg font-semibold mb-2">Mission</h3>'
        f'<p class="mb-4">{escape(MISSION)}</p>'
        '<h3 class="text-lg font-semibold mb-2">Business Goals</h3>'
        f'{bullet_list(BUSINESS_GOALS, "list-disc pl-5 mb-4")}'
    )
    raw = {"vision": VISION, "mission": MISSION, "businessGoals": list(BUSINESS_GOALS)}
    return DocumentContent(html=html, raw=raw)


def _financial() -> DocumentContent:
    rows = "".join(
        "<tr>"
        f'<td class="border p-2">{item["tier"]}</td>'
        f'<td class="border p-2">€{item["price"]}/mo</td>'
        f'<td class="border p-2">{item["target"]} subscribers</td>'
        "</tr>"
        for item in SUBSCRIPTIONS
    )
    html = (
        '<h2 class="text-xl font-bold mb-4">Financial Projection - NEO</h2>'
        '<div class="mb-4"><h3 class="text-lg font-semibold mb-2">Revenue Streams</h3>'
        '<table class="min-w-full border"><thead><tr>'
        '<th class="border p-2">Subscription Tier</th><th class="border p-2">Price</th>'
        '<th class="border p-2">Year 1 Target</th>'
        f"</tr></thead><tbody>{rows}</tbody></table></div>"
        '<div class="mb-4"><h3 class="text-lg font-semibold mb-2">Pilot Engagements</h3>'
        "<p>8-10 pilot deals at €5-10k each = €60-80k additional revenue</p></div>"
    )
    raw = {"revenue": {"subscriptions": [dict(item) for item in SUBSCRIPTIONS], "pilots": dict(PILOTS)}}
    return DocumentContent(html=html, raw=raw)


def _okrs() -> DocumentContent:
    html = '<h2 class="text-xl font-bold mb-4">OKRs - NEO</h2>' + "".join(
        render_objective(index, objective) for index, objective in enumerate(OBJECTIVES, start=1)
    )
    raw = {
        "objectives": [
            {**objective, "keyResults": list(objective["keyResults"])} for objective in OBJECTIVES
        ]
    }
    return DocumentContent(html=html, raw=raw)


def default_documents() -> dict[DocumentSlot, DocumentContent]:
    """Return fresh copies of the seeded documents."""

    return {
        DocumentSlot.CANVAS: _canvas(),
        DocumentSlot.STRATEGY: _strategy(),
        DocumentSlot.FINANCIAL_PROJECTION: _financial(),
        DocumentSlot.OKRS: _okrs(),
    }


def import_placeholder(slot: DocumentSlot, record: IngestionRecord, path: str) -> DocumentContent:
    """Content shown for a slot right after a file was imported into it."""

    stored = record.to_storage()
    preview = json.dumps(stored, indent=2, ensure_ascii=False)
    if len(preview) > PREVIEW_LIMIT:
        preview = preview[:PREVIEW_LIMIT] + "..."
    html = (
        f'<h2 class="text-xl font-bold mb-4">{escape(slot.value)} - Imported from {escape(record.file_name)}</h2>'
        f'<p class="mb-4">File successfully imported and saved to: {escape(path)}</p>'
        '<div class="p-4 bg-gray-100 rounded mb-4"><p class="font-medium mb-2">File Details:</p>'
        '<ul class="list-disc pl-5">'
        f"<li><strong>Format:</strong> {record.format}</li>"
        f"<li><strong>Saved as:</strong> {escape(path)}</li>"
        f"<li><strong>Last Modified:</strong> {record.last_modified.isoformat()}</li>"
        "</ul></div>"
        '<div class="p-4 bg-gray-100 rounded"><p class="font-mono text-sm mb-2">Preview of JSON data:</p>'
        f'<pre class="font-mono text-xs whitespace-pre-wrap">{escape(preview)}</pre></div>'
    )
    return DocumentContent(html=html, raw=stored)
