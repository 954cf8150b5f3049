"""Content transformations wired to catalog actions.

Only a few ``(slot, action)`` pairs carry a real transformation.  Every other
catalog action is still accepted by the suggestion engine, it simply leaves
the document content untouched.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Callable

from neo.core.content import bullet_list, render_objective
from neo.domain import ActionTag, DocumentContent, DocumentSlot


ACQUISITION_CHANNELS = [
    "Targeted LinkedIn Ads for startup founders / scale-up CEOs",
    "Bi-weekly NEO Live Demo Webinars",
    "Partnerships with 2-3 startup accelerators or VC networks",
    "Direct founder-led outreach to potential Enterprise clients",
    "Thought leadership content on strategy + systems thinking",
]

CUSTOMER_SATISFACTION_OBJECTIVE = {
    "title": "Deliver Exceptional Customer Satisfaction",
    "rationale": "Ensure high retention and word-of-mouth growth through superior user experience.",
    "keyResults": [
        "Achieve Customer Satisfaction Score ≥ 90% by Month 12 (aligned with Strategy Document)",
        "Attain a Net Promoter Score (NPS) ≥ 50 by Year 1",
        "Log at least 10 verified ROI case studies from Pro/Enterprise clients",
    ],
}

CHURN_SCENARIOS = [
    {"scenario": "Best Case", "churn": 0.02, "mrr": 9100, "percentOfTarget": 1.1},
    {"scenario": "Expected", "churn": 0.04, "mrr": 8300, "percentOfTarget": 1.0},
    {"scenario": "Worst Case", "churn": 0.07, "mrr": 6900, "percentOfTarget": 0.83},
]


@dataclass(frozen=True)
class Mutation:
    transform: Callable[[DocumentContent], DocumentContent]
    inconsistency_delta: int = 0


def _insert_after_business_goals(html: str, fragment: str) -> str:
    heading = html.find("Business Goals")
    end = html.find("</ul>", heading) if heading != -1 else -1
    if end == -1:
        return html + fragment
    insertion_point = end + len("</ul>")
    return html[:insertion_point] + fragment + html[insertion_point:]


def add_strategic_priorities(content: DocumentContent) -> DocumentContent:
    fragment = (
        '<h3 class="text-lg font-semibold mb-2">Key Strategic Priorities</h3>'
        '<div class="pl-5 mb-4"><h4 class="font-medium">Customer Acquisition Channels</h4>'
        f"{bullet_list(ACQUISITION_CHANNELS)}</div>"
    )
    raw = copy.deepcopy(content.raw)
    raw["strategicPriorities"] = {"customerAcquisition": list(ACQUISITION_CHANNELS)}
    return DocumentContent(html=_insert_after_business_goals(content.html, fragment), raw=raw)


def add_customer_satisfaction_kr(content: DocumentContent) -> DocumentContent:
    raw = copy.deepcopy(content.raw)
    objectives = raw.get("objectives")
    if not isinstance(objectives, list):
        objectives = []
    objective = copy.deepcopy(CUSTOMER_SATISFACTION_OBJECTIVE)
    objectives.append(objective)
    raw["objectives"] = objectives
    html = content.html + render_objective(len(objectives), objective)
    return DocumentContent(html=html, raw=raw)


def add_sensitivity_analysis(content: DocumentContent) -> DocumentContent:
    rows = "".join(
        "<tr>"
        f'<td class="border p-2">{item["scenario"]}</td>'
        f'<td class="border p-2">{round(item["churn"] * 100)}%</td>'
        f'<td class="border p-2">€{item["mrr"]:,}</td>'
        f'<td class="border p-2">{round(item["percentOfTarget"] * 100)}%</td>'
        "</tr>"
        for item in CHURN_SCENARIOS
    )
    fragment = (
        '<div class="mb-4"><h3 class="text-lg font-semibold mb-2">Sensitivity Analysis</h3>'
        '<p class="mb-2">Impact of different churn rates on Year 1 MRR:</p>'
        '<table class="min-w-full border"><thead><tr>'
        '<th class="border p-2">Scenario</th><th class="border p-2">Monthly Churn</th>'
        '<th class="border p-2">Year-End MRR</th><th class="border p-2">% of Target</th>'
        f"</tr></thead><tbody>{rows}</tbody></table></div>"
    )
    raw = copy.deepcopy(content.raw)
    raw["sensitivityAnalysis"] = {"churnScenarios": copy.deepcopy(CHURN_SCENARIOS)}
    return DocumentContent(html=content.html + fragment, raw=raw)


MUTATIONS: dict[tuple[DocumentSlot, ActionTag], Mutation] = {
    (DocumentSlot.STRATEGY, ActionTag.STRATEGY_PRIORITIES): Mutation(add_strategic_priorities, -1),
    (DocumentSlot.OKRS, ActionTag.OKR_CUSTOMER_SATISFACTION): Mutation(add_customer_satisfaction_kr, -1),
    (DocumentSlot.FINANCIAL_PROJECTION, ActionTag.FINANCIAL_SENSITIVITY): Mutation(add_sensitivity_analysis, 0),
}


def find_mutation(slot: DocumentSlot, action: ActionTag) -> Mutation | None:
    return MUTATIONS.get((slot, action))
