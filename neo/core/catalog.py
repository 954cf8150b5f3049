"""Static catalog of suggestions and inconsistencies per document."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from neo.domain import ActionItem, ActionKind, ActionTag, DocumentSlot

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def _parse_items(kind: ActionKind, section: dict[str, Any] | None) -> list[ActionItem]:
    items: list[ActionItem] = []
    for slot_name, entries in (section or {}).items():
        listed_under = DocumentSlot(slot_name)
        for entry in entries or []:
            try:
                action = ActionTag(entry["action"])
            except ValueError as exc:
                raise ValueError(f"catalog item {entry.get('id')!r} uses unknown action {entry['action']!r}") from exc
            items.append(
                ActionItem(
                    id=str(entry["id"]),
                    text=str(entry["text"]),
                    target_slot=DocumentSlot(entry["section"]),
                    action=action,
                    kind=kind,
                    listed_under=listed_under,
                )
            )
    return items


@dataclass(frozen=True)
class ActionCatalog:
    items: tuple[ActionItem, ...]

    @classmethod
    def from_mapping(cls, payload: dict[str, Any]) -> "ActionCatalog":
        items = _parse_items(ActionKind.SUGGESTION, payload.get("suggestions"))
        items += _parse_items(ActionKind.INCONSISTENCY, payload.get("inconsistencies"))
        seen: set[str] = set()
        for item in items:
            if item.id in seen:
                raise ValueError(f"duplicate catalog id {item.id!r}")
            seen.add(item.id)
        return cls(items=tuple(items))

    def get(self, item_id: str) -> ActionItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def _filter(self, kind: ActionKind, slot: DocumentSlot | None) -> list[ActionItem]:
        return [
            item
            for item in self.items
            if item.kind is kind and (slot is None or item.listed_under is slot)
        ]

    def suggestions(self, slot: DocumentSlot | None = None) -> list[ActionItem]:
        return self._filter(ActionKind.SUGGESTION, slot)

    def inconsistencies(self, slot: DocumentSlot | None = None) -> list[ActionItem]:
        return self._filter(ActionKind.INCONSISTENCY, slot)

    def initial_counts(self) -> dict[DocumentSlot, int]:
        """Seeded inconsistency counters: one per listed inconsistency."""

        counts = {slot: 0 for slot in DocumentSlot}
        for item in self.inconsistencies():
            counts[item.listed_under] += 1
        return counts


def load_catalog(path: Path | None = None) -> ActionCatalog:
    path = path or CONFIG_DIR / "catalog.yaml"
    with path.open("r", encoding="utf-8") as fp:
        payload = yaml.safe_load(fp) or {}
    return ActionCatalog.from_mapping(payload)


CATALOG = load_catalog()
