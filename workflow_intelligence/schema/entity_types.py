"""Controlled workflow entity and relationship type system."""

from __future__ import annotations

from typing import Literal

WorkflowEntityType = Literal[
    "document",
    "task",
    "note",
    "media",
    "project",
    "conversation",
    "email",
    "calendar",
    "reference",
]

WorkflowRelationshipType = Literal[
    "references",
    "depends_on",
    "generates",
    "part_of",
    "related_to",
    "follows",
    "contradicts",
    "supports",
    "updates",
    "summarizes",
]

ENTITY_TYPE_VALUES: tuple[str, ...] = (
    "document",
    "task",
    "note",
    "media",
    "project",
    "conversation",
    "email",
    "calendar",
    "reference",
)
ENTITY_TYPE_SET = frozenset(ENTITY_TYPE_VALUES)

_ENTITY_TYPE_SYNONYMS: dict[str, str] = {
    "report": "document",
    "article": "document",
    "doc": "document",
    "todo": "task",
    "action_item": "task",
    "idea": "note",
    "observation": "note",
    "image": "media",
    "pdf": "media",
    "audio": "media",
    "video": "media",
    "chat": "conversation",
    "message": "email",
    "event": "calendar",
    "meeting": "calendar",
    "link": "reference",
}


def normalize_entity_type(raw_type: str | None) -> str | None:
    """Normalize to the controlled entity type list, or ``None`` when unknown."""

    if not raw_type:
        return None
    cleaned = "_".join(raw_type.strip().lower().split())
    if cleaned in ENTITY_TYPE_SET:
        return cleaned
    return _ENTITY_TYPE_SYNONYMS.get(cleaned)
