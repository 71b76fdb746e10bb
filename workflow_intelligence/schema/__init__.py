"""Static type vocabularies and rule tables."""

from workflow_intelligence.schema.entity_types import ENTITY_TYPE_VALUES, normalize_entity_type

__all__ = [
    "ENTITY_TYPE_VALUES",
    "normalize_entity_type",
]
