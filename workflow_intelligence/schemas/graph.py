"""Read-only workspace graph snapshot consumed by the engine."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workflow_intelligence.schema.entity_types import (
    WorkflowEntityType,
    WorkflowRelationshipType,
    normalize_entity_type,
)


class WorkflowEntity(BaseModel):
    """First-class workspace item (note, task, document, media, ...)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    type: WorkflowEntityType
    title: str = ""
    content: str | None = None
    status: str | None = None
    priority: int | None = Field(default=None, ge=1, le=5)
    project_id: str | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None
    tags: tuple[str, ...] = ()
    metadata: dict[str, object] = Field(default_factory=dict)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_entity_type(value) or value
        return value


class WorkflowRelationship(BaseModel):
    """Directed edge between two workspace entities."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    source_id: str
    target_id: str
    type: WorkflowRelationshipType = "related_to"
    strength: float = Field(default=1.0, ge=0.0, le=1.0)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    bidirectional: bool = False


class WorkflowGraph(BaseModel):
    """Entities keyed by id plus relationship edges."""

    model_config = ConfigDict(frozen=True)

    id: str = "workspace"
    name: str = "Workspace"
    entities: dict[str, WorkflowEntity] = Field(default_factory=dict)
    relationships: tuple[WorkflowRelationship, ...] = ()

    def get_entity(self, entity_id: str) -> WorkflowEntity | None:
        return self.entities.get(entity_id)

    def neighbors(self, entity_id: str) -> list[tuple[WorkflowEntity, WorkflowRelationship]]:
        """Return entities reachable over one edge, ordered by relationship id."""

        found: list[tuple[WorkflowEntity, WorkflowRelationship]] = []
        for relationship in sorted(self.relationships, key=lambda r: (r.id, r.source_id, r.target_id)):
            if relationship.source_id == entity_id:
                other_id = relationship.target_id
            elif relationship.bidirectional and relationship.target_id == entity_id:
                other_id = relationship.source_id
            else:
                continue
            other = self.entities.get(other_id)
            if other is not None:
                found.append((other, relationship))
        return found

    @classmethod
    def from_entities(
        cls,
        entities: list[WorkflowEntity],
        relationships: list[WorkflowRelationship] | None = None,
        **kwargs: object,
    ) -> "WorkflowGraph":
        return cls(
            entities={entity.id: entity for entity in entities},
            relationships=tuple(relationships or ()),
            **kwargs,
        )
