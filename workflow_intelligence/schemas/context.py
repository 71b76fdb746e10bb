"""Caller-supplied and internal prediction context schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from workflow_intelligence.schemas.graph import WorkflowEntity

TimeOfDay = Literal["morning", "afternoon", "evening"]


class ContextMetadata(BaseModel):
    """Optional activity signals attached to a workflow context."""

    model_config = ConfigDict(extra="allow")

    recent_actions: list[str] | None = None
    available_time: float | None = Field(default=None, ge=0)


class WorkflowContext(BaseModel):
    """Per-interaction input describing what the user has been doing."""

    recent_entity_ids: list[str] = Field(default_factory=list)
    user_intent: str | None = None
    metadata: ContextMetadata = Field(default_factory=ContextMetadata)


class PredictionContext(BaseModel):
    """Normalized context rebuilt for every engine call."""

    current_entities: list[WorkflowEntity]
    recent_actions: list[str]
    user_intent: str | None = None
    time_of_day: TimeOfDay
    day_of_week: str
    observed_at: datetime
    available_time: float | None = None

    @property
    def entity_types(self) -> list[str]:
        """Distinct entity types in first-seen order."""

        return list(dict.fromkeys(entity.type for entity in self.current_entities))
