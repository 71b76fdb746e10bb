"""Behavior log and learning result schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from workflow_intelligence.schemas.context import WorkflowContext
from workflow_intelligence.schemas.prediction import Suggestion


class BehaviorRecord(BaseModel):
    """One observed user action."""

    timestamp: datetime
    action: str = Field(min_length=1)
    entity_id: str | None = None
    context: WorkflowContext = Field(default_factory=WorkflowContext)
    duration_minutes: float | None = Field(default=None, ge=0)
    success: bool = True


class BehaviorPattern(BaseModel):
    """Frequently repeated action extracted from a behavior log."""

    type: str
    frequency: float
    occurrences: int
    success_rate: float
    average_duration_minutes: float | None = None
    description: str


class LearningResult(BaseModel):
    learned_patterns: list[str]
    updated_confidence_scores: dict[str, float]
    personalized_recommendations: list[Suggestion]
