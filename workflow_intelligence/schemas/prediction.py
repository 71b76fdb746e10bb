"""Prediction, suggestion and history schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from workflow_intelligence.schemas.context import PredictionContext

Impact = Literal["low", "medium", "high"]
TimeHorizon = Literal["short", "medium", "long"]


def new_prediction_id() -> str:
    return f"prediction-{uuid4().hex}"


class PredictionAlternative(BaseModel):
    """Lower-ranked action offered next to a prediction."""

    action: str
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str


class WorkflowPrediction(BaseModel):
    """Proposed next action; ``id`` is the feedback correlation key."""

    id: str = Field(default_factory=new_prediction_id)
    predicted_action: str
    confidence: float = Field(ge=0.0, le=1.0)
    evidence: list[str] = Field(default_factory=list)
    expected_impact: Impact = "medium"
    estimated_time_minutes: int | None = None
    priority_recommendation: int = Field(default=3, ge=1, le=5)
    alternatives: list[PredictionAlternative] = Field(default_factory=list)
    entity_type: str | None = None
    source: str = "unknown"
    timestamp: datetime


class Suggestion(BaseModel):
    """Lightweight recommended action, optionally tied to one entity."""

    action: str
    entity_id: str | None = None
    entity_type: str | None = None
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: list[str] = Field(default_factory=list)
    estimated_time_minutes: int | None = None
    priority: int = Field(default=3, ge=1, le=5)
    impact: Impact = "medium"


class TemplateStep(BaseModel):
    action: str
    entity_type: str
    description: str
    estimated_time_minutes: int


class WorkflowTemplate(BaseModel):
    """Predefined multi-step pattern matched against the current entity mix."""

    id: str
    name: str
    description: str
    steps: list[TemplateStep]
    suitability_score: float
    match_reasons: list[str]


class PredictionOptions(BaseModel):
    """Tuning knobs for a single ``generate_predictions`` call."""

    max_predictions: int = Field(default=5, ge=1)
    min_confidence: float = Field(default=0.3, ge=0.0, le=1.0)
    include_templates: bool = False
    time_horizon: TimeHorizon | None = None


class PredictionBundle(BaseModel):
    predictions: list[WorkflowPrediction]
    suggestions: list[Suggestion]
    templates: list[WorkflowTemplate] | None = None
    overall_confidence: float


class PredictionHistoryEntry(BaseModel):
    """Issued predictions plus the feedback recorded against them."""

    entry_id: str = Field(default_factory=lambda: uuid4().hex)
    timestamp: datetime
    context: PredictionContext
    predictions: list[WorkflowPrediction]
    actual_action: str | None = None
    actual_entity_id: str | None = None
    accuracy: float | None = None

    def find_prediction(self, prediction_id: str) -> WorkflowPrediction | None:
        return next((p for p in self.predictions if p.id == prediction_id), None)


class AccuracyResult(BaseModel):
    accuracy: float
    feedback: str
    updated_predictions: list[WorkflowPrediction]


class FeedbackRequest(BaseModel):
    """Actual user action reported against an issued prediction."""

    actual_action: str = Field(min_length=1)
    actual_entity_id: str | None = None
