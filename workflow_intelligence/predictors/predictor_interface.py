"""Predictor interface for pluggable candidate sources."""

from abc import ABC, abstractmethod

from workflow_intelligence.predictors.types import PredictionCandidate
from workflow_intelligence.schemas.context import PredictionContext
from workflow_intelligence.schemas.prediction import Suggestion, WorkflowPrediction


def clamp_confidence(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


class PredictorInterface(ABC):
    """Abstract predictor; ``name`` tags every prediction it emits."""

    name: str = "predictor"

    @abstractmethod
    def candidates(self, context: PredictionContext) -> list[PredictionCandidate]:
        """Propose candidate actions from one signal source."""

    def predict(self, context: PredictionContext) -> list[WorkflowPrediction]:
        return [
            WorkflowPrediction(
                predicted_action=candidate.action,
                confidence=clamp_confidence(candidate.confidence),
                evidence=list(candidate.evidence),
                expected_impact=candidate.impact,
                estimated_time_minutes=candidate.estimated_time_minutes,
                priority_recommendation=candidate.priority,
                alternatives=list(candidate.alternatives),
                entity_type=candidate.entity_type,
                source=self.name,
                timestamp=context.observed_at,
            )
            for candidate in self.candidates(context)
        ]

    def generate_suggestions(self, context: PredictionContext) -> list[Suggestion]:
        return [
            Suggestion(
                action=candidate.action,
                entity_id=candidate.entity_id,
                entity_type=candidate.entity_type,
                confidence=clamp_confidence(candidate.confidence),
                reasoning=list(candidate.evidence),
                estimated_time_minutes=candidate.estimated_time_minutes,
                priority=candidate.priority,
                impact=candidate.impact,
            )
            for candidate in self.candidates(context)
        ]
