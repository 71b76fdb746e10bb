"""Typed predictor outputs independent of the public schemas."""

from dataclasses import dataclass, field

from workflow_intelligence.schemas.prediction import Impact, PredictionAlternative


@dataclass(slots=True)
class PredictionCandidate:
    """Candidate action proposed by a single predictor."""

    action: str
    confidence: float
    evidence: list[str]
    impact: Impact = "medium"
    estimated_time_minutes: int | None = None
    priority: int = 3
    entity_type: str | None = None
    entity_id: str | None = None
    alternatives: list[PredictionAlternative] = field(default_factory=list)
