"""ORM models package exports."""

from workflow_intelligence.models.base import Base
from workflow_intelligence.models.prediction_history import PredictionHistoryLink, PredictionHistoryRecord

__all__ = [
    "Base",
    "PredictionHistoryLink",
    "PredictionHistoryRecord",
]
