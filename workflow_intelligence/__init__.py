"""Workflow prediction and next-step suggestion engine."""

from workflow_intelligence.services.engine import InvalidWorkflowInputError, WorkflowPredictionEngine
from workflow_intelligence.services.history import PredictionHistory, PredictionNotFoundError

__all__ = [
    "InvalidWorkflowInputError",
    "PredictionHistory",
    "PredictionNotFoundError",
    "WorkflowPredictionEngine",
]
