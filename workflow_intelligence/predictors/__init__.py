"""Candidate predictors package."""

from workflow_intelligence.predictors.next_step import NextStepPredictor
from workflow_intelligence.predictors.predictor_interface import PredictorInterface
from workflow_intelligence.predictors.rule_based import (
    ActionSequencePredictor,
    EntityTypePredictor,
    IntentPredictor,
    TimeContextPredictor,
    default_predictors,
)

__all__ = [
    "ActionSequencePredictor",
    "EntityTypePredictor",
    "IntentPredictor",
    "NextStepPredictor",
    "PredictorInterface",
    "TimeContextPredictor",
    "default_predictors",
]
