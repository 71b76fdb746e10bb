"""Confidence aggregation, accuracy scoring and feedback adjustment."""

from __future__ import annotations

from collections.abc import Sequence

from workflow_intelligence.predictors.predictor_interface import clamp_confidence
from workflow_intelligence.schemas.behavior import BehaviorPattern
from workflow_intelligence.schemas.prediction import Suggestion, WorkflowPrediction

PREDICTION_WEIGHT = 0.6
SUGGESTION_WEIGHT = 0.4

ACTION_MATCH_WEIGHT = 0.7
IMPACT_WEIGHT = 0.2
TIME_WEIGHT = 0.1
# No outcome signal is threaded through yet; both terms stay neutral.
PLACEHOLDER_IMPACT_SCORE = 0.5
PLACEHOLDER_TIME_SCORE = 0.5

ADJUSTMENT_BASE = 0.7
ADJUSTMENT_ACCURACY_WEIGHT = 0.3
ADJUSTED_CONFIDENCE_FLOOR = 0.1

PATTERN_BASE_CONFIDENCE = 0.5
PATTERN_FREQUENCY_WEIGHT = 0.1
PATTERN_MAX_BOOST = 0.4


def calculate_overall_confidence(
    predictions: Sequence[WorkflowPrediction],
    suggestions: Sequence[Suggestion],
) -> float:
    if not predictions and not suggestions:
        return 0.0
    return PREDICTION_WEIGHT * _mean([p.confidence for p in predictions]) + SUGGESTION_WEIGHT * _mean(
        [s.confidence for s in suggestions]
    )


def word_overlap(predicted_action: str, actual_action: str) -> float:
    """Fraction of predicted words that appear verbatim in the actual action."""

    predicted_words = predicted_action.lower().split()
    if not predicted_words:
        return 0.0
    actual_words = set(actual_action.lower().split())
    matched = sum(1 for word in predicted_words if word in actual_words)
    return matched / len(predicted_words)


def calculate_prediction_accuracy(
    prediction: WorkflowPrediction,
    actual_action: str,
    actual_entity_id: str | None = None,
) -> float:
    # actual_entity_id is accepted for forward compatibility; entity-level
    # matching has no weight in the score yet.
    score = (
        ACTION_MATCH_WEIGHT * word_overlap(prediction.predicted_action, actual_action)
        + IMPACT_WEIGHT * PLACEHOLDER_IMPACT_SCORE
        + TIME_WEIGHT * PLACEHOLDER_TIME_SCORE
    )
    return clamp_confidence(score)


def adjust_predictions_based_on_accuracy(
    predictions: Sequence[WorkflowPrediction],
    prediction_id: str,
    accuracy: float,
) -> list[WorkflowPrediction]:
    """Return a new list where only ``prediction_id`` is re-scored.

    Sibling predictions are passed through as the same objects.
    """

    adjusted: list[WorkflowPrediction] = []
    for prediction in predictions:
        if prediction.id != prediction_id:
            adjusted.append(prediction)
            continue
        factor = ADJUSTMENT_BASE + ADJUSTMENT_ACCURACY_WEIGHT * accuracy
        new_confidence = clamp_confidence(prediction.confidence * factor, ADJUSTED_CONFIDENCE_FLOOR, 1.0)
        adjusted.append(
            prediction.model_copy(
                update={
                    "confidence": new_confidence,
                    "evidence": [
                        *prediction.evidence,
                        (
                            f"Feedback accuracy {accuracy:.2f} adjusted confidence "
                            f"from {prediction.confidence:.2f} to {new_confidence:.2f}"
                        ),
                    ],
                }
            )
        )
    return adjusted


def update_confidence_scores(patterns: Sequence[BehaviorPattern]) -> dict[str, float]:
    return {
        pattern.type: PATTERN_BASE_CONFIDENCE + min(PATTERN_MAX_BOOST, pattern.frequency * PATTERN_FREQUENCY_WEIGHT)
        for pattern in patterns
        if pattern.frequency is not None
    }


def generate_accuracy_feedback(prediction: WorkflowPrediction, accuracy: float) -> str:
    action = prediction.predicted_action
    if accuracy >= 0.8:
        return f"Excellent prediction: '{action}' closely matched what you did."
    if accuracy >= 0.6:
        return f"Good prediction: '{action}' was mostly aligned with your action."
    if accuracy >= 0.4:
        return f"Fair prediction: '{action}' partially matched your action."
    return f"Prediction needs improvement: '{action}' did not match your action."


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)
