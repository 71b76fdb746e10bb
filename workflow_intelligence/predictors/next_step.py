"""Fan-out over all predictors followed by pooling, dedup and ranking."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from workflow_intelligence.predictors.predictor_interface import PredictorInterface
from workflow_intelligence.predictors.rule_based import default_predictors
from workflow_intelligence.schemas.context import PredictionContext
from workflow_intelligence.schemas.prediction import PredictionOptions, Suggestion, WorkflowPrediction

logger = logging.getLogger(__name__)

TIME_HORIZON_LIMITS: dict[str, int | None] = {"short": 15, "medium": 60, "long": None}

ItemT = TypeVar("ItemT", WorkflowPrediction, Suggestion)


class NextStepPredictor:
    """Composes tagged predictors into one ranked prediction/suggestion list."""

    def __init__(self, predictors: Sequence[PredictorInterface] | None = None) -> None:
        self.predictors = list(predictors) if predictors is not None else default_predictors()

    def predict_next_actions(
        self,
        context: PredictionContext,
        options: PredictionOptions,
    ) -> list[WorkflowPrediction]:
        pooled = self._collect(lambda predictor: predictor.predict(context), stage="predict")
        return _rank(
            pooled,
            options,
            key=lambda p: (p.predicted_action, p.entity_type or ""),
            confidence=lambda p: p.confidence,
            minutes=lambda p: p.estimated_time_minutes,
        )

    def generate_suggestions(
        self,
        context: PredictionContext,
        options: PredictionOptions,
    ) -> list[Suggestion]:
        pooled = self._collect(lambda predictor: predictor.generate_suggestions(context), stage="suggest")
        return _rank(
            pooled,
            options,
            key=lambda s: (s.action, s.entity_type or ""),
            confidence=lambda s: s.confidence,
            minutes=lambda s: s.estimated_time_minutes,
        )

    def _collect(
        self,
        produce: Callable[[PredictorInterface], Iterable[ItemT]],
        *,
        stage: str,
    ) -> list[ItemT]:
        pooled: list[ItemT] = []
        for predictor in self.predictors:
            try:
                pooled.extend(produce(predictor))
            except Exception:
                logger.exception("workflow.predictor_failed predictor=%s stage=%s", predictor.name, stage)
        return pooled


def _rank(
    items: list[ItemT],
    options: PredictionOptions,
    *,
    key: Callable[[ItemT], tuple[str, str]],
    confidence: Callable[[ItemT], float],
    minutes: Callable[[ItemT], int | None],
) -> list[ItemT]:
    seen: set[tuple[str, str]] = set()
    unique: list[ItemT] = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        unique.append(item)

    horizon_limit = TIME_HORIZON_LIMITS.get(options.time_horizon) if options.time_horizon else None
    filtered = [
        item
        for item in unique
        if confidence(item) >= options.min_confidence
        and (horizon_limit is None or (minutes(item) or 0) <= horizon_limit)
    ]
    filtered.sort(key=lambda item: confidence(item), reverse=True)
    return filtered[: options.max_predictions]
