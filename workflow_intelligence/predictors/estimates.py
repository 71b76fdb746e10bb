"""Keyword-based impact, time, priority and alternative estimates."""

from __future__ import annotations

from workflow_intelligence.schema.rules import (
    ACTION_ALTERNATIVES,
    ACTION_IMPACT_KEYWORDS,
    ACTION_TIME_KEYWORDS,
    DEFAULT_ACTION_MINUTES,
    DEFAULT_ALTERNATIVES,
)
from workflow_intelligence.schemas.context import PredictionContext
from workflow_intelligence.schemas.prediction import Impact, PredictionAlternative


def estimate_impact(action: str) -> Impact:
    lowered = action.lower()
    for keywords, impact in ACTION_IMPACT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return impact  # type: ignore[return-value]
    return "low"


def estimate_time(action: str) -> int:
    lowered = action.lower()
    for keywords, minutes in ACTION_TIME_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return minutes
    return DEFAULT_ACTION_MINUTES


def calculate_priority(action: str, context: PredictionContext, *, estimated_minutes: int | None = None) -> int:
    """Return a 1 (highest) to 5 (lowest) priority recommendation.

    Actions that do not fit into the caller's available time are pushed to the
    bottom; otherwise urgency words in the action text decide.
    """

    minutes = estimated_minutes if estimated_minutes is not None else estimate_time(action)
    if context.available_time is not None and minutes > context.available_time:
        return 5
    lowered = action.lower()
    if "urgent" in lowered or "critical" in lowered or "overdue" in lowered:
        return 1
    if "important" in lowered or "priority" in lowered:
        return 2
    return 3


def generate_alternatives(action: str) -> list[PredictionAlternative]:
    lowered = action.lower()
    alternatives: list[PredictionAlternative] = []
    for marker, options in ACTION_ALTERNATIVES:
        if marker in lowered:
            alternatives.extend(
                PredictionAlternative(action=alt_action, confidence=confidence, reason=reason)
                for alt_action, confidence, reason in options
            )
    if not alternatives:
        alternatives = [
            PredictionAlternative(action=alt_action, confidence=confidence, reason=reason)
            for alt_action, confidence, reason in DEFAULT_ALTERNATIVES
        ]
    return alternatives
