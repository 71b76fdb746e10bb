"""Builds the normalized prediction context from caller input and the graph."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from workflow_intelligence.schemas.context import PredictionContext, TimeOfDay, WorkflowContext
from workflow_intelligence.schemas.graph import WorkflowGraph

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def get_time_of_day(moment: datetime) -> TimeOfDay:
    if moment.hour < 12:
        return "morning"
    if moment.hour < 17:
        return "afternoon"
    return "evening"


def get_day_of_week(moment: datetime) -> str:
    return _WEEKDAY_NAMES[moment.weekday()]


def build_prediction_context(
    context: WorkflowContext,
    graph: WorkflowGraph,
    *,
    clock: Clock = datetime.now,
) -> PredictionContext:
    """Resolve recent entity ids and stamp the current time buckets.

    Ids missing from the graph are dropped; a partial context is still usable.
    """

    entities = []
    for entity_id in context.recent_entity_ids:
        entity = graph.get_entity(entity_id)
        if entity is not None:
            entities.append(entity)
    dropped = len(context.recent_entity_ids) - len(entities)
    if dropped:
        logger.debug(
            "workflow.context_unresolved_entities dropped=%d requested=%d",
            dropped,
            len(context.recent_entity_ids),
        )

    now = clock()
    return PredictionContext(
        current_entities=entities,
        recent_actions=list(context.metadata.recent_actions or []),
        user_intent=context.user_intent,
        time_of_day=get_time_of_day(now),
        day_of_week=get_day_of_week(now),
        observed_at=now,
        available_time=context.metadata.available_time,
    )
