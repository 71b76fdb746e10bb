"""Deterministic rule-table predictors."""

from __future__ import annotations

from datetime import datetime
from typing import Mapping

from workflow_intelligence.predictors.estimates import (
    calculate_priority,
    estimate_impact,
    estimate_time,
    generate_alternatives,
)
from workflow_intelligence.predictors.predictor_interface import PredictorInterface
from workflow_intelligence.predictors.types import PredictionCandidate
from workflow_intelligence.schema.rules import (
    ACTION_SEQUENCE_RULES,
    CLOSED_TASK_STATUSES,
    ENTITY_TYPE_RULES,
    INTENT_RULES,
    OVERDUE_TASK_RULE,
    STATUS_RULES,
    TIME_CONTEXT_CONFIDENCE_SCALE,
    TIME_CONTEXT_RULES,
    WEEKEND_DAYS,
    ActionRule,
    StatusRule,
)
from workflow_intelligence.schemas.context import PredictionContext
from workflow_intelligence.schemas.graph import WorkflowEntity

TIME_CONTEXT_MINUTES = 15
TIME_CONTEXT_PRIORITY = 3
INTENT_MINUTES = 30
INTENT_PRIORITY = 1


class EntityTypePredictor(PredictorInterface):
    """Next steps implied by the types and states of the entities in focus."""

    name = "entity_type"

    def __init__(
        self,
        rules: Mapping[str, tuple[ActionRule, ...]] = ENTITY_TYPE_RULES,
        status_rules: tuple[StatusRule, ...] = STATUS_RULES,
    ) -> None:
        self.rules = rules
        self.status_rules = status_rules

    def candidates(self, context: PredictionContext) -> list[PredictionCandidate]:
        candidates: list[PredictionCandidate] = []
        for entity in context.current_entities:
            candidates.extend(self._state_candidates(entity, context))
            for rule in self.rules.get(entity.type, ()):
                candidates.append(
                    self._candidate(
                        rule,
                        entity,
                        context,
                        evidence=[f"Based on entity type: {entity.type}"],
                    )
                )
        return candidates

    def _state_candidates(self, entity: WorkflowEntity, context: PredictionContext) -> list[PredictionCandidate]:
        found: list[PredictionCandidate] = []
        status = (entity.status or "").strip().lower()
        if (
            entity.type == "task"
            and entity.due_date is not None
            and entity.completed_at is None
            and status not in CLOSED_TASK_STATUSES
            and _is_before(entity.due_date, context.observed_at)
        ):
            label = entity.title or entity.id
            found.append(
                self._candidate(
                    OVERDUE_TASK_RULE,
                    entity,
                    context,
                    evidence=[f"Task '{label}' was due {entity.due_date:%Y-%m-%d}"],
                )
            )
        for status_rule in self.status_rules:
            if status_rule.entity_type == entity.type and status_rule.status == status:
                found.append(
                    self._candidate(
                        ActionRule(action=status_rule.action, confidence=status_rule.confidence),
                        entity,
                        context,
                        evidence=[f"{entity.type.capitalize()} status is {status}"],
                    )
                )
        return found

    @staticmethod
    def _candidate(
        rule: ActionRule,
        entity: WorkflowEntity,
        context: PredictionContext,
        *,
        evidence: list[str],
    ) -> PredictionCandidate:
        minutes = estimate_time(rule.action)
        return PredictionCandidate(
            action=rule.action,
            confidence=rule.confidence,
            evidence=evidence,
            impact=estimate_impact(rule.action),
            estimated_time_minutes=minutes,
            priority=calculate_priority(rule.action, context, estimated_minutes=minutes),
            entity_type=entity.type,
            entity_id=entity.id,
            alternatives=generate_alternatives(rule.action),
        )


class ActionSequencePredictor(PredictorInterface):
    """Follow-up actions for the most recent recorded action."""

    name = "action_sequence"

    def __init__(self, rules: Mapping[str, tuple[ActionRule, ...]] = ACTION_SEQUENCE_RULES) -> None:
        self.rules = rules

    def candidates(self, context: PredictionContext) -> list[PredictionCandidate]:
        if not context.recent_actions:
            return []
        last_action = context.recent_actions[-1]
        normalized = _normalize_action_key(last_action)
        if not normalized:
            return []

        candidates: list[PredictionCandidate] = []
        for pattern, rules in self.rules.items():
            if pattern not in normalized and normalized not in pattern:
                continue
            for rule in rules:
                minutes = estimate_time(rule.action)
                candidates.append(
                    PredictionCandidate(
                        action=rule.action,
                        confidence=rule.confidence,
                        evidence=[f"Based on recent action: {last_action}"],
                        impact=estimate_impact(rule.action),
                        estimated_time_minutes=minutes,
                        priority=calculate_priority(rule.action, context, estimated_minutes=minutes),
                        alternatives=generate_alternatives(rule.action),
                    )
                )
        return candidates


class TimeContextPredictor(PredictorInterface):
    """Routine actions for the current time of day or the weekend."""

    name = "time_context"

    def __init__(
        self,
        rules: Mapping[str, tuple[ActionRule, ...]] = TIME_CONTEXT_RULES,
        confidence_scale: float = TIME_CONTEXT_CONFIDENCE_SCALE,
    ) -> None:
        self.rules = rules
        self.confidence_scale = confidence_scale

    def candidates(self, context: PredictionContext) -> list[PredictionCandidate]:
        bucket = "weekend" if context.day_of_week in WEEKEND_DAYS else context.time_of_day
        rules = self.rules.get(bucket) or self.rules.get(context.time_of_day, ())
        return [
            PredictionCandidate(
                action=rule.action,
                confidence=rule.confidence * self.confidence_scale,
                evidence=[f"Time context: {context.time_of_day}, {context.day_of_week}"],
                impact="medium",
                estimated_time_minutes=TIME_CONTEXT_MINUTES,
                priority=TIME_CONTEXT_PRIORITY,
            )
            for rule in rules
        ]


class IntentPredictor(PredictorInterface):
    """Actions matching the user's stated intent."""

    name = "intent"

    def __init__(self, rules: Mapping[str, tuple[ActionRule, ...]] = INTENT_RULES) -> None:
        self.rules = rules

    def candidates(self, context: PredictionContext) -> list[PredictionCandidate]:
        if not context.user_intent:
            return []
        intent_text = context.user_intent.lower()
        candidates: list[PredictionCandidate] = []
        for intent, rules in self.rules.items():
            if intent not in intent_text:
                continue
            candidates.extend(
                PredictionCandidate(
                    action=rule.action,
                    confidence=rule.confidence,
                    evidence=[f"Based on user intent: {context.user_intent}"],
                    impact="high",
                    estimated_time_minutes=INTENT_MINUTES,
                    priority=INTENT_PRIORITY,
                )
                for rule in rules
            )
        return candidates


def default_predictors() -> list[PredictorInterface]:
    return [
        EntityTypePredictor(),
        ActionSequencePredictor(),
        TimeContextPredictor(),
        IntentPredictor(),
    ]


def _normalize_action_key(action: str) -> str:
    return "_".join(action.lower().replace("-", " ").replace("_", " ").split())


def _is_before(moment: datetime, reference: datetime) -> bool:
    if moment.tzinfo is None and reference.tzinfo is not None:
        moment = moment.replace(tzinfo=reference.tzinfo)
    elif moment.tzinfo is not None and reference.tzinfo is None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment < reference
