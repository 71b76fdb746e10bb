"""Workflow prediction engine: public API over predictors, scoring and planning."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime
from time import perf_counter

from workflow_intelligence.config import Settings, get_settings
from workflow_intelligence.predictors.next_step import NextStepPredictor
from workflow_intelligence.predictors.predictor_interface import PredictorInterface
from workflow_intelligence.schema.rules import WORKFLOW_TEMPLATES
from workflow_intelligence.schemas.behavior import BehaviorRecord, LearningResult
from workflow_intelligence.schemas.context import PredictionContext, WorkflowContext
from workflow_intelligence.schemas.graph import WorkflowGraph
from workflow_intelligence.schemas.prediction import (
    AccuracyResult,
    PredictionBundle,
    PredictionHistoryEntry,
    PredictionOptions,
    TemplateStep,
    WorkflowTemplate,
)
from workflow_intelligence.schemas.workflow import AlternativePath, WorkflowOptions, WorkflowPlan
from workflow_intelligence.services import confidence, workflow_math
from workflow_intelligence.services.context_builder import Clock, build_prediction_context
from workflow_intelligence.services.heuristics import WorkflowHeuristics
from workflow_intelligence.services.history import PredictionHistory, PredictionNotFoundError

logger = logging.getLogger(__name__)

MAX_ALTERNATIVE_PATHS = 3


class InvalidWorkflowInputError(ValueError):
    """Raised when a workflow request cannot be resolved against the graph."""


class WorkflowPredictionEngine:
    """Predicts next actions, learns from feedback and plans goal-directed workflows.

    The engine keeps no state besides its prediction history; every call
    rebuilds its context from the injected graph and clock.
    """

    def __init__(
        self,
        graph: WorkflowGraph,
        *,
        settings: Settings | None = None,
        clock: Clock | None = None,
        predictors: Sequence[PredictorInterface] | None = None,
        history: PredictionHistory | None = None,
    ) -> None:
        self.graph = graph
        self.settings = settings or get_settings()
        self._clock = clock or datetime.now
        self.next_step_predictor = NextStepPredictor(predictors)
        self.heuristics = WorkflowHeuristics(
            graph,
            default_max_steps=self.settings.default_max_steps,
            max_paths=self.settings.max_workflow_paths,
        )
        self.history = (
            history
            if history is not None
            else PredictionHistory(max_entries=self.settings.prediction_history_max_entries)
        )

    async def generate_predictions(
        self,
        context: WorkflowContext,
        options: PredictionOptions | None = None,
    ) -> PredictionBundle:
        """Predict next actions for the caller's current context."""

        started = perf_counter()
        options = options or self.default_prediction_options()
        prediction_context = self._build_context(context)

        predictions = self.next_step_predictor.predict_next_actions(prediction_context, options)
        suggestions = self.next_step_predictor.generate_suggestions(prediction_context, options)
        templates = self.match_workflow_templates(prediction_context) if options.include_templates else None
        overall_confidence = confidence.calculate_overall_confidence(predictions, suggestions)

        # History writes may reach a synchronous store; keep them off the event loop.
        await asyncio.to_thread(
            self.history.append,
            PredictionHistoryEntry(
                timestamp=prediction_context.observed_at,
                context=prediction_context,
                predictions=predictions,
            ),
        )
        logger.info(
            (
                "workflow.predictions_generated entities=%d predictions=%d suggestions=%d "
                "templates=%d overall_confidence=%.3f total_ms=%.2f"
            ),
            len(prediction_context.current_entities),
            len(predictions),
            len(suggestions),
            len(templates or []),
            overall_confidence,
            (perf_counter() - started) * 1000.0,
        )
        return PredictionBundle(
            predictions=predictions,
            suggestions=suggestions,
            templates=templates,
            overall_confidence=overall_confidence,
        )

    async def update_prediction_accuracy(
        self,
        prediction_id: str,
        actual_action: str,
        actual_entity_id: str | None = None,
    ) -> AccuracyResult:
        """Score a prediction against what the user actually did.

        The adjusted predictions replace the stored ones, so repeated feedback
        on the same id compounds.
        """

        def apply_feedback(entry: PredictionHistoryEntry) -> AccuracyResult:
            prediction = entry.find_prediction(prediction_id)
            if prediction is None:
                raise PredictionNotFoundError(prediction_id)
            accuracy = confidence.calculate_prediction_accuracy(prediction, actual_action, actual_entity_id)
            updated = confidence.adjust_predictions_based_on_accuracy(entry.predictions, prediction_id, accuracy)
            entry.actual_action = actual_action
            entry.actual_entity_id = actual_entity_id
            entry.accuracy = accuracy
            entry.predictions = updated
            return AccuracyResult(
                accuracy=accuracy,
                feedback=confidence.generate_accuracy_feedback(prediction, accuracy),
                updated_predictions=updated,
            )

        result = await asyncio.to_thread(self.history.update_entry, prediction_id, apply_feedback)
        logger.info(
            "workflow.prediction_feedback prediction_id=%s accuracy=%.3f",
            prediction_id,
            result.accuracy,
        )
        return result

    async def suggest_optimal_workflow(
        self,
        start_entity_ids: Sequence[str],
        goal_description: str,
        options: WorkflowOptions | None = None,
    ) -> WorkflowPlan:
        """Plan a step sequence from the start entities toward a goal."""

        options = options or WorkflowOptions()
        start_entities = [
            entity
            for entity in (self.graph.get_entity(entity_id) for entity_id in start_entity_ids)
            if entity is not None
        ]
        if not start_entities:
            raise InvalidWorkflowInputError("No valid start entities found")

        goal = self.heuristics.analyze_goal(goal_description)
        paths = self.heuristics.find_workflow_paths(start_entities, goal, options)
        ranked = self.heuristics.rank_paths(paths, goal, options)
        optimal = ranked[0]

        steps = self.heuristics.convert_path_to_steps(optimal, goal)
        total_estimated_time = workflow_math.calculate_total_estimated_time(steps)
        alternative_paths = [
            AlternativePath(
                steps=len(path.steps),
                estimated_time=workflow_math.calculate_path_estimated_time(path),
                confidence=workflow_math.calculate_path_confidence(path),
                differences=self.heuristics.identify_path_differences(path, optimal),
            )
            for path in ranked[1 : MAX_ALTERNATIVE_PATHS + 1]
        ]
        logger.info(
            "workflow.plan_suggested goal_type=%s candidate_paths=%d steps=%d origin=%s",
            goal.goal_type,
            len(paths),
            len(steps),
            optimal.origin,
        )
        return WorkflowPlan(
            steps=steps,
            total_estimated_time=total_estimated_time,
            completeness_score=workflow_math.calculate_completeness_score(steps, goal),
            efficiency_score=workflow_math.calculate_efficiency_score(steps, total_estimated_time),
            alternative_paths=alternative_paths,
        )

    async def learn_from_behavior(
        self,
        user_id: str,
        behavior_data: Sequence[BehaviorRecord],
    ) -> LearningResult:
        """Derive patterns and recommendations from a behavior log; nothing is stored."""

        patterns = self.heuristics.analyze_behavior_patterns(behavior_data)
        recommendations = self.heuristics.generate_personalized_recommendations(patterns)
        logger.info(
            "workflow.behavior_learned user_id=%s records=%d patterns=%d",
            user_id,
            len(behavior_data),
            len(patterns),
        )
        return LearningResult(
            learned_patterns=[pattern.description for pattern in patterns],
            updated_confidence_scores=confidence.update_confidence_scores(patterns),
            personalized_recommendations=recommendations,
        )

    def match_workflow_templates(self, context: PredictionContext) -> list[WorkflowTemplate]:
        present = set(context.entity_types)
        return [
            WorkflowTemplate(
                id=rule.id,
                name=rule.name,
                description=rule.description,
                steps=[
                    TemplateStep(
                        action=step.action,
                        entity_type=step.entity_type,
                        description=step.description,
                        estimated_time_minutes=step.estimated_time_minutes,
                    )
                    for step in rule.steps
                ],
                suitability_score=rule.suitability_score,
                match_reasons=list(rule.match_reasons),
            )
            for rule in WORKFLOW_TEMPLATES
            if present.issuperset(rule.required_entity_types)
        ]

    def default_prediction_options(self) -> PredictionOptions:
        return PredictionOptions(
            max_predictions=self.settings.default_max_predictions,
            min_confidence=self.settings.default_min_confidence,
        )

    def _build_context(self, context: WorkflowContext) -> PredictionContext:
        return build_prediction_context(context, self.graph, clock=self._clock)
