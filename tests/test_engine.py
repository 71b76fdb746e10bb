"""End-to-end tests for the workflow prediction engine."""

import unittest
from datetime import datetime

from workflow_intelligence.config import Settings
from workflow_intelligence.schemas.behavior import BehaviorRecord
from workflow_intelligence.schemas.context import ContextMetadata, WorkflowContext
from workflow_intelligence.schemas.graph import WorkflowEntity, WorkflowGraph, WorkflowRelationship
from workflow_intelligence.schemas.prediction import PredictionOptions
from workflow_intelligence.schemas.workflow import WorkflowOptions
from workflow_intelligence.services.engine import InvalidWorkflowInputError, WorkflowPredictionEngine
from workflow_intelligence.services.history import PredictionHistory, PredictionNotFoundError

MONDAY_MORNING = datetime(2026, 10, 19, 9, 0)


def _settings() -> Settings:
    return Settings(persist_prediction_history=False, graph_snapshot_path=None)


def _engine(history: PredictionHistory | None = None) -> WorkflowPredictionEngine:
    graph = WorkflowGraph.from_entities(
        [
            WorkflowEntity(id="N1", type="note", title="Kickoff notes"),
            WorkflowEntity(id="T1", type="task", title="Send recap", status="open"),
        ],
        [WorkflowRelationship(id="R1", source_id="N1", target_id="T1", type="generates")],
    )
    return WorkflowPredictionEngine(
        graph,
        settings=_settings(),
        clock=lambda: MONDAY_MORNING,
        history=history,
    )


class GeneratePredictionsTests(unittest.IsolatedAsyncioTestCase):
    async def test_note_context_predicts_task_creation_first(self) -> None:
        engine = _engine()
        bundle = await engine.generate_predictions(
            WorkflowContext(recent_entity_ids=["N1"]),
            PredictionOptions(max_predictions=3, min_confidence=0.3),
        )

        predictions = bundle.predictions
        self.assertEqual(len(predictions), 3)
        self.assertEqual(predictions[0].predicted_action, "Create task from note")
        self.assertEqual(predictions[0].confidence, 0.8)
        self.assertEqual(predictions[0].entity_type, "note")
        self.assertEqual(predictions[1].predicted_action, "Expand note into document")
        self.assertEqual(predictions[2].predicted_action, "Plan day")
        self.assertAlmostEqual(predictions[2].confidence, 0.64)
        self.assertTrue(all(p.timestamp == MONDAY_MORNING for p in predictions))
        self.assertEqual(len({p.id for p in predictions}), 3)
        self.assertIsNone(bundle.templates)
        self.assertGreater(bundle.overall_confidence, 0.0)
        self.assertLessEqual(bundle.overall_confidence, 1.0)

    async def test_repeated_calls_rank_identically(self) -> None:
        engine = _engine()
        context = WorkflowContext(
            recent_entity_ids=["N1", "T1"],
            user_intent="execute",
            metadata=ContextMetadata(recent_actions=["create note"]),
        )
        first = await engine.generate_predictions(context)
        second = await engine.generate_predictions(context)

        def ranking(bundle):
            return [(p.predicted_action, p.confidence, p.entity_type) for p in bundle.predictions]

        self.assertEqual(ranking(first), ranking(second))
        self.assertEqual(len(engine.history), 2)

    async def test_unknown_entities_are_dropped(self) -> None:
        engine = _engine()
        bundle = await engine.generate_predictions(WorkflowContext(recent_entity_ids=["missing"]))

        self.assertTrue(bundle.predictions)
        self.assertTrue(all(p.source == "time_context" for p in bundle.predictions))
        self.assertEqual(engine.history.entries()[0].context.current_entities, [])

    async def test_templates_require_all_entity_types(self) -> None:
        engine = _engine()
        with_both = await engine.generate_predictions(
            WorkflowContext(recent_entity_ids=["N1", "T1"]),
            PredictionOptions(include_templates=True),
        )
        note_only = await engine.generate_predictions(
            WorkflowContext(recent_entity_ids=["N1"]),
            PredictionOptions(include_templates=True),
        )

        self.assertEqual([t.id for t in with_both.templates], ["note-to-task-workflow"])
        self.assertEqual(note_only.templates, [])

    async def test_settings_drive_default_options(self) -> None:
        engine = WorkflowPredictionEngine(
            WorkflowGraph(),
            settings=Settings(default_max_predictions=1),
            clock=lambda: MONDAY_MORNING,
        )
        bundle = await engine.generate_predictions(WorkflowContext())
        self.assertEqual(len(bundle.predictions), 1)


class FeedbackTests(unittest.IsolatedAsyncioTestCase):
    async def test_unknown_prediction_leaves_history_untouched(self) -> None:
        engine = _engine()
        await engine.generate_predictions(WorkflowContext(recent_entity_ids=["N1"]))
        before = engine.history.entries()[0].model_copy(deep=True)

        with self.assertRaises(PredictionNotFoundError):
            await engine.update_prediction_accuracy("prediction-unknown", "Create task")

        self.assertEqual(engine.history.entries()[0], before)

    async def test_exact_match_scores_high_and_only_adjusts_target(self) -> None:
        engine = _engine()
        bundle = await engine.generate_predictions(WorkflowContext(recent_entity_ids=["N1"]))
        target, *siblings = bundle.predictions

        result = await engine.update_prediction_accuracy(target.id, target.predicted_action, "T1")

        self.assertAlmostEqual(result.accuracy, 0.85)
        self.assertTrue(result.feedback.startswith("Excellent"))
        updated = {p.id: p for p in result.updated_predictions}
        self.assertAlmostEqual(updated[target.id].confidence, 0.8 * (0.7 + 0.3 * 0.85))
        for sibling in siblings:
            self.assertEqual(updated[sibling.id], sibling)

        entry = engine.history.entries()[0]
        self.assertEqual(entry.actual_action, target.predicted_action)
        self.assertEqual(entry.actual_entity_id, "T1")
        self.assertAlmostEqual(entry.accuracy, 0.85)

    async def test_repeated_feedback_compounds(self) -> None:
        engine = _engine()
        bundle = await engine.generate_predictions(WorkflowContext(recent_entity_ids=["N1"]))
        target = bundle.predictions[0]
        factor = 0.7 + 0.3 * 0.85

        first = await engine.update_prediction_accuracy(target.id, target.predicted_action)
        second = await engine.update_prediction_accuracy(target.id, target.predicted_action)

        first_confidence = next(p.confidence for p in first.updated_predictions if p.id == target.id)
        second_confidence = next(p.confidence for p in second.updated_predictions if p.id == target.id)
        self.assertAlmostEqual(first_confidence, 0.8 * factor)
        self.assertAlmostEqual(second_confidence, 0.8 * factor * factor)

    async def test_feedback_after_eviction_is_not_found(self) -> None:
        engine = _engine(history=PredictionHistory(max_entries=1))
        first = await engine.generate_predictions(WorkflowContext(recent_entity_ids=["N1"]))
        await engine.generate_predictions(WorkflowContext(recent_entity_ids=["T1"]))

        self.assertEqual(len(engine.history), 1)
        with self.assertRaises(PredictionNotFoundError):
            await engine.update_prediction_accuracy(first.predictions[0].id, "anything")


class OptimalWorkflowTests(unittest.IsolatedAsyncioTestCase):
    async def test_requires_resolvable_start_entities(self) -> None:
        engine = _engine()
        with self.assertRaises(InvalidWorkflowInputError):
            await engine.suggest_optimal_workflow([], "turn this into a task")
        with self.assertRaises(InvalidWorkflowInputError):
            await engine.suggest_optimal_workflow(["missing"], "turn this into a task")

    async def test_note_to_task_plan(self) -> None:
        engine = _engine()
        plan = await engine.suggest_optimal_workflow(["N1"], "turn this into a task")

        self.assertGreaterEqual(len(plan.steps), 1)
        self.assertEqual(plan.total_estimated_time, sum(step.estimated_time_minutes for step in plan.steps))
        self.assertGreaterEqual(plan.completeness_score, 0.0)
        self.assertLessEqual(plan.completeness_score, 1.0)
        self.assertGreater(plan.efficiency_score, 0.0)
        self.assertLessEqual(plan.efficiency_score, 1.0)
        self.assertLessEqual(len(plan.alternative_paths), 3)
        self.assertTrue(all(alternative.differences for alternative in plan.alternative_paths))

    async def test_plans_are_deterministic(self) -> None:
        engine = _engine()
        first = await engine.suggest_optimal_workflow(["N1", "T1"], "plan the launch")
        second = await engine.suggest_optimal_workflow(["N1", "T1"], "plan the launch")
        self.assertEqual(first, second)

    async def test_max_steps_bounds_plan(self) -> None:
        engine = _engine()
        plan = await engine.suggest_optimal_workflow(["N1"], "", WorkflowOptions(max_steps=2))
        self.assertLessEqual(len(plan.steps), 2)


class LearnFromBehaviorTests(unittest.IsolatedAsyncioTestCase):
    async def test_frequent_actions_become_patterns(self) -> None:
        engine = _engine()
        records = [
            BehaviorRecord(timestamp=datetime(2026, 10, 19, 9, minute), action=action)
            for minute, action in enumerate(["create_note", "create_note", "create_note", "review"])
        ]

        result = await engine.learn_from_behavior("user-1", records)

        self.assertEqual(
            result.learned_patterns,
            ["User frequently performs: create_note", "User frequently performs: review"],
        )
        self.assertAlmostEqual(result.updated_confidence_scores["create_note"], 0.575)
        self.assertAlmostEqual(result.updated_confidence_scores["review"], 0.525)
        self.assertEqual(
            [suggestion.action for suggestion in result.personalized_recommendations],
            ["Continue create_note", "Review and organize created content"],
        )

    async def test_empty_log_learns_nothing(self) -> None:
        result = await _engine().learn_from_behavior("user-1", [])
        self.assertEqual(result.learned_patterns, [])
        self.assertEqual(result.updated_confidence_scores, {})
        self.assertEqual(result.personalized_recommendations, [])


if __name__ == "__main__":
    unittest.main()
