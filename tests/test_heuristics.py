"""Tests for goal analysis, path search, ranking and workflow math."""

import unittest
from datetime import datetime

from workflow_intelligence.schemas.behavior import BehaviorRecord
from workflow_intelligence.schemas.graph import WorkflowEntity, WorkflowGraph, WorkflowRelationship
from workflow_intelligence.schemas.workflow import GoalAnalysis, PathStep, WorkflowOptions, WorkflowPath
from workflow_intelligence.services import workflow_math
from workflow_intelligence.services.heuristics import WorkflowHeuristics


def _note_task_graph() -> WorkflowGraph:
    return WorkflowGraph.from_entities(
        [
            WorkflowEntity(id="N1", type="note", title="Meeting notes"),
            WorkflowEntity(id="T1", type="task", title="Follow up"),
        ],
        [WorkflowRelationship(id="R1", source_id="N1", target_id="T1", type="generates")],
    )


class GoalAnalysisTests(unittest.TestCase):
    def setUp(self) -> None:
        self.heuristics = WorkflowHeuristics(WorkflowGraph())

    def test_empty_goal_falls_back_to_defaults(self) -> None:
        for raw in ("", None, "   "):
            goal = self.heuristics.analyze_goal(raw)
            self.assertEqual(goal.goal_type, "general")
            self.assertEqual(goal.complexity, "simple")
            self.assertEqual(goal.keywords, [])
            self.assertEqual(goal.required_entity_types, ["task", "document"])
            self.assertEqual(goal.required_step_types, [])

    def test_conversion_goal_is_create(self) -> None:
        goal = self.heuristics.analyze_goal("turn this into a task")
        self.assertEqual(goal.goal_type, "create")
        self.assertEqual(goal.required_entity_types, ["task"])
        self.assertEqual(goal.required_step_types, ["analysis", "execution"])
        self.assertEqual(goal.keywords, ["turn", "task"])
        self.assertEqual(goal.estimated_steps, 2)

    def test_long_goal_is_complex(self) -> None:
        goal = self.heuristics.analyze_goal(" ".join(["review"] * 35))
        self.assertEqual(goal.complexity, "complex")
        self.assertEqual(goal.estimated_steps, 7)
        self.assertEqual(goal.keywords, ["review"])


class PathSearchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.graph = _note_task_graph()
        self.heuristics = WorkflowHeuristics(self.graph)
        self.goal = self.heuristics.analyze_goal("turn this into a task")
        self.note = self.graph.get_entity("N1")

    def test_paths_include_trivial_graph_and_templates(self) -> None:
        paths = self.heuristics.find_workflow_paths([self.note], self.goal)
        origins = [path.origin for path in paths]

        self.assertEqual(origins[0], "trivial")
        self.assertIn("graph", origins)
        self.assertIn("template:direct", origins)
        graph_path = paths[origins.index("graph")]
        self.assertEqual([step.entity_id for step in graph_path.steps[:2]], ["N1", "T1"])
        self.assertEqual(len({path.signature for path in paths}), len(paths))

    def test_max_steps_bounds_every_path(self) -> None:
        paths = self.heuristics.find_workflow_paths([self.note], self.goal, WorkflowOptions(max_steps=1))
        self.assertTrue(paths)
        self.assertTrue(all(len(path.steps) == 1 for path in paths))

    def test_time_limit_keeps_trivial_path(self) -> None:
        paths = self.heuristics.find_workflow_paths([self.note], self.goal, WorkflowOptions(time_limit_minutes=1))
        self.assertEqual([path.origin for path in paths], ["trivial"])

    def test_cycles_terminate(self) -> None:
        graph = WorkflowGraph.from_entities(
            [WorkflowEntity(id="A", type="task"), WorkflowEntity(id="B", type="task")],
            [
                WorkflowRelationship(id="R1", source_id="A", target_id="B", bidirectional=True),
                WorkflowRelationship(id="R2", source_id="B", target_id="A"),
            ],
        )
        heuristics = WorkflowHeuristics(graph)
        paths = heuristics.find_workflow_paths([graph.get_entity("A")], heuristics.analyze_goal("finish it"))
        graph_paths = [path for path in paths if path.origin == "graph"]
        self.assertEqual(len(graph_paths), 1)
        self.assertEqual([step.entity_id for step in graph_paths[0].steps[:2]], ["A", "B"])

    def test_step_confidences_are_bounded(self) -> None:
        for path in self.heuristics.find_workflow_paths([self.note], self.goal):
            for step in path.steps:
                self.assertGreaterEqual(step.confidence, 0.0)
                self.assertLessEqual(step.confidence, 1.0)


class RankingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.graph = _note_task_graph()
        self.heuristics = WorkflowHeuristics(self.graph)
        self.goal = self.heuristics.analyze_goal("turn this into a task")
        self.paths = self.heuristics.find_workflow_paths([self.graph.get_entity("N1")], self.goal)

    def test_selection_is_deterministic(self) -> None:
        first = self.heuristics.select_optimal_path(self.paths, self.goal)
        second = self.heuristics.select_optimal_path(list(self.paths), self.goal)
        self.assertEqual(first, second)
        self.assertEqual(first.origin, "template:direct")

    def test_efficiency_preference_never_picks_a_longer_path(self) -> None:
        efficient = self.heuristics.select_optimal_path(self.paths, self.goal, WorkflowOptions(prefer_efficiency=True))
        complete = self.heuristics.select_optimal_path(
            self.paths, self.goal, WorkflowOptions(prefer_completeness=True)
        )
        self.assertLessEqual(len(efficient.steps), len(complete.steps))
        self.assertEqual(efficient.origin, "template:quick")

    def test_ties_go_to_higher_confidence(self) -> None:
        weak = WorkflowPath(origin="a", steps=[PathStep(step_type="review", entity_type="task", confidence=0.2)])
        strong = WorkflowPath(origin="b", steps=[PathStep(step_type="review", entity_type="task", confidence=0.9)])
        goal = GoalAnalysis(required_entity_types=["task"])
        self.assertEqual(self.heuristics.select_optimal_path([weak, strong], goal).origin, "b")

    def test_select_from_nothing(self) -> None:
        self.assertIsNone(self.heuristics.select_optimal_path([], self.goal))

    def test_path_differences(self) -> None:
        by_origin = {path.origin: path for path in self.paths}
        differences = self.heuristics.identify_path_differences(
            by_origin["template:quick"], by_origin["template:direct"]
        )
        self.assertEqual(differences[0], "Path lengths differ: 2 vs 3 steps")
        self.assertIn("Only in this path: Quick action task", differences)
        self.assertIn("Only in selected path: Analyze note", differences)
        self.assertEqual(self.heuristics.identify_path_differences(by_origin["trivial"], by_origin["trivial"]), [])

    def test_convert_path_to_steps_uses_duration_table(self) -> None:
        direct = next(path for path in self.paths if path.origin == "template:direct")
        steps = self.heuristics.convert_path_to_steps(direct, self.goal)

        self.assertEqual([step.action for step in steps], ["Analyze note", "Execute task", "Document document"])
        self.assertEqual([step.estimated_time_minutes for step in steps], [30, 60, 20])
        self.assertEqual(steps[0].entity_id, "N1")
        self.assertIn("create goal", steps[0].description)


class WorkflowMathTests(unittest.TestCase):
    def setUp(self) -> None:
        self.goal = GoalAnalysis(required_entity_types=["task"], required_step_types=["analysis", "execution"])

    def test_completeness(self) -> None:
        steps = [
            PathStep(step_type="analysis", entity_type="note"),
            PathStep(step_type="execution", entity_type="task"),
        ]
        self.assertEqual(workflow_math.calculate_completeness_score(steps, self.goal), 1.0)
        self.assertAlmostEqual(workflow_math.calculate_completeness_score(steps[:1], self.goal), 1 / 3)
        self.assertEqual(workflow_math.calculate_completeness_score([], self.goal), 0.0)
        self.assertEqual(workflow_math.calculate_completeness_score(steps, GoalAnalysis()), 1.0)

    def test_efficiency_never_increases_with_time(self) -> None:
        steps = [PathStep(step_type="analysis", entity_type="note")]
        scores = [workflow_math.calculate_efficiency_score(steps, minutes) for minutes in (0, 10, 30, 60, 240)]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(scores[0], 1.0)
        self.assertEqual(workflow_math.calculate_efficiency_score([], 10), 0.0)

    def test_path_time_and_confidence(self) -> None:
        path = WorkflowPath(
            origin="x",
            steps=[
                PathStep(step_type="research", entity_type="note", confidence=0.4),
                PathStep(step_type="unknown", entity_type="task", confidence=0.6),
            ],
        )
        self.assertEqual(workflow_math.calculate_path_estimated_time(path), 45 + 15)
        self.assertAlmostEqual(workflow_math.calculate_path_confidence(path), 0.5)
        self.assertEqual(workflow_math.calculate_path_confidence(WorkflowPath(origin="x", steps=[])), 0.0)


class BehaviorPatternTests(unittest.TestCase):
    def setUp(self) -> None:
        self.heuristics = WorkflowHeuristics(WorkflowGraph())

    def _records(self, actions: list[str]) -> list[BehaviorRecord]:
        return [
            BehaviorRecord(timestamp=datetime(2026, 10, 19, 9, minute), action=action, duration_minutes=10)
            for minute, action in enumerate(actions)
        ]

    def test_rare_actions_are_ignored(self) -> None:
        records = self._records(["create_note"] * 9 + ["archive"])
        patterns = self.heuristics.analyze_behavior_patterns(records)
        self.assertEqual([pattern.type for pattern in patterns], ["create_note"])
        self.assertAlmostEqual(patterns[0].frequency, 0.9)
        self.assertEqual(patterns[0].average_duration_minutes, 10)

    def test_recommendations_for_frequent_creation(self) -> None:
        patterns = self.heuristics.analyze_behavior_patterns(self._records(["create_note"] * 3 + ["review"]))
        recommendations = self.heuristics.generate_personalized_recommendations(patterns)
        actions = [suggestion.action for suggestion in recommendations]
        self.assertEqual(actions, ["Continue create_note", "Review and organize created content"])

    def test_empty_log(self) -> None:
        self.assertEqual(self.heuristics.analyze_behavior_patterns([]), [])
        self.assertEqual(self.heuristics.generate_personalized_recommendations([]), [])


if __name__ == "__main__":
    unittest.main()
