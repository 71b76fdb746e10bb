"""Tests for confidence aggregation, accuracy scoring and feedback adjustment."""

import unittest
from datetime import datetime

from workflow_intelligence.schemas.behavior import BehaviorPattern
from workflow_intelligence.schemas.prediction import Suggestion, WorkflowPrediction
from workflow_intelligence.services import confidence

ISSUED_AT = datetime(2026, 10, 19, 9, 0)


def _prediction(action: str, value: float, prediction_id: str) -> WorkflowPrediction:
    return WorkflowPrediction(
        id=prediction_id,
        predicted_action=action,
        confidence=value,
        evidence=["Based on entity type: note"],
        timestamp=ISSUED_AT,
    )


def _pattern(action: str, frequency: float) -> BehaviorPattern:
    return BehaviorPattern(
        type=action,
        frequency=frequency,
        occurrences=1,
        success_rate=1.0,
        description=f"User frequently performs: {action}",
    )


class OverallConfidenceTests(unittest.TestCase):
    def test_empty_inputs_score_zero(self) -> None:
        self.assertEqual(confidence.calculate_overall_confidence([], []), 0.0)

    def test_weighted_means(self) -> None:
        predictions = [_prediction("A", 0.8, "p1"), _prediction("B", 0.6, "p2")]
        suggestions = [Suggestion(action="A", confidence=0.5)]
        self.assertAlmostEqual(
            confidence.calculate_overall_confidence(predictions, suggestions),
            0.6 * 0.7 + 0.4 * 0.5,
        )

    def test_missing_suggestions_contribute_zero(self) -> None:
        predictions = [_prediction("A", 1.0, "p1")]
        self.assertAlmostEqual(confidence.calculate_overall_confidence(predictions, []), 0.6)


class AccuracyTests(unittest.TestCase):
    def test_exact_match_uses_neutral_impact_and_time_terms(self) -> None:
        prediction = _prediction("Create task from note", 0.8, "p1")
        accuracy = confidence.calculate_prediction_accuracy(prediction, "Create task from note")
        self.assertAlmostEqual(accuracy, 0.7 + 0.2 * 0.5 + 0.1 * 0.5)

    def test_partial_word_overlap(self) -> None:
        prediction = _prediction("Create task from note", 0.8, "p1")
        accuracy = confidence.calculate_prediction_accuracy(prediction, "create TASK")
        self.assertAlmostEqual(accuracy, 0.7 * 0.5 + 0.15)

    def test_no_overlap_keeps_placeholder_floor(self) -> None:
        prediction = _prediction("Plan day", 0.64, "p1")
        self.assertAlmostEqual(confidence.calculate_prediction_accuracy(prediction, "went home"), 0.15)

    def test_word_overlap_of_empty_prediction(self) -> None:
        self.assertEqual(confidence.word_overlap("", "anything"), 0.0)


class AdjustmentTests(unittest.TestCase):
    def test_only_target_prediction_changes(self) -> None:
        target = _prediction("Create task from note", 0.8, "p1")
        sibling = _prediction("Expand note into document", 0.7, "p2")

        adjusted = confidence.adjust_predictions_based_on_accuracy([target, sibling], "p1", 0.85)

        self.assertEqual(len(adjusted), 2)
        self.assertAlmostEqual(adjusted[0].confidence, 0.8 * (0.7 + 0.3 * 0.85))
        self.assertEqual(adjusted[0].id, "p1")
        self.assertEqual(len(adjusted[0].evidence), 2)
        self.assertIn("Feedback accuracy 0.85", adjusted[0].evidence[-1])
        self.assertIs(adjusted[1], sibling)
        self.assertEqual(target.confidence, 0.8)

    def test_adjusted_confidence_respects_floor(self) -> None:
        low = _prediction("Share note with team", 0.1, "p1")
        adjusted = confidence.adjust_predictions_based_on_accuracy([low], "p1", 0.0)
        self.assertEqual(adjusted[0].confidence, 0.1)

    def test_unknown_id_returns_same_objects(self) -> None:
        first = _prediction("A", 0.5, "p1")
        adjusted = confidence.adjust_predictions_based_on_accuracy([first], "missing", 1.0)
        self.assertIs(adjusted[0], first)


class PatternConfidenceTests(unittest.TestCase):
    def test_frequency_boost_is_capped(self) -> None:
        scores = confidence.update_confidence_scores([_pattern("create_note", 0.5), _pattern("review", 9.0)])
        self.assertAlmostEqual(scores["create_note"], 0.55)
        self.assertAlmostEqual(scores["review"], 0.9)


class FeedbackMessageTests(unittest.TestCase):
    def test_feedback_tiers(self) -> None:
        prediction = _prediction("Plan day", 0.64, "p1")
        self.assertTrue(confidence.generate_accuracy_feedback(prediction, 0.85).startswith("Excellent"))
        self.assertTrue(confidence.generate_accuracy_feedback(prediction, 0.65).startswith("Good"))
        self.assertTrue(confidence.generate_accuracy_feedback(prediction, 0.45).startswith("Fair"))
        self.assertTrue(
            confidence.generate_accuracy_feedback(prediction, 0.15).startswith("Prediction needs improvement")
        )


if __name__ == "__main__":
    unittest.main()
