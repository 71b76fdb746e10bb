"""Quantitative aggregation over workflow steps and candidate paths."""

from __future__ import annotations

from collections.abc import Sequence

from workflow_intelligence.schema.rules import DEFAULT_STEP_DURATION_MINUTES, STEP_DURATION_MINUTES
from workflow_intelligence.schemas.workflow import GoalAnalysis, PathStep, WorkflowPath, WorkflowStep

EFFICIENCY_TIME_SCALE_MINUTES = 60.0
EFFICIENCY_STEP_PENALTY = 0.1


def step_duration(step_type: str) -> int:
    return STEP_DURATION_MINUTES.get(step_type, DEFAULT_STEP_DURATION_MINUTES)


def calculate_total_estimated_time(steps: Sequence[WorkflowStep]) -> int:
    return sum(step.estimated_time_minutes for step in steps)


def calculate_completeness_score(steps: Sequence[WorkflowStep] | Sequence[PathStep], goal: GoalAnalysis) -> float:
    """Share of goal-required entity types and step types covered by ``steps``."""

    if not steps:
        return 0.0
    required = {("entity", value) for value in goal.required_entity_types}
    required |= {("step", value) for value in goal.required_step_types}
    if not required:
        return 1.0
    covered: set[tuple[str, str]] = set()
    for step in steps:
        covered.add(("entity", step.entity_type))
        covered.add(("step", step.step_type))
    return len(required & covered) / len(required)


def calculate_efficiency_score(steps: Sequence[WorkflowStep] | Sequence[PathStep], total_time: float) -> float:
    """Score in (0, 1]; never increases as ``total_time`` grows."""

    if not steps:
        return 0.0
    time_factor = EFFICIENCY_TIME_SCALE_MINUTES / (EFFICIENCY_TIME_SCALE_MINUTES + max(0.0, total_time))
    step_factor = 1.0 / (1.0 + EFFICIENCY_STEP_PENALTY * (len(steps) - 1))
    return time_factor * step_factor


def calculate_path_estimated_time(path: WorkflowPath) -> int:
    return sum(step_duration(step.step_type) for step in path.steps)


def calculate_path_confidence(path: WorkflowPath) -> float:
    if not path.steps:
        return 0.0
    return sum(step.confidence for step in path.steps) / len(path.steps)

