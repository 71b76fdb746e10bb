"""Goal analysis, bounded path search and behavior pattern heuristics."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from workflow_intelligence.schema.rules import (
    APPROACH_TEMPLATES,
    DEFAULT_GOAL_ENTITY_TYPES,
    DEFAULT_STEP_ACTION_NAME,
    DEFAULT_STEP_TYPE,
    ENTITY_STEP_TYPES,
    GOAL_COMPLEXITY_STEPS,
    GOAL_ENTITY_KEYWORDS,
    GOAL_MAX_KEYWORDS,
    GOAL_REQUIRED_STEP_TYPES,
    GOAL_STOP_WORDS,
    GOAL_TYPE_KEYWORDS,
    PATTERN_MIN_FREQUENCY,
    PERSONALIZED_MIN_FREQUENCY,
    STEP_ACTION_NAMES,
)
from workflow_intelligence.schemas.behavior import BehaviorPattern, BehaviorRecord
from workflow_intelligence.schemas.graph import WorkflowEntity, WorkflowGraph
from workflow_intelligence.schemas.prediction import Suggestion
from workflow_intelligence.schemas.workflow import (
    GoalAnalysis,
    GoalComplexity,
    PathStep,
    WorkflowOptions,
    WorkflowPath,
    WorkflowStep,
)
from workflow_intelligence.services import workflow_math

_WORD_RE = re.compile(r"[a-z0-9][a-z0-9_\-']*")

STEP_BASE_CONFIDENCE = 0.7
STEP_POSITION_DECAY = 0.2
TASK_STEP_CONFIDENCE = 0.8
OTHER_STEP_CONFIDENCE = 0.6

BALANCED_WEIGHTS = (0.5, 0.5)
EFFICIENCY_FIRST_WEIGHTS = (0.7, 0.3)
COMPLETENESS_FIRST_WEIGHTS = (0.3, 0.7)


@dataclass(slots=True)
class _DraftStep:
    step_type: str
    entity_type: str
    entity_id: str | None = None
    edge_weight: float = 1.0


class WorkflowHeuristics:
    """Deterministic planner over a read-only workflow graph."""

    def __init__(self, graph: WorkflowGraph, *, default_max_steps: int = 6, max_paths: int = 12) -> None:
        self.graph = graph
        self.default_max_steps = default_max_steps
        self.max_paths = max_paths

    def analyze_goal(self, goal_description: str | None) -> GoalAnalysis:
        """Classify a free-text goal; any input, including empty, is accepted."""

        text = goal_description if isinstance(goal_description, str) else ""
        lowered = text.lower()
        words = _WORD_RE.findall(lowered)

        keywords = [word for word in dict.fromkeys(words) if len(word) > 3 and word not in GOAL_STOP_WORDS]
        complexity = _estimate_complexity(len(words))

        required_entity_types = [
            entity_type
            for entity_type, markers in GOAL_ENTITY_KEYWORDS
            if any(marker in lowered for marker in markers)
        ]
        if not required_entity_types:
            required_entity_types = list(DEFAULT_GOAL_ENTITY_TYPES)

        goal_type = next(
            (
                candidate
                for candidate, markers in GOAL_TYPE_KEYWORDS
                if any(word.startswith(marker) for word in words for marker in markers)
            ),
            "general",
        )
        return GoalAnalysis(
            goal_type=goal_type,
            keywords=keywords[:GOAL_MAX_KEYWORDS],
            complexity=complexity,
            estimated_steps=GOAL_COMPLEXITY_STEPS[complexity],
            required_entity_types=required_entity_types,
            required_step_types=list(GOAL_REQUIRED_STEP_TYPES.get(goal_type, ())),
        )

    def find_workflow_paths(
        self,
        start_entities: Sequence[WorkflowEntity],
        goal: GoalAnalysis,
        options: WorkflowOptions | None = None,
    ) -> list[WorkflowPath]:
        """Enumerate candidate paths, bounded by ``max_steps`` and ``max_paths``.

        Order is fixed: trivial single-entity paths, graph walks from each start
        entity, then the static approach templates. The trivial paths are always
        kept.
        """

        options = options or WorkflowOptions()
        max_steps = options.max_steps or self.default_max_steps
        trivial: list[WorkflowPath] = []
        candidates: list[WorkflowPath] = []

        for entity in start_entities:
            trivial.append(
                _finalize_path(
                    "trivial",
                    [_DraftStep(_step_type_for(entity.type), entity.type, entity.id)],
                )
            )

        for entity in start_entities:
            for chain in self._walk_chains(entity, max_steps):
                drafts = [
                    _DraftStep(_step_type_for(node.type), node.type, node.id, weight) for node, weight in chain
                ]
                candidates.append(_finalize_path("graph", _extend_for_goal(drafts, goal, max_steps)))

        if start_entities:
            anchor = start_entities[0]
            for approach, rules in APPROACH_TEMPLATES.items():
                drafts = [
                    _DraftStep(
                        rule.step_type,
                        rule.entity_type or anchor.type,
                        anchor.id if not rule.entity_type else None,
                    )
                    for rule in rules[:max_steps]
                ]
                candidates.append(_finalize_path(f"template:{approach}", drafts))

        if options.time_limit_minutes is not None:
            candidates = [
                path
                for path in candidates
                if workflow_math.calculate_path_estimated_time(path) <= options.time_limit_minutes
            ]

        paths: list[WorkflowPath] = []
        seen: set[tuple[tuple[str, str, str | None], ...]] = set()
        for path in [*trivial, *candidates]:
            if path.signature in seen:
                continue
            seen.add(path.signature)
            paths.append(path)
        return paths[: max(self.max_paths, len(trivial))]

    def rank_paths(
        self,
        paths: Sequence[WorkflowPath],
        goal: GoalAnalysis,
        options: WorkflowOptions | None = None,
    ) -> list[WorkflowPath]:
        """Order paths best first; ties go to fewer steps, then higher confidence."""

        options = options or WorkflowOptions()
        efficiency_weight, completeness_weight = _score_weights(options)
        keyed = []
        for index, path in enumerate(paths):
            total_time = workflow_math.calculate_path_estimated_time(path)
            score = efficiency_weight * workflow_math.calculate_efficiency_score(
                path.steps, total_time
            ) + completeness_weight * workflow_math.calculate_completeness_score(path.steps, goal)
            confidence = workflow_math.calculate_path_confidence(path)
            keyed.append(((-round(score, 9), len(path.steps), -round(confidence, 9), index), path))
        keyed.sort(key=lambda item: item[0])
        return [path for _, path in keyed]

    def select_optimal_path(
        self,
        paths: Sequence[WorkflowPath],
        goal: GoalAnalysis,
        options: WorkflowOptions | None = None,
    ) -> WorkflowPath | None:
        ranked = self.rank_paths(paths, goal, options)
        return ranked[0] if ranked else None

    def convert_path_to_steps(self, path: WorkflowPath, goal: GoalAnalysis) -> list[WorkflowStep]:
        focus = f" ({', '.join(goal.keywords[:3])})" if goal.keywords else ""
        return [
            WorkflowStep(
                action=_action_name(step),
                step_type=step.step_type,
                entity_type=step.entity_type,
                entity_id=step.entity_id,
                description=(
                    f"{step.step_type.replace('_', ' ')} step involving {step.entity_type} "
                    f"to achieve {goal.goal_type} goal{focus}"
                ),
                estimated_time_minutes=workflow_math.step_duration(step.step_type),
                confidence=step.confidence,
            )
            for step in path.steps
        ]

    def identify_path_differences(self, path: WorkflowPath, selected: WorkflowPath) -> list[str]:
        """Describe how ``path`` differs from the ``selected`` one."""

        differences: list[str] = []
        if len(path.steps) != len(selected.steps):
            differences.append(f"Path lengths differ: {len(path.steps)} vs {len(selected.steps)} steps")

        own = Counter(_action_name(step) for step in path.steps)
        other = Counter(_action_name(step) for step in selected.steps)
        for label in sorted((own - other).elements()):
            differences.append(f"Only in this path: {label}")
        for label in sorted((other - own).elements()):
            differences.append(f"Only in selected path: {label}")

        if not differences and path.signature != selected.signature:
            differences.append("Same steps in a different order or on different entities")
        return differences

    def analyze_behavior_patterns(self, records: Sequence[BehaviorRecord]) -> list[BehaviorPattern]:
        if not records:
            return []
        grouped: dict[str, list[BehaviorRecord]] = {}
        for record in records:
            grouped.setdefault(record.action, []).append(record)

        patterns: list[BehaviorPattern] = []
        for action, items in grouped.items():
            frequency = len(items) / len(records)
            if frequency <= PATTERN_MIN_FREQUENCY:
                continue
            durations = [item.duration_minutes for item in items if item.duration_minutes is not None]
            patterns.append(
                BehaviorPattern(
                    type=action,
                    frequency=frequency,
                    occurrences=len(items),
                    success_rate=sum(1 for item in items if item.success) / len(items),
                    average_duration_minutes=sum(durations) / len(durations) if durations else None,
                    description=f"User frequently performs: {action}",
                )
            )
        return patterns

    def generate_personalized_recommendations(self, patterns: Sequence[BehaviorPattern]) -> list[Suggestion]:
        suggestions: list[Suggestion] = []
        for pattern in patterns:
            if pattern.frequency <= PERSONALIZED_MIN_FREQUENCY:
                continue
            successful = pattern.success_rate >= 0.5
            suggestions.append(
                Suggestion(
                    action=f"Continue {pattern.type}",
                    confidence=0.8 if successful else 0.5,
                    reasoning=[
                        "This is a frequently performed action",
                        (
                            f"Success rate {pattern.success_rate:.0%} observed"
                            if successful
                            else f"Low success rate {pattern.success_rate:.0%}; consider revising this step"
                        ),
                    ],
                    estimated_time_minutes=(
                        round(pattern.average_duration_minutes)
                        if pattern.average_duration_minutes is not None
                        else 15
                    ),
                    priority=2,
                    impact="medium",
                )
            )

        if any("create" in pattern.type.lower() for pattern in patterns):
            suggestions.append(
                Suggestion(
                    action="Review and organize created content",
                    confidence=0.7,
                    reasoning=["You frequently create new content", "Organization improves findability"],
                    estimated_time_minutes=20,
                    priority=3,
                    impact="medium",
                )
            )
        return suggestions

    def _walk_chains(
        self,
        start: WorkflowEntity,
        max_steps: int,
    ) -> list[list[tuple[WorkflowEntity, float]]]:
        """Depth-first simple chains of two or more entities starting at ``start``."""

        chains: list[list[tuple[WorkflowEntity, float]]] = []
        stack: list[list[tuple[WorkflowEntity, float]]] = [[(start, 1.0)]]
        while stack and len(chains) < self.max_paths:
            chain = stack.pop()
            if len(chain) > 1:
                chains.append(chain)
            if len(chain) >= max_steps:
                continue
            visited = {node.id for node, _ in chain}
            extensions = [
                [*chain, (neighbor, relationship.strength * relationship.confidence)]
                for neighbor, relationship in self.graph.neighbors(chain[-1][0].id)
                if neighbor.id not in visited
            ]
            # Reversed so the first neighbor is explored first.
            stack.extend(reversed(extensions))
        return chains


def _estimate_complexity(word_count: int) -> GoalComplexity:
    if word_count < 10:
        return "simple"
    if word_count < 30:
        return "medium"
    return "complex"


def _score_weights(options: WorkflowOptions) -> tuple[float, float]:
    if options.prefer_efficiency and not options.prefer_completeness:
        return EFFICIENCY_FIRST_WEIGHTS
    if options.prefer_completeness and not options.prefer_efficiency:
        return COMPLETENESS_FIRST_WEIGHTS
    return BALANCED_WEIGHTS


def _step_type_for(entity_type: str) -> str:
    return ENTITY_STEP_TYPES.get(entity_type, DEFAULT_STEP_TYPE)


def _action_name(step: PathStep) -> str:
    return f"{STEP_ACTION_NAMES.get(step.step_type, DEFAULT_STEP_ACTION_NAME)} {step.entity_type}"


def _extend_for_goal(drafts: list[_DraftStep], goal: GoalAnalysis, max_steps: int) -> list[_DraftStep]:
    extended = list(drafts)
    covered_entities = {draft.entity_type for draft in extended}
    for entity_type in goal.required_entity_types:
        if len(extended) >= max_steps:
            return extended
        if entity_type not in covered_entities:
            extended.append(_DraftStep(_step_type_for(entity_type), entity_type))
            covered_entities.add(entity_type)

    covered_steps = {draft.step_type for draft in extended}
    fallback_entity = goal.required_entity_types[0] if goal.required_entity_types else "task"
    for step_type in goal.required_step_types:
        if len(extended) >= max_steps:
            break
        if step_type not in covered_steps:
            extended.append(_DraftStep(step_type, fallback_entity))
            covered_steps.add(step_type)
    return extended


def _finalize_path(origin: str, drafts: list[_DraftStep]) -> WorkflowPath:
    total = len(drafts)
    steps = []
    for index, draft in enumerate(drafts):
        position_factor = 1 - (index / total) * STEP_POSITION_DECAY
        type_factor = TASK_STEP_CONFIDENCE if draft.entity_type == "task" else OTHER_STEP_CONFIDENCE
        confidence = min(1.0, STEP_BASE_CONFIDENCE * position_factor * type_factor * draft.edge_weight)
        steps.append(
            PathStep(
                step_type=draft.step_type,
                entity_type=draft.entity_type,
                entity_id=draft.entity_id,
                confidence=max(0.0, confidence),
            )
        )
    return WorkflowPath(origin=origin, steps=steps)
