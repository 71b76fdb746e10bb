"""Goal analysis, path planning and workflow plan schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

GoalComplexity = Literal["simple", "medium", "complex"]


class GoalAnalysis(BaseModel):
    """Structured descriptor derived from a free-text goal."""

    goal_type: str = "general"
    keywords: list[str] = Field(default_factory=list)
    complexity: GoalComplexity = "simple"
    estimated_steps: int = 2
    required_entity_types: list[str] = Field(default_factory=list)
    required_step_types: list[str] = Field(default_factory=list)


class PathStep(BaseModel):
    """One node of a candidate path before conversion to a public step."""

    step_type: str
    entity_type: str
    entity_id: str | None = None
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class WorkflowPath(BaseModel):
    """Ordered candidate action sequence produced by path enumeration."""

    origin: str
    steps: list[PathStep]

    @property
    def signature(self) -> tuple[tuple[str, str, str | None], ...]:
        return tuple((step.step_type, step.entity_type, step.entity_id) for step in self.steps)


class WorkflowStep(BaseModel):
    """Public plan step."""

    action: str
    step_type: str
    entity_type: str
    entity_id: str | None = None
    description: str
    estimated_time_minutes: int
    confidence: float


class AlternativePath(BaseModel):
    steps: int
    estimated_time: int
    confidence: float
    differences: list[str]


class WorkflowOptions(BaseModel):
    """Tuning knobs for ``suggest_optimal_workflow``."""

    max_steps: int | None = Field(default=None, ge=1)
    prefer_efficiency: bool = False
    prefer_completeness: bool = False
    time_limit_minutes: int | None = Field(default=None, ge=1)


class WorkflowPlan(BaseModel):
    steps: list[WorkflowStep]
    total_estimated_time: int
    completeness_score: float
    efficiency_score: float
    alternative_paths: list[AlternativePath]


class WorkflowPlanRequest(BaseModel):
    start_entity_ids: list[str]
    goal_description: str = ""
    options: WorkflowOptions | None = None
