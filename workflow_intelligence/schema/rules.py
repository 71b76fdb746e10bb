"""Static rule tables driving predictions, templates and path planning.

Every table here is immutable configuration data. Predictors and heuristics
read from these tables; nothing mutates them at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class ActionRule:
    """One candidate action with its base confidence."""

    action: str
    confidence: float


@dataclass(frozen=True, slots=True)
class StatusRule:
    """Extra candidate emitted when an entity is in a given status."""

    entity_type: str
    status: str
    action: str
    confidence: float


@dataclass(frozen=True, slots=True)
class TemplateStepRule:
    action: str
    entity_type: str
    description: str
    estimated_time_minutes: int


@dataclass(frozen=True, slots=True)
class TemplateRule:
    """Multi-step template matched when all required entity types co-occur."""

    id: str
    name: str
    description: str
    required_entity_types: tuple[str, ...]
    steps: tuple[TemplateStepRule, ...]
    suitability_score: float
    match_reasons: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class PathStepRule:
    step_type: str
    entity_type: str


def _rules(*pairs: tuple[str, float]) -> tuple[ActionRule, ...]:
    return tuple(ActionRule(action=action, confidence=confidence) for action, confidence in pairs)


ENTITY_TYPE_RULES: Mapping[str, tuple[ActionRule, ...]] = MappingProxyType(
    {
        "note": _rules(
            ("Create task from note", 0.8),
            ("Expand note into document", 0.7),
            ("Add media to note", 0.5),
            ("Share note with team", 0.4),
        ),
        "task": _rules(
            ("Update task progress", 0.7),
            ("Create related tasks", 0.6),
            ("Document task completion", 0.5),
            ("Schedule follow-up", 0.4),
        ),
        "document": _rules(
            ("Review and edit document", 0.6),
            ("Share document for feedback", 0.5),
            ("Create summary from document", 0.4),
            ("Archive completed document", 0.3),
        ),
        "media": _rules(
            ("Review media content", 0.5),
            ("Add description to media", 0.4),
            ("Link media to related documents", 0.3),
        ),
    }
)

OVERDUE_TASK_RULE = ActionRule(action="Resolve overdue task", confidence=0.85)
CLOSED_TASK_STATUSES = frozenset({"completed", "done", "cancelled", "archived"})

STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule(entity_type="document", status="draft", action="Finish draft document", confidence=0.65),
)

ACTION_SEQUENCE_RULES: Mapping[str, tuple[ActionRule, ...]] = MappingProxyType(
    {
        "create_note": _rules(
            ("Add details to note", 0.7),
            ("Create task from note", 0.6),
            ("Organize notes", 0.5),
        ),
        "complete_task": _rules(
            ("Document completion", 0.8),
            ("Create follow-up task", 0.6),
            ("Update project status", 0.5),
        ),
        "edit_document": _rules(
            ("Review changes", 0.7),
            ("Share for feedback", 0.6),
            ("Finalize document", 0.5),
        ),
        "review_media": _rules(
            ("Add annotations", 0.6),
            ("Link to related content", 0.5),
            ("Archive media", 0.4),
        ),
    }
)

TIME_CONTEXT_RULES: Mapping[str, tuple[ActionRule, ...]] = MappingProxyType(
    {
        "morning": _rules(
            ("Plan day", 0.8),
            ("Review pending tasks", 0.7),
            ("Set daily goals", 0.6),
        ),
        "afternoon": _rules(
            ("Work on focused tasks", 0.7),
            ("Collaborate with team", 0.6),
            ("Review progress", 0.5),
        ),
        "evening": _rules(
            ("Wrap up work", 0.8),
            ("Plan for tomorrow", 0.7),
            ("Document accomplishments", 0.6),
        ),
        "weekend": _rules(
            ("Review weekly progress", 0.7),
            ("Plan next week", 0.6),
            ("Clean up workspace", 0.5),
        ),
    }
)
TIME_CONTEXT_CONFIDENCE_SCALE = 0.8
WEEKEND_DAYS = frozenset({"Saturday", "Sunday"})

INTENT_RULES: Mapping[str, tuple[ActionRule, ...]] = MappingProxyType(
    {
        "plan": _rules(
            ("Create project plan", 0.9),
            ("Define milestones", 0.8),
            ("Assign tasks", 0.7),
        ),
        "execute": _rules(
            ("Start next task", 0.9),
            ("Focus on current task", 0.8),
            ("Complete pending items", 0.7),
        ),
        "review": _rules(
            ("Review recent work", 0.8),
            ("Provide feedback", 0.7),
            ("Update documentation", 0.6),
        ),
        "organize": _rules(
            ("Categorize content", 0.8),
            ("Create structure", 0.7),
            ("Clean up workspace", 0.6),
        ),
    }
)

# Keyword -> value tables are scanned in order; first match wins.
ACTION_IMPACT_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("plan", "create", "start", "resolve"), "high"),
    (("review", "update", "edit"), "medium"),
)
ACTION_TIME_KEYWORDS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("plan", "create"), 30),
    (("review", "update"), 15),
    (("organize", "clean"), 20),
)
DEFAULT_ACTION_MINUTES = 10

ACTION_ALTERNATIVES: tuple[tuple[str, tuple[tuple[str, float, str], ...]], ...] = (
    (
        "create task",
        (
            ("Add reminder instead", 0.6, "Less formal than a task"),
            ("Schedule for later", 0.5, "Defer to more appropriate time"),
        ),
    ),
    (
        "review document",
        (
            ("Skim document quickly", 0.4, "Quick overview instead of detailed review"),
            ("Delegate review to team member", 0.3, "Share the workload"),
        ),
    ),
    (
        "organize notes",
        (
            ("Use tags for organization", 0.7, "Flexible categorization system"),
            ("Create folder structure", 0.6, "Hierarchical organization"),
        ),
    ),
)
DEFAULT_ALTERNATIVES: tuple[tuple[str, float, str], ...] = (
    ("Do nothing for now", 0.2, "Wait for more context"),
    ("Ask for clarification", 0.3, "Seek additional information"),
)

WORKFLOW_TEMPLATES: tuple[TemplateRule, ...] = (
    TemplateRule(
        id="note-to-task-workflow",
        name="Note to Task Conversion",
        description="Convert notes into actionable tasks with follow-ups",
        required_entity_types=("note", "task"),
        steps=(
            TemplateStepRule("Review note content", "note", "Extract actionable items", 5),
            TemplateStepRule("Create tasks", "task", "Create tasks from extracted items", 10),
            TemplateStepRule("Assign priorities", "task", "Set task priorities and deadlines", 5),
        ),
        suitability_score=0.8,
        match_reasons=("Contains both notes and tasks", "Common workflow pattern"),
    ),
    TemplateRule(
        id="document-media-integration",
        name="Document with Media Integration",
        description="Enhance documents with related media content",
        required_entity_types=("document", "media"),
        steps=(
            TemplateStepRule("Review document", "document", "Identify sections needing media", 10),
            TemplateStepRule("Link media", "media", "Link relevant media to document sections", 15),
            TemplateStepRule("Update document", "document", "Integrate media references", 10),
        ),
        suitability_score=0.7,
        match_reasons=("Contains documents and media", "Media integration workflow"),
    ),
    TemplateRule(
        id="project-kickoff",
        name="Project Kickoff",
        description="Break a project into scheduled tasks",
        required_entity_types=("project", "task"),
        steps=(
            TemplateStepRule("Define project scope", "project", "Agree on goals and deliverables", 20),
            TemplateStepRule("Break down work", "task", "Split deliverables into tasks", 15),
            TemplateStepRule("Schedule tasks", "task", "Assign owners and due dates", 10),
        ),
        suitability_score=0.75,
        match_reasons=("Contains a project and its tasks", "Planning workflow"),
    ),
    TemplateRule(
        id="conversation-follow-up",
        name="Conversation Follow-up",
        description="Capture decisions from a conversation as notes",
        required_entity_types=("conversation", "note"),
        steps=(
            TemplateStepRule("Summarize conversation", "conversation", "List decisions and open questions", 10),
            TemplateStepRule("Record notes", "note", "Write the summary into a note", 5),
        ),
        suitability_score=0.6,
        match_reasons=("Contains conversations and notes", "Follow-up workflow"),
    ),
)

# Goal analysis.
GOAL_STOP_WORDS = frozenset(
    {"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by", "this", "that", "into"}
)
GOAL_MAX_KEYWORDS = 10
GOAL_COMPLEXITY_STEPS: Mapping[str, int] = MappingProxyType({"simple": 2, "medium": 4, "complex": 7})

GOAL_ENTITY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("task", ("task", "todo", "action")),
    ("document", ("document", "report", "write")),
    ("note", ("note", "idea", "thought")),
    ("media", ("media", "image", "pdf")),
    ("project", ("project", "milestone")),
    ("calendar", ("meeting", "calendar", "schedule")),
)
DEFAULT_GOAL_ENTITY_TYPES: tuple[str, ...] = ("task", "document")

GOAL_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("create", ("create", "make", "turn", "convert", "build", "generate")),
    ("plan", ("plan", "schedule", "prepare", "roadmap")),
    ("review", ("review", "check", "audit", "feedback")),
    ("organize", ("organize", "organise", "clean", "sort", "tidy")),
    ("document", ("document", "write", "report", "summarize", "summarise")),
    ("execute", ("execute", "finish", "complete", "deliver", "ship")),
)
GOAL_REQUIRED_STEP_TYPES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "create": ("analysis", "execution"),
        "plan": ("planning",),
        "review": ("review",),
        "organize": ("analysis", "finalization"),
        "document": ("documentation",),
        "execute": ("execution", "review"),
        "general": (),
    }
)

# Path planning.
ENTITY_STEP_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "note": "research",
        "task": "execution",
        "document": "documentation",
        "media": "review",
        "project": "planning",
        "conversation": "analysis",
        "email": "analysis",
        "calendar": "planning",
        "reference": "research",
    }
)
DEFAULT_STEP_TYPE = "analysis"

APPROACH_TEMPLATES: Mapping[str, tuple[PathStepRule, ...]] = MappingProxyType(
    {
        # An empty entity type means "the start entity's type".
        "direct": (
            PathStepRule("analysis", ""),
            PathStepRule("execution", "task"),
            PathStepRule("documentation", "document"),
        ),
        "comprehensive": (
            PathStepRule("research", "note"),
            PathStepRule("planning", "document"),
            PathStepRule("execution", "task"),
            PathStepRule("review", "document"),
            PathStepRule("finalization", "document"),
        ),
        "quick": (
            PathStepRule("quick_action", "task"),
            PathStepRule("brief_documentation", "note"),
        ),
    }
)

STEP_ACTION_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "analysis": "Analyze",
        "research": "Research",
        "planning": "Plan",
        "execution": "Execute",
        "documentation": "Document",
        "review": "Review",
        "finalization": "Finalize",
        "quick_action": "Quick action",
        "brief_documentation": "Brief documentation",
    }
)
DEFAULT_STEP_ACTION_NAME = "Process"

STEP_DURATION_MINUTES: Mapping[str, int] = MappingProxyType(
    {
        "analysis": 30,
        "research": 45,
        "planning": 25,
        "execution": 60,
        "documentation": 20,
        "review": 15,
        "finalization": 10,
        "quick_action": 10,
        "brief_documentation": 5,
    }
)
DEFAULT_STEP_DURATION_MINUTES = 15

# Behavior learning.
PATTERN_MIN_FREQUENCY = 0.1
PERSONALIZED_MIN_FREQUENCY = 0.3
