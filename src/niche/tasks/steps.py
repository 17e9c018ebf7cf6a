"""Step sequencing: derives a task's ordered step list from its name or type.

Classification is plain keyword matching with no LLM call. Rules are
evaluated in order and the first match wins, so a name like "Research
analysis" is an analysis task.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from niche.tasks.models import TaskStatus, TaskStep

STEP_TEMPLATES: dict[str, list[str]] = {
    "analysis": [
        "Parsing input data",
        "Identifying patterns",
        "Running analysis",
        "Generating insights",
        "Compiling report",
    ],
    "research": [
        "Gathering sources",
        "Reviewing documents",
        "Cross-referencing data",
        "Synthesizing findings",
        "Writing summary",
    ],
    "document": [
        "Reading document",
        "Extracting text",
        "Processing content",
        "Validating data",
        "Finalizing output",
    ],
    "default": [
        "Initializing",
        "Processing",
        "Analyzing",
        "Validating",
        "Completing",
    ],
}


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    def predicate(lower_name: str) -> bool:
        return any(keyword in lower_name for keyword in keywords)

    return predicate


# Priority order: analysis > research > document > default
_CATEGORY_RULES: list[tuple[Callable[[str], bool], str]] = [
    (_contains_any("analysis", "analyze"), "analysis"),
    (_contains_any("research", "find", "search"), "research"),
    (_contains_any("document", "read", "process"), "document"),
]


def classify_task(task_name: str) -> str:
    """Return the step-template category for a task name."""
    lower_name = task_name.lower()
    for predicate, category in _CATEGORY_RULES:
        if predicate(lower_name):
            return category
    return "default"


def generate_task_steps(task_name: str) -> list[TaskStep]:
    """Build fresh steps for a simulated task; the first one starts queued."""
    template = STEP_TEMPLATES[classify_task(task_name)]
    return [
        TaskStep(name=name, status=TaskStatus.QUEUED if index == 0 else TaskStatus.IDLE)
        for index, name in enumerate(template)
    ]


class TaskType(StrEnum):
    """Kinds of work the AI-backed executor can delegate to the model."""

    SUMMARIZE = "summarize"
    QA = "qa"
    EXTRACT = "extract"
    REPORT = "report"
    RESEARCH = "research"
    ANALYZE = "analyze"
    CHAT = "chat"


AI_STEP_TEMPLATES: dict[TaskType, list[str]] = {
    TaskType.SUMMARIZE: [
        "Reading document",
        "Analyzing content structure",
        "Identifying key points",
        "Generating summary",
        "Formatting output",
    ],
    TaskType.QA: [
        "Processing question",
        "Scanning document",
        "Finding relevant sections",
        "Analyzing context",
        "Generating answer",
    ],
    TaskType.EXTRACT: [
        "Parsing document",
        "Identifying data fields",
        "Extracting values",
        "Validating data",
        "Structuring output",
    ],
    TaskType.REPORT: [
        "Analyzing source data",
        "Creating outline",
        "Writing sections",
        "Adding insights",
        "Formatting report",
    ],
    TaskType.RESEARCH: [
        "Processing topic",
        "Gathering information",
        "Analyzing perspectives",
        "Synthesizing findings",
        "Compiling report",
    ],
    TaskType.ANALYZE: [
        "Loading document",
        "Running analysis",
        "Identifying patterns",
        "Drawing conclusions",
        "Preparing results",
    ],
    TaskType.CHAT: [
        "Processing context",
        "Understanding query",
        "Generating response",
    ],
}


def generate_ai_task_steps(task_type: TaskType | str) -> list[TaskStep]:
    """Build fresh steps for an AI-backed task; all start idle.

    Unknown task types fall back to the ``analyze`` template.
    """
    try:
        key = TaskType(task_type)
    except ValueError:
        key = TaskType.ANALYZE
    return [TaskStep(name=name) for name in AI_STEP_TEMPLATES[key]]
