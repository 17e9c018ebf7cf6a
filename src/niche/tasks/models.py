"""Pydantic models for agents, tasks, and their steps."""

from __future__ import annotations

import math
import secrets
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class TaskStatus(StrEnum):
    """Lifecycle states shared by tasks and their steps.

    Steps never use ``paused``.
    """

    IDLE = "idle"
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"


TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED})


class AgentType(StrEnum):
    """Industry persona an agent runs as; selects its system prompt."""

    ACCOUNTANT = "accountant"
    LEGAL = "legal"
    MEDICAL = "medical"
    ARCHITECT = "architect"
    RESEARCHER = "researcher"
    ANALYST = "analyst"


class AgentStatus(StrEnum):
    ACTIVE = "active"
    IDLE = "idle"
    BUSY = "busy"
    ERROR = "error"


def generate_id() -> str:
    return secrets.token_hex(6)


def _now() -> datetime:
    return datetime.now(UTC)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def format_duration(seconds: float) -> str:
    """Format elapsed wall-clock seconds as ``1h 5m``, ``2m 30s`` or ``12s``."""
    total_seconds = int(math.floor(max(seconds, 0.0)))
    minutes = total_seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    if minutes > 0:
        return f"{minutes}m {total_seconds % 60}s"
    return f"{total_seconds}s"


class Agent(BaseModel):
    """An agent persona that tasks run against.

    The engine only reads ``id``, ``name`` and ``type``; the counters are
    maintained by :class:`niche.tasks.roster.AgentRoster`.
    """

    id: str = Field(default_factory=generate_id)
    name: str
    type: AgentType = AgentType.ANALYST
    specialization: str = ""
    status: AgentStatus = AgentStatus.IDLE
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_steps: int = 10
    tasks_completed: int = 0
    tasks_running: int = 0
    efficiency: int = 100
    created_at: datetime = Field(default_factory=_now)
    last_active_at: datetime = Field(default_factory=_now)


class TaskStep(BaseModel):
    """One named phase of a task's execution."""

    id: str = Field(default_factory=generate_id)
    name: str
    status: TaskStatus = TaskStatus.IDLE
    started_at: datetime | None = None
    completed_at: datetime | None = None
    output: str | None = None
    error: str | None = None


class Task(BaseModel):
    """A unit of agent work with a fixed, ordered list of steps."""

    id: str = Field(default_factory=generate_id)
    name: str
    description: str = ""
    agent_id: str
    agent_name: str = ""
    status: TaskStatus = TaskStatus.QUEUED
    progress: int = 0  # 0-100, 100 only when completed
    steps: list[TaskStep] = Field(default_factory=list)
    input: str | None = None
    output: str | None = None
    error: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration: str | None = None
    created_at: datetime = Field(default_factory=_now)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def running_steps(self) -> int:
        return sum(1 for step in self.steps if step.status == TaskStatus.RUNNING)

    def snapshot(self) -> Task:
        """Return an independent deep copy safe to hand to callers."""
        return self.model_copy(deep=True)


class TaskStats(BaseModel):
    """Summary counts over a collection of tasks."""

    total: int = 0
    completed: int = 0
    failed: int = 0
    running: int = 0
    queued: int = 0
    success_rate: int = 0
