"""Task subsystem: models, step sequencing, stats, and history."""

from niche.tasks.factory import create_ai_task, create_task
from niche.tasks.models import Agent, AgentType, Task, TaskStats, TaskStatus, TaskStep
from niche.tasks.roster import AgentRoster
from niche.tasks.stats import task_stats
from niche.tasks.steps import TaskType, generate_ai_task_steps, generate_task_steps
from niche.tasks.store import TaskStore

__all__ = [
    "Agent",
    "AgentRoster",
    "AgentType",
    "Task",
    "TaskStats",
    "TaskStatus",
    "TaskStep",
    "TaskStore",
    "TaskType",
    "create_ai_task",
    "create_task",
    "generate_ai_task_steps",
    "generate_task_steps",
    "task_stats",
]
