"""Task factory: builds queued tasks for an agent."""

from __future__ import annotations

from niche.tasks.models import Agent, Task, TaskStatus
from niche.tasks.steps import TaskType, generate_ai_task_steps, generate_task_steps


def create_task(
    name: str,
    description: str,
    agent: Agent,
    input: str | None = None,
) -> Task:
    """Create a queued task whose steps are derived from its name."""
    return Task(
        name=name,
        description=description,
        agent_id=agent.id,
        agent_name=agent.name,
        status=TaskStatus.QUEUED,
        progress=0,
        steps=generate_task_steps(name),
        input=input,
    )


def create_ai_task(
    name: str,
    description: str,
    agent: Agent,
    task_type: TaskType | str,
    input: str | None = None,
) -> Task:
    """Create a queued task whose steps follow an AI task type."""
    return Task(
        name=name,
        description=description,
        agent_id=agent.id,
        agent_name=agent.name,
        status=TaskStatus.QUEUED,
        progress=0,
        steps=generate_ai_task_steps(task_type),
        input=input,
    )
