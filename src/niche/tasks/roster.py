"""Agent roster: keeps agent counters in step with task status changes.

The execution engine never touches agents. Whoever owns the agents feeds
task snapshots into :meth:`AgentRoster.observe` (typically from the
``on_update`` callback) and the roster reconciles the counters.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from niche.tasks.models import Agent, AgentStatus, Task, TaskStatus
from niche.tasks.stats import success_rate

logger = logging.getLogger("niche.tasks.roster")

_LEAVES_RUNNING = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.PAUSED})


class AgentRoster:
    """In-memory set of agents plus the last status seen for each task."""

    def __init__(self, agents: list[Agent] | None = None) -> None:
        self._agents: dict[str, Agent] = {a.id: a for a in agents or []}
        self._last_status: dict[str, TaskStatus] = {}
        self._finished: dict[str, list[TaskStatus]] = {}

    def add(self, agent: Agent) -> Agent:
        self._agents[agent.id] = agent
        return agent

    def get(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    def all(self) -> list[Agent]:
        return list(self._agents.values())

    def observe(self, task: Task) -> None:
        """Apply a task snapshot; only status transitions change counters."""
        previous = self._last_status.get(task.id)
        self._last_status[task.id] = task.status
        if previous == task.status:
            return

        agent = self._agents.get(task.agent_id)
        if agent is None:
            logger.debug("Task %s belongs to unknown agent %s", task.id, task.agent_id)
            return

        if task.status == TaskStatus.RUNNING:
            agent.tasks_running += 1
            agent.status = AgentStatus.BUSY
        elif previous == TaskStatus.RUNNING and task.status in _LEAVES_RUNNING:
            agent.tasks_running = max(0, agent.tasks_running - 1)
            if task.status != TaskStatus.PAUSED:
                self._record_finish(agent, task.status)
            if agent.tasks_running == 0:
                agent.status = AgentStatus.IDLE

        agent.last_active_at = datetime.now(UTC)

    def _record_finish(self, agent: Agent, status: TaskStatus) -> None:
        finished = self._finished.setdefault(agent.id, [])
        finished.append(status)
        if status == TaskStatus.COMPLETED:
            agent.tasks_completed += 1
        completed = finished.count(TaskStatus.COMPLETED)
        agent.efficiency = success_rate(completed, len(finished) - completed)
