"""Outcome aggregation over task snapshots."""

from __future__ import annotations

from collections.abc import Iterable

from niche.tasks.models import Task, TaskStats, TaskStatus, round_half_up


def success_rate(completed: int, failed: int) -> int:
    """Percentage of finished tasks that completed.

    With nothing finished the denominator falls back to 1, so the rate is 0
    rather than undefined.
    """
    return round_half_up(completed / ((completed + failed) or 1) * 100)


def task_stats(tasks: Iterable[Task]) -> TaskStats:
    """Count tasks by status and compute the success rate."""
    tasks = list(tasks)
    counts = {status: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status] += 1

    completed = counts[TaskStatus.COMPLETED]
    failed = counts[TaskStatus.FAILED]
    return TaskStats(
        total=len(tasks),
        completed=completed,
        failed=failed,
        running=counts[TaskStatus.RUNNING],
        queued=counts[TaskStatus.QUEUED],
        success_rate=success_rate(completed, failed) if tasks else 0,
    )
