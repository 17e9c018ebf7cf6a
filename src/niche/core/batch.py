"""Batch scheduler: runs a queue of tasks with bounded concurrency."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Iterable

from niche.core.executor import TaskCallback, TaskRunner
from niche.tasks.models import Task

logger = logging.getLogger("niche.core.batch")


class BatchScheduler:
    """Starts up to ``concurrency`` workers over a FIFO queue.

    Each worker awaits one ``execute`` call at a time and pulls the next task
    only when it finishes, so at most ``concurrency`` executions are ever
    outstanding. A runner that raises is logged and the worker moves on to
    the next task. No priorities, preemption, or per-task timeouts.
    """

    def __init__(self, runner: TaskRunner, default_concurrency: int = 2) -> None:
        self._runner = runner
        self._default_concurrency = default_concurrency

    async def run_batch(
        self,
        tasks: Iterable[Task],
        on_update: TaskCallback,
        on_complete: TaskCallback,
        concurrency: int | None = None,
    ) -> None:
        """Resolve once every task has completed, failed, or paused."""
        limit = self._default_concurrency if concurrency is None else concurrency
        if limit < 1:
            raise ValueError(f"concurrency must be >= 1, got {limit}")

        queue: deque[Task] = deque(tasks)
        if not queue:
            return

        workers = min(limit, len(queue))
        logger.info("Running batch of %d task(s) with %d worker(s)", len(queue), workers)

        async def worker() -> None:
            while queue:
                task = queue.popleft()
                try:
                    await self._runner.execute(task, on_update, on_complete)
                except Exception:
                    logger.exception("Task %s raised out of its runner; continuing batch", task.id)

        await asyncio.gather(*(worker() for _ in range(workers)))
        logger.info("Batch finished")
