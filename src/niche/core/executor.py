"""Simulated task execution: drives a task through its steps one at a time."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

from niche.config.models import EngineConfig
from niche.core.cancellation import CancellationHandle, CancellationRegistry
from niche.tasks.models import Task, TaskStatus, format_duration, round_half_up

logger = logging.getLogger("niche.core.executor")

TaskCallback = Callable[[Task], None]
SleepFunc = Callable[[float], Awaitable[None]]

STEP_ERROR = "Simulated processing error"

COMPLETION_OUTPUTS = (
    "Analysis completed successfully. Found 3 key insights and 5 recommendations.",
    "Research concluded with 12 relevant sources identified and synthesized.",
    "Document processed. Extracted 1,247 data points across 15 categories.",
    "Task completed. Results have been compiled and are ready for review.",
    "Processing finished. Generated comprehensive report with actionable insights.",
)


class RandomSource(Protocol):
    """The subset of :class:`random.Random` the executor draws from."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def choice(self, seq: Sequence[Any]) -> Any: ...


class TaskRunner(Protocol):
    """Anything that can run a task to a terminal or paused state."""

    async def execute(
        self, task: Task, on_update: TaskCallback, on_complete: TaskCallback
    ) -> None: ...


def _now() -> datetime:
    return datetime.now(UTC)


def notify(callback: TaskCallback, task: Task) -> None:
    """Deliver a snapshot of *task*, logging rather than raising listener errors."""
    try:
        callback(task.snapshot())
    except Exception:
        logger.exception("Listener failed for task %s (%s)", task.id, task.status)


class TaskExecutor:
    """Advances tasks through their steps with simulated latency and failures.

    Each step waits a random delay, then fails with probability
    ``failure_rate``. Pause requests made through the registry are honoured
    before a step starts and after its delay, never mid-delay.

    Every ``on_update``/``on_complete`` call receives a fresh deep copy of
    the task, so callers may keep snapshots without them changing later.
    """

    def __init__(
        self,
        registry: CancellationRegistry | None = None,
        config: EngineConfig | None = None,
        rng: RandomSource | None = None,
        sleep: SleepFunc | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.registry = registry if registry is not None else CancellationRegistry()
        self._config = config or EngineConfig()
        self._rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep
        self._clock = clock

    # -- Public API ------------------------------------------------------------

    async def execute(
        self, task: Task, on_update: TaskCallback, on_complete: TaskCallback
    ) -> None:
        """Run *task* until it completes, fails, or is paused.

        Never raises for simulated failures or errors inside the run; those
        end as a ``failed`` task reported through ``on_complete``, which is
        called exactly once per finished run. Listener errors raised while
        reporting a final or paused state are logged. Paused runs do not call
        ``on_complete``.
        """
        handle = self.registry.register(task.id)
        current = task.snapshot()
        started = self._clock()

        try:
            await self._run(current, handle, started, on_update, on_complete)
        except Exception as exc:
            logger.exception("Task %s failed unexpectedly", current.id)
            self._fail_unexpected(current, exc, started)
            notify(on_update, current)
            notify(on_complete, current)
        finally:
            self.registry.deregister(task.id, handle)

    def pause_task(self, task_id: str) -> bool:
        return self.registry.pause_task(task_id)

    def is_task_running(self, task_id: str) -> bool:
        return self.registry.is_task_running(task_id)

    def cancel_all(self) -> int:
        return self.registry.cancel_all()

    # -- Internal --------------------------------------------------------------

    async def _run(
        self,
        current: Task,
        handle: CancellationHandle,
        started: float,
        on_update: TaskCallback,
        on_complete: TaskCallback,
    ) -> None:
        current.status = TaskStatus.RUNNING
        if current.started_at is None:
            current.started_at = _now()
        current.error = None
        current.output = None
        current.completed_at = None
        current.duration = None
        logger.info("Task %s (%s) started", current.id, current.name)
        on_update(current.snapshot())

        total = len(current.steps)
        first = next(
            (i for i, step in enumerate(current.steps) if step.status != TaskStatus.COMPLETED),
            total,
        )
        if first:
            logger.info("Task %s resuming at step %d/%d", current.id, first + 1, total)

        for index in range(first, total):
            step = current.steps[index]

            if handle.aborted:
                self._pause(current, index, on_update)
                return

            step.status = TaskStatus.RUNNING
            step.started_at = _now()
            step.error = None
            current.progress = max(current.progress, round_half_up(index / total * 100))
            logger.debug("Task %s step %d/%d running: %s", current.id, index + 1, total, step.name)
            on_update(current.snapshot())

            await self._sleep(self._step_delay())

            if handle.aborted:
                self._pause(current, index, on_update)
                return

            if self._rng.random() < self._config.failure_rate:
                step.status = TaskStatus.FAILED
                step.completed_at = _now()
                step.error = STEP_ERROR
                current.status = TaskStatus.FAILED
                current.error = f'Step "{step.name}" failed: {STEP_ERROR}'
                self._finish(current, started)
                logger.info("Task %s failed at step %d: %s", current.id, index + 1, step.name)
                notify(on_update, current)
                notify(on_complete, current)
                return

            step.status = TaskStatus.COMPLETED
            step.completed_at = _now()
            step.output = f"Step {index + 1} completed successfully"
            if index + 1 < total:
                current.steps[index + 1].status = TaskStatus.QUEUED
            on_update(current.snapshot())

        current.status = TaskStatus.COMPLETED
        current.progress = 100
        current.output = self._rng.choice(COMPLETION_OUTPUTS)
        self._finish(current, started)
        logger.info("Task %s completed in %s", current.id, current.duration)
        notify(on_update, current)
        notify(on_complete, current)

    def _step_delay(self) -> float:
        cfg = self._config
        return self._rng.uniform(cfg.step_delay_min_ms, cfg.step_delay_max_ms) / 1000

    def _pause(self, current: Task, index: int, on_update: TaskCallback) -> None:
        step = current.steps[index]
        step.status = TaskStatus.IDLE
        step.started_at = None
        current.status = TaskStatus.PAUSED
        logger.info("Task %s paused before step %d", current.id, index + 1)
        notify(on_update, current)

    def _finish(self, current: Task, started: float) -> None:
        current.completed_at = _now()
        current.duration = format_duration(self._clock() - started)

    def _fail_unexpected(self, current: Task, exc: Exception, started: float) -> None:
        for step in current.steps:
            if step.status == TaskStatus.RUNNING:
                step.status = TaskStatus.FAILED
                step.completed_at = _now()
                step.error = str(exc)
        current.status = TaskStatus.FAILED
        current.error = str(exc) or "An unexpected error occurred"
        self._finish(current, started)
