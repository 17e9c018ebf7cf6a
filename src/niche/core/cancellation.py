"""Cancellation registry: cooperative stop handles for in-flight tasks."""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger("niche.core.cancellation")


class CancellationHandle:
    """Abort capability for one execution attempt of one task."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        self._event = asyncio.Event()

    def abort(self) -> None:
        self._event.set()

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until :meth:`abort` is called."""
        await self._event.wait()


class CancellationRegistry:
    """Maps task IDs to the handle of their currently running execution.

    A handle lives exactly as long as one ``execute`` call. Pausing only
    requests a stop; the driver observes it at its next checkpoint.
    """

    def __init__(self) -> None:
        self._handles: dict[str, CancellationHandle] = {}

    def register(self, task_id: str) -> CancellationHandle:
        """Create and register a fresh handle, replacing any existing one."""
        if task_id in self._handles:
            logger.warning("Task %s is already registered; replacing its handle", task_id)
        handle = CancellationHandle(task_id)
        self._handles[task_id] = handle
        return handle

    def deregister(self, task_id: str, handle: CancellationHandle | None = None) -> None:
        """Drop a task's handle.

        When *handle* is given it is removed only if it is still the
        registered one, so a finished attempt never evicts a newer attempt.
        """
        current = self._handles.get(task_id)
        if current is None:
            return
        if handle is not None and current is not handle:
            return
        del self._handles[task_id]

    def pause_task(self, task_id: str) -> bool:
        """Request a cooperative stop. Returns False if the task is not running."""
        handle = self._handles.get(task_id)
        if handle is None:
            return False
        handle.abort()
        logger.info("Pause requested for task %s", task_id)
        return True

    def is_task_running(self, task_id: str) -> bool:
        return task_id in self._handles

    def cancel_all(self) -> int:
        """Abort and forget every registered handle. Returns how many there were."""
        handles = list(self._handles.values())
        for handle in handles:
            handle.abort()
        self._handles.clear()
        if handles:
            logger.info("Cancelled %d running task(s)", len(handles))
        return len(handles)

    @property
    def active_task_ids(self) -> list[str]:
        return list(self._handles)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)
