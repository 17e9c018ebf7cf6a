"""JSON file persistence for task history."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from niche.config.constants import TASK_HISTORY_FILE
from niche.tasks.models import Task, TaskStatus

logger = logging.getLogger("niche.tasks.store")


class TaskStore:
    """Load/save task snapshots from a JSON file.

    Uses atomic writes (write to .tmp, then replace) to prevent corruption.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or TASK_HISTORY_FILE
        self._tasks: dict[str, Task] = {}
        self.load()

    # -- Persistence -----------------------------------------------------------

    def load(self) -> None:
        """Load tasks from disk. Silently starts empty if file is missing."""
        self._tasks.clear()
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            for raw in data:
                task = Task.model_validate(raw)
                self._tasks[task.id] = task
            logger.debug("Loaded %d tasks from %s", len(self._tasks), self._path)
        except (json.JSONDecodeError, OSError, TypeError, ValidationError) as exc:
            self._tasks.clear()
            logger.warning("Failed to load task history: %s", exc)

    def save(self) -> None:
        """Persist all tasks to disk atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        data = [task.model_dump(mode="json") for task in self._tasks.values()]
        tmp.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        tmp.replace(self._path)

    # -- CRUD ------------------------------------------------------------------

    def add(self, task: Task) -> Task:
        """Add a task and persist."""
        self._tasks[task.id] = task
        self.save()
        return task

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def update(self, task: Task) -> Task:
        """Replace the stored snapshot of a task and persist."""
        self._tasks[task.id] = task
        self.save()
        return task

    def remove(self, task_id: str) -> bool:
        """Remove a task by ID. Returns True if it existed."""
        if task_id in self._tasks:
            del self._tasks[task_id]
            self.save()
            return True
        return False

    def all(self) -> list[Task]:
        """Return all tasks, oldest first."""
        return sorted(self._tasks.values(), key=lambda t: t.created_at)

    # -- Query helpers ---------------------------------------------------------

    def find_by_status(self, status: TaskStatus) -> list[Task]:
        return [t for t in self.all() if t.status == status]

    def find_by_agent(self, agent_id: str) -> list[Task]:
        return [t for t in self.all() if t.agent_id == agent_id]

    def find_resumable(self) -> list[Task]:
        """Tasks that were paused mid-run and can be executed again."""
        return self.find_by_status(TaskStatus.PAUSED)
