"""AI-backed task execution: delegates the work to a content generator.

Unlike :class:`niche.core.executor.TaskExecutor`, steps here are not worked
through one by one. The generator reports coarse progress (0-100) and that
percentage is mapped onto the task's steps. Once started, the model call
cannot be paused.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from niche.ai.client import ChatMessage
from niche.config.constants import TRUNCATION_NOTICE
from niche.config.models import AIConfig
from niche.core.executor import notify
from niche.documents.processor import ProcessedDocument, extract_text_from_file
from niche.tasks.models import Agent, Task, TaskStatus, format_duration, round_half_up
from niche.tasks.steps import TaskType

if TYPE_CHECKING:
    from niche.ai.content import ContentGenerator
    from niche.core.executor import TaskCallback

logger = logging.getLogger("niche.core.ai_executor")

ProgressCallback = Callable[[int, str], None]
Extractor = Callable[[Path], ProcessedDocument]

# Share of overall progress the step mapping may reach before the final result
_STEP_PROGRESS_CEILING = 80


class AITaskConfig(BaseModel):
    """What to ask the model, and the material to ask it about."""

    type: TaskType = TaskType.ANALYZE
    document_content: str = ""
    document_path: Path | None = None
    question: str | None = None
    extraction_type: str = "general"
    report_type: str = "analysis"
    research_topic: str | None = None
    chat_history: list[ChatMessage] = Field(default_factory=list)


class AITaskResult(BaseModel):
    success: bool
    output: str = ""
    error: str | None = None


def _now() -> datetime:
    return datetime.now(UTC)


class AITaskExecutor:
    """Runs tasks whose output comes from a :class:`ContentGenerator`."""

    def __init__(
        self,
        generator: ContentGenerator,
        extractor: Extractor = extract_text_from_file,
        config: AIConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._generator = generator
        self._extractor = extractor
        self._config = config or AIConfig()
        self._clock = clock

    async def run_ai_task(
        self,
        config: AITaskConfig,
        agent: Agent,
        on_progress: ProgressCallback | None = None,
    ) -> AITaskResult:
        """Produce output for *config*; failures come back as ``success=False``."""

        def progress(value: int, label: str) -> None:
            logger.debug("AI task progress %d%%: %s", value, label)
            if on_progress is not None:
                on_progress(value, label)

        try:
            content = config.document_content
            if config.document_path is not None and not content:
                progress(10, "Extracting document content...")
                processed = await asyncio.to_thread(self._extractor, config.document_path)
                content = processed.content

            limit = self._config.max_document_chars
            if len(content) > limit:
                content = content[:limit] + TRUNCATION_NOTICE

            progress(30, "Processing with AI...")
            output = await self._dispatch(config, agent, content, progress)
            progress(90, "Finalizing results...")
            return AITaskResult(success=True, output=output)
        except Exception as exc:
            logger.error("AI task failed for agent %s: %s", agent.name, exc)
            return AITaskResult(
                success=False,
                error=str(exc) or "An error occurred during AI processing",
            )

    async def _dispatch(
        self,
        config: AITaskConfig,
        agent: Agent,
        content: str,
        progress: ProgressCallback,
    ) -> str:
        gen = self._generator
        agent_type = str(agent.type)
        task_type = config.type

        if task_type == TaskType.SUMMARIZE:
            progress(50, "Generating summary...")
            return await gen.summarize_document(content, agent_type)

        if task_type == TaskType.QA:
            if not config.question:
                raise ValueError("Question is required for Q&A tasks")
            progress(50, "Analyzing document for answer...")
            return await gen.answer_question(content, config.question, agent_type)

        if task_type == TaskType.EXTRACT:
            progress(50, "Extracting structured data...")
            return await gen.extract_data(content, config.extraction_type, agent_type)

        if task_type == TaskType.REPORT:
            progress(50, "Generating report...")
            return await gen.generate_report(content, config.report_type, agent_type)

        if task_type == TaskType.RESEARCH:
            if not config.research_topic:
                raise ValueError("Research topic is required")
            progress(50, "Conducting research...")
            return await gen.conduct_research(config.research_topic, content, agent_type)

        if task_type == TaskType.CHAT:
            progress(50, "Processing conversation...")
            return await gen.chat_with_context(
                config.chat_history, config.question or "", content, agent_type
            )

        progress(50, "Analyzing content...")
        return await gen.summarize_document(content, agent_type)

    async def execute(
        self,
        task: Task,
        config: AITaskConfig,
        agent: Agent,
        on_update: TaskCallback,
        on_complete: TaskCallback,
    ) -> None:
        """Run *task* through the generator, mirroring progress onto its steps."""
        started = self._clock()
        current = task.snapshot()
        current.status = TaskStatus.RUNNING
        if current.started_at is None:
            current.started_at = _now()
        current.error = None
        current.output = None
        logger.info("AI task %s (%s) started as %s", current.id, current.name, config.type)

        def advance(value: int, _label: str = "") -> None:
            if self._apply_progress(current, value):
                on_update(current.snapshot())

        try:
            on_update(current.snapshot())
            advance(0)
            result = await self.run_ai_task(config, agent, advance)
            if result.success:
                completed_at = _now()
                for step in current.steps:
                    if step.status != TaskStatus.COMPLETED:
                        step.status = TaskStatus.COMPLETED
                        step.started_at = step.started_at or completed_at
                        step.completed_at = completed_at
                current.status = TaskStatus.COMPLETED
                current.progress = 100
                current.output = result.output
            else:
                current.status = TaskStatus.FAILED
                current.error = result.error
        except Exception as exc:
            logger.exception("AI task %s failed unexpectedly", current.id)
            current.status = TaskStatus.FAILED
            current.error = str(exc) or "An unexpected error occurred"

        current.completed_at = _now()
        current.duration = format_duration(self._clock() - started)
        logger.info("AI task %s %s in %s", current.id, current.status, current.duration)
        notify(on_update, current)
        notify(on_complete, current)

    def runner_for(self, config: AITaskConfig, agent: Agent) -> _BoundAIRunner:
        """Bind a config and agent so AI tasks fit the batch scheduler."""
        return _BoundAIRunner(self, config, agent)

    @staticmethod
    def _apply_progress(task: Task, value: int) -> bool:
        """Map a 0-100 progress value onto step statuses. Returns True if changed.

        Steps before the mapped index are completed, the mapped step is
        running; a completed step is never downgraded.
        """
        total = len(task.steps)
        if total == 0:
            return False

        index = min(math.floor(value / 100 * total), total - 1)
        now = _now()
        changed = False

        for step in task.steps[:index]:
            if step.status != TaskStatus.COMPLETED:
                step.status = TaskStatus.COMPLETED
                step.started_at = step.started_at or now
                step.completed_at = now
                changed = True

        step = task.steps[index]
        if step.status not in (TaskStatus.COMPLETED, TaskStatus.RUNNING):
            step.status = TaskStatus.RUNNING
            step.started_at = now
            changed = True

        mapped = round_half_up((index + 1) / total * _STEP_PROGRESS_CEILING)
        task.progress = max(task.progress, mapped)
        return changed


class _BoundAIRunner:
    """Adapter exposing ``execute(task, on_update, on_complete)``."""

    def __init__(self, executor: AITaskExecutor, config: AITaskConfig, agent: Agent) -> None:
        self._executor = executor
        self._config = config
        self._agent = agent

    async def execute(
        self, task: Task, on_update: TaskCallback, on_complete: TaskCallback
    ) -> None:
        await self._executor.execute(task, self._config, self._agent, on_update, on_complete)
