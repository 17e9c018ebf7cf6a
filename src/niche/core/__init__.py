"""Core execution engine: drivers, cancellation, and batch scheduling."""

from niche.core.ai_executor import AITaskConfig, AITaskExecutor, AITaskResult
from niche.core.batch import BatchScheduler
from niche.core.cancellation import CancellationHandle, CancellationRegistry
from niche.core.executor import TaskCallback, TaskExecutor, TaskRunner

__all__ = [
    "AITaskConfig",
    "AITaskExecutor",
    "AITaskResult",
    "BatchScheduler",
    "CancellationHandle",
    "CancellationRegistry",
    "TaskCallback",
    "TaskExecutor",
    "TaskRunner",
]
