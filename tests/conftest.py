"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from niche.config.models import EngineConfig, ModelConfig
from niche.config.settings import Settings
from niche.core.cancellation import CancellationRegistry
from niche.core.executor import TaskExecutor
from niche.tasks.models import Agent, AgentType


class ScriptedRandom:
    """Deterministic stand-in for random.Random.

    ``random()`` returns queued values (then 0.99, i.e. "no failure"),
    ``uniform()`` returns the lower bound and ``choice()`` the first item.
    """

    def __init__(self, values: Sequence[float] = ()) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0) if self._values else 0.99

    def uniform(self, a: float, b: float) -> float:
        return a

    def choice(self, seq: Sequence[Any]) -> Any:
        return seq[0]


async def no_sleep(_seconds: float) -> None:
    return None


class Recorder:
    """Collects on_update / on_complete snapshots."""

    def __init__(self) -> None:
        self.updates: list = []
        self.completed: list = []

    def on_update(self, task) -> None:
        self.updates.append(task)

    def on_complete(self, task) -> None:
        self.completed.append(task)


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings configured for testing (no real API calls)."""
    return Settings(
        model=ModelConfig(provider="ollama", model_id="llama3.1", heavy_model_id="llama3.1"),
        engine=EngineConfig(step_delay_min_ms=0, step_delay_max_ms=0, failure_rate=0.0),
        history_file=str(tmp_path / "task_history.json"),
    )


@pytest.fixture
def agent() -> Agent:
    return Agent(id="agent-1", name="Ada", type=AgentType.ANALYST)


@pytest.fixture
def registry() -> CancellationRegistry:
    return CancellationRegistry()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_executor(registry: CancellationRegistry):
    """Factory for executors with scripted randomness and no real sleeping."""

    def _make(values: Sequence[float] = (), sleep=no_sleep, failure_rate: float = 0.05):
        return TaskExecutor(
            registry=registry,
            config=EngineConfig(failure_rate=failure_rate),
            rng=ScriptedRandom(values),
            sleep=sleep,
        )

    return _make
