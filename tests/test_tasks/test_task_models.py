"""Tests for task models, the task factory and formatting helpers."""

from __future__ import annotations

import pytest

from niche.tasks.factory import create_ai_task, create_task
from niche.tasks.models import (
    Task,
    TaskStatus,
    TaskStep,
    format_duration,
    round_half_up,
)
from niche.tasks.steps import TaskType


@pytest.mark.parametrize(("seconds", "expected"), [
    (0, "0s"),
    (0.999, "0s"),
    (12.7, "12s"),
    (60, "1m 0s"),
    (150, "2m 30s"),
    (3599, "59m 59s"),
    (3600, "1h 0m"),
    (3900, "1h 5m"),
    (-3, "0s"),
])
def test_format_duration(seconds: float, expected: str):
    assert format_duration(seconds) == expected


@pytest.mark.parametrize(("value", "expected"), [
    (0.5, 1),
    (1.5, 2),
    (2.5, 3),
    (12.5, 13),
    (33.33, 33),
    (66.67, 67),
])
def test_round_half_up(value: float, expected: int):
    assert round_half_up(value) == expected


class TestCreateTask:
    def test_defaults(self, agent):
        task = create_task("Quarterly Financial Analysis", "Q3 numbers", agent, input="q3.csv")
        assert task.status == TaskStatus.QUEUED
        assert task.progress == 0
        assert task.agent_id == agent.id
        assert task.agent_name == "Ada"
        assert task.input == "q3.csv"
        assert task.created_at is not None
        assert task.started_at is None
        assert len(task.steps) == 5
        assert task.steps[0].status == TaskStatus.QUEUED

    def test_unique_ids(self, agent):
        assert create_task("A", "", agent).id != create_task("A", "", agent).id

    def test_ai_task_steps_follow_type(self, agent):
        task = create_ai_task("Chat", "", agent, TaskType.CHAT)
        assert len(task.steps) == 3
        assert all(s.status == TaskStatus.IDLE for s in task.steps)


class TestTaskHelpers:
    def test_is_terminal(self):
        assert Task(name="t", agent_id="a", status=TaskStatus.COMPLETED).is_terminal
        assert Task(name="t", agent_id="a", status=TaskStatus.FAILED).is_terminal
        assert not Task(name="t", agent_id="a", status=TaskStatus.PAUSED).is_terminal

    def test_running_steps(self):
        task = Task(
            name="t",
            agent_id="a",
            steps=[
                TaskStep(name="one", status=TaskStatus.COMPLETED),
                TaskStep(name="two", status=TaskStatus.RUNNING),
                TaskStep(name="three"),
            ],
        )
        assert task.running_steps == 1

    def test_snapshot_is_independent(self, agent):
        task = create_task("Random Task", "", agent)
        copy = task.snapshot()
        copy.steps[0].status = TaskStatus.RUNNING
        copy.progress = 40
        assert task.steps[0].status == TaskStatus.QUEUED
        assert task.progress == 0

    def test_json_round_trip_keeps_statuses(self, agent):
        task = create_task("Random Task", "", agent)
        restored = Task.model_validate(task.model_dump(mode="json"))
        assert restored.steps[0].status == TaskStatus.QUEUED
        assert restored.created_at == task.created_at
