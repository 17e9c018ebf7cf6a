"""Tests for the niche CLI task commands."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from niche import __version__
from niche.ai.content import ContentGenerator
from niche.cli.main import app
from niche.config.models import EngineConfig
from niche.core.ai_executor import AITaskExecutor
from niche.tasks.factory import create_task
from niche.tasks.models import Agent, TaskStatus
from niche.tasks.store import TaskStore

runner = CliRunner()


@pytest.fixture
def store(test_settings) -> TaskStore:
    return TaskStore(path=test_settings.history_path)


@pytest.fixture(autouse=True)
def patch_cli(test_settings, store):
    """Point the CLI at tmp_path settings and store, and leave logging alone."""
    with (
        patch("niche.cli.main._load_settings", return_value=test_settings),
        patch("niche.cli.main._get_store", return_value=store),
        patch("niche.cli.main._configure_logging"),
    ):
        yield


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"niche v{__version__}" in result.output


def test_run_completes_and_records(store):
    result = runner.invoke(app, ["run", "Quarterly Financial Analysis", "-d", "Q3"])

    assert result.exit_code == 0
    assert "Parsing input data" in result.output
    assert "Compiling report" in result.output
    tasks = store.all()
    assert len(tasks) == 1
    assert tasks[0].status == TaskStatus.COMPLETED
    assert tasks[0].progress == 100
    assert tasks[0].description == "Q3"


def test_run_failure_is_reported(test_settings, store):
    test_settings.engine = EngineConfig(
        step_delay_min_ms=0, step_delay_max_ms=0, failure_rate=1.0
    )

    result = runner.invoke(app, ["run", "Random Task"])

    assert result.exit_code == 0
    assert "Simulated processing error" in result.output
    assert store.all()[0].status == TaskStatus.FAILED


def test_resume_paused_task(store):
    task = create_task("Market research", "", Agent(name="Ada"))
    task.status = TaskStatus.PAUSED
    task.progress = 40
    task.steps[0].status = TaskStatus.COMPLETED
    task.steps[1].status = TaskStatus.COMPLETED
    store.add(task)

    result = runner.invoke(app, ["resume", task.id])

    assert result.exit_code == 0
    assert "Resuming" in result.output
    resumed = store.get(task.id)
    assert resumed.status == TaskStatus.COMPLETED
    assert resumed.steps[0].output is None  # not re-run


def test_resume_prints_only_remaining_steps(store):
    task = create_task("Market research", "", Agent(name="Ada"))
    task.status = TaskStatus.PAUSED
    task.progress = 40
    task.steps[0].status = TaskStatus.COMPLETED
    task.steps[1].status = TaskStatus.COMPLETED
    store.add(task)

    result = runner.invoke(app, ["resume", task.id])

    assert result.exit_code == 0
    assert "Gathering sources" not in result.output
    assert "Reviewing documents" not in result.output
    assert "Cross-referencing data" in result.output
    assert "Writing summary" in result.output


def test_resume_unknown_task():
    result = runner.invoke(app, ["resume", "doesnotexist"])
    assert result.exit_code == 1
    assert "Task not found" in result.output


def test_resume_rejects_finished_task(store):
    task = create_task("Random Task", "", Agent(name="Ada"))
    task.status = TaskStatus.COMPLETED
    store.add(task)

    result = runner.invoke(app, ["resume", task.id])

    assert result.exit_code == 1
    assert "not paused" in result.output


def test_batch_runs_all(store):
    result = runner.invoke(app, ["batch", "One", "Two", "Three", "-c", "2"])

    assert result.exit_code == 0
    assert [t.status for t in store.all()] == [TaskStatus.COMPLETED] * 3
    assert "3 completed" in result.output
    assert "batch success rate 100%" in result.output


def test_batch_rejects_zero_concurrency(store):
    result = runner.invoke(app, ["batch", "One", "-c", "0"])
    assert result.exit_code == 1
    assert "--concurrency must be at least 1" in result.output
    assert store.all() == []


def test_history_empty():
    result = runner.invoke(app, ["history"])
    assert result.exit_code == 0
    assert "No tasks recorded" in result.output


def test_history_lists_tasks(store):
    store.add(create_task("Review", "", Agent(name="Ada")))
    result = runner.invoke(app, ["history"])
    assert result.exit_code == 0
    assert "Task History" in result.output
    assert "Review" in result.output


def test_history_filter(store):
    done = create_task("Finished", "", Agent(name="Ada"))
    done.status = TaskStatus.COMPLETED
    store.add(done)
    store.add(create_task("Waiting", "", Agent(name="Ada")))

    result = runner.invoke(app, ["history", "--status", "completed"])

    assert "Finished" in result.output
    assert "Waiting" not in result.output


def test_stats(store):
    agent = Agent(name="Ada")
    for status in [TaskStatus.COMPLETED] * 3 + [TaskStatus.FAILED]:
        task = create_task("Random Task", "", agent)
        task.status = status
        store.add(task)

    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "Success rate:" in result.output
    assert "75%" in result.output


class TestAICommand:
    @pytest.fixture
    def generator(self):
        gen = AsyncMock(spec=ContentGenerator)
        gen.summarize_document.return_value = "**Key point**: revenue grew."
        return gen

    @pytest.fixture(autouse=True)
    def patch_ai(self, generator):
        with patch(
            "niche.cli.main._build_ai_executor",
            return_value=AITaskExecutor(generator),
        ):
            yield

    def test_summarize_document(self, store, tmp_path: Path):
        doc = tmp_path / "report.txt"
        doc.write_text("Revenue grew 10% this quarter.", encoding="utf-8")

        result = runner.invoke(app, ["ai", str(doc)])

        assert result.exit_code == 0
        assert "revenue grew" in result.output
        task = store.all()[0]
        assert task.status == TaskStatus.COMPLETED
        assert task.input == str(doc)

    def test_missing_question_fails(self, store, tmp_path: Path):
        doc = tmp_path / "report.txt"
        doc.write_text("text", encoding="utf-8")

        result = runner.invoke(app, ["ai", str(doc), "--type", "qa"])

        assert result.exit_code == 1
        assert "Question is required" in result.output
        assert store.all()[0].status == TaskStatus.FAILED

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["ai", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_unknown_type(self, tmp_path: Path):
        doc = tmp_path / "report.txt"
        doc.write_text("text", encoding="utf-8")
        result = runner.invoke(app, ["ai", str(doc), "--type", "translate"])
        assert result.exit_code == 1
        assert "Unknown task type" in result.output
