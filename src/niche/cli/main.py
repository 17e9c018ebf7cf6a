"""niche CLI: the main entry point."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.table import Table

from niche import __version__
from niche.tasks.models import Agent, AgentType, Task, TaskStatus

if TYPE_CHECKING:
    from niche.config.settings import Settings
    from niche.core.ai_executor import AITaskExecutor
    from niche.core.executor import TaskExecutor
    from niche.tasks.store import TaskStore

app = typer.Typer(
    name="niche",
    help="Run AI agent tasks with step-by-step progress tracking.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_STATUS_STYLE = {
    TaskStatus.IDLE: "dim",
    TaskStatus.QUEUED: "cyan",
    TaskStatus.RUNNING: "blue",
    TaskStatus.COMPLETED: "green",
    TaskStatus.FAILED: "red",
    TaskStatus.PAUSED: "yellow",
}


# --- Helpers ---

def _load_settings() -> Settings:
    from niche.config.settings import get_settings

    return get_settings()


def _get_store(path: Path | None = None) -> TaskStore:
    """Create a TaskStore over the configured history file."""
    from niche.tasks.store import TaskStore

    return TaskStore(path=path or _load_settings().history_path)


def _build_executor(settings: Settings) -> TaskExecutor:
    from niche.core.executor import TaskExecutor

    return TaskExecutor(config=settings.engine)


def _build_ai_executor(settings: Settings) -> AITaskExecutor:
    from niche.ai.content import ContentGenerator
    from niche.core.ai_executor import AITaskExecutor

    return AITaskExecutor(ContentGenerator(settings), config=settings.ai)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _styled(status: TaskStatus) -> str:
    style = _STATUS_STYLE.get(status, "")
    return f"[{style}]{status.value}[/{style}]" if style else status.value


def _make_agent(name: str, agent_type: AgentType) -> Agent:
    return Agent(name=name, type=agent_type)


class _ProgressPrinter:
    """Prints step transitions and persists every snapshot it sees."""

    def __init__(self, store: TaskStore, show_task: bool = False) -> None:
        self._store = store
        self._show_task = show_task
        self._seen: dict[str, dict[str, TaskStatus]] = {}

    def seed(self, task: Task) -> None:
        """Treat the current step states of *task* as already printed."""
        self._seen[task.id] = {step.id: step.status for step in task.steps}

    def on_update(self, task: Task) -> None:
        self._store.update(task)
        seen = self._seen.setdefault(task.id, {})
        prefix = f"[dim]{task.name}[/dim] " if self._show_task else ""
        for index, step in enumerate(task.steps, start=1):
            if seen.get(step.id) == step.status:
                continue
            seen[step.id] = step.status
            if step.status in (TaskStatus.RUNNING, TaskStatus.COMPLETED, TaskStatus.FAILED):
                console.print(
                    f"  {prefix}[{index}/{len(task.steps)}] {step.name} "
                    f"{_styled(step.status)} [dim]({task.progress}%)[/dim]"
                )
        if task.status == TaskStatus.PAUSED:
            console.print(
                f"  {prefix}{_styled(task.status)}, resume with "
                f"[bold]niche resume {task.id}[/bold]"
            )

    def on_complete(self, task: Task) -> None:
        line = f"  {_styled(task.status)} [bold]{task.name}[/bold] in {task.duration}"
        console.print(line)
        if task.error:
            console.print(f"  [red]{task.error}[/red]")
        elif task.output and not self._show_task:
            console.print(f"  {task.output}")


@contextlib.contextmanager
def _pause_on_interrupt(executor: TaskExecutor):
    """Turn Ctrl-C into a cooperative pause of every running task."""
    loop = asyncio.get_running_loop()
    installed = False
    # Unsupported on Windows and outside the main thread
    with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
        loop.add_signal_handler(signal.SIGINT, executor.cancel_all)
        installed = True
    try:
        yield
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


async def _execute_one(executor: TaskExecutor, task: Task, printer: _ProgressPrinter) -> None:
    with _pause_on_interrupt(executor):
        await executor.execute(task, printer.on_update, printer.on_complete)


# --- Commands ---

@app.callback(invoke_without_command=True)
def main_callback(
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", help="Log engine activity"),
):
    if version:
        console.print(f"niche v{__version__}")
        raise typer.Exit()
    _configure_logging("DEBUG" if verbose else _load_settings().log_level)


@app.command()
def run(
    name: str = typer.Argument(help="Task name; keywords pick the step template"),
    description: str = typer.Option("", "--description", "-d", help="What the task is for"),
    agent_name: str = typer.Option("Analyst", "--agent", "-a", help="Agent display name"),
    agent_type: AgentType = typer.Option(AgentType.ANALYST, "--agent-type", "-t"),
    input_text: Optional[str] = typer.Option(None, "--input", "-i", help="Task input"),
):
    """Create a task and run it with simulated execution. Ctrl-C pauses it."""
    from niche.tasks.factory import create_task

    settings = _load_settings()
    store = _get_store()
    agent = _make_agent(agent_name, agent_type)
    task = store.add(create_task(name, description, agent, input_text))

    console.print(f"\n  Running [bold]{task.name}[/bold] [dim]({task.id})[/dim] as {agent.name}")
    executor = _build_executor(settings)
    asyncio.run(_execute_one(executor, task, _ProgressPrinter(store)))
    console.print()


@app.command()
def resume(task_id: str = typer.Argument(help="ID of a paused task")):
    """Resume a paused task from its first unfinished step."""
    store = _get_store()
    task = store.get(task_id)
    if task is None:
        console.print(f"[red]Task not found: {task_id}[/red]")
        raise typer.Exit(1)
    if task.status != TaskStatus.PAUSED:
        console.print(f"[yellow]Task {task_id} is {task.status.value}, not paused.[/yellow]")
        raise typer.Exit(1)

    console.print(f"\n  Resuming [bold]{task.name}[/bold] [dim]({task.id})[/dim]")
    executor = _build_executor(_load_settings())
    printer = _ProgressPrinter(store)
    printer.seed(task)
    asyncio.run(_execute_one(executor, task, printer))
    console.print()


@app.command()
def batch(
    names: list[str] = typer.Argument(help="Task names to run"),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-c", help="Max tasks running at once"
    ),
    agent_name: str = typer.Option("Analyst", "--agent", "-a", help="Agent display name"),
    agent_type: AgentType = typer.Option(AgentType.ANALYST, "--agent-type", "-t"),
):
    """Run several tasks with bounded concurrency."""
    from niche.core.batch import BatchScheduler
    from niche.tasks.factory import create_task
    from niche.tasks.roster import AgentRoster
    from niche.tasks.stats import task_stats

    if concurrency is not None and concurrency < 1:
        console.print("[red]--concurrency must be at least 1[/red]")
        raise typer.Exit(1)

    settings = _load_settings()
    store = _get_store()
    agent = _make_agent(agent_name, agent_type)
    roster = AgentRoster([agent])
    tasks = [store.add(create_task(name, "", agent)) for name in names]

    printer = _ProgressPrinter(store, show_task=True)

    def on_update(task: Task) -> None:
        roster.observe(task)
        printer.on_update(task)

    executor = _build_executor(settings)
    scheduler = BatchScheduler(executor, settings.engine.max_concurrent_tasks)

    async def _run() -> None:
        with _pause_on_interrupt(executor):
            await scheduler.run_batch(tasks, on_update, printer.on_complete, concurrency)

    asyncio.run(_run())

    final = [store.get(t.id) or t for t in tasks]
    stats = task_stats(final)
    console.print(
        f"\n  [bold]{agent.name}[/bold]: {agent.tasks_completed} completed, "
        f"efficiency {agent.efficiency}%, batch success rate {stats.success_rate}%\n"
    )


@app.command("ai")
def ai_task(
    file: Path = typer.Argument(help="Document to process"),
    task_type: str = typer.Option("summarize", "--type", help="summarize|qa|extract|report|research|analyze|chat"),  # noqa: E501
    question: Optional[str] = typer.Option(None, "--question", "-q", help="Question for qa/chat"),
    topic: Optional[str] = typer.Option(None, "--topic", help="Topic for research"),
    extraction_type: str = typer.Option("general", "--extract", help="invoice|contract|financial|general"),  # noqa: E501
    report_type: str = typer.Option("analysis", "--report", help="analysis|summary|comparison"),
    agent_type: AgentType = typer.Option(AgentType.ANALYST, "--agent-type", "-t"),
):
    """Run a real AI task against a document."""
    from niche.core.ai_executor import AITaskConfig
    from niche.tasks.factory import create_ai_task
    from niche.tasks.steps import TaskType

    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)
    try:
        kind = TaskType(task_type)
    except ValueError:
        console.print(f"[red]Unknown task type: {task_type}[/red]")
        raise typer.Exit(1)

    settings = _load_settings()
    store = _get_store()
    agent = _make_agent(f"{agent_type.value.title()} Agent", agent_type)
    task = store.add(
        create_ai_task(f"{kind.value.title()} {file.name}", "", agent, kind, input=str(file))
    )
    config = AITaskConfig(
        type=kind,
        document_path=file,
        question=question,
        research_topic=topic,
        extraction_type=extraction_type,
        report_type=report_type,
    )

    printer = _ProgressPrinter(store, show_task=True)
    executor = _build_ai_executor(settings)
    console.print(f"\n  Running [bold]{task.name}[/bold] [dim]({task.id})[/dim]")
    asyncio.run(executor.execute(task, config, agent, printer.on_update, printer.on_complete))

    result = store.get(task.id)
    if result is not None and result.status == TaskStatus.COMPLETED and result.output:
        console.print()
        console.print(Markdown(result.output))
    console.print()
    if result is None or result.status == TaskStatus.FAILED:
        raise typer.Exit(1)


@app.command()
def history(
    status: Optional[TaskStatus] = typer.Option(None, "--status", "-s", help="Filter by status"),
):
    """List recorded tasks."""
    store = _get_store()
    tasks = store.find_by_status(status) if status else store.all()

    if not tasks:
        console.print("[dim]No tasks recorded.[/dim]")
        raise typer.Exit()

    table = Table(title="Task History", show_lines=False)
    table.add_column("ID", style="dim", max_width=12)
    table.add_column("Name", style="bold")
    table.add_column("Agent")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Result", max_width=40)

    for task in tasks:
        result = task.error or task.output or ""
        table.add_row(
            task.id,
            task.name,
            task.agent_name,
            _styled(task.status),
            f"{task.progress}%",
            task.duration or "-",
            result[:40] + ("..." if len(result) > 40 else ""),
        )

    console.print(table)
    console.print(f"\n  [dim]{len(tasks)} tasks total.[/dim]\n")


@app.command()
def stats():
    """Show success rate and counts over recorded tasks."""
    from niche.tasks.stats import task_stats

    summary = task_stats(_get_store().all())
    console.print()
    console.print(f"  [bold]Total:[/bold]        {summary.total}")
    console.print(f"  [bold]Completed:[/bold]    {summary.completed}")
    console.print(f"  [bold]Failed:[/bold]       {summary.failed}")
    console.print(f"  [bold]Running:[/bold]      {summary.running}")
    console.print(f"  [bold]Queued:[/bold]       {summary.queued}")
    console.print(f"  [bold]Success rate:[/bold] {summary.success_rate}%")
    console.print()


if __name__ == "__main__":
    app()
