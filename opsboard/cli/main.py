"""Main CLI entry point using Typer."""

import time

import anyio
import typer
from rich.console import Console
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from opsboard import __version__
from opsboard.core.board import TaskBoard
from opsboard.core.config import get_settings
from opsboard.core.exceptions import EmptyMessageError, EmptyTaskNameError
from opsboard.core.logging import configure_logging
from opsboard.core.models import Step, Task, TaskStatus

app = typer.Typer(
    name="opsboard",
    help="OPS Board - multi-LLM ops task dashboard",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()

STATUS_STYLES = {
    TaskStatus.RUNNING: "blue",
    TaskStatus.QUEUED: "yellow",
    TaskStatus.COMPLETE: "green",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]OPS Board[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    OPS Board - watch multi-step ops tasks run across LLM workers.

    Plan a pipeline in chat, turn it into a task, and follow its progress.
    """
    pass


def _styled_status(status: TaskStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


def build_steps_table(steps: list[Step], title: str = "Pipeline") -> Table:
    """Render pipeline steps as a Rich table."""
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Step", style="bold")
    table.add_column("LLM", style="cyan")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Duration", style="dim")

    for index, step in enumerate(steps, start=1):
        table.add_row(
            str(index),
            step.name,
            step.llm,
            _styled_status(step.status),
            f"{step.progress:.0f}%" if step.progress is not None else "-",
            step.duration or "-",
        )
    return table


def build_board_table(tasks: list[Task]) -> Table:
    """Render the board as a Rich table."""
    table = Table(title="Task Queue")
    table.add_column("ID", style="dim")
    table.add_column("Task", style="bold")
    table.add_column("Owner")
    table.add_column("LLM", style="cyan")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Steps", justify="right")
    table.add_column("Duration", style="dim")

    for task in tasks:
        done = sum(1 for s in task.steps if s.is_complete)
        table.add_row(
            str(task.id),
            task.name,
            task.user,
            task.llm,
            _styled_status(task.status),
            f"{task.progress:.0f}%",
            f"{done}/{len(task.steps)}",
            task.duration or "-",
        )
    return table


@app.command()
def serve(
    port: int | None = typer.Option(None, "--port", "-p", help="Port for dashboard server"),
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind to"),
) -> None:
    """
    Start the dashboard API server.

    Example:
        opsboard serve --port 3000
    """
    import uvicorn

    from opsboard.api.main import app as api_app

    settings = get_settings()
    configure_logging(settings)
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(
        Panel(
            f"[bold]API:[/bold]       http://localhost:{port}\n"
            f"[bold]API Docs:[/bold]  http://localhost:{port}/docs\n"
            f"[bold]Health:[/bold]    http://localhost:{port}/health",
            title="[bold cyan]OPS Board[/bold cyan]",
            border_style="cyan",
        )
    )

    uvicorn.run(api_app, host=host, port=port, log_level="info")


@app.command()
def watch(
    task_name: list[str] = typer.Option(
        [],
        "--task",
        "-t",
        help="Create a task with the default pipeline before watching (repeatable)",
    ),
    ticks: int | None = typer.Option(
        None,
        "--ticks",
        "-n",
        help="Stop after this many ticks (default: until nothing is running)",
    ),
    interval: float | None = typer.Option(None, "--interval", "-i", help="Seconds between ticks"),
    demo: bool = typer.Option(True, "--demo/--no-demo", help="Seed the demo tasks"),
) -> None:
    """
    Run the progress simulation in the terminal.

    Example:
        opsboard watch -t "Audit Logs" --no-demo
    """
    settings = get_settings().model_copy(update={"seed_demo_tasks": demo})
    configure_logging(settings, console=settings.debug)
    board = TaskBoard.from_settings(settings)
    interval = interval if interval is not None else settings.tick_interval

    try:
        for name in task_name:
            board.create_task(name)
    except EmptyTaskNameError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    count = 0
    with Live(build_board_table(board.list_tasks()), console=console, refresh_per_second=4) as live:
        while board.stats().running and (ticks is None or count < ticks):
            time.sleep(interval)
            live.update(build_board_table(board.tick()))
            count += 1

    stats = board.stats()
    console.print(
        f"[dim]{count} tick(s): {stats.running} running, {stats.queued} queued, "
        f"{stats.complete} complete[/dim]"
    )


@app.command()
def plan(
    description: str = typer.Argument(..., help="Describe the ops task"),
) -> None:
    """
    Ask the planner for a pipeline and show what would be derived from it.

    Example:
        opsboard plan "Rotate staging API keys"
    """
    from opsboard.chat.session import ChatSession

    async def do_plan() -> None:
        chat = ChatSession(reply_delay=0)
        try:
            reply = await chat.send(description)
        except EmptyMessageError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(code=1) from e

        console.print(Panel(Markdown(reply.text), title="[bold cyan]Planner[/bold cyan]"))
        console.print(build_steps_table(chat.derive_pipeline() or []))

    anyio.run(do_plan)


@app.command()
def chat() -> None:
    """
    Plan a task interactively, then watch it run.

    Type a description to get a proposal, [bold]/create[/bold] to turn the
    latest proposal into a task, [bold]/reset[/bold] to start over and
    [bold]exit[/bold] to quit.
    """
    from opsboard.chat.session import ChatSession

    settings = get_settings()
    configure_logging(settings, console=settings.debug)

    async def start() -> None:
        session = ChatSession(reply_delay=settings.reply_delay, default_llm=settings.default_llm)
        board = TaskBoard.from_settings(settings.model_copy(update={"seed_demo_tasks": False}))

        console.print(Panel.fit("[bold cyan]OPS Board[/bold cyan]\n[dim]Pipeline planning chat[/dim]"))
        console.print(f"\n{session.messages[0].text}\n")

        while True:
            try:
                user_input = console.input("[bold]You>[/bold] ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if not user_input:
                continue
            if user_input.lower() in ("exit", "quit", "q"):
                console.print("[dim]Goodbye![/dim]")
                break
            if user_input == "/reset":
                session.reset()
                console.print("[dim]Conversation reset[/dim]")
                continue
            if user_input == "/create":
                task = session.create_task(board)
                console.print(f"[green]Created task {task.id}: {task.name}[/green]")
                console.print(build_steps_table(task.steps, title=task.name))
                continue

            with console.status("Planning..."):
                reply = await session.send(user_input)
            console.print()
            console.print(Markdown(reply.text))
            console.print()

    anyio.run(start)


if __name__ == "__main__":
    app()
