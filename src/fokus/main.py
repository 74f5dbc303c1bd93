"""Main entry point for fokus."""

import logging

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fokus import __version__
from fokus.config import get_config_manager
from fokus.models import (
    AlreadyRunning,
    HistoryStore,
    PageController,
    SessionEngine,
)
from fokus.models.ui import TimerDisplay
from fokus.utils.exit_codes import (
    ERROR_ALREADY_RUNNING,
    ERROR_STORAGE,
    get_exit_code_description,
    get_exit_code_name,
)
from fokus.utils.lock import InstanceLock
from fokus.utils.logger import get_logger

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="fokus",
    add_completion=False,
)

console = Console()


def _fail(code: int, detail: str) -> typer.Exit:
    """Report a startup failure and build the Exit carrying *code*."""
    logger.error("Startup failed with %s: %s", get_exit_code_name(code), detail)
    console.print(f"[red]{get_exit_code_description(code)}: {escape(detail)}[/red]")
    return typer.Exit(code)


@app.callback(invoke_without_command=True)
def run(
    ctx: typer.Context,
    duration: int | None = typer.Option(
        None,
        "--duration",
        "-d",
        min=1,
        max=999,
        help="Timer duration in minutes for this run (overrides config)",
    ),
) -> None:
    """Open the stopwatch/timer UI.

    Space starts a session or stops and banks it. Whole minutes are added to
    today's total. Quitting with q does not bank a session that is still
    running; stop it with space first.
    """
    if ctx.invoked_subcommand is not None:
        return

    get_logger()
    manager = get_config_manager()
    try:
        config = manager.config
    except OSError as e:
        raise _fail(ERROR_STORAGE, f"{manager.config_dir}: {e}") from e

    lock = InstanceLock(manager.lock_file)
    try:
        lock.acquire()
    except AlreadyRunning as e:
        raise _fail(ERROR_ALREADY_RUNNING, str(e)) from e

    store = HistoryStore(manager.history_file)
    try:
        store.load()
        engine = SessionEngine(
            store, default_target=duration or config.default_timer_duration
        )
        if store.load_error is not None:
            engine.notice = "History file unreadable, starting empty"

        controller = PageController(engine, store)
        result = TimerDisplay(console).run(
            controller, tick_interval=config.tick_interval_ms / 1000
        )
        logger.info("UI closed (%s)", result)
    finally:
        if not store.flush():
            console.print(f"[yellow]Failed to save history to {escape(str(store.path))}[/yellow]")
        lock.release()


@app.command()
def history(
    limit: int = typer.Option(0, "--limit", "-n", min=0, help="Show only the newest N days"),
) -> None:
    """Show focused minutes per day."""
    manager = get_config_manager()
    store = HistoryStore(manager.history_file)
    store.load(backup=False)

    if store.load_error is not None:
        console.print(f"[yellow]⚠ {escape(str(store.load_error))}[/yellow]")

    entries = list(store.entries_sorted())
    if limit:
        entries = entries[:limit]

    if not entries:
        console.print("[dim]No focused minutes recorded yet.[/dim]")
        return

    table = Table(title="Focus History")
    table.add_column("Date", style="cyan")
    table.add_column("Minutes", justify="right", style="green")
    for day, minutes in entries:
        table.add_row(day.isoformat(), str(minutes))

    console.print(table)
    console.print(f"Total: [bold]{sum(m for _, m in entries)}[/bold] minutes")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]fokus[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
