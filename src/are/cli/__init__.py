"""
CLI for the incremental generation engine.

Provides commands to inspect discovery, preview pending changes and run an
incremental update.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table

from are.core.logging_setup import configure_logging
from are.infrastructure import StateStoreError, get_current_commit
from are.services import EngineContainer, NullSummarizer, create_engine

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="are",
    help="Incremental generation engine - discover, diff and chunk a codebase",
    add_completion=False,
)

_verbose = False

RECENT_RUNS_SHOWN = 5


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Incremental generation engine."""
    global _verbose
    _verbose = verbose


def _open_engine(path: Path, config: Optional[Path], progress_callback=None) -> EngineContainer:
    if not path.is_dir():
        console.print(f"[bold red]Error:[/bold red] Not a directory: {path}")
        raise typer.Exit(1)

    try:
        engine = create_engine(path, config_path=config, progress_callback=progress_callback)
    except StateStoreError as e:
        console.print(f"[bold red]State error:[/bold red] {e}")
        raise typer.Exit(1)
    except (yaml.YAMLError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Config error:[/bold red] {e}")
        raise typer.Exit(1)

    configure_logging(engine.config.logging, verbose=_verbose)
    return engine


@app.command()
def discover(
    path: Path = typer.Argument(Path("."), help="Project root"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
    show_excluded: bool = typer.Option(
        False, "--show-excluded", help="List excluded files with their reasons"
    ),
):
    """List the files that take part in generation."""
    engine = _open_engine(path, config)
    try:
        with console.status(f"[bold blue]Discovering[/bold blue] {engine.root}..."):
            result = asyncio.run(engine.detector.discover())

        summary = Table.grid(padding=1)
        summary.add_column(style="bold")
        summary.add_column()
        summary.add_row("Included:", f"[green]{len(result.included)}[/green]")
        summary.add_row("Excluded:", f"[yellow]{len(result.excluded)}[/yellow]")
        for name in engine.filter_chain.filter_names:
            count = len(result.excluded_by(name))
            if count:
                summary.add_row(f"  by {name}:", str(count))

        console.print(
            Panel(summary, title="[bold green]Discovery[/bold green]", border_style="green", expand=False)
        )

        if show_excluded and result.excluded:
            table = Table(title="Excluded Files", border_style="yellow")
            table.add_column("Path", style="cyan")
            table.add_column("Filter", style="magenta", no_wrap=True)
            table.add_column("Reason")
            for excluded in result.excluded:
                table.add_row(
                    Path(excluded.path).relative_to(engine.root).as_posix(),
                    excluded.filter_name,
                    excluded.reason,
                )
            console.print(table)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    finally:
        engine.close()


@app.command()
def status(
    path: Path = typer.Argument(Path("."), help="Project root"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Show pending changes and recent runs without modifying state."""
    engine = _open_engine(path, config)
    try:
        with console.status("[bold blue]Detecting changes...[/bold blue]"):
            change_set = asyncio.run(engine.detector.detect(dry_run=True))

        grid = Table.grid(padding=1)
        grid.add_column(style="bold")
        grid.add_column()
        grid.add_row("New Files:", f"[green]{len(change_set.new)}[/green]")
        grid.add_row("Changed Files:", f"[yellow]{len(change_set.changed)}[/yellow]")
        grid.add_row("Vanished Files:", f"[red]{len(change_set.vanished)}[/red]")
        grid.add_row("Unchanged Files:", str(len(change_set.unchanged)))
        if change_set.unreadable:
            grid.add_row("Unreadable Files:", f"[red]{len(change_set.unreadable)}[/red]")
        console.print(Panel(grid, title="Pending Changes", border_style="blue", expand=False))

        runs = engine.state_store.get_runs(limit=RECENT_RUNS_SHOWN)
        if not runs:
            console.print("[yellow]No completed runs yet.[/yellow]")
        else:
            table = Table(title="Recent Runs", border_style="blue")
            table.add_column("Run", justify="right")
            table.add_column("Completed")
            table.add_column("Commit", style="cyan")
            table.add_column("Analyzed", justify="right", style="green")
            table.add_column("Skipped", justify="right")
            for run in runs:
                table.add_row(
                    str(run.id),
                    f"{run.completed_at:%Y-%m-%d %H:%M:%S}",
                    run.commit_hash,
                    str(run.files_analyzed),
                    str(run.files_skipped),
                )
            console.print(table)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    finally:
        engine.close()


@app.command()
def update(
    path: Path = typer.Argument(Path("."), help="Project root"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
):
    """
    Record the current state of new and changed files.

    No summarizer is attached on the command line: files are fingerprinted
    and marked as analyzed without generating summaries, and later runs
    treat them as unchanged.
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Scanning...", total=None)

        def update_progress(current: int, total: int, message: str) -> None:
            progress.update(task, completed=current, total=total, description=message)

        engine = _open_engine(path, config, progress_callback=update_progress)
        try:
            commit_hash = get_current_commit(engine.root)
            result = asyncio.run(engine.detector.run(NullSummarizer(), commit_hash))
        except Exception as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(1)
        finally:
            engine.close()

    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Commit:", result.commit_hash)
    summary.add_row("Analyzed Files:", f"[green]{result.files_analyzed}[/green]")
    summary.add_row("Skipped Files:", str(result.files_skipped))
    summary.add_row("Deleted Files:", f"[red]{result.files_deleted}[/red]")
    summary.add_row("Duration:", f"{result.duration_seconds:.2f}s")
    if result.failures:
        summary.add_row("Failed Files:", f"[red]{result.files_failed}[/red]")

    console.print(
        Panel(
            summary,
            title="[bold green]Update Complete[/bold green]",
            border_style="green",
            expand=False,
        )
    )

    if result.failures:
        console.print("\n[bold red]Failed Files:[/bold red]")
        for failure in result.failures[:5]:
            console.print(f"  - {failure}")
        if len(result.failures) > 5:
            console.print(f"  ... and {len(result.failures) - 5} more")


if __name__ == "__main__":
    app()
