"""CLI interface for diskscope."""

import asyncio
import json
import os
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from diskscope import __version__
from diskscope.config import CONFIG_FILE, load_settings
from diskscope.demo import demo_scan_result
from diskscope.display import (
    confirm_action,
    console,
    progress_text,
    show_mutation_result,
    show_projection,
    show_scan_summary,
    show_scanning_progress,
)
from diskscope.log import setup_logging
from diskscope.mutations import MutationCoordinator
from diskscope.session import ScanSession, ScanState
from diskscope.views import ViewMode

# Create Typer app
app = typer.Typer(
    name="diskscope",
    help="Explore disk usage as a treemap, sunburst, bar chart or list",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"diskscope version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr."),
) -> None:
    """diskscope - disk usage explorer."""
    setup_logging(level=load_settings().log_level, verbose=verbose)


async def _scan_with_progress(session: ScanSession, path: Optional[str]) -> None:
    with show_scanning_progress() as progress:
        task = progress.add_task("Scanning directories...", total=None)

        def update(changed: ScanSession) -> None:
            progress.update(task, description=escape(progress_text(changed.progress).plain))

        unsubscribe = session.subscribe(update)
        try:
            session.start_scan(path)
            await session.wait()
        finally:
            unsubscribe()


def _make_session(demo_fallback: bool = False, max_depth: Optional[int] = None) -> ScanSession:
    settings = load_settings()
    if max_depth is not None:
        settings = settings.model_copy(update={"scan_max_depth": max_depth})
    if demo_fallback:
        settings = settings.model_copy(update={"demo_fallback": True})
    return ScanSession.from_settings(settings)


@app.command()
def scan(
    path: Optional[str] = typer.Argument(None, help="Directory to scan (default: platform root)"),
    view: ViewMode = typer.Option(ViewMode.TREEMAP, "--view", "-V", help="Projection to show"),
    demo_fallback: bool = typer.Option(
        False, "--demo-fallback", help="Show demo data instead of failing when the scan fails"
    ),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", min=1, help="Deepest level to walk"),
) -> None:
    """Scan a directory and show one projection of it."""
    session = _make_session(demo_fallback=demo_fallback, max_depth=max_depth)
    asyncio.run(_scan_with_progress(session, path))

    if session.state is ScanState.FAILED or session.result is None:
        console.print(f"[red]Scan failed: {escape(str(session.error))}[/red]")
        raise typer.Exit(1)

    result = session.result
    if session.used_fallback:
        console.print(f"[yellow]Scan failed ({escape(str(session.error))}); showing demo data[/yellow]")
    show_scan_summary(result, demo=session.used_fallback)
    show_projection(view, result.root, title=result.root.path)


@app.command()
def demo(
    view: ViewMode = typer.Option(ViewMode.TREEMAP, "--view", "-V", help="Projection to show"),
) -> None:
    """Show a projection of the built-in demo dataset."""
    result = demo_scan_result()
    show_scan_summary(result, demo=True)
    show_projection(view, result.root, title=result.root.name)


@app.command()
def delete(
    path: str = typer.Argument(..., help="File or folder to delete"),
    root: Optional[str] = typer.Option(None, "--root", "-r", help="Directory to rescan afterwards"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
) -> None:
    """Delete a file or folder, then rescan and show what is left."""
    target = os.path.normpath(os.path.abspath(os.path.expanduser(path)))
    scan_root = root or str(Path(target).parent)
    failures: list[str] = []

    def confirm(message: str) -> bool:
        return yes or confirm_action(message)

    async def run():
        session = _make_session()
        await _scan_with_progress(session, scan_root)
        coordinator = MutationCoordinator(session, confirm=confirm, notify_error=failures.append)
        outcome = await coordinator.delete_file_or_folder(target)
        await session.wait()
        return session, outcome

    session, outcome = asyncio.run(run())
    show_mutation_result(outcome)
    if failures:
        raise typer.Exit(1)
    if outcome.cancelled:
        raise typer.Exit(0)

    if session.result is not None:
        console.print()
        show_scan_summary(session.result)
        show_projection(ViewMode.BARCHART, session.result.root, title=session.result.root.path)


@app.command()
def config() -> None:
    """Show the active configuration."""
    settings = load_settings()
    console.print(f"[dim]Config file: {escape(str(CONFIG_FILE))}[/dim]")
    console.print_json(json.dumps(settings.model_dump()))


@app.command()
def tui(
    path: Optional[str] = typer.Argument(None, help="Directory to scan on start"),
    demo_fallback: bool = typer.Option(
        False, "--demo-fallback", help="Show demo data instead of failing when the scan fails"
    ),
) -> None:
    """Launch the interactive TUI."""
    from diskscope.tui import run_tui

    run_tui(path=path, demo_fallback=demo_fallback)


if __name__ == "__main__":
    app()
