from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from pathassist.cli.renderers import (
    PathJsonRenderer,
    PathPlainRenderer,
    PathRichRenderer,
    run_events,
)
from pathassist.core.show import show_events

console = Console()


def show(
    config: Path = typer.Option(
        Path("pathassist.yaml"),
        "--config",
        "-c",
        help="Path to pathassist.yaml.",
    ),
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Base directory for relative paths.",
    ),
    record: str | None = typer.Option(
        None,
        "--record",
        "-r",
        help="Record id; overrides path.record_id from config.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show stack traces for unexpected errors.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable JSON report.",
    ),
) -> None:
    """Show a record's path and the action the update button would take."""
    events = show_events(project, config_path=config, record_id=record)
    if json_output:
        renderer = PathJsonRenderer(console)
    else:
        renderer = PathRichRenderer(console) if console.is_terminal else PathPlainRenderer(console)
    try:
        exit_code = run_events(events, renderer)
    except Exception as exc:  # noqa: BLE001
        if debug:
            raise
        console.print(f"[red]Unexpected error:[/red] {exc}")
        raise typer.Exit(code=3)
    raise typer.Exit(code=exit_code)
