from __future__ import annotations

import typer
from rich.console import Console

from pathassist.cli.renderers import (
    ListSourcesJsonRenderer,
    ListSourcesPlainRenderer,
    ListSourcesRichRenderer,
    run_events,
)
from pathassist.core.list_sources import list_sources_events

console = Console()


def list_sources(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable JSON report.",
    ),
) -> None:
    events = list_sources_events()
    if json_output:
        renderer = ListSourcesJsonRenderer(console)
    else:
        renderer = ListSourcesRichRenderer(console) if console.is_terminal else ListSourcesPlainRenderer(console)
    exit_code = run_events(events, renderer)
    raise typer.Exit(code=exit_code)
