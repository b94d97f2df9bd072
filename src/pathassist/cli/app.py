import typer
import rich_click  # noqa: F401
from .advance import advance
from .list_sources import list_sources
from .show import show
from pathassist import __version__

app = typer.Typer(
    name="pathassist",
    help="Record path assistant: show and advance a picklist-driven stage path",
    no_args_is_help=True,
)

@app.command("version")
def version() -> None:
    """Show the pathassist version."""
    typer.echo(f"pathassist v{__version__}")

app.command()(show)
app.command()(advance)
app.command("list-sources")(list_sources)
