"""CLI interface for measure-fn.

Requires the 'cli' extra: pip install measure-fn[cli]
"""

from __future__ import annotations

import sys

try:
    import typer
    from rich.console import Console
    from rich.table import Table
except ImportError:
    print(
        "CLI dependencies not installed. Install with: pip install measure-fn[cli]",
        file=sys.stderr,
    )
    sys.exit(1)

from measure_fn import __version__
from measure_fn.config import SILENT_ENV, TIMESTAMPS_ENV, get_config
from measure_fn.ids import encode, join

app = typer.Typer(
    name="measure-fn",
    help="Hierarchical timing and outcome logging for Python functions.",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
) -> None:
    if version:
        console.print(f"measure-fn {__version__}")
        raise typer.Exit()


@app.command()
def info() -> None:
    """Show the installed version and the effective configuration."""
    table = Table(title="measure-fn info")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])

    try:
        import pydantic

        table.add_row("pydantic", str(pydantic.VERSION))
    except ImportError:
        table.add_row("pydantic", "[red]not installed[/red]")

    config = get_config()
    table.add_row(f"suppress ({SILENT_ENV})", str(config.suppress))
    table.add_row(f"timestamp_prefix ({TIMESTAMPS_ENV})", str(config.timestamp_prefix))
    table.add_row("truncation_limit", str(config.truncation_limit or "unlimited"))
    console.print(table)


@app.command("encode")
def encode_path(
    indices: list[int] = typer.Argument(..., help="Zero-based index per nesting level"),  # noqa: B008
) -> None:
    """Print the id path for a chain of indices, e.g. ``0 1 27`` -> ``a-b-ab``."""
    if any(i < 0 for i in indices):
        console.print("[red]Error: indices must be non-negative[/red]")
        raise typer.Exit(code=1)
    console.print(join(encode(i) for i in indices))


@app.command()
def ids(
    count: int = typer.Argument(..., help="How many ids to list"),
    start: int = typer.Option(0, "--start", "-s", help="First index to list"),
) -> None:
    """List consecutive top-level ids with their indices."""
    if count < 0 or start < 0:
        console.print("[red]Error: count and start must be non-negative[/red]")
        raise typer.Exit(code=1)
    table = Table(title="measure-fn ids")
    table.add_column("Index", style="cyan", justify="right")
    table.add_column("Id", style="green")
    for index in range(start, start + count):
        table.add_row(str(index), encode(index))
    console.print(table)


if __name__ == "__main__":
    app()
