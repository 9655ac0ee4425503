"""The ``tendbook`` command."""

from __future__ import annotations

import typer

from tendbook import __version__
from tendbook.cli.db import app as db_app
from tendbook.cli.instance import app as instance_app
from tendbook.cli.serve import app as serve_app
from tendbook.core.logging import configure_logging

app = typer.Typer(
    name="tendbook",
    help="tendbook: shared household chore tracker.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(serve_app, name="serve", help="Start the API server.")
app.add_typer(db_app, name="db", help="Store inspection.")
app.add_typer(instance_app, name="instance", help="Inspect, import and export instances.")


def _print_version(value: bool) -> None:
    if not value:
        return
    typer.echo(f"tendbook {__version__}")
    raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
) -> None:
    """Serve the API, check the store, and move instances in and out as JSON."""
    configure_logging(level=log_level, json_format=False)
