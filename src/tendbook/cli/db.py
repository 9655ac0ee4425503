"""
CLI: ``tendbook db``: store inspection commands.
"""

from __future__ import annotations

import json

import typer

from tendbook.cli.utils import check_result, console, make_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command()
def check(
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL or path"),
    recreate: bool = typer.Option(
        False, "--recreate", help="Discard and recreate a corrupted database file"
    ),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Open the store and report whether it is usable."""
    from tendbook.ops.database import check_store_health

    with make_context(database, recreate=recreate) as ctx:
        result = check_store_health(ctx)
    output_result(result, as_json=json_out, title="Store Health")
    if not result.data.connected:
        raise typer.Exit(code=1)


@app.command()
def instances(
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the sync ids the store holds."""
    from tendbook.ops.database import list_instances

    with make_context(database) as ctx:
        result = list_instances(ctx)
    sync_ids = check_result(result)
    if json_out:
        console.print_json(json.dumps(sync_ids))
        return
    if not sync_ids:
        console.print("[dim]No instances.[/dim]")
        return
    for sync_id in sync_ids:
        console.print(sync_id)
