"""
CLI: ``tendbook instance``: inspect, import and export one instance.

Import and export use the same JSON shape as ``GET /api/{sync_id}/export``,
so a file exported here can be imported through the API and vice versa.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer

from tendbook.cli.utils import (
    check_result,
    console,
    fail,
    format_ms,
    make_context,
    output_result,
    print_table,
)

app = typer.Typer(no_args_is_help=True)


@app.command()
def show(
    sync_id: str = typer.Argument(..., help="Instance key"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Tenders, chores and the last tending of an instance."""
    from tendbook.ops.instance import get_instance

    with make_context(database) as ctx:
        result = get_instance(ctx, sync_id)
    doc = check_result(result)

    if json_out:
        console.print_json(json.dumps(doc.to_dict(), ensure_ascii=False))
        return

    console.print(f"[bold]Instance[/bold] {doc.sync_id}")
    if doc.tenders:
        print_table(doc.tenders, title="Tenders")
    else:
        console.print("[dim]No tenders.[/dim]")
    if doc.chores:
        print_table(doc.chores, title="Chores")
    else:
        console.print("[dim]No chores.[/dim]")
    last = format_ms(doc.last_tended_timestamp)
    who = f" by {doc.last_tender}" if doc.last_tender else ""
    console.print(f"Last tended: {last}{who}")


@app.command()
def history(
    sync_id: str = typer.Argument(..., help="Instance key"),
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """The tending log, newest first."""
    from tendbook.ops.history import list_history

    with make_context(database) as ctx:
        result = list_history(ctx, sync_id)
    if json_out:
        output_result(result, as_json=True)
        return

    entries = check_result(result)
    if not entries:
        console.print("[dim]No history.[/dim]")
        return
    rows = [
        {
            "when": format_ms(e.timestamp),
            "person": e.person,
            "chore_id": e.chore_id,
            "notes": e.notes,
            "id": e.id,
        }
        for e in entries
    ]
    print_table(rows, title=f"History of {sync_id}")


@app.command("import")
def import_file(
    sync_id: str = typer.Argument(..., help="Instance key"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported JSON file"),
    database: str | None = typer.Option(None, "--database", "-d"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Validate and count without merging. A new SYNC_ID is still created with its default chore.",
    ),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Merge an exported JSON file into an instance."""
    from tendbook.ops.imports import import_document

    try:
        payload = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        fail(f"Cannot read {file}: {exc}", "INVALID_ARGUMENT")

    with make_context(database, dry_run=dry_run) as ctx:
        result = import_document(ctx, sync_id, payload)
    output_result(result, as_json=json_out, title="Imported")
    if not json_out and result.metadata:
        console.print(
            f"[dim]{result.metadata['inserted_tenders']} tenders, "
            f"{result.metadata['inserted_chores']} chores, "
            f"{result.metadata['inserted_history_entries']} history entries were new.[/dim]"
        )


@app.command("export")
def export_file(
    sync_id: str = typer.Argument(..., help="Instance key"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
    database: str | None = typer.Option(None, "--database", "-d"),
) -> None:
    """Write an instance as importable JSON."""
    from tendbook.ops.imports import export_document

    with make_context(database) as ctx:
        result = export_document(ctx, sync_id)
    data = check_result(result)

    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"Exported [bold]{sync_id}[/bold] to {output}")
