"""
Shared plumbing for the ``tendbook`` commands.

Data goes to stdout through ``console``; errors and warnings go to stderr
through ``err_console`` so ``tendbook instance export kitchen > out.json``
stays clean.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from tendbook.api.settings import TendbookAPISettings
from tendbook.core.errors import TendbookError
from tendbook.ops.context import OperationContext
from tendbook.ops.result import OperationResult
from tendbook.store import open_store

console = Console()
err_console = Console(stderr=True)


def fail(message: str, code: str = "ERROR") -> NoReturn:
    err_console.print(f"[bold red]Error[/bold red] ({code}): {message}")
    raise typer.Exit(code=1)


@contextmanager
def make_context(
    database: str | None = None,
    *,
    dry_run: bool = False,
    recreate: bool = False,
) -> Iterator[OperationContext]:
    """Open the store for one command and close it afterwards.

    ``database`` overrides ``TENDBOOK_DATABASE_URL``.  A store that cannot
    be opened, a corrupted file included, ends the command with exit 1.
    """
    settings = TendbookAPISettings()
    try:
        store = open_store(
            database or settings.database_url,
            data_dir=settings.data_dir,
            recreate_corrupted=recreate or settings.recreate_corrupted_db,
        )
    except TendbookError as exc:
        fail(exc.message, exc.code)
    try:
        yield OperationContext(store=store, caller="cli", dry_run=dry_run)
    finally:
        store.close()


def check_result(result: OperationResult[Any]) -> Any:
    """``result.data`` of a successful result; exit 1 otherwise."""
    if result.success:
        return result.data
    if result.error is None:
        fail("Operation failed")
    fail(result.error.message, result.error.code)


def format_ms(timestamp_ms: int | None) -> str:
    """``2024-06-09 14:20`` in UTC, or ``never``."""
    if timestamp_ms is None:
        return "never"
    try:
        moment = datetime.fromtimestamp(timestamp_ms / 1000, UTC)
    except (ValueError, OverflowError, OSError):
        # beyond year 9999
        return str(timestamp_ms)
    return moment.strftime("%Y-%m-%d %H:%M")


def _plain(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, list | tuple):
        return [_plain(item) for item in obj]
    return obj


def output_result(result: OperationResult[Any], *, as_json: bool = False, title: str = "") -> None:
    """Print ``result.data`` as JSON, a table (lists) or key/value lines."""
    data = _plain(check_result(result))
    if as_json:
        console.print_json(json.dumps(data, default=str, ensure_ascii=False))
        return

    if isinstance(data, list):
        if data:
            print_table(data, title=title)
        else:
            console.print("[dim]No items.[/dim]")
    elif isinstance(data, dict):
        if title:
            console.print(f"[bold]{title}[/bold]")
        for key, value in data.items():
            console.print(f"  [cyan]{key}[/cyan]: {value}")
    else:
        console.print(data)

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning[/yellow]: {warning}")


def print_table(rows: list[Any], *, title: str = "") -> None:
    """One column per field of the first row; ``None`` prints blank."""
    records = [_plain(row) for row in rows]
    table = Table(title=title or None, pad_edge=False)
    for column in records[0]:
        table.add_column(column, overflow="fold")
    for record in records:
        table.add_row(*("" if value is None else str(value) for value in record.values()))
    console.print(table)
