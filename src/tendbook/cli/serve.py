"""``tendbook serve start``."""

from __future__ import annotations

import typer
import uvicorn

from tendbook.api.settings import TendbookAPISettings
from tendbook.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address [default: TENDBOOK_HOST]"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port [default: TENDBOOK_PORT]"),
    reload: bool = typer.Option(False, "--reload", help="Restart on source changes"),
    log_level: str = typer.Option("info", "--log-level", help="uvicorn log level"),
) -> None:
    """Run the REST API under uvicorn.

    Always one worker: instance locks live in the process.
    """
    settings = TendbookAPISettings()
    host = host or settings.host
    port = port or settings.port
    console.print(f"[bold green]tendbook API[/bold green] listening on {host}:{port}")
    uvicorn.run(
        "tendbook.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=1,
        log_level=log_level,
    )
