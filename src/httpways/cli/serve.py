"""``httpways serve``: run the demo application."""

from __future__ import annotations

import typer
from rich.console import Console

from httpways.demo.server import run_server

console = Console(stderr=True)


def serve_cmd(
    host: str = typer.Option("localhost", "--host", help="Interface to bind."),
    port: int = typer.Option(8080, "--port", "-p", help="Port to listen on.", min=1, max=65535),
    app_name: str = typer.Option("demo", "--app-name", "-a", help="Application context path."),
    page_suffix: str = typer.Option("", "--page-suffix", help="Suffix of every page name."),
) -> None:
    """Serve the demo application until interrupted."""
    app_name = app_name.strip("/")
    if not app_name:
        msg = "--app-name must not be empty"
        raise typer.BadParameter(msg)

    console.print(f"[green]Serving[/green] http://{host}:{port}/{app_name}/ (Ctrl+C to stop)")
    run_server(host=host, port=port, app_name=app_name, page_suffix=page_suffix)
