"""Main Typer application, the entry point for the ``httpways`` CLI."""

from __future__ import annotations

import typer

from httpways import __version__
from httpways._internal.logging import level_for, setup_logging
from httpways.cli.check import check_cmd, list_cmd
from httpways.cli.serve import serve_cmd

app = typer.Typer(
    name="httpways",
    help="Ways to talk HTTP from Python, checked against a demo application.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("check", help="Run the client checks against a demo application.")(check_cmd)
app.command("list", help="List the available checks.")(list_cmd)
app.command("serve", help="Serve the demo application.")(serve_cmd)


def _version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version was passed.
    """
    if value:
        typer.echo(f"httpways {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every request.",
    ),
    log_json: bool = typer.Option(
        False,
        "--log-json",
        help="Emit logs as one JSON object per line.",
    ),
) -> None:
    """httpways: ways to talk HTTP from Python."""
    setup_logging(level_for(verbose), json_format=log_json)
