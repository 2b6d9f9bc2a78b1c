"""``httpways check`` / ``httpways list``: run or show the client checks."""

from __future__ import annotations

import asyncio
import dataclasses
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from httpways._internal.config import load_config
from httpways._internal.errors import CheckError, ConfigError
from httpways.checks.runner import run_checks, select_checks

if TYPE_CHECKING:
    from httpways.checks.runner import CheckResult

console = Console(stderr=True)
out = Console()


def _results_table(results: list[CheckResult], base_url: str) -> Table:
    """Build a Rich table with one row per check result.

    Args:
        results: Results in run order.
        base_url: Application root that was checked, shown as the title.

    Returns:
        Formatted Rich Table.
    """
    table = Table(
        title=f"Checks against {base_url}",
        show_header=True,
        header_style="bold cyan",
        expand=True,
    )
    table.add_column("Check", style="bold")
    table.add_column("Client")
    table.add_column("Result", justify="center")
    table.add_column("Time", justify="right")
    table.add_column("Detail")

    for result in results:
        if result.skipped:
            verdict = "[yellow]SKIP[/yellow]"
            detail = "needs network (--network)"
        elif result.passed:
            verdict = "[green]PASS[/green]"
            detail = ""
        else:
            verdict = "[red]FAIL[/red]"
            detail = escape(result.error or "")
        table.add_row(
            escape(result.name),
            result.mechanism.value,
            verdict,
            f"{result.duration_ms:.1f}ms",
            detail,
        )
    return table


def check_cmd(
    host: str | None = typer.Option(None, "--host", help="Demo application host (env HTTPWAYS_HOST)."),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Demo application port (env HTTPWAYS_PORT).",
        min=1,
        max=65535,
    ),
    app_name: str | None = typer.Option(
        None,
        "--app-name",
        "-a",
        help="Application context path (env HTTPWAYS_APP_NAME).",
    ),
    page_suffix: str | None = typer.Option(
        None,
        "--page-suffix",
        help="Suffix of every page name, e.g. .groovy (env HTTPWAYS_PAGE_SUFFIX).",
    ),
    only: list[str] | None = typer.Option(
        None,
        "--only",
        "-k",
        help="Run only the named check (repeatable).",
    ),
    network: bool = typer.Option(
        False,
        "--network",
        help="Also run checks that need public internet access.",
    ),
) -> None:
    """Run every client check and print a results table."""
    try:
        config = load_config()
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from None

    if app_name is not None:
        app_name = app_name.strip("/")
        if not app_name:
            msg = "--app-name must not be empty"
            raise typer.BadParameter(msg)

    overrides = {
        "host": host,
        "port": port,
        "app_name": app_name,
        "page_suffix": page_suffix,
    }
    config = dataclasses.replace(config, **{k: v for k, v in overrides.items() if v is not None})

    try:
        results = asyncio.run(run_checks(config, only, include_network=network))
    except CheckError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from None

    out.print(_results_table(results, config.base_url))

    failed = [result for result in results if not result.passed and not result.skipped]
    if failed:
        console.print(f"[red]{len(failed)} of {len(results)} checks failed[/red]")
        raise typer.Exit(code=1)


def list_cmd() -> None:
    """Print the name and client style of every available check."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Check", style="bold")
    table.add_column("Client")
    table.add_column("Network", justify="center")
    for definition in select_checks():
        table.add_row(
            escape(definition.name),
            definition.mechanism.value,
            "yes" if definition.requires_network else "",
        )
    out.print(table)
