"""
Shared helpers for CLI commands.
"""

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from taxrollwatch.application.container import Container
from taxrollwatch.domain.report import ComparisonReport
from taxrollwatch.infrastructure.report_writer import (
    write_report_json,
    write_report_workbook,
)

logger = logging.getLogger(__name__)

console = Console()


def get_container(ctx: typer.Context) -> Container:
    """Container created by the root callback."""
    container = ctx.obj
    if not isinstance(container, Container):
        container = Container()
        ctx.obj = container
    return container


def fail(message: str, error: Exception) -> NoReturn:
    """Report a handled error and exit with status 1."""
    logger.error("%s: %s", message, error)
    console.print(f"[red]❌ {escape(message)}:[/red] {escape(str(error))}")
    raise typer.Exit(1)


def export_report(
    report: ComparisonReport,
    json_out: Optional[Path],
    xlsx_out: Optional[Path],
) -> None:
    """Write the optional JSON and workbook outputs."""
    if json_out:
        path = write_report_json(report, json_out)
        console.print(f"[green]✅ JSON report written:[/green] {escape(str(path))}")
    if xlsx_out:
        path = write_report_workbook(report, xlsx_out)
        console.print(f"[green]✅ Workbook written:[/green] {escape(str(path))}")
