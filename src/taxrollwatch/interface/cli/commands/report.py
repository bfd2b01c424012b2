"""
Report Command - show or export the latest stored comparison report.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from taxrollwatch.domain.errors import TaxRollWatchError
from taxrollwatch.infrastructure.sqlite import DEFAULT_ROLL

from ..formatters import ReportFormatter
from .common import console, export_report, fail, get_container

logger = logging.getLogger(__name__)


def report(
    ctx: typer.Context,
    roll: str = typer.Option(DEFAULT_ROLL, "--roll", "-r", help="Roll to report on."),
    limit: int = typer.Option(20, "--limit", help="Rows shown per table (0 for all)."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Write the report as JSON."),
    xlsx_out: Optional[Path] = typer.Option(None, "--xlsx-out", help="Write the report as a workbook."),
):
    """Show the latest comparison report stored for a roll."""
    container = get_container(ctx)

    try:
        latest = container.snapshot_store.latest_report(roll)
        if latest is not None:
            export_report(latest, json_out, xlsx_out)
    except (TaxRollWatchError, OSError) as e:
        fail("Cannot load report", e)

    if latest is None:
        console.print(f"[yellow]No reports stored for roll '{escape(roll)}'[/yellow]")
        return

    ReportFormatter(console).display_report(latest, limit=limit)
