"""
Ingest Command - store a new roll export and compare it to the previous one.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from taxrollwatch.domain.errors import TaxRollWatchError
from taxrollwatch.infrastructure.sqlite import DEFAULT_ROLL

from ..formatters import ReportFormatter
from .common import console, export_report, fail, get_container

logger = logging.getLogger(__name__)


def ingest(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Roll export (.xlsx, .xlsm or .csv)."),
    roll: str = typer.Option(DEFAULT_ROLL, "--roll", "-r", help="Roll the export belongs to."),
    json_out: Optional[Path] = typer.Option(
        None, "--json-out", help="Report JSON path (default: report_directory/<roll>-<snapshot>.json)."
    ),
    xlsx_out: Optional[Path] = typer.Option(None, "--xlsx-out", help="Write the report as a workbook."),
    limit: int = typer.Option(20, "--limit", help="Rows shown per table (0 for all)."),
):
    """
    Ingest a roll export.

    The export is compared with the roll's previous snapshot, then stored
    together with the report as the new baseline. The report JSON is always
    written, to the configured report directory unless --json-out is given.
    """
    container = get_container(ctx)

    try:
        result = container.ingestion_service.ingest_file(file, roll=roll)
        if json_out is None:
            report_dir = Path(container.settings.report_directory)
            json_out = report_dir / f"{roll}-comparison-report-{result.snapshot_id}.json"
        export_report(result.report, json_out, xlsx_out)
    except (TaxRollWatchError, OSError) as e:
        fail(f"Ingest of {file.name} failed", e)

    console.print(f"[green]✅ Stored snapshot {result.snapshot_id} for roll '{roll}'[/green]")
    ReportFormatter(console).display_report(result.report, limit=limit)
