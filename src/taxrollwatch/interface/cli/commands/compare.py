"""
Compare Command - diff two exports without storing anything.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from taxrollwatch.application.ingestion_service import compare_files
from taxrollwatch.domain.errors import TaxRollWatchError

from ..formatters import ReportFormatter
from .common import console, export_report, fail, get_container

logger = logging.getLogger(__name__)


def compare(
    ctx: typer.Context,
    previous: Path = typer.Argument(..., help="Older export."),
    current: Path = typer.Argument(..., help="Newer export."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Write the report as JSON."),
    xlsx_out: Optional[Path] = typer.Option(None, "--xlsx-out", help="Write the report as a workbook."),
    limit: int = typer.Option(20, "--limit", help="Rows shown per table (0 for all)."),
):
    """
    Compare two roll exports directly.

    Nothing is written to the snapshot database.
    """
    container = get_container(ctx)

    try:
        report = compare_files(previous, current, container.settings)
        export_report(report, json_out, xlsx_out)
    except (TaxRollWatchError, OSError) as e:
        fail("Comparison failed", e)

    ReportFormatter(console).display_report(report, limit=limit)
