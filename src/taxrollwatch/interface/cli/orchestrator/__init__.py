"""
CLI Orchestrator - Main Entry Point

Wires the global options (config, database, logging) and registers one
command per module from the commands package.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from taxrollwatch import __version__
from taxrollwatch.application.container import Container
from taxrollwatch.infrastructure.logging_config import setup_logging

from ..commands import compare, history, ingest, report
from ..commands.common import console

logger = logging.getLogger(__name__)

# Create main app
app = typer.Typer(
    name="taxrollwatch",
    help="🏠 Delinquent tax roll change tracker",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command("ingest")(ingest)
app.command("compare")(compare)
app.command("report")(report)
app.command("history")(history)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"taxrollwatch {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Tracker config file (default: config/tracker_config.json)."
    ),
    db: Optional[Path] = typer.Option(
        None, "--db", help="Snapshot database (overrides database_path in the config)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
):
    """
    🏠 TaxRollWatch - compare consecutive delinquency roll exports

    Each upload is compared with the previous one of the same roll:
    - **New status**: properties that entered Judgment, Active or Pending
    - **New / removed**: properties that appeared on or dropped off the roll
    - **Foreclosed**: removed properties that were in Judgment

    🔧 **Quick Start:**
    1. Store the first export: `taxrollwatch ingest roll-may.xlsx`
    2. Store the next one: `taxrollwatch ingest roll-june.xlsx --json-out report.json`
    3. Review later: `taxrollwatch report` / `taxrollwatch history`
    """
    setup_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        log_file=str(log_file) if log_file else None,
    )
    ctx.obj = Container(config_file=config, db_path=db)
    ctx.call_on_close(ctx.obj.close)
