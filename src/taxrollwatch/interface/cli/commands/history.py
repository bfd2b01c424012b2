"""
History Command - list stored snapshots of a roll.
"""

import logging

import typer

from taxrollwatch.domain.errors import TaxRollWatchError
from taxrollwatch.infrastructure.sqlite import DEFAULT_ROLL

from ..formatters import ReportFormatter
from .common import console, fail, get_container

logger = logging.getLogger(__name__)


def history(
    ctx: typer.Context,
    roll: str = typer.Option(DEFAULT_ROLL, "--roll", "-r", help="Roll to list."),
):
    """List stored snapshots, newest first."""
    container = get_container(ctx)

    try:
        snapshots = container.snapshot_store.list_snapshots(roll)
    except TaxRollWatchError as e:
        fail("Cannot read history", e)

    ReportFormatter(console).display_history(snapshots, roll)
