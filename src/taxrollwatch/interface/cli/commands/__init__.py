"""
CLI commands, one module per command.
"""

from .compare import compare
from .history import history
from .ingest import ingest
from .report import report

__all__ = ["compare", "history", "ingest", "report"]
