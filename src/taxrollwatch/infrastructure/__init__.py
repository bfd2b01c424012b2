"""
Infrastructure layer package.

Contains all I/O integrations:
- Configuration file loading
- Logging setup
- Spreadsheet decoding (xlsx/csv)
- SQLite snapshot store (sqlite/)
- Report output (JSON and Excel)
"""

from taxrollwatch.infrastructure.config_loader import ConfigLoader
from taxrollwatch.infrastructure.logging_config import setup_logging
from taxrollwatch.infrastructure.report_writer import (
    write_report_json,
    write_report_workbook,
)
from taxrollwatch.infrastructure.spreadsheet_reader import read_records
from taxrollwatch.infrastructure.sqlite import SnapshotStore

__all__ = [
    # Config
    "ConfigLoader",
    # Logging
    "setup_logging",
    # Input/output
    "read_records",
    "write_report_json",
    "write_report_workbook",
    # Persistence
    "SnapshotStore",
]
