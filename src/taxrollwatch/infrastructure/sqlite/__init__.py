"""
SQLite persistence for roll snapshots and comparison reports.
"""

from taxrollwatch.infrastructure.sqlite.store import (
    DEFAULT_ROLL,
    SCHEMA_VERSION,
    SnapshotInfo,
    SnapshotStore,
)

__all__ = [
    "DEFAULT_ROLL",
    "SCHEMA_VERSION",
    "SnapshotInfo",
    "SnapshotStore",
]
