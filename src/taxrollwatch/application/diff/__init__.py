"""
Diff module for comparing roll snapshots.

This module provides pure functions for diffing:
- Properties added to or removed from the roll
- Properties that newly entered a legal status

All diff functions use the domain state machine for transition classification.
"""

from taxrollwatch.application.diff.snapshot_diff import (
    diff_snapshots,
    build_snapshot_index,
    SnapshotDiffResult,
    SnapshotIndex,
)

__all__ = [
    "diff_snapshots",
    "build_snapshot_index",
    "SnapshotDiffResult",
    "SnapshotIndex",
]
