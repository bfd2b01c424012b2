"""
Ingestion service - the upload workflow.

Decodes an export, validates it as a snapshot, compares it to the roll's
previous snapshot and stores both the snapshot and the report. The current
snapshot becomes the baseline for the next ingest.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Sequence

from taxrollwatch.application.report_builder import ReportBuilder
from taxrollwatch.domain.config import TrackerSettings
from taxrollwatch.domain.records import Snapshot
from taxrollwatch.domain.report import ComparisonReport
from taxrollwatch.infrastructure.spreadsheet_reader import read_records
from taxrollwatch.infrastructure.sqlite.store import DEFAULT_ROLL, SnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    """Outcome of one ingest."""

    snapshot_id: int
    report: ComparisonReport
    report_id: int | None = None
    previous_snapshot_id: int | None = None


class IngestionService:
    """
    Application service for ingesting roll exports.

    Ingests of the same roll are serialized so each one compares against
    the snapshot stored by the one before it. Different rolls do not block
    each other.

    Usage:
        service = IngestionService(store, settings)
        result = service.ingest_file(Path("exports/2024-06.xlsx"), roll="county")
        print(result.report.summary.new_status_count)
    """

    def __init__(self, store: SnapshotStore, settings: TrackerSettings | None = None) -> None:
        self.store = store
        self.settings = settings or TrackerSettings()
        self.builder = ReportBuilder(self.settings)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _roll_lock(self, roll: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(roll, threading.Lock())

    def ingest_file(
        self,
        path: Path | str,
        roll: str = DEFAULT_ROLL,
        uploaded_at: datetime | None = None,
    ) -> IngestResult:
        """
        Ingest an .xlsx/.csv export.

        Raises:
            SpreadsheetDecodeError: If the file cannot be decoded
            MalformedSnapshotError: If decoded rows are not valid records
            DuplicateIdentifierError: If duplicates are configured as errors
            StorageError: If persisting fails (nothing is written)
        """
        path = Path(path)
        rows = read_records(path, sheet_name=self.settings.sheet_name)
        return self.ingest_rows(rows, roll=roll, uploaded_at=uploaded_at, source_name=path.name)

    def ingest_rows(
        self,
        rows: Sequence[Mapping[str, Any]],
        roll: str = DEFAULT_ROLL,
        uploaded_at: datetime | None = None,
        source_name: str = "",
    ) -> IngestResult:
        """
        Ingest already-decoded rows.

        The snapshot is validated before the roll is locked; a malformed
        upload never touches stored state.
        """
        snapshot = Snapshot.from_rows(rows, uploaded_at=uploaded_at, source_name=source_name)

        with self._roll_lock(roll):
            latest = self.store.latest_snapshot(roll)
            previous_id, previous = latest if latest else (None, None)

            report = self.builder.build(previous, snapshot)
            snapshot_id, report_id = self.store.record_ingest(
                roll, snapshot, report, previous_snapshot_id=previous_id
            )

        logger.info(
            "Ingested %s into roll %s as snapshot %d (%d records)",
            source_name or "rows",
            roll,
            snapshot_id,
            len(snapshot),
        )
        return IngestResult(
            snapshot_id=snapshot_id,
            report=report,
            report_id=report_id,
            previous_snapshot_id=previous_id,
        )

    def compare_files(
        self,
        previous_path: Path | str,
        current_path: Path | str,
    ) -> ComparisonReport:
        """Compare two exports directly without touching the store."""
        return compare_files(previous_path, current_path, self.settings)


def compare_files(
    previous_path: Path | str,
    current_path: Path | str,
    settings: TrackerSettings | None = None,
) -> ComparisonReport:
    """
    Compare two exports, oldest first.

    Args:
        previous_path: Older export
        current_path: Newer export
        settings: Tracker settings (defaults if None)

    Returns:
        ComparisonReport of current against previous
    """
    settings = settings or TrackerSettings()
    previous_path, current_path = Path(previous_path), Path(current_path)
    previous = Snapshot.from_rows(
        read_records(previous_path, sheet_name=settings.sheet_name),
        source_name=previous_path.name,
    )
    current = Snapshot.from_rows(
        read_records(current_path, sheet_name=settings.sheet_name),
        source_name=current_path.name,
    )
    return ReportBuilder(settings).build(previous, current)
