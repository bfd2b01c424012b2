"""
SQLite-based snapshot store for roll history.

Provides persistence for:
- Snapshots (every ingested export, kept indefinitely)
- Comparison reports (one per ingest after the first)

Uses stdlib sqlite3 with no ORM. Records and reports are stored as JSON
text since the roll has no fixed column schema.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from taxrollwatch.domain.report import ComparisonReport
from taxrollwatch.domain.errors import StorageError
from taxrollwatch.domain.records import Snapshot

logger = logging.getLogger(__name__)

# Schema version - increment when making breaking changes
SCHEMA_VERSION = 1

DEFAULT_ROLL = "default"


@dataclass(frozen=True)
class SnapshotInfo:
    """Snapshot metadata without its records."""

    id: int
    roll: str
    uploaded_at: datetime
    source_name: str
    record_count: int


class SnapshotStore:
    """
    SQLite-backed storage for snapshots and comparison reports.

    Usage:
        store = SnapshotStore(Path("output/taxrollwatch.db"))
        store.initialize_schema()

        previous = store.latest_snapshot("county")
        snapshot_id, report_id = store.record_ingest("county", snapshot, report)
    """

    def __init__(self, db_path: Path | str) -> None:
        """
        Initialize snapshot store.

        Args:
            db_path: Path to SQLite database file (created if not exists)
        """
        self.db_path = Path(db_path)
        self._connection: sqlite3.Connection | None = None
        # Serializes use of the shared connection across threads
        self._lock = threading.RLock()
        logger.info("SnapshotStore initialized: %s", self.db_path)

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        with self._lock:
            if self._connection is None:
                # Ensure parent directory exists
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

                try:
                    conn = sqlite3.connect(self.db_path, check_same_thread=False)
                    # Enable foreign keys
                    conn.execute("PRAGMA foreign_keys = ON")
                except sqlite3.Error as e:
                    raise StorageError(f"Cannot open database {self.db_path}: {e}") from e
                # Use Row factory for dict-like access
                conn.row_factory = sqlite3.Row
                self._connection = conn
                logger.debug("Database connection established")
            return self._connection

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None
                logger.debug("Database connection closed")

    # ========================================================================
    # Schema Management
    # ========================================================================

    def initialize_schema(self) -> None:
        """
        Create database tables if they don't exist.

        Safe to call multiple times - uses CREATE TABLE IF NOT EXISTS.
        """
        with self._lock:
            conn = self._get_connection()
            try:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS snapshots (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        roll TEXT NOT NULL,
                        uploaded_at TEXT NOT NULL,
                        source_name TEXT NOT NULL DEFAULT '',
                        record_count INTEGER NOT NULL,
                        records_json TEXT NOT NULL
                    )
                """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_snapshots_roll ON snapshots (roll, id)"
                )

                # One report per ingested snapshot after the first
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS comparison_reports (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        roll TEXT NOT NULL,
                        generated_at TEXT NOT NULL,
                        previous_snapshot_id INTEGER,
                        current_snapshot_id INTEGER NOT NULL,
                        report_json TEXT NOT NULL,
                        FOREIGN KEY (previous_snapshot_id) REFERENCES snapshots(id),
                        FOREIGN KEY (current_snapshot_id) REFERENCES snapshots(id) ON DELETE CASCADE
                    )
                """
                )

                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS schema_meta (
                        key TEXT PRIMARY KEY,
                        value TEXT
                    )
                """
                )
                conn.execute(
                    """
                    INSERT OR REPLACE INTO schema_meta (key, value)
                    VALUES ('version', ?)
                """,
                    (str(SCHEMA_VERSION),),
                )
                conn.commit()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to initialize schema in {self.db_path}: {e}") from e
        logger.info("Database schema initialized (version %d)", SCHEMA_VERSION)

    # ========================================================================
    # Snapshots
    # ========================================================================

    def _insert_snapshot(self, conn: sqlite3.Connection, roll: str, snapshot: Snapshot) -> int:
        cursor = conn.execute(
            """
            INSERT INTO snapshots (roll, uploaded_at, source_name, record_count, records_json)
            VALUES (?, ?, ?, ?, ?)
        """,
            (
                roll,
                snapshot.uploaded_at.isoformat(),
                snapshot.source_name,
                len(snapshot),
                json.dumps([dict(r) for r in snapshot.records], ensure_ascii=False),
            ),
        )
        return int(cursor.lastrowid)

    def save_snapshot(self, roll: str, snapshot: Snapshot) -> int:
        """
        Store a snapshot.

        Returns:
            New snapshot id
        """
        with self._lock:
            conn = self._get_connection()
            try:
                snapshot_id = self._insert_snapshot(conn, roll, snapshot)
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"Failed to save snapshot for roll '{roll}': {e}") from e
        logger.debug("Saved snapshot %d (%d records) for roll %s", snapshot_id, len(snapshot), roll)
        return snapshot_id

    def latest_snapshot(self, roll: str = DEFAULT_ROLL) -> tuple[int, Snapshot] | None:
        """
        Fetch the newest snapshot of a roll.

        Returns:
            (snapshot id, Snapshot) or None if the roll has no history
        """
        row = self._fetch_one(
            "SELECT * FROM snapshots WHERE roll = ? ORDER BY id DESC LIMIT 1", (roll,)
        )
        if row is None:
            return None
        return row["id"], _row_to_snapshot(row)

    def get_snapshot(self, snapshot_id: int) -> Snapshot | None:
        """Fetch a snapshot by id."""
        row = self._fetch_one("SELECT * FROM snapshots WHERE id = ?", (snapshot_id,))
        return _row_to_snapshot(row) if row else None

    def list_snapshots(self, roll: str = DEFAULT_ROLL) -> list[SnapshotInfo]:
        """List snapshot metadata for a roll, newest first."""
        with self._lock:
            conn = self._get_connection()
            try:
                rows = conn.execute(
                    """
                    SELECT id, roll, uploaded_at, source_name, record_count
                    FROM snapshots WHERE roll = ? ORDER BY id DESC
                """,
                    (roll,),
                ).fetchall()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to list snapshots for roll '{roll}': {e}") from e
        return [
            SnapshotInfo(
                id=row["id"],
                roll=row["roll"],
                uploaded_at=datetime.fromisoformat(row["uploaded_at"]),
                source_name=row["source_name"],
                record_count=row["record_count"],
            )
            for row in rows
        ]

    # ========================================================================
    # Reports
    # ========================================================================

    def _insert_report(
        self,
        conn: sqlite3.Connection,
        roll: str,
        report: ComparisonReport,
        previous_snapshot_id: int | None,
        current_snapshot_id: int,
    ) -> int:
        cursor = conn.execute(
            """
            INSERT INTO comparison_reports
                (roll, generated_at, previous_snapshot_id, current_snapshot_id, report_json)
            VALUES (?, ?, ?, ?, ?)
        """,
            (
                roll,
                report.generated_at.isoformat(),
                previous_snapshot_id,
                current_snapshot_id,
                json.dumps(report.to_dict(), ensure_ascii=False),
            ),
        )
        return int(cursor.lastrowid)

    def save_report(
        self,
        roll: str,
        report: ComparisonReport,
        current_snapshot_id: int,
        previous_snapshot_id: int | None = None,
    ) -> int:
        """Store a comparison report; returns the report id."""
        with self._lock:
            conn = self._get_connection()
            try:
                report_id = self._insert_report(
                    conn, roll, report, previous_snapshot_id, current_snapshot_id
                )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"Failed to save report for roll '{roll}': {e}") from e
        return report_id

    def latest_report(self, roll: str = DEFAULT_ROLL) -> ComparisonReport | None:
        """Fetch the newest comparison report of a roll."""
        row = self._fetch_one(
            "SELECT report_json FROM comparison_reports WHERE roll = ? ORDER BY id DESC LIMIT 1",
            (roll,),
        )
        if row is None:
            return None
        return ComparisonReport.from_dict(json.loads(row["report_json"]))

    def record_ingest(
        self,
        roll: str,
        snapshot: Snapshot,
        report: ComparisonReport,
        previous_snapshot_id: int | None = None,
    ) -> tuple[int, int]:
        """
        Store a new snapshot and its report in one transaction.

        Either both rows are written or neither is.

        Returns:
            (snapshot id, report id)
        """
        with self._lock:
            conn = self._get_connection()
            try:
                snapshot_id = self._insert_snapshot(conn, roll, snapshot)
                report_id = self._insert_report(
                    conn, roll, report, previous_snapshot_id, snapshot_id
                )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"Failed to record ingest for roll '{roll}': {e}") from e
        logger.info(
            "Recorded snapshot %d and report %d for roll %s", snapshot_id, report_id, roll
        )
        return snapshot_id, report_id

    # ========================================================================
    # Helpers
    # ========================================================================

    def _fetch_one(self, sql: str, params: tuple) -> sqlite3.Row | None:
        with self._lock:
            conn = self._get_connection()
            try:
                return conn.execute(sql, params).fetchone()
            except sqlite3.Error as e:
                raise StorageError(f"Query failed on {self.db_path}: {e}") from e


def _row_to_snapshot(row: sqlite3.Row) -> Snapshot:
    return Snapshot.from_rows(
        json.loads(row["records_json"]),
        uploaded_at=datetime.fromisoformat(row["uploaded_at"]),
        source_name=row["source_name"],
    )
