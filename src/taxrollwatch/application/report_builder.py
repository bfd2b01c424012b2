"""
Report Builder - assemble a ComparisonReport from two snapshots.

The builder runs the differ once, applies the foreclosure policy to the
removed properties and computes the summary counts. It does not persist
anything: storing the report and keeping the current snapshot as the next
baseline is the caller's job (see IngestionService).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from taxrollwatch.application.diff.snapshot_diff import (
    SnapshotDiffResult,
    diff_snapshots,
)
from taxrollwatch.domain.change_types import PropertyEntry
from taxrollwatch.domain.config import TrackerSettings
from taxrollwatch.domain.records import Snapshot
from taxrollwatch.domain.report import ComparisonReport, ReportSummary

logger = logging.getLogger(__name__)


# =============================================================================
# Builder
# =============================================================================


class ReportBuilder:
    """
    Builds comparison reports with a fixed set of tracker settings.

    Usage:
        builder = ReportBuilder(TrackerSettings())
        report = builder.build(previous_snapshot, current_snapshot)
    """

    def __init__(self, settings: TrackerSettings | None = None) -> None:
        self.settings = settings or TrackerSettings()
        self.identity_resolver = self.settings.build_identity_resolver()
        self.status_normalizer = self.settings.build_status_normalizer()

    def diff(self, previous: Snapshot, current: Snapshot) -> SnapshotDiffResult:
        """Run the differ with the configured policies."""
        return diff_snapshots(
            previous,
            current,
            identify=self.identity_resolver,
            extract_status=self.status_normalizer,
            raise_on_duplicates=self.settings.raise_on_duplicates,
        )

    def select_foreclosed(self, removed: list[PropertyEntry]) -> list[PropertyEntry]:
        """Apply the foreclosure policy to removed properties."""
        if not self.settings.detect_foreclosures:
            return []
        statuses = set(self.settings.foreclosure_statuses)
        return [entry for entry in removed if entry.status in statuses]

    def build(
        self,
        previous: Snapshot | None,
        current: Snapshot,
        generated_at: datetime | None = None,
    ) -> ComparisonReport:
        """
        Build the comparison report for a newly ingested snapshot.

        Args:
            previous: Prior snapshot of the same roll, or None for the first upload
            current: Newly ingested snapshot
            generated_at: Report timestamp (defaults to now, UTC)

        Returns:
            Fully populated ComparisonReport
        """
        generated_at = generated_at or datetime.now(timezone.utc)

        if previous is None:
            logger.info(
                "No previous snapshot - baseline report for %d records", len(current)
            )
            return ComparisonReport(
                generated_at=generated_at,
                summary=ReportSummary(current_record_count=len(current)),
                current_uploaded_at=current.uploaded_at,
                foreclosure_reason=self.settings.foreclosure_reason,
            )

        result = self.diff(previous, current)
        foreclosed = self.select_foreclosed(result.removed_properties)
        _log_identifier_quality(result)

        summary = ReportSummary(
            new_status_count=len(result.new_status_properties),
            removed_count=len(result.removed_properties),
            new_count=len(result.new_properties),
            foreclosed_count=len(foreclosed),
            comparisons_performed=1,
            previous_record_count=len(previous),
            current_record_count=len(current),
            duplicate_identifier_count=result.duplicate_identifier_count,
            empty_identifier_count=result.empty_identifier_count,
            transition_breakdown=result.transition_breakdown,
        )

        logger.info(
            "Comparison: %d new status, %d new, %d removed (%d foreclosed)",
            summary.new_status_count,
            summary.new_count,
            summary.removed_count,
            summary.foreclosed_count,
        )

        return ComparisonReport(
            generated_at=generated_at,
            summary=summary,
            status_changes=result.new_status_properties,
            removed_properties=result.removed_properties,
            new_properties=result.new_properties,
            foreclosed_properties=foreclosed,
            previous_uploaded_at=previous.uploaded_at,
            current_uploaded_at=current.uploaded_at,
            foreclosure_reason=self.settings.foreclosure_reason,
        )


def _log_identifier_quality(result: SnapshotDiffResult) -> None:
    """Surface degenerate identifiers; they never stop a comparison."""
    for label, duplicates in (
        ("previous", result.previous_duplicates),
        ("current", result.current_duplicates),
    ):
        if duplicates:
            sample = ", ".join(f"{key!r} x{count}" for key, count in list(duplicates.items())[:5])
            logger.warning(
                "%d duplicate identifier(s) in %s snapshot, last row wins: %s",
                len(duplicates),
                label,
                sample,
            )
    if result.empty_identifier_count:
        logger.warning(
            "%d record(s) have an empty identifier", result.empty_identifier_count
        )


def build_report(
    previous: Snapshot | None,
    current: Snapshot,
    settings: TrackerSettings | None = None,
    generated_at: datetime | None = None,
) -> ComparisonReport:
    """Build a report with the given (or default) settings."""
    return ReportBuilder(settings).build(previous, current, generated_at=generated_at)
