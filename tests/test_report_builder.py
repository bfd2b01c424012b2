"""
Tests for report building and the report JSON shape.
"""

from datetime import datetime, timezone

from taxrollwatch.application.report_builder import ReportBuilder, build_report
from taxrollwatch.domain.change_types import StatusCode
from taxrollwatch.domain.config import TrackerSettings
from taxrollwatch.domain.records import Snapshot
from taxrollwatch.domain.report import FORECLOSURE_REASON, ComparisonReport

GENERATED = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
PREVIOUS_UPLOAD = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
CURRENT_UPLOAD = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


def make_snapshots():
    previous = Snapshot.from_rows(
        [
            {"CAN": "100", "ADDRSTRING": "1 OAK ST", "LEGALSTATUS": ""},
            {"CAN": "200", "ADDRSTRING": "2 OAK ST", "LEGALSTATUS": "J"},
            {"CAN": "300", "ADDRSTRING": "3 OAK ST", "LEGALSTATUS": "A"},
            {"CAN": "400", "ADDRSTRING": "4 OAK ST", "LEGALSTATUS": "P"},
        ],
        uploaded_at=PREVIOUS_UPLOAD,
        source_name="may.xlsx",
    )
    current = Snapshot.from_rows(
        [
            {"CAN": "100", "ADDRSTRING": "1 OAK ST", "LEGALSTATUS": "J"},
            {"CAN": "400", "ADDRSTRING": "4 OAK ST", "LEGALSTATUS": "J"},
            {"CAN": "500", "ADDRSTRING": "5 OAK ST", "LEGALSTATUS": "P"},
        ],
        uploaded_at=CURRENT_UPLOAD,
        source_name="june.xlsx",
    )
    return previous, current


class TestReportBuilder:
    """Report assembly from two snapshots."""

    def test_lists_and_counts(self):
        previous, current = make_snapshots()

        report = build_report(previous, current, generated_at=GENERATED)

        assert [c.identifier for c in report.status_changes] == ["100"]
        assert [e.identifier for e in report.removed_properties] == ["200", "300"]
        assert [e.identifier for e in report.new_properties] == ["500"]

        summary = report.summary
        assert summary.new_status_count == 1
        assert summary.removed_count == 2
        assert summary.new_count == 1
        assert summary.comparisons_performed == 1
        assert summary.previous_record_count == 4
        assert summary.current_record_count == 3
        assert summary.transition_breakdown == {"Blank→J": 1, "P→J": 1}

    def test_removed_judgment_is_foreclosed(self):
        previous, current = make_snapshots()

        report = build_report(previous, current, generated_at=GENERATED)

        assert [e.identifier for e in report.foreclosed_properties] == ["200"]
        assert report.summary.foreclosed_count == 1

    def test_foreclosure_detection_can_be_disabled(self):
        previous, current = make_snapshots()
        settings = TrackerSettings(detect_foreclosures=False)

        report = build_report(previous, current, settings=settings)

        assert report.foreclosed_properties == []
        assert report.summary.removed_count == 2

    def test_foreclosure_statuses_configurable(self):
        previous, current = make_snapshots()
        settings = TrackerSettings(foreclosure_statuses=[StatusCode.JUDGMENT, StatusCode.ACTIVE])

        report = build_report(previous, current, settings=settings)

        assert [e.identifier for e in report.foreclosed_properties] == ["200", "300"]

    def test_baseline_without_previous(self):
        _, current = make_snapshots()

        report = ReportBuilder().build(None, current, generated_at=GENERATED)

        assert report.is_baseline
        assert report.summary.comparisons_performed == 0
        assert report.summary.current_record_count == 3
        assert report.status_changes == []
        assert report.new_properties == []
        assert report.previous_uploaded_at is None

    def test_duplicates_reported_in_summary(self):
        previous = Snapshot.from_rows([{"CAN": "1"}])
        current = Snapshot.from_rows([{"CAN": "1"}, {"CAN": "1"}, {"CAN": ""}])

        report = build_report(previous, current)

        assert report.summary.duplicate_identifier_count == 1
        # Blank CAN falls back to the first column, which is also blank
        assert report.summary.empty_identifier_count == 1


class TestReportSerialization:
    """The camelCase JSON shape and reading it back."""

    def test_to_dict_shape(self):
        previous, current = make_snapshots()
        data = build_report(previous, current, generated_at=GENERATED).to_dict()

        assert data["uploadDate"] == GENERATED.isoformat()
        assert data["previousUploadDate"] == PREVIOUS_UPLOAD.isoformat()
        assert data["currentUploadDate"] == CURRENT_UPLOAD.isoformat()
        assert data["summary"]["newStatusCount"] == 1
        assert data["summary"]["foreclosedCount"] == 1
        assert data["summary"]["transitionBreakdown"]["Blank→J"] == 1

        change = data["statusChanges"][0]
        assert change["identifier"] == "100"
        assert change["previousStatus"] == "None"
        assert change["newStatus"] == "Judgment"
        assert change["changeType"] == "Blank→J"
        assert change["ADDRSTRING"] == "1 OAK ST"

        removed = data["removedProperties"][0]
        assert removed["address"] == "2 OAK ST"
        assert removed["previousStatus"] == "Judgment"

        assert data["newProperties"][0]["currentStatus"] == "Pending"

        foreclosed = data["foreclosedProperties"][0]
        assert foreclosed["identifier"] == "200"
        assert foreclosed["reason"] == FORECLOSURE_REASON

    def test_engine_keys_win_over_record_fields(self):
        previous = Snapshot.from_rows([{"ID": "1", "Status": ""}])
        current = Snapshot.from_rows([{"ID": "1", "Status": "J", "newStatus": "stale"}])

        data = build_report(previous, current).to_dict()

        assert data["statusChanges"][0]["newStatus"] == "Judgment"

    def test_record_columns_not_written_by_entry_are_kept(self):
        """Only the keys an entry type sets shadow record columns."""
        previous = Snapshot.from_rows([{"ID": "1", "address": "1 OAK ST", "Status": ""}])
        current = Snapshot.from_rows(
            [
                {"ID": "1", "address": "1 OAK ST", "Status": "J", "reason": "tax sale"},
                {"ID": "2", "address": "2 ELM ST", "Status": "", "previousStatus": "old"},
            ]
        )

        data = build_report(previous, current).to_dict()

        change = data["statusChanges"][0]
        assert change["address"] == "1 OAK ST"
        assert change["reason"] == "tax sale"
        assert list(change)[:4] == ["identifier", "previousStatus", "newStatus", "changeType"]
        new = data["newProperties"][0]
        assert new["address"] == "2 ELM ST"
        assert new["previousStatus"] == "old"

    def test_from_dict_keeps_unshadowed_record_columns(self):
        previous = Snapshot.from_rows([{"ID": "1", "address": "1 OAK ST", "Status": ""}])
        current = Snapshot.from_rows([{"ID": "1", "address": "1 OAK ST", "Status": "J"}])
        report = build_report(previous, current)

        restored = ComparisonReport.from_dict(report.to_dict())

        assert restored.status_changes[0].record["address"] == "1 OAK ST"
        assert restored.to_dict() == report.to_dict()

    def test_from_dict_reads_to_dict(self):
        previous, current = make_snapshots()
        report = build_report(previous, current, generated_at=GENERATED)

        restored = ComparisonReport.from_dict(report.to_dict())

        assert restored.generated_at == GENERATED
        assert restored.summary == report.summary
        assert restored.status_changes[0].new_status == StatusCode.JUDGMENT
        assert restored.status_changes[0].record["ADDRSTRING"] == "1 OAK ST"
        assert [e.identifier for e in restored.foreclosed_properties] == ["200"]
        assert restored.to_dict() == report.to_dict()

    def test_custom_foreclosure_reason(self):
        previous, current = make_snapshots()
        settings = TrackerSettings(foreclosure_reason="Dropped from roll")

        data = build_report(previous, current, settings=settings).to_dict()

        assert data["foreclosedProperties"][0]["reason"] == "Dropped from roll"
