"""
Tests for the snapshot differ.

Covers the reference scenarios, the only-None-to-status rule, ordering,
duplicate identifiers and idempotence.
"""

import pytest

from taxrollwatch.application.diff import build_snapshot_index, diff_snapshots
from taxrollwatch.domain.change_types import StatusCode
from taxrollwatch.domain.errors import DuplicateIdentifierError, MalformedSnapshotError
from taxrollwatch.domain.identity import IdentityResolver
from taxrollwatch.domain.records import Snapshot


def snap(*rows):
    return Snapshot.from_rows(list(rows))


class TestReferenceScenarios:
    """Small hand-checked comparisons."""

    def test_blank_to_judgment_is_new_status(self):
        result = diff_snapshots(
            snap({"ID": "1", "Status": ""}),
            snap({"ID": "1", "Status": "J"}),
        )

        assert len(result.new_status_properties) == 1
        change = result.new_status_properties[0]
        assert change.identifier == "1"
        assert change.previous_status == StatusCode.NONE
        assert change.new_status == StatusCode.JUDGMENT
        assert change.record["Status"] == "J"
        assert result.removed_properties == []
        assert result.new_properties == []

    def test_missing_from_current_is_removed(self):
        result = diff_snapshots(snap({"ID": "1", "Status": "A"}), snap())

        assert [e.identifier for e in result.removed_properties] == ["1"]
        assert result.removed_properties[0].status == StatusCode.ACTIVE
        assert result.new_status_properties == []

    def test_new_property_is_not_a_status_change(self):
        result = diff_snapshots(snap(), snap({"ID": "2", "Status": "P"}))

        assert [e.identifier for e in result.new_properties] == ["2"]
        assert result.new_properties[0].status == StatusCode.PENDING
        assert result.new_status_properties == []

    def test_first_column_fallback_joins_records(self):
        result = diff_snapshots(
            snap({"Foo": "x", "Bar": "y"}),
            snap({"Foo": "x", "Bar": "z"}),
        )
        assert not result.has_changes


class TestTransitionRules:
    """Only None→J/A/P is reported; other changes are counted."""

    def test_pending_to_judgment_is_not_reported(self):
        result = diff_snapshots(
            snap({"ID": "1", "Status": "P"}),
            snap({"ID": "1", "Status": "J"}),
        )
        assert result.new_status_properties == []
        assert result.transition_breakdown == {"P→J": 1}

    def test_status_removal_is_not_reported(self):
        result = diff_snapshots(
            snap({"ID": "1", "Status": "J"}),
            snap({"ID": "1", "Status": ""}),
        )
        assert result.new_status_properties == []
        assert result.transition_breakdown == {"J→Blank": 1}

    def test_breakdown_counts_reported_changes_too(self):
        result = diff_snapshots(
            snap({"ID": "1"}, {"ID": "2"}, {"ID": "3", "Status": "A"}),
            snap({"ID": "1", "Status": "J"}, {"ID": "2", "Status": "J"}, {"ID": "3", "Status": "A"}),
        )
        assert len(result.new_status_properties) == 2
        assert result.transition_breakdown == {"Blank→J": 2}

    def test_unrecognized_status_counts_as_none(self):
        result = diff_snapshots(
            snap({"ID": "1", "Status": "Under review"}),
            snap({"ID": "1", "Status": "A"}),
        )
        assert [c.new_status for c in result.new_status_properties] == [StatusCode.ACTIVE]


class TestOrderingAndIdempotence:
    """Output order follows the snapshots."""

    def test_lists_follow_snapshot_order(self):
        previous = snap({"ID": "9"}, {"ID": "1"}, {"ID": "5"}, {"ID": "7"})
        current = snap({"ID": "4", "Status": "J"}, {"ID": "5", "Status": "A"}, {"ID": "1", "Status": "P"}, {"ID": "2"})

        result = diff_snapshots(previous, current)

        assert [c.identifier for c in result.new_status_properties] == ["5", "1"]
        assert [e.identifier for e in result.new_properties] == ["4", "2"]
        assert [e.identifier for e in result.removed_properties] == ["9", "7"]

    def test_identical_snapshots_have_no_changes(self):
        rows = [{"ID": "1", "Status": "J"}, {"ID": "2", "Status": ""}]
        result = diff_snapshots(snap(*rows), snap(*rows))

        assert not result.has_changes
        assert result.transition_breakdown == {}

    def test_diff_is_deterministic(self):
        previous = snap({"ID": "1"}, {"ID": "2", "Status": "A"})
        current = snap({"ID": "1", "Status": "J"}, {"ID": "3"})

        first = diff_snapshots(previous, current)
        second = diff_snapshots(previous, current)

        assert first == second

    def test_empty_snapshots(self):
        result = diff_snapshots(snap(), snap())
        assert not result.has_changes


class TestDuplicateIdentifiers:
    """Repeated identifiers within one snapshot."""

    def test_last_row_wins(self):
        previous = snap({"ID": "1", "Status": "J"})
        current = snap({"ID": "1", "Status": ""}, {"ID": "1", "Status": "J"})

        result = diff_snapshots(previous, current)

        assert not result.has_changes
        assert result.current_duplicates == {"1": 2}
        assert result.duplicate_identifier_count == 1

    def test_first_position_kept_for_order(self):
        current = snap({"ID": "1"}, {"ID": "2"}, {"ID": "1", "Owner": "later"})
        index = build_snapshot_index(current, IdentityResolver())

        assert list(index.records) == ["1", "2"]
        assert index.records["1"]["Owner"] == "later"

    def test_duplicates_can_be_fatal(self):
        current = snap({"ID": "1"}, {"ID": "1"})

        with pytest.raises(DuplicateIdentifierError) as excinfo:
            diff_snapshots(snap(), current, raise_on_duplicates=True)

        assert excinfo.value.identifier == "1"
        assert excinfo.value.count == 2

    def test_empty_identifiers_are_counted(self):
        result = diff_snapshots(snap({"ID": ""}), snap({"ID": "", "Other": None}))
        assert result.empty_identifier_count == 2


class TestMalformedInput:
    """Malformed snapshots are rejected before any diffing."""

    @pytest.mark.parametrize("rows", ["ID,Status", {"ID": "1"}, 42, None])
    def test_non_sequence_rejected(self, rows):
        with pytest.raises(MalformedSnapshotError):
            Snapshot.from_rows(rows)

    def test_non_mapping_row_rejected(self):
        with pytest.raises(MalformedSnapshotError):
            Snapshot.from_rows([{"ID": "1"}, ["ID", "2"]])

    def test_nested_value_rejected(self):
        with pytest.raises(MalformedSnapshotError):
            Snapshot.from_rows([{"ID": "1", "Owners": ["a", "b"]}])

    def test_non_string_key_rejected(self):
        with pytest.raises(MalformedSnapshotError):
            Snapshot.from_rows([{1: "x"}])

    def test_malformed_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            Snapshot.from_rows("not rows")
