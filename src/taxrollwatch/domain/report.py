"""
Comparison report model.

The report is the persisted outcome of comparing two consecutive snapshots
of a roll. Its JSON shape (camelCase keys) is what downstream dashboards
read; to_dict/from_dict are the only place that shape is defined.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from taxrollwatch.domain.change_types import ChangeRecord, PropertyEntry, StatusCode
from taxrollwatch.domain.identity import find_address
from taxrollwatch.domain.records import Record

FORECLOSURE_REASON = "Foreclosed or New Owner - Lead No Longer Valid"

# Keys each entry type adds on top of the record; they win over same-named fields
STATUS_CHANGE_KEYS = ("identifier", "previousStatus", "newStatus", "changeType")
REMOVED_KEYS = ("identifier", "address", "previousStatus")
NEW_KEYS = ("identifier", "currentStatus")
FORECLOSED_KEYS = REMOVED_KEYS + ("reason",)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ReportSummary:
    # pylint: disable=too-many-instance-attributes
    """
    Aggregate counts for a comparison.

    This is THE data structure all consumers (CLI, JSON, workbook) use.
    """

    new_status_count: int = 0
    removed_count: int = 0
    new_count: int = 0
    foreclosed_count: int = 0
    comparisons_performed: int = 0
    previous_record_count: int = 0
    current_record_count: int = 0
    duplicate_identifier_count: int = 0
    empty_identifier_count: int = 0
    transition_breakdown: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "newStatusCount": self.new_status_count,
            "removedCount": self.removed_count,
            "newCount": self.new_count,
            "foreclosedCount": self.foreclosed_count,
            "comparisonsPerformed": self.comparisons_performed,
            "previousRecordCount": self.previous_record_count,
            "currentRecordCount": self.current_record_count,
            "duplicateIdentifierCount": self.duplicate_identifier_count,
            "emptyIdentifierCount": self.empty_identifier_count,
            "transitionBreakdown": dict(self.transition_breakdown),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportSummary:
        """Read a summary written by to_dict (missing counts default to 0)."""
        return cls(
            new_status_count=int(data.get("newStatusCount", 0)),
            removed_count=int(data.get("removedCount", 0)),
            new_count=int(data.get("newCount", 0)),
            foreclosed_count=int(data.get("foreclosedCount", 0)),
            comparisons_performed=int(data.get("comparisonsPerformed", 0)),
            previous_record_count=int(data.get("previousRecordCount", 0)),
            current_record_count=int(data.get("currentRecordCount", 0)),
            duplicate_identifier_count=int(data.get("duplicateIdentifierCount", 0)),
            empty_identifier_count=int(data.get("emptyIdentifierCount", 0)),
            transition_breakdown=dict(data.get("transitionBreakdown") or {}),
        )


@dataclass
class ComparisonReport:
    # pylint: disable=too-many-instance-attributes
    """
    Persisted summary of the differences between two consecutive snapshots.

    Attributes:
        generated_at: When the comparison ran ("uploadDate" in JSON)
        summary: Aggregate counts
        status_changes: Properties that newly entered J/A/P
        removed_properties: Properties only in the previous snapshot
        new_properties: Properties only in the current snapshot
        foreclosed_properties: Removed properties matching the foreclosure policy
        previous_uploaded_at: Upload time of the previous snapshot (None if first)
        current_uploaded_at: Upload time of the current snapshot
        foreclosure_reason: Reason text attached to foreclosed entries
    """

    generated_at: datetime
    summary: ReportSummary = field(default_factory=ReportSummary)
    status_changes: list[ChangeRecord] = field(default_factory=list)
    removed_properties: list[PropertyEntry] = field(default_factory=list)
    new_properties: list[PropertyEntry] = field(default_factory=list)
    foreclosed_properties: list[PropertyEntry] = field(default_factory=list)
    previous_uploaded_at: datetime | None = None
    current_uploaded_at: datetime | None = None
    foreclosure_reason: str = FORECLOSURE_REASON

    @property
    def is_baseline(self) -> bool:
        """Check if this report was produced without a previous snapshot."""
        return self.summary.comparisons_performed == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON report shape."""
        return {
            "uploadDate": self.generated_at.isoformat(),
            "previousUploadDate": _iso(self.previous_uploaded_at),
            "currentUploadDate": _iso(self.current_uploaded_at),
            "summary": self.summary.to_dict(),
            "statusChanges": [_status_change_dict(c) for c in self.status_changes],
            "removedProperties": [_removed_dict(e) for e in self.removed_properties],
            "newProperties": [_new_dict(e) for e in self.new_properties],
            "foreclosedProperties": [
                _removed_dict(e, self.foreclosure_reason)
                for e in self.foreclosed_properties
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ComparisonReport:
        """
        Read a report written by to_dict.

        Record fields shadowed by the keys an entry type writes (identifier,
        address on removed entries, ...) are not recoverable and are dropped.
        """
        foreclosed = data.get("foreclosedProperties") or []
        return cls(
            generated_at=datetime.fromisoformat(data["uploadDate"]),
            summary=ReportSummary.from_dict(data.get("summary") or {}),
            status_changes=[
                ChangeRecord(
                    identifier=str(item.get("identifier", "")),
                    previous_status=StatusCode.from_label(item.get("previousStatus")),
                    new_status=StatusCode.from_label(item.get("newStatus")),
                    record=_strip_keys(item, STATUS_CHANGE_KEYS),
                )
                for item in data.get("statusChanges") or []
            ],
            removed_properties=[
                _entry_from_dict(item, "previousStatus", REMOVED_KEYS)
                for item in data.get("removedProperties") or []
            ],
            new_properties=[
                _entry_from_dict(item, "currentStatus", NEW_KEYS)
                for item in data.get("newProperties") or []
            ],
            foreclosed_properties=[
                _entry_from_dict(item, "previousStatus", FORECLOSED_KEYS)
                for item in foreclosed
            ],
            previous_uploaded_at=_parse_iso(data.get("previousUploadDate")),
            current_uploaded_at=_parse_iso(data.get("currentUploadDate")),
            foreclosure_reason=(
                str(foreclosed[0].get("reason") or FORECLOSURE_REASON)
                if foreclosed
                else FORECLOSURE_REASON
            ),
        )


# =============================================================================
# Serialization Helpers
# =============================================================================


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _strip_keys(item: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in item.items() if k not in keys}


def _with_record(fields: dict[str, Any], record: Record) -> dict[str, Any]:
    """Report keys first, then every record field they don't shadow."""
    return {**fields, **_strip_keys(dict(record), tuple(fields))}


def _status_change_dict(change: ChangeRecord) -> dict[str, Any]:
    return _with_record(
        {
            "identifier": change.identifier,
            "previousStatus": change.previous_status.value,
            "newStatus": change.new_status.value,
            "changeType": change.change_type,
        },
        change.record,
    )


def _removed_dict(entry: PropertyEntry, reason: str | None = None) -> dict[str, Any]:
    fields = {
        "identifier": entry.identifier,
        "address": find_address(entry.record),
        "previousStatus": entry.status.value,
    }
    if reason is not None:
        fields["reason"] = reason
    return _with_record(fields, entry.record)


def _new_dict(entry: PropertyEntry) -> dict[str, Any]:
    return _with_record(
        {"identifier": entry.identifier, "currentStatus": entry.status.value},
        entry.record,
    )


def _entry_from_dict(
    item: dict[str, Any], status_key: str, keys: tuple[str, ...]
) -> PropertyEntry:
    return PropertyEntry(
        identifier=str(item.get("identifier", "")),
        status=StatusCode.from_label(item.get(status_key)),
        record=_strip_keys(item, keys),
    )
