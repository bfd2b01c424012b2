"""
Snapshot Diff - Pure function for comparing two roll snapshots.

This module provides diff functionality for property rolls,
using the domain state machine for transition classification.

Architecture Note:
    - Pure functions with no side effects
    - No database or file I/O
    - Uses domain types and state machine
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable

from taxrollwatch.domain.change_types import ChangeRecord, PropertyEntry, StatusCode
from taxrollwatch.domain.errors import DuplicateIdentifierError
from taxrollwatch.domain.identity import IdentityResolver
from taxrollwatch.domain.records import Record, Snapshot
from taxrollwatch.domain.state_machine import classify_status_transition
from taxrollwatch.domain.status_normalizer import StatusNormalizer

Identify = Callable[[Record], str]
ExtractStatus = Callable[[Record], StatusCode]


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class SnapshotIndex:
    """
    Records of one snapshot keyed by identifier.

    Duplicate identifiers resolve last-write-wins; the map keeps the
    position of the first occurrence so output order follows the snapshot.
    """

    records: dict[str, Record] = field(default_factory=dict)
    duplicates: dict[str, int] = field(default_factory=dict)
    empty_identifiers: int = 0


@dataclass
class SnapshotDiffResult:
    """
    Result of diffing two snapshots.

    Contains the three change lists plus data-quality diagnostics.
    """

    new_status_properties: list[ChangeRecord] = field(default_factory=list)
    removed_properties: list[PropertyEntry] = field(default_factory=list)
    new_properties: list[PropertyEntry] = field(default_factory=list)

    # Transition key ("Blank→J", "P→J", "J→Blank") -> count, for
    # properties present in both snapshots whose status changed
    transition_breakdown: dict[str, int] = field(default_factory=dict)

    # Diagnostics (surfaced by the caller, never fatal by default)
    previous_duplicates: dict[str, int] = field(default_factory=dict)
    current_duplicates: dict[str, int] = field(default_factory=dict)
    empty_identifier_count: int = 0

    @property
    def has_changes(self) -> bool:
        """Check if any list is non-empty."""
        return bool(
            self.new_status_properties or self.removed_properties or self.new_properties
        )

    @property
    def duplicate_identifier_count(self) -> int:
        """Number of distinct identifiers repeated within a snapshot."""
        return len(self.previous_duplicates) + len(self.current_duplicates)


# =============================================================================
# Helper Functions
# =============================================================================


def build_snapshot_index(
    snapshot: Snapshot,
    identify: Identify,
    raise_on_duplicates: bool = False,
) -> SnapshotIndex:
    """
    Build a map of identifier -> record.

    Args:
        snapshot: Snapshot to index
        identify: Identity strategy
        raise_on_duplicates: Raise instead of last-write-wins

    Returns:
        SnapshotIndex with records and duplicate/empty diagnostics

    Raises:
        DuplicateIdentifierError: If raise_on_duplicates and a key repeats
    """
    index = SnapshotIndex()
    seen: Counter[str] = Counter()

    for record in snapshot.records:
        key = identify(record)
        if not key:
            index.empty_identifiers += 1
        seen[key] += 1
        if seen[key] > 1 and raise_on_duplicates:
            raise DuplicateIdentifierError(key, seen[key])
        index.records[key] = record

    index.duplicates = {key: count for key, count in seen.items() if count > 1}
    return index


# =============================================================================
# Main Diff Function
# =============================================================================


def diff_snapshots(
    previous: Snapshot,
    current: Snapshot,
    identify: Identify | None = None,
    extract_status: ExtractStatus | None = None,
    raise_on_duplicates: bool = False,
) -> SnapshotDiffResult:
    """
    Diff two snapshots and classify every property.

    This is THE primary diff function for roll comparison.
    Uses the domain state machine for transition classification.

    Args:
        previous: Older snapshot (may be empty)
        current: Newer snapshot
        identify: Identity strategy (default field priorities if None)
        extract_status: Status policy (default candidate fields if None)
        raise_on_duplicates: Treat repeated identifiers as an error

    Returns:
        SnapshotDiffResult with change lists and diagnostics
    """
    identify = identify or IdentityResolver()
    extract_status = extract_status or StatusNormalizer()

    old_index = build_snapshot_index(previous, identify, raise_on_duplicates)
    new_index = build_snapshot_index(current, identify, raise_on_duplicates)

    result = SnapshotDiffResult(
        previous_duplicates=old_index.duplicates,
        current_duplicates=new_index.duplicates,
        empty_identifier_count=old_index.empty_identifiers + new_index.empty_identifiers,
    )
    breakdown: Counter[str] = Counter()

    # Current order drives new properties and status changes
    for key, new_record in new_index.records.items():
        new_status = extract_status(new_record)
        old_record = old_index.records.get(key)

        if old_record is None:
            result.new_properties.append(PropertyEntry(key, new_status, new_record))
            continue

        transition = classify_status_transition(extract_status(old_record), new_status)
        if transition.kind.is_change:
            breakdown[transition.label] += 1
        if transition.kind.is_reported:
            result.new_status_properties.append(
                ChangeRecord(
                    identifier=key,
                    previous_status=transition.previous_status,
                    new_status=transition.new_status,
                    record=new_record,
                )
            )

    # Previous-only properties, in previous order
    for key, old_record in old_index.records.items():
        if key not in new_index.records:
            result.removed_properties.append(
                PropertyEntry(key, extract_status(old_record), old_record)
            )

    result.transition_breakdown = dict(breakdown)
    return result
