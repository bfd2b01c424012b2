"""
Record and Snapshot types.

A Record is one property's row: an ordered mapping of column name to a
scalar cell value. Column sets drift between roll releases, so there is no
fixed schema; the only guarantee enforced here is the shape (string keys,
scalar values). A Snapshot is the ordered, immutable set of records captured
at one upload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Sequence, Union

from taxrollwatch.domain.errors import MalformedSnapshotError

logger = logging.getLogger(__name__)

ScalarValue = Union[str, int, float, bool, None]
Record = Mapping[str, ScalarValue]

SCALAR_TYPES = (str, int, float, bool, type(None))


def is_blank(value: ScalarValue) -> bool:
    """Check if a cell value counts as empty."""
    return value is None or str(value).strip() == ""


def cell_text(value: ScalarValue) -> str:
    """
    Render a cell value as trimmed text.

    Integral floats lose their ".0" so a numeric account number read back
    from a spreadsheet as 12345.0 matches the text "12345".
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def freeze_record(row: Any, index: int) -> Record:
    """
    Validate one row and return a read-only copy of it.

    Args:
        row: Candidate record
        index: Position of the row in its snapshot (for error messages)

    Raises:
        MalformedSnapshotError: If the row is not a flat str -> scalar mapping
    """
    if not isinstance(row, Mapping):
        raise MalformedSnapshotError(
            f"Row {index} is a {type(row).__name__}, expected a field mapping"
        )
    frozen: dict[str, ScalarValue] = {}
    for key, value in row.items():
        if not isinstance(key, str):
            raise MalformedSnapshotError(
                f"Row {index} has non-string column name {key!r}"
            )
        if not isinstance(value, SCALAR_TYPES):
            raise MalformedSnapshotError(
                f"Row {index} column {key!r} holds a {type(value).__name__}, "
                "expected a scalar"
            )
        frozen[key] = value
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class Snapshot:
    """
    One full capture of the property roll.

    Attributes:
        records: Ordered, read-only records
        uploaded_at: When the export was ingested
        source_name: Original file name or other label
    """

    records: tuple[Record, ...] = ()
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source_name: str = ""

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Mapping[str, Any]],
        uploaded_at: datetime | None = None,
        source_name: str = "",
    ) -> Snapshot:
        """
        Build a Snapshot from decoded rows, validating their shape.

        Args:
            rows: Ordered sequence of field mappings
            uploaded_at: Upload timestamp (defaults to now, UTC)
            source_name: Label for the export

        Returns:
            Snapshot instance

        Raises:
            MalformedSnapshotError: If rows is not an ordered sequence of
                flat field mappings. Nothing is partially processed.
        """
        if isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Sequence):
            raise MalformedSnapshotError(
                f"Snapshot must be an ordered sequence of records, got {type(rows).__name__}"
            )
        records = tuple(freeze_record(row, i) for i, row in enumerate(rows))
        logger.debug("Validated snapshot %r with %d records", source_name, len(records))
        return cls(
            records=records,
            uploaded_at=uploaded_at or datetime.now(timezone.utc),
            source_name=source_name,
        )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def columns(self) -> list[str]:
        """Union of column names in first-seen order."""
        seen: dict[str, None] = {}
        for record in self.records:
            for key in record:
                seen.setdefault(key, None)
        return list(seen)


def normalize_column(name: str) -> str:
    """Canonical form of a column name for loose matching."""
    return " ".join(name.split()).casefold()


def lookup_field(record: Record, name: str) -> ScalarValue:
    """
    Find a non-blank value for a column name.

    An exact column match wins; otherwise columns are compared
    case-insensitively with whitespace collapsed, in record order.
    """
    value = record.get(name)
    if not is_blank(value):
        return value
    wanted = normalize_column(name)
    for column, candidate in record.items():
        if column != name and normalize_column(column) == wanted and not is_blank(candidate):
            return candidate
    return None
