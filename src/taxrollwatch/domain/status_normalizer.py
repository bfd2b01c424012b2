"""
Status Normalizer - extract the J/A/P legal status from a record.

Exports place the status in inconsistently named columns, so extraction is
an ordered list of candidate column predicates. The first candidate column
holding exactly J, A or P wins. An exhaustive scan of every column exists as
an opt-in last resort: it raises recall but picks up stray single-letter
values (initials, unit letters) as false positives.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from taxrollwatch.domain.change_types import StatusCode
from taxrollwatch.domain.records import Record, is_blank, normalize_column

ColumnPredicate = Callable[[str], bool]

DEFAULT_STATUS_FIELDS = (
    "LEGALSTATUS",
    "Status",
    "status",
    "J",
    "A",
    "P",
    "Judgment Status",
    "Tax Status",
    "Foreclosure Status",
)


def named_column(name: str) -> ColumnPredicate:
    """Predicate matching a column name case-insensitively."""
    wanted = normalize_column(name)

    def matches(column: str) -> bool:
        return normalize_column(column) == wanted

    matches.__name__ = f"named_column({name!r})"
    return matches


class StatusNormalizer:
    """
    Ordered status extraction policy.

    Usage:
        normalizer = StatusNormalizer.from_field_names(["Status"])
        normalizer.extract_status({"Status": " j "})  # StatusCode.JUDGMENT
    """

    def __init__(
        self,
        candidates: Sequence[ColumnPredicate] | None = None,
        exhaustive_scan: bool = False,
    ) -> None:
        if candidates is None:
            candidates = [named_column(name) for name in DEFAULT_STATUS_FIELDS]
        self.candidates = tuple(candidates)
        self.exhaustive_scan = exhaustive_scan

    @classmethod
    def from_field_names(
        cls,
        names: Iterable[str],
        exhaustive_scan: bool = False,
    ) -> StatusNormalizer:
        """Build a normalizer from column names in priority order."""
        return cls([named_column(name) for name in names], exhaustive_scan=exhaustive_scan)

    def extract_status(self, record: Record) -> StatusCode:
        """
        Extract the normalized status of a record.

        Args:
            record: Field mapping from one roll row

        Returns:
            StatusCode; NONE when no candidate holds a J/A/P value
        """
        for candidate in self.candidates:
            for column, value in record.items():
                if is_blank(value) or not candidate(column):
                    continue
                status = StatusCode.from_code(value)
                if status is not None:
                    return status
                # First non-empty match decides this candidate
                break

        if self.exhaustive_scan:
            for value in record.values():
                status = StatusCode.from_code(value)
                if status is not None:
                    return status

        return StatusCode.NONE

    __call__ = extract_status


_DEFAULT_NORMALIZER = StatusNormalizer()


def extract_status(record: Record) -> StatusCode:
    """Extract a status with the default candidate fields."""
    return _DEFAULT_NORMALIZER.extract_status(record)
