"""
Identity Resolver - derive the join key for a property record.

Roll exports rename their identifier columns between releases, so identity
is an ordered list of extractor strategies: the first one that yields a
non-empty value wins. When none does, the value of the record's first
column is used, trading uniqueness for total coverage.

Architecture Note:
    - Pure functions with no side effects
    - Never raises; an all-empty record yields ""
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from taxrollwatch.domain.records import Record, cell_text, lookup_field

IdentifierExtractor = Callable[[Record], "str | None"]

ACCOUNT_FIELDS = (
    "CAN",
    "Account Number",
    "accountNumber",
    "Account",
    "account",
    "Property ID",
    "propertyId",
    "ID",
    "id",
)
PARCEL_FIELDS = ("Parcel Number", "parcelNumber", "Parcel", "parcel", "PARCEL")
ADDRESS_FIELDS = ("ADDRSTRING", "Property Address", "Address", "address")
OWNER_FIELDS = ("OWNER", "Owner Name", "Owner", "owner")

DEFAULT_IDENTIFIER_FIELDS: tuple[tuple[str, ...], ...] = (
    ACCOUNT_FIELDS,
    PARCEL_FIELDS,
    ADDRESS_FIELDS,
    OWNER_FIELDS,
)


def field_extractor(*names: str) -> IdentifierExtractor:
    """
    Build an extractor that returns the first non-empty named field.

    Args:
        *names: Column names in priority order

    Returns:
        Callable returning the trimmed value, or None if no field matched
    """

    def extract(record: Record) -> str | None:
        for name in names:
            text = cell_text(lookup_field(record, name))
            if text:
                return text
        return None

    extract.__name__ = f"field_extractor({', '.join(names)})"
    return extract


def first_column_value(record: Record) -> str:
    """Value of the first column in record order ("" for an empty record)."""
    for value in record.values():
        return cell_text(value)
    return ""


def find_address(record: Record) -> str:
    """Best-effort street address for display."""
    return field_extractor(*ADDRESS_FIELDS)(record) or ""


class IdentityResolver:
    """
    Ordered identifier strategy.

    Usage:
        resolver = IdentityResolver.from_field_groups([["CAN"], ["Parcel"]])
        key = resolver.identify({"CAN": " 0012 ", "Parcel": "9"})  # "0012"
    """

    def __init__(
        self,
        extractors: Sequence[IdentifierExtractor] | None = None,
        first_column_fallback: bool = True,
    ) -> None:
        if extractors is None:
            extractors = [field_extractor(*group) for group in DEFAULT_IDENTIFIER_FIELDS]
        self.extractors = tuple(extractors)
        self.first_column_fallback = first_column_fallback

    @classmethod
    def from_field_groups(
        cls,
        groups: Iterable[Iterable[str]],
        first_column_fallback: bool = True,
    ) -> IdentityResolver:
        """Build a resolver with one field extractor per group of names."""
        return cls(
            [field_extractor(*group) for group in groups],
            first_column_fallback=first_column_fallback,
        )

    def identify(self, record: Record) -> str:
        """
        Derive the identifier for a record.

        Args:
            record: Field mapping from one roll row

        Returns:
            Identifier string; may be "" for degenerate records
        """
        for extractor in self.extractors:
            value = extractor(record)
            if value:
                return value
        if self.first_column_fallback:
            return first_column_value(record)
        return ""

    __call__ = identify


_DEFAULT_RESOLVER = IdentityResolver()


def identify(record: Record) -> str:
    """Identify a record with the default field priorities."""
    return _DEFAULT_RESOLVER.identify(record)
