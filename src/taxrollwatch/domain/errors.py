"""
Exception hierarchy for TaxRollWatch.

Domain and infrastructure errors share a single base so the CLI can
report any handled failure with one except clause.
"""

from __future__ import annotations


class TaxRollWatchError(Exception):
    """Base class for all handled TaxRollWatch errors."""


class MalformedSnapshotError(TaxRollWatchError, ValueError):
    """Input is not an ordered sequence of flat field mappings."""


class DuplicateIdentifierError(TaxRollWatchError):
    """Raised when duplicate identifiers are configured to be fatal."""

    def __init__(self, identifier: str, count: int) -> None:
        super().__init__(
            f"Identifier {identifier!r} appears {count} times in one snapshot"
        )
        self.identifier = identifier
        self.count = count


class SpreadsheetDecodeError(TaxRollWatchError):
    """A spreadsheet export could not be turned into records."""


class StorageError(TaxRollWatchError):
    """Snapshot or report persistence failed."""


class ConfigError(TaxRollWatchError):
    """Configuration file is missing required structure or is invalid."""
