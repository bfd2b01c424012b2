"""
Domain layer package.

Contains pure data models and decision logic with no I/O dependencies.
Snapshots and reports are serialized by the infrastructure layer.
"""

from taxrollwatch.domain.errors import (
    TaxRollWatchError,
    MalformedSnapshotError,
    DuplicateIdentifierError,
    SpreadsheetDecodeError,
    StorageError,
    ConfigError,
)

from taxrollwatch.domain.change_types import (
    StatusCode,
    TransitionKind,
    TransitionResult,
    ChangeRecord,
    PropertyEntry,
)

from taxrollwatch.domain.records import (
    Record,
    ScalarValue,
    Snapshot,
)

from taxrollwatch.domain.identity import (
    IdentityResolver,
    identify,
)

from taxrollwatch.domain.status_normalizer import (
    StatusNormalizer,
    extract_status,
)

from taxrollwatch.domain.state_machine import classify_status_transition

from taxrollwatch.domain.report import ComparisonReport, ReportSummary

__all__ = [
    # Errors
    "TaxRollWatchError",
    "MalformedSnapshotError",
    "DuplicateIdentifierError",
    "SpreadsheetDecodeError",
    "StorageError",
    "ConfigError",
    # Types
    "StatusCode",
    "TransitionKind",
    "TransitionResult",
    "ChangeRecord",
    "PropertyEntry",
    "ComparisonReport",
    "ReportSummary",
    "Record",
    "ScalarValue",
    "Snapshot",
    # Policies
    "IdentityResolver",
    "identify",
    "StatusNormalizer",
    "extract_status",
    "classify_status_transition",
]
