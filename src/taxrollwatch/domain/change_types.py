"""
Change Types and Enums for the snapshot comparison engine.

This module defines the core enums and dataclasses used throughout
the diff/report system. It is the single source of truth for
all status and change-related type definitions.

Architecture Note:
    This is a pure domain module with NO external dependencies.
    It should only contain enums, dataclasses, and type definitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

# Label used in transition keys for "no recognized status"
BLANK_LABEL = "Blank"


class StatusCode(str, Enum):
    """
    Normalized legal status of a delinquent property.

    NONE means no recognized status value was found in the record.
    """

    JUDGMENT = "Judgment"
    ACTIVE = "Active"
    PENDING = "Pending"
    NONE = "None"

    @property
    def code(self) -> str:
        """Single-letter code as it appears in roll exports ("" for NONE)."""
        return _LETTER_BY_STATUS[self]

    @property
    def is_recognized(self) -> bool:
        """Check if this is one of the legal statuses (J/A/P)."""
        return self is not StatusCode.NONE

    @property
    def transition_label(self) -> str:
        """Short label used in transition keys like "Blank→J"."""
        return self.code or BLANK_LABEL

    @classmethod
    def from_code(cls, value: Any) -> StatusCode | None:
        """
        Parse a raw cell value as a status letter.

        Only the exact letters J, A and P (case-insensitive, surrounding
        whitespace ignored) are accepted. Returns None for anything else so
        callers can tell "not a status" apart from StatusCode.NONE.
        """
        if value is None:
            return None
        return _STATUS_BY_LETTER.get(str(value).strip().upper())

    @classmethod
    def from_label(cls, value: str | None) -> StatusCode:
        """Parse a stored label ("Judgment", "None", ...) or letter."""
        if value is None:
            return cls.NONE
        for status in cls:
            if status.value.lower() == str(value).strip().lower():
                return status
        return cls.from_code(value) or cls.NONE


_LETTER_BY_STATUS = {
    StatusCode.JUDGMENT: "J",
    StatusCode.ACTIVE: "A",
    StatusCode.PENDING: "P",
    StatusCode.NONE: "",
}

_STATUS_BY_LETTER = {
    letter: status for status, letter in _LETTER_BY_STATUS.items() if letter
}


class TransitionKind(str, Enum):
    """
    Classification of a status pair for a property present in both snapshots.

    Only NEW_STATUS is reported in the change lists; the others are
    counted in the transition breakdown.
    """

    NEW_STATUS = "New Status"  # None → J/A/P
    LATERAL = "Lateral"  # J/A/P → different J/A/P
    CLEARED = "Cleared"  # J/A/P → None
    UNCHANGED = "Unchanged"

    @property
    def is_reported(self) -> bool:
        """Check if this transition produces a ChangeRecord."""
        return self is TransitionKind.NEW_STATUS

    @property
    def is_change(self) -> bool:
        """Check if the status differs between snapshots."""
        return self is not TransitionKind.UNCHANGED


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class TransitionResult:
    """
    Result of classifying a status transition.

    Attributes:
        kind: The type of transition detected
        previous_status: Status in the previous snapshot
        new_status: Status in the current snapshot
    """

    kind: TransitionKind
    previous_status: StatusCode
    new_status: StatusCode

    @property
    def label(self) -> str:
        """Transition key such as "Blank→J" or "P→J"."""
        return (
            f"{self.previous_status.transition_label}→"
            f"{self.new_status.transition_label}"
        )


@dataclass(frozen=True)
class ChangeRecord:
    """
    A property that newly entered a recognized legal status.

    Attributes:
        identifier: Join key of the property
        previous_status: Status in the previous snapshot (always NONE today)
        new_status: Status in the current snapshot
        record: The full current record, for display
    """

    identifier: str
    previous_status: StatusCode
    new_status: StatusCode
    record: Mapping[str, Any]

    @property
    def change_type(self) -> str:
        """Transition key such as "Blank→J"."""
        return (
            f"{self.previous_status.transition_label}→"
            f"{self.new_status.transition_label}"
        )


@dataclass(frozen=True)
class PropertyEntry:
    """A property present in only one of the two snapshots."""

    identifier: str
    status: StatusCode
    record: Mapping[str, Any]
