"""
State Machine for status transitions.

This module provides THE authoritative logic for classifying how a
property's legal status moved between two snapshots. The differ and the
report summary both use it, so "what counts as a new status" lives in
exactly one place.

Architecture Note:
    - Pure domain logic - no I/O
    - Only applies to properties present in both snapshots; additions and
      removals are decided by identifier presence, not status
"""

from __future__ import annotations

from taxrollwatch.domain.change_types import (
    StatusCode,
    TransitionKind,
    TransitionResult,
)


def classify_status_transition(
    previous_status: StatusCode,
    new_status: StatusCode,
) -> TransitionResult:
    """
    Classify a status transition for a property present in both snapshots.

    Args:
        previous_status: Status in the previous snapshot
        new_status: Status in the current snapshot

    Returns:
        TransitionResult with the transition kind

    Rules:
        1. NONE → J/A/P          = NEW_STATUS (reported)
        2. J/A/P → other J/A/P   = LATERAL (counted only)
        3. J/A/P → NONE          = CLEARED (counted only)
        4. anything else         = UNCHANGED
    """
    if previous_status == new_status:
        kind = TransitionKind.UNCHANGED
    elif not previous_status.is_recognized:
        kind = TransitionKind.NEW_STATUS
    elif not new_status.is_recognized:
        kind = TransitionKind.CLEARED
    else:
        kind = TransitionKind.LATERAL

    return TransitionResult(
        kind=kind,
        previous_status=previous_status,
        new_status=new_status,
    )
