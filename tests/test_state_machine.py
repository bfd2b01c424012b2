"""
Unit tests for the state machine and change types.

Tests every status pair and the transition labels.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parents[1] / "src"))

import unittest
from taxrollwatch.domain.change_types import (
    ChangeRecord,
    StatusCode,
    TransitionKind,
)
from taxrollwatch.domain.state_machine import classify_status_transition


class TestStatusCode(unittest.TestCase):
    """Test StatusCode enum methods."""

    def test_from_code(self):
        """Only exact J/A/P letters parse."""
        self.assertEqual(StatusCode.from_code("J"), StatusCode.JUDGMENT)
        self.assertEqual(StatusCode.from_code(" a "), StatusCode.ACTIVE)
        self.assertEqual(StatusCode.from_code("p"), StatusCode.PENDING)
        self.assertIsNone(StatusCode.from_code(""))
        self.assertIsNone(StatusCode.from_code("Judgment"))
        self.assertIsNone(StatusCode.from_code(None))

    def test_from_label(self):
        """Stored labels and letters both parse; anything else is NONE."""
        self.assertEqual(StatusCode.from_label("Judgment"), StatusCode.JUDGMENT)
        self.assertEqual(StatusCode.from_label("pending"), StatusCode.PENDING)
        self.assertEqual(StatusCode.from_label("A"), StatusCode.ACTIVE)
        self.assertEqual(StatusCode.from_label("None"), StatusCode.NONE)
        self.assertEqual(StatusCode.from_label(None), StatusCode.NONE)
        self.assertEqual(StatusCode.from_label("garbage"), StatusCode.NONE)

    def test_codes_and_labels(self):
        self.assertEqual(StatusCode.JUDGMENT.code, "J")
        self.assertEqual(StatusCode.NONE.code, "")
        self.assertEqual(StatusCode.NONE.transition_label, "Blank")
        self.assertTrue(StatusCode.ACTIVE.is_recognized)
        self.assertFalse(StatusCode.NONE.is_recognized)


class TestClassifyStatusTransition(unittest.TestCase):
    """Test the main transition classification function."""

    def test_new_status_from_none(self):
        """None→J/A/P = New Status, reported."""
        for status in (StatusCode.JUDGMENT, StatusCode.ACTIVE, StatusCode.PENDING):
            result = classify_status_transition(StatusCode.NONE, status)
            self.assertEqual(result.kind, TransitionKind.NEW_STATUS)
            self.assertTrue(result.kind.is_reported)

    def test_lateral(self):
        """P→J = Lateral, counted but not reported."""
        result = classify_status_transition(StatusCode.PENDING, StatusCode.JUDGMENT)
        self.assertEqual(result.kind, TransitionKind.LATERAL)
        self.assertFalse(result.kind.is_reported)
        self.assertTrue(result.kind.is_change)
        self.assertEqual(result.label, "P→J")

    def test_cleared(self):
        """J→None = Cleared, counted but not reported."""
        result = classify_status_transition(StatusCode.JUDGMENT, StatusCode.NONE)
        self.assertEqual(result.kind, TransitionKind.CLEARED)
        self.assertFalse(result.kind.is_reported)
        self.assertEqual(result.label, "J→Blank")

    def test_unchanged(self):
        """Same status on both sides, including None→None."""
        for status in StatusCode:
            result = classify_status_transition(status, status)
            self.assertEqual(result.kind, TransitionKind.UNCHANGED)
            self.assertFalse(result.kind.is_change)

    def test_only_none_to_recognized_is_reported(self):
        """Exactly three of the sixteen pairs are reported."""
        reported = [
            (old, new)
            for old in StatusCode
            for new in StatusCode
            if classify_status_transition(old, new).kind.is_reported
        ]
        self.assertEqual(len(reported), 3)
        self.assertTrue(all(old == StatusCode.NONE for old, _ in reported))


class TestChangeRecord(unittest.TestCase):
    """Test ChangeRecord helpers."""

    def test_change_type_label(self):
        change = ChangeRecord(
            identifier="1",
            previous_status=StatusCode.NONE,
            new_status=StatusCode.JUDGMENT,
            record={"ID": "1"},
        )
        self.assertEqual(change.change_type, "Blank→J")


if __name__ == "__main__":
    unittest.main()
