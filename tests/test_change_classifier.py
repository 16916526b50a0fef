"""
Tests for recency classification of captures.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from snapshot_discovery.analyzers.change_classifier import (
    ChangeClassifier,
    classify_change,
    months_ago,
)
from snapshot_discovery.models import ChangeType

NOW = datetime(2024, 6, 15)


def days_before(days: int, now: datetime = NOW) -> str:
    return (now - timedelta(days=days)).strftime("%Y%m%d%H%M%S")


class TestClassifyChange:
    """Bucket thresholds are inclusive in whole 30-day months."""

    def test_recent_capture(self):
        assert classify_change(days_before(10), NOW) == ChangeType.RECENT

    def test_45_days_is_one_month(self):
        assert months_ago(days_before(45), NOW) == 1
        assert classify_change(days_before(45), NOW) == ChangeType.RECENT

    @pytest.mark.parametrize("days, expected", [
        (0, ChangeType.RECENT),
        (89, ChangeType.RECENT),
        (90, ChangeType.MODERATE),
        (209, ChangeType.MODERATE),
        (210, ChangeType.SIGNIFICANT),
        (389, ChangeType.SIGNIFICANT),
        (390, ChangeType.MAJOR),
        (749, ChangeType.MAJOR),
        (750, ChangeType.HISTORICAL),
        (5000, ChangeType.HISTORICAL),
    ])
    def test_bucket_boundaries(self, days, expected):
        assert classify_change(days_before(days), NOW) == expected

    def test_time_of_day_is_ignored(self):
        """Only the capture's calendar date counts."""
        morning = "20240317000000"
        evening = "20240317235959"
        assert months_ago(morning, NOW) == months_ago(evening, NOW) == 3

    def test_future_capture_is_recent(self):
        assert classify_change("20250101000000", NOW) == ChangeType.RECENT

    def test_aware_reference_time(self):
        aware_now = datetime(2024, 6, 15, tzinfo=timezone.utc)
        assert classify_change(days_before(100), aware_now) == ChangeType.MODERATE

    def test_only_five_labels_are_produced(self):
        produced = {classify_change(days_before(d), NOW) for d in range(0, 1200, 7)}
        assert produced == {
            ChangeType.RECENT,
            ChangeType.MODERATE,
            ChangeType.SIGNIFICANT,
            ChangeType.MAJOR,
            ChangeType.HISTORICAL,
        }


class TestChangeClassifier:
    def test_pinned_reference_time(self):
        classifier = ChangeClassifier(NOW)
        assert classifier.classify(days_before(10)) == ChangeType.RECENT
        assert classifier.classify(days_before(300)) == ChangeType.SIGNIFICANT

    def test_defaults_to_current_time(self):
        classifier = ChangeClassifier()
        today = datetime.now().strftime("%Y%m%d%H%M%S")
        assert classifier.classify(today) == ChangeType.RECENT
