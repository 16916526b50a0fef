"""
Change Classification

Assigns each capture a coarse recency bucket relative to the moment of
analysis. The label only says how old a capture is; it makes no claim about
how much the page actually changed.
"""

import math
from datetime import datetime
from typing import List, Optional, Tuple

from ..models.snapshot_models import ChangeType, parse_timestamp

DAYS_PER_MONTH = 30
SECONDS_PER_DAY = 86400

# (inclusive upper bound in months, label), checked in order
RECENCY_THRESHOLDS: List[Tuple[int, ChangeType]] = [
    (2, ChangeType.RECENT),
    (6, ChangeType.MODERATE),
    (12, ChangeType.SIGNIFICANT),
    (24, ChangeType.MAJOR),
]


def months_ago(timestamp: str, now: datetime) -> int:
    """
    Whole 30-day periods between a capture's calendar date and ``now``.

    Only the year/month/day of the capture are used; the capture is placed at
    midnight of that day.
    """
    captured = parse_timestamp(timestamp)
    captured_day = datetime(captured.year, captured.month, captured.day)
    if now.tzinfo is not None:
        now = now.replace(tzinfo=None)
    elapsed_days = (now - captured_day).total_seconds() / SECONDS_PER_DAY
    return math.floor(elapsed_days / DAYS_PER_MONTH)


def classify_change(timestamp: str, now: Optional[datetime] = None) -> ChangeType:
    """
    Map a capture timestamp to its recency bucket.

    Args:
        timestamp: 14-digit archive timestamp
        now: Reference time; defaults to the current local time

    Returns:
        One of recent, moderate, significant, major, historical
    """
    months = months_ago(timestamp, now or datetime.now())
    for upper_bound, label in RECENCY_THRESHOLDS:
        if months <= upper_bound:
            return label
    return ChangeType.HISTORICAL


class ChangeClassifier:
    """Classifies captures against a fixed reference time.

    Pinning ``now`` once per request keeps every record of one response
    classified against the same instant.
    """

    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime.now()

    def classify(self, timestamp: str) -> ChangeType:
        return classify_change(timestamp, self.now)
