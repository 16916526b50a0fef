"""
Interval Analysis

Infers likely experiment or redesign windows from the cadence of successive
captures. Short gaps between captures suggest active iteration on the page;
the later capture's recency label sharpens the guess.
"""

from typing import Iterable, List, Optional, Tuple

from ..models.snapshot_models import (
    ChangeType,
    ExperimentWindow,
    Impact,
    SnapshotRecord,
    WindowType,
    format_timestamp,
)
from ..utils.logging_config import get_logger

logger = get_logger("interval_analyzer")

MAX_CONFIDENCE = 95
MIN_CONFIDENCE = 0
DEFAULT_MAX_WINDOWS = 3

# (exclusive upper bound in days, window type, base confidence)
DURATION_BUCKETS: List[Tuple[int, WindowType, int]] = [
    (30, WindowType.RAPID_ITERATION, 85),
    (90, WindowType.MONTHLY_OPTIMIZATION, 70),
    (180, WindowType.SEASONAL_UPDATE, 60),
]
FALLBACK_BUCKET = (WindowType.UNKNOWN, 50)

# Later capture's label -> (confidence bonus, overriding type)
CHANGE_TYPE_ADJUSTMENTS = {
    ChangeType.RECENT: (10, WindowType.CONTINUOUS_OPTIMIZATION),
    ChangeType.SIGNIFICANT: (15, WindowType.MAJOR_AB_TEST),
    ChangeType.REDESIGN: (20, WindowType.FULL_REDESIGN),
}


def days_between(earlier: SnapshotRecord, later: SnapshotRecord) -> int:
    """Whole calendar days elapsed between two captures."""
    return max(0, (later.captured_at - earlier.captured_at).days)


def estimate_impact(days: int) -> Impact:
    if days < 30:
        return Impact.HIGH
    if days < 90:
        return Impact.MEDIUM
    return Impact.LOW


def base_classification(days: int) -> Tuple[WindowType, int]:
    for upper_bound, window_type, confidence in DURATION_BUCKETS:
        if days < upper_bound:
            return window_type, confidence
    return FALLBACK_BUCKET


class IntervalAnalyzer:
    """Detects probable experiment windows between consecutive captures."""

    def __init__(self, max_windows: int = DEFAULT_MAX_WINDOWS, log=None):
        """
        Args:
            max_windows: How many of the most recent windows to report
            log: Logger; defaults to the module logger
        """
        self.max_windows = max_windows
        self.log = log or logger

    def analyze(self, records: Iterable[SnapshotRecord]) -> List[ExperimentWindow]:
        """
        Walk captures oldest to newest and classify every consecutive pair.

        Args:
            records: De-duplicated captures in any order

        Returns:
            The most recent ``max_windows`` windows, oldest first
        """
        ordered = sorted(records, key=lambda r: r.timestamp)
        if len(ordered) < 2:
            return []

        windows = [
            self.classify_pair(previous, current)
            for previous, current in zip(ordered, ordered[1:])
        ]

        self.log.debug(
            f"Classified {len(windows)} intervals, reporting the last {self.max_windows}"
        )
        if self.max_windows <= 0:
            return []
        return windows[-self.max_windows:]

    def classify_pair(
        self, previous: SnapshotRecord, current: SnapshotRecord
    ) -> ExperimentWindow:
        days = days_between(previous, current)
        window_type, confidence = base_classification(days)

        adjustment = CHANGE_TYPE_ADJUSTMENTS.get(current.change_type)
        if adjustment:
            bonus, window_type = adjustment
            confidence += bonus

        return ExperimentWindow(
            previous=previous,
            current=current,
            period=f"{format_timestamp(previous.timestamp)} - {format_timestamp(current.timestamp)}",
            type=window_type,
            confidence=_clip_confidence(confidence),
            days_duration=days,
            estimated_impact=estimate_impact(days),
        )


def _clip_confidence(value: int) -> int:
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value))


def detect_experiment_windows(
    records: Iterable[SnapshotRecord], max_windows: Optional[int] = None
) -> List[ExperimentWindow]:
    analyzer = IntervalAnalyzer(
        max_windows=DEFAULT_MAX_WINDOWS if max_windows is None else max_windows
    )
    return analyzer.analyze(records)
