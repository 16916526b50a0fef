"""Aggregate statistics over a capture timeline."""

from datetime import date
from typing import Dict, List, Sequence

from ..models.snapshot_models import SnapshotRecord, TimelineSummary


def _calendar_date(timestamp: str) -> date:
    return date(int(timestamp[0:4]), int(timestamp[4:6]), int(timestamp[6:8]))


def describe_time_span(first_timestamp: str, last_timestamp: str) -> str:
    """Human-readable distance between two captures, by calendar date."""
    days = abs((_calendar_date(last_timestamp) - _calendar_date(first_timestamp)).days)
    if days < 30:
        return f"{days} days"
    if days < 365:
        return f"{days // 30} months"
    return f"{days // 365} years"


def summarize_timeline(records: Sequence[SnapshotRecord]) -> TimelineSummary:
    """
    Summarize a set of captures.

    Args:
        records: Captures in any order

    Returns:
        TimelineSummary with counts per change label and the overall span
    """
    ordered: List[SnapshotRecord] = sorted(records, key=lambda r: r.timestamp, reverse=True)
    total = len(ordered)

    change_types: Dict[str, int] = {}
    for record in ordered:
        label = record.change_type.value if record.change_type else "unknown"
        change_types[label] = change_types.get(label, 0) + 1

    most_frequent = None
    if change_types:
        label, count = sorted(change_types.items(), key=lambda item: -item[1])[0]
        most_frequent = {"type": label, "count": count}

    return TimelineSummary(
        total_snapshots=total,
        time_span=describe_time_span(ordered[0].timestamp, ordered[-1].timestamp)
        if total > 1
        else None,
        change_types=change_types,
        most_frequent_change=most_frequent,
        avg_change_interval_days=365 // (total - 1) if total > 1 else None,
    )
