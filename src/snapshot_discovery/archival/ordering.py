"""Ordering and de-duplication of snapshot records."""

from typing import Iterable, List

from ..models.snapshot_models import SnapshotRecord

DEFAULT_MAX_RESULTS = 50


def sort_newest_first(records: Iterable[SnapshotRecord]) -> List[SnapshotRecord]:
    # Fixed-width zero-padded timestamps sort correctly as strings
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def dedupe_by_month(records: Iterable[SnapshotRecord]) -> List[SnapshotRecord]:
    """Keep the first record seen for each YYYYMM prefix."""
    seen_months = set()
    unique = []
    for record in records:
        if record.year_month in seen_months:
            continue
        seen_months.add(record.year_month)
        unique.append(record)
    return unique


def order_and_dedupe(
    records: Iterable[SnapshotRecord], max_results: int = DEFAULT_MAX_RESULTS
) -> List[SnapshotRecord]:
    """
    Sort newest first, keep one capture per calendar month, then truncate.

    The most recent capture of each month wins. The result is strictly
    decreasing by timestamp and holds at most ``max_results`` records.
    """
    return dedupe_by_month(sort_newest_first(records))[:max_results]
