"""
Synthetic snapshot sets for demos.

When enabled, a result with no real captures is replaced by a fabricated,
clearly labelled timeline (``dataSource: "synthetic"``). This is strictly
opt-in through ``DiscoveryConfig.synthetic_fallback`` and never happens by
default.
"""

import calendar
from datetime import datetime
from typing import List, Optional

from ..analyzers.change_classifier import ChangeClassifier
from ..config import DiscoveryConfig
from ..models.snapshot_models import (
    AnalysisQuality,
    DataSource,
    DiscoveryResult,
    SnapshotRecord,
    TIMESTAMP_FORMAT,
)
from ..utils.logging_config import get_logger

logger = get_logger("synthetic")

# Months before "now" at which fake captures are placed
SYNTHETIC_MONTH_OFFSETS = [2, 4, 7, 10, 14, 18]


def months_before(moment: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` calendar months earlier, clamped to month end."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def build_synthetic_snapshots(
    url: str, now: Optional[datetime] = None, archive_base: Optional[str] = None
) -> List[SnapshotRecord]:
    now = now or datetime.now()
    classifier = ChangeClassifier(now)
    archive_base = archive_base or DiscoveryConfig().archive_base_url

    snapshots = []
    for offset in SYNTHETIC_MONTH_OFFSETS:
        captured = months_before(now, offset).replace(hour=12, minute=0, second=0)
        timestamp = captured.strftime(TIMESTAMP_FORMAT)
        snapshots.append(
            SnapshotRecord(
                timestamp=timestamp,
                original_url=url,
                status_code="200",
                change_type=classifier.classify(timestamp),
                archive_base=archive_base,
            )
        )
    return snapshots


def apply_synthetic_fallback(
    result: DiscoveryResult, config: DiscoveryConfig, now: Optional[datetime] = None
) -> DiscoveryResult:
    """
    Swap an unavailable result for a synthetic one if the config allows it.

    Results with real data, and error results, are returned unchanged.
    """
    if not config.synthetic_fallback or result.available:
        return result
    if result.data_source == DataSource.ERROR:
        return result

    logger.warning(f"No archive data for {result.url}; returning SYNTHETIC snapshots")
    return DiscoveryResult(
        url=result.url,
        available=True,
        snapshots=build_synthetic_snapshots(result.url, now, config.archive_base_url),
        analysis_quality=AnalysisQuality.MEDIUM,
        data_source=DataSource.SYNTHETIC,
        attempts=result.attempts,
    )
