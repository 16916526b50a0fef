"""
Data models for snapshot discovery.

This module defines the value types produced by one analysis request:
- Archived captures returned by the CDX index
- Per-variant query attempts and their outcome
- Inferred experiment/redesign windows
- The final discovery payload

Nothing here is persisted; every object lives for a single request.
"""

import enum
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

DEFAULT_ARCHIVE_BASE = "https://web.archive.org"

TIMESTAMP_PATTERN = re.compile(r"^\d{14}$")
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


class ChangeType(enum.Enum):
    """Recency bucket of a capture relative to the time of analysis."""

    RECENT = "recent"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"
    MAJOR = "major"
    HISTORICAL = "historical"

    # Legacy labels carried only by pre-labelled records
    REDESIGN = "redesign"
    LAUNCH = "launch"


class WindowType(enum.Enum):
    """Inferred category of an interval between two captures."""

    RAPID_ITERATION = "rapid_iteration"
    MONTHLY_OPTIMIZATION = "monthly_optimization"
    SEASONAL_UPDATE = "seasonal_update"
    CONTINUOUS_OPTIMIZATION = "continuous_optimization"
    MAJOR_AB_TEST = "major_ab_test"
    FULL_REDESIGN = "full_redesign"
    UNKNOWN = "unknown"


class Impact(enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnalysisQuality(enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DataSource(enum.Enum):
    """Which strategy produced the snapshot data."""

    WAYBACK_CDX = "wayback_cdx_api"
    NO_DATA = "wayback_api_no_data"
    SYNTHETIC = "synthetic"
    ERROR = "error"


class AttemptStatus(enum.Enum):
    """Outcome of querying the index with one URL variant."""

    OK = "ok"
    EMPTY = "empty"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    ERROR = "error"


def is_valid_timestamp(value: Any) -> bool:
    """True for a 14-digit timestamp that names a real calendar instant."""
    if not isinstance(value, str) or not TIMESTAMP_PATTERN.match(value):
        return False
    try:
        parse_timestamp(value)
    except ValueError:
        return False
    return True


def parse_timestamp(timestamp: str) -> datetime:
    """Convert a 14-digit archive timestamp into a naive datetime."""
    return datetime.strptime(timestamp, TIMESTAMP_FORMAT)


def format_timestamp(timestamp: Optional[str]) -> str:
    """Render a timestamp as YYYY/MM/DD."""
    if not timestamp:
        return "Unknown"
    return f"{timestamp[0:4]}/{timestamp[4:6]}/{timestamp[6:8]}"


def build_archive_url(
    timestamp: str, original_url: str, archive_base: str = DEFAULT_ARCHIVE_BASE
) -> str:
    """Replay URL of a capture; must match the archive's layout byte for byte."""
    return f"{archive_base}/web/{timestamp}/{original_url}"


@dataclass
class SnapshotRecord:
    """One archived capture of a page."""

    timestamp: str  # YYYYMMDDhhmmss
    original_url: str
    status_code: str  # "200", "301" or "-"
    change_type: Optional[ChangeType] = None
    archive_base: str = field(default=DEFAULT_ARCHIVE_BASE, repr=False, compare=False)

    @property
    def archive_url(self) -> str:
        return build_archive_url(self.timestamp, self.original_url, self.archive_base)

    @property
    def captured_at(self) -> datetime:
        return parse_timestamp(self.timestamp)

    @property
    def year_month(self) -> str:
        return self.timestamp[:6]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "originalUrl": self.original_url,
            "statusCode": self.status_code,
            "archiveUrl": self.archive_url,
            "changeType": self.change_type.value if self.change_type else None,
        }


@dataclass
class ExperimentWindow:
    """Inferred experiment/redesign window between two consecutive captures."""

    previous: SnapshotRecord
    current: SnapshotRecord
    period: str
    type: WindowType
    confidence: int  # 0-95
    days_duration: int
    estimated_impact: Impact

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "type": self.type.value,
            "confidence": self.confidence,
            "daysDuration": self.days_duration,
            "estimatedImpact": self.estimated_impact.value,
            "fromTimestamp": self.previous.timestamp,
            "toTimestamp": self.current.timestamp,
        }


@dataclass
class VariantAttempt:
    """Trace entry for one variant tried against the index."""

    variant: str
    status: AttemptStatus
    record_count: int = 0
    http_status: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "variant": self.variant,
            "status": self.status.value,
            "recordCount": self.record_count,
        }
        if self.http_status is not None:
            data["httpStatus"] = self.http_status
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class QueryOutcome:
    """Tagged result of the first-success strategy over URL variants.

    ``successful_variant`` is None when every variant came back empty.
    """

    successful_variant: Optional[str]
    records: List[SnapshotRecord] = field(default_factory=list)
    attempts: List[VariantAttempt] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.successful_variant is not None and bool(self.records)


@dataclass
class TimelineSummary:
    """Aggregate view over an ordered set of captures."""

    total_snapshots: int
    time_span: Optional[str]
    change_types: Dict[str, int]
    most_frequent_change: Optional[Dict[str, Any]]
    avg_change_interval_days: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSnapshots": self.total_snapshots,
            "timeSpan": self.time_span,
            "changeTypes": self.change_types,
            "mostFrequentChange": self.most_frequent_change,
            "avgChangeIntervalDays": self.avg_change_interval_days,
        }


@dataclass
class DiscoveryResult:
    """Final payload of one analysis request."""

    url: str
    available: bool
    snapshots: List[SnapshotRecord]
    analysis_quality: AnalysisQuality
    data_source: DataSource
    successful_url: Optional[str] = None
    error: Optional[str] = None
    attempts: List[VariantAttempt] = field(default_factory=list)
    experiment_windows: Optional[List[ExperimentWindow]] = None
    timeline: Optional[TimelineSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "url": self.url,
            "available": self.available,
            "historicalSnapshots": [s.to_dict() for s in self.snapshots],
            "analysisQuality": self.analysis_quality.value,
            "dataSource": self.data_source.value,
            "attempts": [a.to_dict() for a in self.attempts],
        }
        if self.successful_url:
            payload["successfulUrl"] = self.successful_url
        if self.error:
            payload["error"] = self.error
        if self.experiment_windows is not None:
            payload["experimentWindows"] = [w.to_dict() for w in self.experiment_windows]
        if self.timeline is not None:
            payload["timeline"] = self.timeline.to_dict()
        return payload
