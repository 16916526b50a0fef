from .snapshot_models import (
    DEFAULT_ARCHIVE_BASE,
    AnalysisQuality,
    AttemptStatus,
    ChangeType,
    DataSource,
    DiscoveryResult,
    ExperimentWindow,
    Impact,
    QueryOutcome,
    SnapshotRecord,
    TimelineSummary,
    VariantAttempt,
    WindowType,
    build_archive_url,
    format_timestamp,
    is_valid_timestamp,
    parse_timestamp,
)

__all__ = [
    'DEFAULT_ARCHIVE_BASE',
    'AnalysisQuality', 'AttemptStatus', 'ChangeType', 'DataSource', 'Impact', 'WindowType',
    'DiscoveryResult', 'ExperimentWindow', 'QueryOutcome', 'SnapshotRecord',
    'TimelineSummary', 'VariantAttempt',
    'build_archive_url', 'format_timestamp', 'is_valid_timestamp', 'parse_timestamp',
]
