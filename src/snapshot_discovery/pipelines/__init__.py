from .discovery_pipeline import (
    SnapshotDiscoveryPipeline,
    BatchDiscoveryRunner,
    batch_stats,
    error_result,
    rate_analysis_quality,
    unavailable_result,
)
from .synthetic import apply_synthetic_fallback, build_synthetic_snapshots

__all__ = [
    'SnapshotDiscoveryPipeline', 'BatchDiscoveryRunner', 'batch_stats',
    'error_result', 'rate_analysis_quality', 'unavailable_result',
    'apply_synthetic_fallback', 'build_synthetic_snapshots',
]
