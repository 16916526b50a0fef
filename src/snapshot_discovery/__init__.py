"""
Wayback Snapshot Discovery

This package discovers the archived captures of a web page and characterizes
how the page changed over time:
- URL variant generation and CDX index lookups with first-success fallback
- Parsing of CDX JSON-lines responses into typed snapshot records
- Per-month de-duplication and recency classification of captures
- Inference of probable experiment/redesign windows from capture cadence
- A small HTTP API and batch runner on top of the discovery pipeline
"""

from .config import DiscoveryConfig
from .exceptions import DiscoveryError, ArchiveClientError
from .archival import URLVariantGenerator, generate_url_variants, CDXParser, WaybackCDXClient, order_and_dedupe
from .analyzers import ChangeClassifier, classify_change, IntervalAnalyzer, summarize_timeline
from .pipelines import SnapshotDiscoveryPipeline, BatchDiscoveryRunner

__all__ = [
    'DiscoveryConfig',
    'DiscoveryError', 'ArchiveClientError',
    'URLVariantGenerator', 'generate_url_variants', 'CDXParser', 'WaybackCDXClient', 'order_and_dedupe',
    'ChangeClassifier', 'classify_change', 'IntervalAnalyzer', 'summarize_timeline',
    'SnapshotDiscoveryPipeline', 'BatchDiscoveryRunner',
]

__version__ = '1.0.0'
