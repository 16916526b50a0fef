"""
Snapshot Discovery Pipeline

This module coordinates the complete discovery process for one page URL:
1. Variants: Build the URL forms worth asking the archive about
2. Query: Ask the CDX index for each form until one returns captures
3. Classification: Label each capture with its recency bucket
4. Ordering: Sort newest first, keep one capture per month, truncate
5. Analysis (optional): Infer experiment windows and a timeline summary
"""

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..analyzers.change_classifier import ChangeClassifier
from ..analyzers.interval_analyzer import IntervalAnalyzer
from ..analyzers.timeline_summary import summarize_timeline
from ..archival.cdx_client import WaybackCDXClient
from ..archival.ordering import order_and_dedupe
from ..archival.variants import URLVariantGenerator
from ..config import DiscoveryConfig
from ..exceptions import DiscoveryError
from ..models.snapshot_models import (
    AnalysisQuality,
    DataSource,
    DiscoveryResult,
    SnapshotRecord,
    format_timestamp,
)
from ..utils.logging_config import get_logger

logger = get_logger("discovery_pipeline")


def rate_analysis_quality(snapshot_count: int) -> AnalysisQuality:
    if snapshot_count > 15:
        return AnalysisQuality.HIGH
    if snapshot_count > 5:
        return AnalysisQuality.MEDIUM
    return AnalysisQuality.LOW


def unavailable_result(url: str) -> DiscoveryResult:
    return DiscoveryResult(
        url=url,
        available=False,
        snapshots=[],
        analysis_quality=AnalysisQuality.LOW,
        data_source=DataSource.NO_DATA,
    )


def error_result(url: str, error: Exception) -> DiscoveryResult:
    return DiscoveryResult(
        url=url,
        available=False,
        snapshots=[],
        analysis_quality=AnalysisQuality.LOW,
        data_source=DataSource.ERROR,
        error=str(error),
    )


class SnapshotDiscoveryPipeline:
    """End-to-end snapshot discovery for a single URL."""

    def __init__(
        self,
        config: Optional[DiscoveryConfig] = None,
        client: Optional[WaybackCDXClient] = None,
        variant_generator: Optional[URLVariantGenerator] = None,
        log=None,
    ):
        """
        Initialize the discovery pipeline.

        Args:
            config: Discovery configuration
            client: CDX client; built from ``config`` if omitted
            variant_generator: URL variant generator
            log: Logger; defaults to the module logger
        """
        self.config = config or DiscoveryConfig()
        self.client = client or WaybackCDXClient(self.config)
        self.variant_generator = variant_generator or URLVariantGenerator()
        self.log = log or logger

    def discover(
        self, url: str, analyze: bool = False, now: Optional[datetime] = None
    ) -> DiscoveryResult:
        """
        Discover and classify archived captures of a page.

        Args:
            url: Page URL to analyze
            analyze: Also infer experiment windows and a timeline summary
            now: Reference time for recency labels; defaults to the current time

        Returns:
            DiscoveryResult; ``available`` is False when no variant had captures

        Raises:
            ArchiveClientError: If the archive cannot be queried at all
        """
        self.log.info(f"Fetching snapshots for: {url}")
        start_time = time.time()

        variants = self.variant_generator.generate(url)
        self.log.debug(f"Testing URL variants: {variants}")

        outcome = self.client.query(variants)

        if not outcome.found:
            self.log.info(f"No snapshots found for any URL variant of: {url}")
            result = unavailable_result(url)
            result.attempts = outcome.attempts
            return result

        classifier = ChangeClassifier(now)
        for record in outcome.records:
            record.change_type = classifier.classify(record.timestamp)

        snapshots = order_and_dedupe(outcome.records, self.config.max_results)

        result = DiscoveryResult(
            url=url,
            available=bool(snapshots),
            snapshots=snapshots,
            analysis_quality=rate_analysis_quality(len(snapshots)),
            data_source=DataSource.WAYBACK_CDX,
            successful_url=outcome.successful_variant,
            attempts=outcome.attempts,
        )

        if analyze:
            self._attach_analysis(result, snapshots)

        self.log.success(
            f"Processed {len(snapshots)} unique snapshots from {outcome.successful_variant} "
            f"({_date_range(snapshots)}) in {time.time() - start_time:.2f}s"
        )
        return result

    def _attach_analysis(self, result: DiscoveryResult, snapshots: List[SnapshotRecord]):
        analyzer = IntervalAnalyzer(max_windows=self.config.max_windows)
        result.experiment_windows = analyzer.analyze(snapshots)
        result.timeline = summarize_timeline(snapshots) if snapshots else None

    def close(self):
        self.client.close()


class BatchDiscoveryRunner:
    """Runs discovery for many URLs on a bounded worker pool.

    Each URL is handled by one worker, so the variants of a single URL are
    still tried one after another.
    """

    def __init__(
        self,
        pipeline: SnapshotDiscoveryPipeline,
        max_workers: Optional[int] = None,
        log=None,
    ):
        self.pipeline = pipeline
        self.max_workers = max_workers or pipeline.config.max_workers
        self.log = log or logger

    def run(
        self, urls: Iterable[str], analyze: bool = False, now: Optional[datetime] = None
    ) -> List[DiscoveryResult]:
        """
        Discover snapshots for every URL.

        Args:
            urls: Page URLs; duplicates are analyzed once
            analyze: Also infer experiment windows
            now: Shared reference time for recency labels

        Returns:
            Results in input order (one per distinct URL)
        """
        unique_urls = list(dict.fromkeys(u.strip() for u in urls if u and u.strip()))
        if not unique_urls:
            return []

        now = now or datetime.now()
        self.log.info(
            f"Starting batch discovery of {len(unique_urls)} URLs with {self.max_workers} workers"
        )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            results = list(
                executor.map(lambda u: self._discover_one(u, analyze, now), unique_urls)
            )

        stats = batch_stats(results)
        self.log.info(
            f"Batch complete: {stats['available']} available, "
            f"{stats['unavailable']} without data, {stats['errors']} errors"
        )
        return results

    def _discover_one(self, url: str, analyze: bool, now: datetime) -> DiscoveryResult:
        try:
            return self.pipeline.discover(url, analyze=analyze, now=now)
        except DiscoveryError as e:
            self.log.error(f"Discovery failed for {url}: {e}")
            return error_result(url, e)


def batch_stats(results: List[DiscoveryResult]) -> Dict[str, int]:
    errors = sum(1 for r in results if r.data_source == DataSource.ERROR)
    available = sum(1 for r in results if r.available)
    return {
        "total": len(results),
        "available": available,
        "unavailable": len(results) - available - errors,
        "errors": errors,
    }


def _date_range(snapshots: List[SnapshotRecord]) -> str:
    if not snapshots:
        return "no captures"
    return f"{format_timestamp(snapshots[-1].timestamp)} -> {format_timestamp(snapshots[0].timestamp)}"
