#!/usr/bin/env python3
"""
Discover Snapshots

CLI tool for listing the Wayback Machine captures of one or more pages.
URLs can be passed as arguments or read from a file (one per line).
"""

import sys
import argparse
import json
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from loguru import logger

from snapshot_discovery.config import DiscoveryConfig
from snapshot_discovery.models import DiscoveryResult
from snapshot_discovery.pipelines import (
    BatchDiscoveryRunner,
    SnapshotDiscoveryPipeline,
    apply_synthetic_fallback,
    batch_stats,
)
from snapshot_discovery.utils.logging_config import setup_logging


def read_url_file(path: Path) -> list:
    """Read URLs from a text file, skipping blank lines and # comments."""
    urls = []
    with open(path, "r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if line and not line.startswith("#"):
                urls.append(line)
    return urls


def print_result(result: DiscoveryResult):
    print(f"\n=== {result.url} ===")
    print(f"Available: {result.available}")
    print(f"Data source: {result.data_source.value}")
    if result.error:
        print(f"Error: {result.error}")
        return
    if not result.available:
        print(f"Variants tried: {len(result.attempts)}")
        return

    print(f"Matched variant: {result.successful_url}")
    print(f"Snapshots: {len(result.snapshots)} (quality: {result.analysis_quality.value})")
    for snapshot in result.snapshots[:10]:
        change = snapshot.change_type.value if snapshot.change_type else "-"
        print(f"  {snapshot.timestamp}  {change:<12} {snapshot.archive_url}")
    if len(result.snapshots) > 10:
        print(f"  ... {len(result.snapshots) - 10} more")

    if result.experiment_windows:
        print("Experiment windows:")
        for window in result.experiment_windows:
            print(
                f"  {window.period}: {window.type.value} "
                f"(confidence {window.confidence}%, {window.days_duration} days, "
                f"impact {window.estimated_impact.value})"
            )


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Discover Wayback Machine snapshots for web pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single page
  python discover_snapshots.py https://example.com/products

  # With experiment window analysis, as JSON
  python discover_snapshots.py https://example.com --analyze --json

  # Many pages from a file, 8 at a time
  python discover_snapshots.py --file urls.txt --workers 8
        """
    )

    parser.add_argument(
        'urls',
        nargs='*',
        help='Page URLs to analyze'
    )

    parser.add_argument(
        '--file', '-f',
        type=Path,
        help='Text file with one URL per line'
    )

    parser.add_argument(
        '--analyze', '-a',
        action='store_true',
        help='Infer experiment windows and a timeline summary'
    )

    parser.add_argument(
        '--workers', '-w',
        type=int,
        help='Number of URLs analyzed in parallel'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print results as JSON'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    args = parser.parse_args()

    config = DiscoveryConfig.from_env()
    setup_logging("DEBUG" if args.verbose else config.log_level, config.log_file)

    urls = list(args.urls)
    if args.file:
        if not args.file.exists():
            logger.error(f"URL file not found: {args.file}")
            sys.exit(1)
        urls.extend(read_url_file(args.file))

    if not urls:
        parser.error("no URLs given")

    pipeline = SnapshotDiscoveryPipeline(config)
    try:
        runner = BatchDiscoveryRunner(pipeline, max_workers=args.workers)
        results = runner.run(urls, analyze=args.analyze)
    finally:
        pipeline.close()

    results = [apply_synthetic_fallback(r, config) for r in results]

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    else:
        for result in results:
            print_result(result)

        stats = batch_stats(results)
        print("\n=== Discovery Results ===")
        print(f"Total URLs: {stats['total']}")
        print(f"With snapshots: {stats['available']}")
        print(f"Without snapshots: {stats['unavailable']}")
        print(f"Errors: {stats['errors']}")

    sys.exit(0 if batch_stats(results)['errors'] == 0 else 1)


if __name__ == "__main__":
    main()
