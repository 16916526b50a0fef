"""
Tests for the end-to-end discovery pipeline, batch runner and synthetic mode.
"""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from snapshot_discovery.archival.cdx_client import WaybackCDXClient
from snapshot_discovery.config import DiscoveryConfig
from snapshot_discovery.exceptions import ArchiveClientError
from snapshot_discovery.models import AnalysisQuality, ChangeType, DataSource
from snapshot_discovery.pipelines import (
    BatchDiscoveryRunner,
    SnapshotDiscoveryPipeline,
    apply_synthetic_fallback,
    batch_stats,
    build_synthetic_snapshots,
    rate_analysis_quality,
)
from snapshot_discovery.pipelines.synthetic import months_before

NOW = datetime(2024, 6, 15)
HEADER = '[["timestamp","original","statuscode"],'


def make_response(status_code: int = 200, text: str = "") -> Mock:
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    response.reason = "OK" if response.ok else "Error"
    return response


def cdx_body(timestamps, url="https://www.example.com/products") -> str:
    lines = [HEADER] + [f'["{t}","{url}","200"],' for t in timestamps]
    return "\n".join(lines)


def make_pipeline(session: Mock, **config_overrides) -> SnapshotDiscoveryPipeline:
    config = DiscoveryConfig(**config_overrides)
    client = WaybackCDXClient(config, session=session)
    return SnapshotDiscoveryPipeline(config, client=client)


class TestSnapshotDiscoveryPipeline:
    """Test the composed discovery operation."""

    def setup_method(self):
        self.session = Mock()
        self.pipeline = make_pipeline(self.session)

    def test_fallback_to_www_variant(self):
        self.session.get.side_effect = [
            make_response(404),
            make_response(text=cdx_body([
                "20240605000000", "20240601000000", "20240110093000",
                "20231205120000", "20230801000000",
            ])),
        ]

        result = self.pipeline.discover("https://example.com/products", now=NOW)

        assert result.available
        assert result.successful_url == "https://www.example.com/products"
        assert result.data_source == DataSource.WAYBACK_CDX
        assert [s.timestamp for s in result.snapshots] == [
            "20240605000000", "20240110093000", "20231205120000", "20230801000000",
        ]
        assert [s.change_type for s in result.snapshots] == [
            ChangeType.RECENT, ChangeType.MODERATE, ChangeType.MODERATE, ChangeType.SIGNIFICANT,
        ]
        assert result.analysis_quality == AnalysisQuality.LOW
        assert result.experiment_windows is None
        assert self.session.get.call_count == 2
        assert [a.variant for a in result.attempts] == [
            "https://example.com/products",
            "https://www.example.com/products",
        ]

    def test_no_data_is_not_an_error(self):
        self.session.get.return_value = make_response(text="")

        result = self.pipeline.discover("https://example.com/products", now=NOW)

        assert not result.available
        assert result.snapshots == []
        assert result.data_source == DataSource.NO_DATA
        assert result.analysis_quality == AnalysisQuality.LOW
        assert result.successful_url is None
        assert len(result.attempts) == 7

        payload = result.to_dict()
        assert payload["dataSource"] == "wayback_api_no_data"
        assert "successfulUrl" not in payload
        assert "error" not in payload

    def test_malformed_url_tries_single_variant(self):
        self.session.get.return_value = make_response(text="")

        result = self.pipeline.discover("example.com/products", now=NOW)

        assert not result.available
        assert self.session.get.call_count == 1

    def test_fatal_error_propagates(self):
        self.session.get.side_effect = requests.exceptions.InvalidSchema("no adapter")

        with pytest.raises(ArchiveClientError):
            self.pipeline.discover("https://example.com/products", now=NOW)

    def test_analysis_adds_windows_and_timeline(self):
        self.session.get.return_value = make_response(text=cdx_body([
            "20240601000000", "20240520000000", "20240401000000", "20240101000000",
        ]))

        result = self.pipeline.discover("https://example.com/products", analyze=True, now=NOW)

        assert len(result.experiment_windows) == 3
        assert result.experiment_windows[-1].current.timestamp == "20240601000000"
        assert result.timeline.total_snapshots == 4
        assert result.timeline.avg_change_interval_days == 121

        payload = result.to_dict()
        assert len(payload["experimentWindows"]) == 3
        assert payload["timeline"]["totalSnapshots"] == 4

    def test_impossible_timestamp_does_not_abort_request(self):
        self.session.get.return_value = make_response(text=cdx_body([
            "20230230000000", "20240601000000", "20231301000000",
        ]))

        result = self.pipeline.discover("https://example.com/products", analyze=True, now=NOW)

        assert result.available
        assert [s.timestamp for s in result.snapshots] == ["20240601000000"]
        assert result.experiment_windows == []

    def test_quality_and_truncation(self):
        timestamps = [f"{y}{m:02d}15000000" for y in range(2015, 2024) for m in range(1, 13)]
        self.session.get.return_value = make_response(text=cdx_body(timestamps))

        result = self.pipeline.discover("https://example.com/products", now=NOW)

        assert len(result.snapshots) == 50
        assert result.analysis_quality == AnalysisQuality.HIGH

    def test_payload_shape(self):
        self.session.get.return_value = make_response(text=cdx_body(["20240601000000"]))

        payload = self.pipeline.discover("https://example.com/products", now=NOW).to_dict()

        assert payload["url"] == "https://example.com/products"
        assert payload["available"] is True
        assert payload["analysisQuality"] == "low"
        assert payload["dataSource"] == "wayback_cdx_api"
        assert payload["successfulUrl"] == "https://example.com/products"
        assert payload["historicalSnapshots"] == [{
            "timestamp": "20240601000000",
            "originalUrl": "https://www.example.com/products",
            "statusCode": "200",
            "archiveUrl": "https://web.archive.org/web/20240601000000/https://www.example.com/products",
            "changeType": "recent",
        }]


class TestAnalysisQuality:
    def test_thresholds(self):
        assert rate_analysis_quality(0) == AnalysisQuality.LOW
        assert rate_analysis_quality(5) == AnalysisQuality.LOW
        assert rate_analysis_quality(6) == AnalysisQuality.MEDIUM
        assert rate_analysis_quality(15) == AnalysisQuality.MEDIUM
        assert rate_analysis_quality(16) == AnalysisQuality.HIGH


class TestBatchDiscoveryRunner:
    """Test discovery across many URLs."""

    def test_results_follow_input_order(self):
        bodies = {
            "https://a.example.com/": cdx_body(["20240601000000"], url="https://a.example.com/"),
            "https://c.example.com/": cdx_body(["20240301000000"], url="https://c.example.com/"),
        }

        def fake_get(endpoint, params=None, timeout=None):
            return make_response(text=bodies.get(params["url"], ""))

        session = Mock()
        session.get.side_effect = fake_get
        runner = BatchDiscoveryRunner(make_pipeline(session), max_workers=3)

        results = runner.run(
            ["https://a.example.com/", "https://b.example.com/", "https://c.example.com/",
             "https://a.example.com/", "  "],
            now=NOW,
        )

        assert [r.url for r in results] == [
            "https://a.example.com/", "https://b.example.com/", "https://c.example.com/",
        ]
        assert [r.available for r in results] == [True, False, True]
        assert batch_stats(results) == {"total": 3, "available": 2, "unavailable": 1, "errors": 0}

    def test_fatal_error_is_isolated_per_url(self):
        session = Mock()
        session.get.side_effect = requests.exceptions.InvalidURL("bad endpoint")
        runner = BatchDiscoveryRunner(make_pipeline(session), max_workers=2)

        results = runner.run(["https://a.example.com/", "https://b.example.com/"], now=NOW)

        assert [r.data_source for r in results] == [DataSource.ERROR, DataSource.ERROR]
        assert all("bad endpoint" in r.error for r in results)
        assert batch_stats(results)["errors"] == 2

    def test_empty_input(self):
        runner = BatchDiscoveryRunner(make_pipeline(Mock()))
        assert runner.run([]) == []


class TestSyntheticFallback:
    """Synthetic data is opt-in and clearly labelled."""

    def setup_method(self):
        self.session = Mock()
        self.session.get.return_value = make_response(text="")

    def test_disabled_by_default(self):
        config = DiscoveryConfig()
        result = make_pipeline(self.session).discover("https://example.com/", now=NOW)

        assert apply_synthetic_fallback(result, config, now=NOW) is result
        assert not config.synthetic_fallback

    def test_enabled_replaces_unavailable_result(self):
        config = DiscoveryConfig(synthetic_fallback=True)
        result = make_pipeline(self.session).discover("https://example.com/", now=NOW)

        synthetic = apply_synthetic_fallback(result, config, now=NOW)

        assert synthetic.available
        assert synthetic.data_source == DataSource.SYNTHETIC
        assert synthetic.to_dict()["dataSource"] == "synthetic"
        assert len(synthetic.snapshots) == 6
        assert synthetic.snapshots[0].timestamp == "20240415120000"

    def test_real_data_is_never_replaced(self):
        self.session.get.return_value = make_response(text=cdx_body(["20240601000000"]))
        config = DiscoveryConfig(synthetic_fallback=True)
        result = make_pipeline(self.session).discover("https://example.com/", now=NOW)

        assert apply_synthetic_fallback(result, config, now=NOW) is result

    def test_synthetic_labels_come_from_classifier(self):
        snapshots = build_synthetic_snapshots("https://example.com/", now=NOW)
        assert [s.change_type for s in snapshots] == [
            ChangeType.RECENT,
            ChangeType.MODERATE,
            ChangeType.SIGNIFICANT,
            ChangeType.SIGNIFICANT,
            ChangeType.MAJOR,
            ChangeType.MAJOR,
        ]

    def test_months_before_clamps_to_month_end(self):
        assert months_before(datetime(2024, 3, 31), 1) == datetime(2024, 2, 29)
        assert months_before(datetime(2024, 1, 15), 14) == datetime(2022, 11, 15)
