"""
Wayback CDX Client

Queries the Wayback Machine CDX index for captures of a page, trying URL
variants in order until one of them returns usable records.
"""

import threading
import time
from typing import List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import DiscoveryConfig
from ..exceptions import ArchiveClientError
from ..models.snapshot_models import (
    AttemptStatus,
    QueryOutcome,
    SnapshotRecord,
    VariantAttempt,
)
from ..utils.logging_config import get_logger
from .cdx_parser import CDXParser

logger = get_logger("cdx_client")

CDX_FIELDS = "timestamp,original,statuscode"

# The request machinery is unusable; no other variant will fare better
FATAL_REQUEST_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
)


class WaybackCDXClient:
    """Client for the Wayback CDX server with first-success variant fallback."""

    def __init__(
        self,
        config: Optional[DiscoveryConfig] = None,
        parser: Optional[CDXParser] = None,
        session: Optional[requests.Session] = None,
        log=None,
    ):
        """
        Initialize the CDX client.

        Args:
            config: Discovery configuration (endpoint, timeout, row limit)
            parser: Parser for CDX responses
            session: Pre-built HTTP session shared by all threads, mainly for tests
            log: Logger; defaults to the module logger
        """
        self.config = config or DiscoveryConfig()
        self.parser = parser or CDXParser(archive_base=self.config.archive_base_url)
        self.log = log or logger
        self._closed = False

        # An injected session is shared as-is; otherwise each thread builds its own
        self._shared_session = session
        self._local = threading.local()
        self._owned_sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """HTTP session for the calling thread."""
        if self._shared_session is not None:
            return self._shared_session

        session = getattr(self._local, "session", None)
        if session is None:
            session = self._build_session()
            self._local.session = session
            with self._sessions_lock:
                self._owned_sessions.append(session)
        return session

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        # Exactly one attempt per variant; a failed variant is skipped, not retried
        retry_strategy = Retry(total=0, raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"User-Agent": self.config.user_agent})
        return session

    def build_params(self, variant: str) -> dict:
        """Query parameters for one CDX lookup."""
        return {
            "url": variant,
            "matchType": self.config.match_type,
            "collapse": self.config.collapse,
            "output": "json",
            "fl": CDX_FIELDS,
            "limit": self.config.row_limit,
        }

    def query(self, variants: List[str]) -> QueryOutcome:
        """
        Try each variant in order and stop at the first that yields records.

        Results of different variants are never merged.

        Args:
            variants: Ordered query candidates

        Returns:
            QueryOutcome naming the successful variant, or with
            ``successful_variant=None`` when every variant came back empty

        Raises:
            ArchiveClientError: If the request machinery itself is unusable
        """
        attempts = []

        for variant in variants:
            attempt, records = self.query_variant(variant)
            attempts.append(attempt)

            if records:
                self.log.success(f"Found {len(records)} snapshots for {variant}")
                return QueryOutcome(
                    successful_variant=variant, records=records, attempts=attempts
                )

        self.log.info(f"No snapshots found for any of {len(variants)} URL variants")
        return QueryOutcome(successful_variant=None, records=[], attempts=attempts)

    def query_variant(self, variant: str) -> Tuple[VariantAttempt, List[SnapshotRecord]]:
        """
        Issue one bounded CDX request for a single variant.

        Network failures are absorbed into the returned attempt.

        Raises:
            ArchiveClientError: If the request machinery itself is unusable
        """
        if self._closed:
            raise ArchiveClientError("CDX client has been closed")

        self.log.info(f"Trying CDX API for: {variant}")
        start_time = time.time()

        try:
            response = self.session.get(
                self.config.cdx_endpoint,
                params=self.build_params(variant),
                timeout=self.config.request_timeout,
            )
        except FATAL_REQUEST_ERRORS as e:
            self.log.error(f"CDX endpoint {self.config.cdx_endpoint!r} is unusable: {e}")
            raise ArchiveClientError(f"CDX endpoint is unusable: {e}") from e
        except requests.exceptions.Timeout as e:
            self.log.warning(
                f"CDX request timed out after {self.config.request_timeout}s for {variant}"
            )
            return VariantAttempt(variant, AttemptStatus.TIMEOUT, error=str(e)), []
        except requests.exceptions.RequestException as e:
            self.log.warning(f"CDX request failed for {variant}: {e}")
            return VariantAttempt(variant, AttemptStatus.ERROR, error=str(e)), []

        elapsed = time.time() - start_time

        if not response.ok:
            self.log.warning(f"CDX API returned {response.status_code} for {variant}")
            return (
                VariantAttempt(
                    variant,
                    AttemptStatus.HTTP_ERROR,
                    http_status=response.status_code,
                    error=response.reason,
                ),
                [],
            )

        text = response.text or ""
        self.log.debug(
            f"CDX response for {variant}: {len(text)} characters in {elapsed:.2f}s"
        )

        records = self.parser.parse(text)
        if not records:
            self.log.info(f"No valid snapshots in response for {variant}")
            return (
                VariantAttempt(
                    variant, AttemptStatus.EMPTY, http_status=response.status_code
                ),
                [],
            )

        return (
            VariantAttempt(
                variant,
                AttemptStatus.OK,
                record_count=len(records),
                http_status=response.status_code,
            ),
            records,
        )

    def close(self):
        if self._closed:
            return
        self._closed = True

        if self._shared_session is not None:
            self._shared_session.close()
        with self._sessions_lock:
            for session in self._owned_sessions:
                session.close()
            self._owned_sessions.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
