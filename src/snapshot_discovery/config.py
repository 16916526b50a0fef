"""
Runtime configuration for snapshot discovery.

Values come from ``config/.env`` (loaded with python-dotenv) and the
``SNAPSHOT_DISCOVERY_*`` environment variables. Anything missing falls back to
the defaults on ``DiscoveryConfig``.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .utils.logging_config import get_logger

logger = get_logger("config")

ENV_PREFIX = "SNAPSHOT_DISCOVERY_"

# Hard cap imposed on the CDX row limit
MAX_CDX_ROWS = 100


@dataclass
class DiscoveryConfig:
    """Configuration for a discovery run."""

    # Archive endpoints
    archive_base_url: str = "https://web.archive.org"
    cdx_path: str = "/cdx/search/cdx"

    # CDX query shape
    match_type: str = "prefix"
    collapse: str = "timestamp:8"
    row_limit: int = MAX_CDX_ROWS
    request_timeout: float = 30.0

    # Result shaping
    max_results: int = 50
    max_windows: int = 3

    # Batch runs
    max_workers: int = 4

    # Opt-in fake data when the archive has nothing (never on by default)
    synthetic_fallback: bool = False

    user_agent: str = (
        "Mozilla/5.0 (compatible; SnapshotDiscovery/1.0; +https://web.archive.org)"
    )

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        self.archive_base_url = self.archive_base_url.rstrip("/")
        if self.row_limit > MAX_CDX_ROWS or self.row_limit < 1:
            logger.warning(
                f"row_limit {self.row_limit} out of range, clamping to 1..{MAX_CDX_ROWS}"
            )
            self.row_limit = max(1, min(self.row_limit, MAX_CDX_ROWS))

    @property
    def cdx_endpoint(self) -> str:
        return f"{self.archive_base_url}{self.cdx_path}"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "DiscoveryConfig":
        """
        Build a config from the environment.

        Args:
            env_file: Optional .env file; defaults to <project>/config/.env

        Returns:
            DiscoveryConfig populated from environment variables
        """
        if env_file is None:
            env_file = Path(__file__).parent.parent.parent / "config" / ".env"
        load_dotenv(env_file)

        defaults = cls()
        return cls(
            archive_base_url=_env_str("ARCHIVE_BASE_URL", defaults.archive_base_url),
            cdx_path=_env_str("CDX_PATH", defaults.cdx_path),
            match_type=_env_str("MATCH_TYPE", defaults.match_type),
            collapse=_env_str("COLLAPSE", defaults.collapse),
            row_limit=_env_int("ROW_LIMIT", defaults.row_limit),
            request_timeout=_env_float("REQUEST_TIMEOUT", defaults.request_timeout),
            max_results=_env_int("MAX_RESULTS", defaults.max_results),
            max_windows=_env_int("MAX_WINDOWS", defaults.max_windows),
            max_workers=_env_int("MAX_WORKERS", defaults.max_workers),
            synthetic_fallback=_env_bool(
                "SYNTHETIC_FALLBACK", defaults.synthetic_fallback
            ),
            user_agent=_env_str("USER_AGENT", defaults.user_agent),
            log_level=_env_str("LOG_LEVEL", defaults.log_level).upper(),
            log_file=os.getenv(ENV_PREFIX + "LOG_FILE") or None,
        )


def _env_str(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name) or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {ENV_PREFIX + name}: {raw!r}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {ENV_PREFIX + name}: {raw!r}, using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")
