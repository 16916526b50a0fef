"""
CDX Response Parser

Parses the Wayback CDX server's ``output=json`` body into snapshot records.
The body is one JSON array per line, the first line being the field header:

    [["timestamp","original","statuscode"],
    ["20230115000000","http://example.com/","200"],
    ["20230220093000","http://example.com/","301"]]

Lines are parsed independently so one bad line never costs the whole response.
"""

import json
from typing import List, Optional

from ..models.snapshot_models import (
    DEFAULT_ARCHIVE_BASE,
    SnapshotRecord,
    is_valid_timestamp,
)
from ..utils.logging_config import get_logger

logger = get_logger("cdx_parser")

# Captures worth showing: OK, redirects, and revisits without a status
ACCEPTED_STATUS_CODES = frozenset({"200", "301", "-"})


class CDXParser:
    """Turns raw CDX JSON-lines text into SnapshotRecord objects."""

    def __init__(
        self,
        archive_base: str = DEFAULT_ARCHIVE_BASE,
        log=None,
    ):
        """
        Initialize the parser.

        Args:
            archive_base: Base URL used to build replay links
            log: Logger; defaults to the module logger
        """
        self.archive_base = archive_base.rstrip("/")
        self.log = log or logger

    def parse(self, text: str) -> List[SnapshotRecord]:
        """
        Parse a CDX response body.

        Args:
            text: Raw response text

        Returns:
            Records with an accepted status code, in response order
        """
        if not text or not text.strip():
            return []

        lines = text.strip().split("\n")
        records = []

        # First line is the field header
        for line_number, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            if line.endswith(","):
                line = line[:-1]
            if not line:
                continue

            fields = self._load_line(line)
            if fields is None:
                self.log.warning(f"Skipping unparseable CDX line {line_number}: {raw_line[:200]!r}")
                continue

            if not isinstance(fields, list) or len(fields) < 3:
                self.log.warning(f"Skipping short CDX line {line_number}: {raw_line[:200]!r}")
                continue

            record = self._create_record(fields, line_number)
            if record:
                records.append(record)

        self.log.debug(f"Parsed {len(records)} snapshot records from {len(lines)} lines")
        return records

    def _load_line(self, line: str):
        try:
            return json.loads(line)
        except ValueError:
            pass

        # Last line of output=json carries the outer array's closing bracket
        if line.endswith("]]"):
            try:
                return json.loads(line[:-1])
            except ValueError:
                return None
        return None

    def _create_record(self, fields: list, line_number: int) -> Optional[SnapshotRecord]:
        timestamp, original_url, status_code = fields[0], fields[1], fields[2]
        status_code = str(status_code)

        if status_code not in ACCEPTED_STATUS_CODES:
            return None

        if not is_valid_timestamp(timestamp):
            self.log.warning(f"Skipping CDX line {line_number} with bad timestamp {timestamp!r}")
            return None

        if not isinstance(original_url, str) or not original_url:
            self.log.warning(f"Skipping CDX line {line_number} without an original URL")
            return None

        return SnapshotRecord(
            timestamp=timestamp,
            original_url=original_url,
            status_code=status_code,
            archive_base=self.archive_base,
        )
