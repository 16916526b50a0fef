"""
Wayback archive access

This package covers everything that talks to, or reads from, the archive index:
- URL variant generation for index lookups
- CDX queries with first-success variant fallback
- Parsing of CDX JSON-lines responses
- Ordering and per-month de-duplication of captures
"""

from .variants import URLVariantGenerator, generate_url_variants
from .cdx_parser import CDXParser, ACCEPTED_STATUS_CODES
from .cdx_client import WaybackCDXClient
from .ordering import order_and_dedupe, sort_newest_first, dedupe_by_month

__all__ = [
    'URLVariantGenerator', 'generate_url_variants',
    'CDXParser', 'ACCEPTED_STATUS_CODES',
    'WaybackCDXClient',
    'order_and_dedupe', 'sort_newest_first', 'dedupe_by_month',
]
