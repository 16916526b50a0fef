"""
URL variant generation.

The archive indexes a page under whatever form the crawler saw it: with or
without ``www.``, with or without a scheme, sometimes only at the site root.
This module turns one input URL into the ordered list of forms worth asking
the CDX index about.
"""

from typing import List
from urllib.parse import urlparse

from ..utils.logging_config import get_logger

logger = get_logger("variants")

WWW_PREFIX = "www."


class URLVariantGenerator:
    """Builds query candidates for a page URL."""

    def __init__(self, log=None):
        self.log = log or logger

    def generate(self, url: str) -> List[str]:
        """
        Generate archive query candidates for a URL.

        The original input is always first. Malformed input yields only the
        original input.

        Args:
            url: URL to analyze

        Returns:
            De-duplicated, order-preserving list of candidates
        """
        variants = [url]

        try:
            parsed = urlparse(url)
            host = parsed.hostname
            if not parsed.scheme or not host:
                raise ValueError("missing scheme or host")
        except ValueError as e:
            self.log.warning(f"URL parsing error for {url!r}: {e}")
            return variants

        if ":" in host:
            host = f"[{host}]"  # IPv6 literal
        scheme = f"{parsed.scheme}://"
        path = parsed.path or "/"
        if parsed.query:
            path = f"{path}?{parsed.query}"

        # www / no-www; a bare "www." host has no stripped form
        if host.startswith(WWW_PREFIX):
            alternate = host[len(WWW_PREFIX):]
        else:
            alternate = f"{WWW_PREFIX}{host}"
        if alternate:
            variants.append(f"{scheme}{alternate}{path}")
            variants.append(f"{alternate}{path}")
            variants.append(alternate)

        # Scheme-less
        variants.append(f"{host}{path}")
        variants.append(host)

        # Site root, for archives that only indexed the homepage
        if path not in ("", "/"):
            variants.append(f"{scheme}{host}")
            variants.append(host)

        return list(dict.fromkeys(v for v in variants if v))


# Global instance for easy importing
variant_generator = URLVariantGenerator()


def generate_url_variants(url: str) -> List[str]:
    return variant_generator.generate(url)
