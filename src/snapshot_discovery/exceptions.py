"""Exception types raised by snapshot discovery."""


class DiscoveryError(Exception):
    """Base class for snapshot discovery errors."""


class ArchiveClientError(DiscoveryError):
    """The archive query machinery itself cannot be used.

    Raised for problems that no other URL variant could get around, such as a
    malformed CDX endpoint or a client that has already been closed. Ordinary
    per-request failures (timeouts, HTTP errors) never raise this.
    """
