"""
Error taxonomy.

Scoring errors are programmer errors and propagate. Cache errors are raised
inside the cache layer only; AnalysisCache converts them into misses/False.
"""


class PageScoreError(Exception):
    """Base class for all pagescore errors."""


class InvalidInputError(PageScoreError, ValueError):
    """Call-site misuse, e.g. passing None as the page signals."""


class CacheError(PageScoreError):
    """Base class for cache-layer failures."""


class CacheUnavailableError(CacheError):
    """Backing store unreachable."""


class CorruptCacheEntryError(CacheError):
    """Stored payload could not be decompressed or deserialized."""


class StaleSchemaError(CacheError):
    """Entry written by an older schema version."""

    def __init__(self, cached_version: str, current_version: str):
        super().__init__(f"Cached schema {cached_version} is older than {current_version}")
        self.cached_version = cached_version
        self.current_version = current_version
