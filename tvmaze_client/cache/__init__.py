"""
TVmaze Client Caching Layer

Provides the persistent response cache used to avoid repeated requests
to the TVmaze API.
"""

from tvmaze_client.cache.base import (
    DEFAULT_EXPIRATION,
    NO_EXPIRATION,
    CacheEntry,
    CacheStats,
)
from tvmaze_client.cache.response_cache import ResponseCache

__all__ = [
    "DEFAULT_EXPIRATION",
    "NO_EXPIRATION",
    "CacheEntry",
    "CacheStats",
    "ResponseCache",
]
