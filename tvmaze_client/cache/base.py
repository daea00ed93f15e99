"""
Cache entry types and statistics.
"""

from dataclasses import dataclass
from typing import Any, Dict

# Expiry sentinels accepted by ResponseCache.set()
DEFAULT_EXPIRATION = 0
NO_EXPIRATION = -1

ONE_WEEK = 7 * 24 * 60 * 60
ONE_HOUR = 60 * 60


@dataclass(frozen=True)
class CacheEntry:
    """A single cached response body."""
    key: str
    value: bytes
    stored_at: float
    ttl: float
    
    @property
    def expires_at(self) -> float:
        """Absolute expiry time, or infinity for entries that never expire."""
        if self.ttl == NO_EXPIRATION:
            return float("inf")
        return self.stored_at + self.ttl
    
    def is_expired(self, now: float) -> bool:
        """Check if entry has expired at ``now``."""
        return now > self.expires_at
    
    def ttl_remaining(self, now: float) -> float:
        """Get remaining TTL in seconds."""
        return max(0.0, self.expires_at - now)


@dataclass
class CacheStats:
    """Cache statistics."""
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    
    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "deletes": self.deletes,
            "evictions": self.evictions,
            "hit_rate": round(self.hit_rate, 2),
        }
