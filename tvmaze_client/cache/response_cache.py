"""
Thread-safe in-memory TTL cache for service responses, persisted to a
single file on request.
"""

import logging
import os
import pickle
import tempfile
import time
import zlib
from dataclasses import asdict
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from tvmaze_client.cache.base import (
    DEFAULT_EXPIRATION,
    NO_EXPIRATION,
    ONE_HOUR,
    ONE_WEEK,
    CacheEntry,
    CacheStats,
)
from tvmaze_client.errors import PersistenceError

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

PathLike = Union[str, "os.PathLike[str]"]


def _current_umask() -> int:
    """Read the process umask (os.umask has no read-only form)."""
    umask = os.umask(0)
    os.umask(umask)
    return umask


class ResponseCache:
    """
    Expiring key -> bytes store keyed by request URI.
    
    Features:
    - Per-entry expiration (ttl=0 uses the configured default)
    - Lazy expiry on read, periodic sweep of expired entries on write
    - Explicit load/save of the whole snapshot to one file
    
    get/set/delete are safe to call from several threads. load_file and
    save_file operate on the whole snapshot; callers serialize them
    around other activity (load at startup, save at shutdown).
    """
    
    def __init__(
        self,
        default_ttl: float = ONE_WEEK,
        cleanup_interval: float = ONE_HOUR,
        clock: Callable[[], float] = time.time,
    ):
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        self.default_ttl = default_ttl
        self.cleanup_interval = cleanup_interval
        self.stats = CacheStats()
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = RLock()
        self._last_sweep = clock()
    
    @classmethod
    def from_file(cls, path: PathLike, **kwargs: Any) -> "ResponseCache":
        """Create a cache and load it from ``path`` if that file exists."""
        cache = cls(**kwargs)
        cache.load_file(path)
        return cache
    
    def get(self, key: str) -> Tuple[bytes, bool]:
        """
        Get a value from cache.
        
        Returns:
            (value, True) for a live entry, (b"", False) when the key was
            never set or its entry has expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.is_expired(self._clock()):
                self.stats.misses += 1
                return b"", False
            self.stats.hits += 1
            return entry.value, True
    
    def set(self, key: str, value: bytes, ttl: float = DEFAULT_EXPIRATION) -> None:
        """
        Insert or overwrite ``key``, starting a fresh expiry window.
        
        Args:
            key: Cache key (the canonical request URI)
            value: Response body
            ttl: Seconds to live. DEFAULT_EXPIRATION (0) applies the default
                TTL, NO_EXPIRATION (-1) keeps the entry until deleted.
        """
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"Cache values must be bytes, not {type(value).__name__}")
        if ttl == DEFAULT_EXPIRATION:
            ttl = self.default_ttl
        elif ttl < 0 and ttl != NO_EXPIRATION:
            raise ValueError(f"Invalid TTL: {ttl}")
        
        now = self._clock()
        entry = CacheEntry(key=key, value=bytes(value), stored_at=now, ttl=ttl)
        
        with self._lock:
            self._entries[key] = entry
            self.stats.sets += 1
            if self.cleanup_interval > 0 and now - self._last_sweep >= self.cleanup_interval:
                self._purge_expired(now)
    
    def delete(self, key: str) -> bool:
        """Delete a value from cache."""
        with self._lock:
            if self._entries.pop(key, None) is None:
                return False
            self.stats.deletes += 1
            return True
    
    def clear(self) -> int:
        """Remove every entry. Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count
    
    def delete_expired(self) -> int:
        """Remove expired entries. Returns the number removed."""
        with self._lock:
            return self._purge_expired(self._clock())
    
    def _purge_expired(self, now: float) -> int:
        expired_keys = [
            key for key, entry in self._entries.items()
            if entry.is_expired(now)
        ]
        for key in expired_keys:
            del self._entries[key]
        self.stats.evictions += len(expired_keys)
        self._last_sweep = now
        if expired_keys:
            logger.debug(f"Purged {len(expired_keys)} expired cache entries")
        return len(expired_keys)
    
    def keys(self) -> List[str]:
        """Keys of all live entries."""
        now = self._clock()
        with self._lock:
            return [
                key for key, entry in self._entries.items()
                if not entry.is_expired(now)
            ]
    
    def entry(self, key: str) -> Optional[CacheEntry]:
        """Get the live entry for ``key`` with its expiry metadata."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry
    
    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.entry(key) is not None
    
    def __len__(self) -> int:
        return len(self.keys())
    
    # Persistence
    
    def load_file(self, path: PathLike) -> int:
        """
        Replace the in-memory snapshot with the contents of ``path``.
        
        A missing file is not an error: the cache is left untouched.
        Expired entries in the file are dropped.
        
        Returns:
            Number of entries loaded.
        
        Raises:
            PersistenceError: If the file cannot be read or is corrupt.
        """
        path = Path(path)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug(f"No cache file at {path}, starting empty")
            return 0
        except OSError as e:
            raise PersistenceError(
                f"Could not read cache file {path}: {e}",
                path=str(path),
                original_error=e,
            ) from e
        
        entries = _decode_snapshot(raw, path)
        now = self._clock()
        live = {entry.key: entry for entry in entries if not entry.is_expired(now)}
        
        with self._lock:
            self._entries = live
            self._last_sweep = now
        
        logger.info(f"Loaded {len(live)} cache entries from {path}")
        return len(live)
    
    def save_file(self, path: PathLike) -> int:
        """
        Write the current snapshot to ``path``, replacing any existing file.
        
        The snapshot is written to a temporary file in the same directory
        and moved into place, so readers never see a partial file.
        
        Returns:
            Number of entries written.
        
        Raises:
            PersistenceError: If the file cannot be written.
        """
        path = Path(path)
        now = self._clock()
        with self._lock:
            entries = [
                entry for entry in self._entries.values()
                if not entry.is_expired(now)
            ]
        
        snapshot = {
            "version": SNAPSHOT_VERSION,
            "entries": [asdict(entry) for entry in entries],
        }
        data = zlib.compress(pickle.dumps(snapshot, protocol=pickle.HIGHEST_PROTOCOL))
        
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp_file:
                tmp_name = tmp_file.name
                tmp_file.write(data)
            # Temp files are created 0600; give the cache the usual umask mode
            os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise PersistenceError(
                f"Could not write cache file {path}: {e}",
                path=str(path),
                original_error=e,
            ) from e
        
        logger.info(f"Saved {len(entries)} cache entries to {path}")
        return len(entries)


def _decode_snapshot(raw: bytes, path: Path) -> List[CacheEntry]:
    """Decode a cache file written by save_file()."""
    try:
        snapshot = pickle.loads(zlib.decompress(raw))
    except (zlib.error, pickle.UnpicklingError, EOFError, AttributeError,
            ImportError, IndexError, TypeError, ValueError) as e:
        raise PersistenceError(
            f"Corrupt cache file {path}: {e}",
            path=str(path),
            original_error=e,
        ) from e
    
    if not isinstance(snapshot, dict) or snapshot.get("version") != SNAPSHOT_VERSION:
        raise PersistenceError(f"Unsupported cache file format in {path}", path=str(path))
    
    items = snapshot.get("entries")
    if not isinstance(items, list):
        raise PersistenceError(f"Malformed cache file {path}: no entry list", path=str(path))
    
    entries = []
    for item in items:
        try:
            entry = CacheEntry(
                key=item["key"],
                value=item["value"],
                stored_at=float(item["stored_at"]),
                ttl=float(item["ttl"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(
                f"Malformed entry in cache file {path}: {e}",
                path=str(path),
                original_error=e,
            ) from e
        if not isinstance(entry.key, str) or not isinstance(entry.value, bytes):
            raise PersistenceError(f"Malformed entry in cache file {path}", path=str(path))
        entries.append(entry)
    return entries
