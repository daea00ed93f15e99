"""
TVmaze client.

Ties the response cache, fetcher, show resolver and episode lister
together behind one object.
"""

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Union

import httpx

from tvmaze_client.cache import ResponseCache
from tvmaze_client.config import ClientConfig, get_config
from tvmaze_client.metadata.episodes import EpisodeLister
from tvmaze_client.metadata.fetcher import DEFAULT_BASE_URI, DEFAULT_TIMEOUT_SECONDS, Fetcher
from tvmaze_client.metadata.models import Candidate, Episode, Show
from tvmaze_client.metadata.resolver import ShowResolver

logger = logging.getLogger(__name__)


class TVMazeClient:
    """
    Client for the TVmaze API.
    
    The cache is passed in so several clients (or tests) can share or
    isolate it. Nothing is written to disk until write_cache() is called.
    
    Example:
        cache = ResponseCache.from_file("tvmaze.cache")
        with TVMazeClient(cache, cache_file="tvmaze.cache", region="US") as client:
            show = client.find_show("Lost Girl")
            episodes = client.get_episodes(show.id)
            client.write_cache()
    """
    
    def __init__(
        self,
        cache: ResponseCache,
        cache_file: Union[str, Path, None] = None,
        base_uri: str = DEFAULT_BASE_URI,
        region: Optional[str] = None,
        use_cache: bool = True,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.cache = cache
        self.cache_file = Path(cache_file) if cache_file is not None else None
        self.base_uri = base_uri
        self.fetcher = Fetcher(
            cache,
            http_client=http_client,
            timeout=timeout,
            user_agent=user_agent,
            headers=headers,
        )
        self.resolver = ShowResolver(self.fetcher, base_uri, region=region, use_cache=use_cache)
        self.episodes = EpisodeLister(self.fetcher, base_uri, use_cache=use_cache)
    
    @classmethod
    def from_config(
        cls,
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> "TVMazeClient":
        """
        Build a client from configuration, loading the cache file if present.
        
        Raises:
            PersistenceError: If the cache file exists but cannot be loaded.
        """
        config = config or get_config()
        cache = ResponseCache.from_file(
            config.cache.file,
            default_ttl=config.cache.default_ttl,
            cleanup_interval=config.cache.cleanup_interval,
        )
        return cls(
            cache,
            cache_file=config.cache.file,
            base_uri=config.tvmaze.base_uri,
            region=config.tvmaze.region,
            use_cache=config.tvmaze.use_cache,
            timeout=config.tvmaze.timeout,
            user_agent=config.tvmaze.user_agent,
            headers=config.tvmaze.headers,
            http_client=http_client,
        )
    
    def __enter__(self) -> "TVMazeClient":
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
    
    @property
    def region(self) -> Optional[str]:
        return self.resolver.region
    
    @region.setter
    def region(self, value: Optional[str]) -> None:
        self.resolver.region = value
    
    @property
    def use_cache(self) -> bool:
        return self.resolver.use_cache
    
    @use_cache.setter
    def use_cache(self, value: bool) -> None:
        self.resolver.use_cache = value
        self.episodes.use_cache = value
    
    def find_show(self, name: str, region: Optional[str] = None) -> Show:
        """Search TVmaze for ``name`` and return the single best match."""
        return self.resolver.resolve(name, region)
    
    def get_show(self, name: str) -> List[Candidate]:
        """Get the search candidates that may match ``name``."""
        return self.resolver.search(name)
    
    def get_episodes(self, show_id: int, specials: bool = False) -> List[Episode]:
        """Get the episodes of a show."""
        return self.episodes.list_episodes(show_id, specials=specials)
    
    def write_cache(self) -> int:
        """
        Save the cache to the configured cache file.
        
        Returns:
            Number of entries written.
        """
        if self.cache_file is None:
            raise ValueError("No cache file configured")
        return self.cache.save_file(self.cache_file)
    
    def close(self) -> None:
        """Release the HTTP connection pool."""
        self.fetcher.close()
