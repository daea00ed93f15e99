"""
Cache-backed HTTP GET for the TVmaze API.
"""

import json
import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import httpx

from tvmaze_client.cache import DEFAULT_EXPIRATION, ResponseCache
from tvmaze_client.errors import DecodeError, HTTPStatusError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URI = "https://api.tvmaze.com"
DEFAULT_TIMEOUT_SECONDS = 180.0


def build_request_uri(
    base_uri: str,
    route: str,
    params: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Build the canonical URI for a request.
    
    The result is both the address requested and the cache key, so
    query parameters are always encoded in sorted key order.
    
    Args:
        base_uri: Service root, e.g. https://api.tvmaze.com
        route: Path below the root, e.g. /search/shows
        params: Optional query parameters
        
    Returns:
        Fully qualified request URI.
    """
    uri = base_uri.rstrip("/") + "/" + route.lstrip("/")
    if params:
        uri += "?" + urlencode(sorted(params.items()))
    return uri


class Fetcher:
    """
    Performs GET requests, serving repeated requests from a ResponseCache.
    
    The cache is shared and not owned; the HTTP client is owned unless one
    was passed in.
    """
    
    def __init__(
        self,
        cache: ResponseCache,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the fetcher.
        
        Args:
            cache: Response cache shared with other callers
            http_client: Preconfigured client; a new one is created if None
            timeout: Request timeout in seconds
            user_agent: Identifying User-Agent sent with every request
            headers: Extra headers sent with every request
        """
        self.cache = cache
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )
        self._headers = {"Accept": "application/json"}
        if user_agent:
            self._headers["User-Agent"] = user_agent
        if headers:
            self._headers.update(headers)
    
    def __enter__(self) -> "Fetcher":
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
    
    def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            self._http_client.close()
    
    def fetch(self, uri: str, use_cache: bool = True) -> bytes:
        """
        Get the body of ``uri``.
        
        With ``use_cache`` a live cache entry is returned without touching
        the network. Otherwise the resource is requested and the fresh
        body replaces whatever the cache held for ``uri``.
        
        Raises:
            TransportError: Connection failure or timeout
            HTTPStatusError: Any status other than 200
        """
        if use_cache:
            data, found = self.cache.get(uri)
            if found:
                logger.debug(f"cache hit: {uri}")
                return data
        
        logger.debug(f"cache miss: {uri}")
        
        try:
            response = self._http_client.get(uri, headers=self._headers)
        except httpx.TimeoutException as e:
            logger.warning(f"TVmaze request timed out: {uri}")
            raise TransportError(f"Request timed out: {uri}", uri=uri, original_error=e) from e
        except httpx.HTTPError as e:
            logger.warning(f"TVmaze request failed: {uri}: {e}")
            raise TransportError(f"Request error: {e}", uri=uri, original_error=e) from e
        
        if response.status_code != 200:
            reason = response.reason_phrase or httpx.codes.get_reason_phrase(response.status_code)
            logger.warning(f"TVmaze API error: HTTP {response.status_code} for {uri}")
            raise HTTPStatusError(response.status_code, reason, uri=uri)
        
        data = response.content
        self.cache.set(uri, data, DEFAULT_EXPIRATION)
        return data
    
    def get_json(self, uri: str, use_cache: bool = True) -> Any:
        """Fetch ``uri`` and parse the body as JSON."""
        data = self.fetch(uri, use_cache=use_cache)
        try:
            return json.loads(data)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {uri}: {e}", uri=uri, original_error=e) from e
