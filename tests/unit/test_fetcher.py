"""
Unit tests for the cache-backed fetcher.
"""

import httpx
import pytest

from tests.fixtures.mock_responses import BASE_URI
from tvmaze_client.errors import DecodeError, HTTPStatusError, TransportError
from tvmaze_client.metadata import Fetcher, build_request_uri


@pytest.mark.unit
class TestBuildRequestUri:
    """Tests for request URI canonicalization."""
    
    def test_joins_base_and_route(self):
        """Exactly one slash separates base and route."""
        assert build_request_uri("https://api.tvmaze.com/", "/shows/1") == "https://api.tvmaze.com/shows/1"
        assert build_request_uri("https://api.tvmaze.com", "shows/1") == "https://api.tvmaze.com/shows/1"
    
    def test_encodes_query(self):
        """Query values are form encoded."""
        uri = build_request_uri("https://api.tvmaze.com", "/search/shows", {"q": "Lost Girl & Co"})
        
        assert uri == "https://api.tvmaze.com/search/shows?q=Lost+Girl+%26+Co"
    
    def test_parameter_order_is_deterministic(self):
        """Logically identical requests produce the same identity."""
        first = build_request_uri(BASE_URI, "/x", {"b": 2, "a": 1})
        second = build_request_uri(BASE_URI, "/x", {"a": 1, "b": 2})
        
        assert first == second == f"{BASE_URI}/x?a=1&b=2"
    
    def test_no_params(self):
        """No query string is added without parameters."""
        assert build_request_uri(BASE_URI, "/shows/1/episodes", {}) == f"{BASE_URI}/shows/1/episodes"


@pytest.mark.unit
class TestFetcher:
    """Tests for Fetcher.fetch."""
    
    def test_miss_fetches_and_caches(self, fetcher, mock_tvmaze, cache):
        """A cache miss goes to the network and stores the body."""
        uri = f"{BASE_URI}/shows/29"
        mock_tvmaze.add(uri, {"id": 29})
        
        data = fetcher.fetch(uri, use_cache=True)
        
        assert data == b'{"id": 29}'
        assert mock_tvmaze.request_count == 1
        assert cache.get(uri) == (data, True)
        assert cache.entry(uri).ttl == cache.default_ttl
    
    def test_hit_skips_network(self, fetcher, mock_tvmaze, cache):
        """A live cache entry is returned without a request."""
        uri = f"{BASE_URI}/shows/29"
        cache.set(uri, b"cached")
        
        assert fetcher.fetch(uri, use_cache=True) == b"cached"
        assert mock_tvmaze.request_count == 0
    
    def test_expired_entry_refetched(self, fetcher, mock_tvmaze, cache, clock):
        """An expired entry counts as a miss."""
        uri = f"{BASE_URI}/shows/29"
        cache.set(uri, b"stale", 10)
        clock.advance(11)
        mock_tvmaze.add(uri, content=b"fresh")
        
        assert fetcher.fetch(uri) == b"fresh"
        assert mock_tvmaze.request_count == 1
    
    def test_cache_bypass_refreshes_entry(self, fetcher, mock_tvmaze, cache, clock):
        """use_cache=False always requests and overwrites the cached body."""
        uri = f"{BASE_URI}/shows/29"
        cache.set(uri, b"old", 100)
        clock.advance(50)
        mock_tvmaze.add(uri, content=b"new")
        
        assert fetcher.fetch(uri, use_cache=False) == b"new"
        assert mock_tvmaze.request_count == 1
        assert cache.get(uri) == (b"new", True)
        assert cache.entry(uri).stored_at == clock()
    
    def test_non_200_raises_status_error(self, fetcher, mock_tvmaze, cache):
        """Non-success statuses raise HTTPStatusError with the reason text."""
        uri = f"{BASE_URI}/shows/999999"
        mock_tvmaze.add(uri, {"name": "Not Found"}, status_code=404)
        
        with pytest.raises(HTTPStatusError) as exc_info:
            fetcher.fetch(uri)
        
        assert exc_info.value.status_code == 404
        assert exc_info.value.reason == "Not Found"
        assert str(exc_info.value) == "Request failed: Not Found"
        assert uri not in cache
    
    def test_other_success_codes_are_failures(self, fetcher, mock_tvmaze):
        """Only 200 counts as success."""
        uri = f"{BASE_URI}/shows/29"
        mock_tvmaze.add(uri, content=b"", status_code=204)
        
        with pytest.raises(HTTPStatusError) as exc_info:
            fetcher.fetch(uri)
        
        assert exc_info.value.reason == "No Content"
    
    def test_rate_limited(self, fetcher, mock_tvmaze):
        """429 is surfaced, not retried."""
        uri = f"{BASE_URI}/search/shows?q=x"
        mock_tvmaze.add(uri, {}, status_code=429)
        
        with pytest.raises(HTTPStatusError):
            fetcher.fetch(uri)
        
        assert mock_tvmaze.request_count == 1
    
    def test_connect_error_raises_transport_error(self, fetcher, mock_tvmaze, cache):
        """Connection failures raise TransportError."""
        uri = f"{BASE_URI}/shows/29"
        mock_tvmaze.error = httpx.ConnectError("connection refused")
        
        with pytest.raises(TransportError) as exc_info:
            fetcher.fetch(uri)
        
        assert exc_info.value.uri == uri
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert uri not in cache
    
    def test_timeout_raises_transport_error(self, fetcher, mock_tvmaze):
        """Timeouts raise TransportError."""
        mock_tvmaze.error = httpx.ReadTimeout("timed out")
        
        with pytest.raises(TransportError, match="timed out"):
            fetcher.fetch(f"{BASE_URI}/shows/29")
    
    def test_sends_identifying_headers(self, fetcher, mock_tvmaze):
        """User-Agent and Accept are sent with every request."""
        uri = f"{BASE_URI}/shows/29"
        mock_tvmaze.add(uri, {})
        
        fetcher.fetch(uri)
        
        request = mock_tvmaze.requests[0]
        assert request.method == "GET"
        assert request.headers["User-Agent"] == "tvmaze-client-tests/1.0"
        assert request.headers["Accept"] == "application/json"
    
    def test_extra_headers(self, cache, http_client, mock_tvmaze):
        """Extra headers are attached to requests."""
        uri = f"{BASE_URI}/shows/29"
        mock_tvmaze.add(uri, {})
        fetcher = Fetcher(cache, http_client=http_client, headers={"X-Client": "abc"})
        
        fetcher.fetch(uri)
        
        assert mock_tvmaze.requests[0].headers["X-Client"] == "abc"
    
    def test_get_json(self, fetcher, mock_tvmaze):
        """get_json parses the body."""
        uri = f"{BASE_URI}/shows/29"
        mock_tvmaze.add(uri, {"id": 29, "name": "Fringe"})
        
        assert fetcher.get_json(uri) == {"id": 29, "name": "Fringe"}
    
    def test_get_json_invalid(self, fetcher, mock_tvmaze):
        """Invalid JSON raises DecodeError."""
        uri = f"{BASE_URI}/shows/29"
        mock_tvmaze.add(uri, content=b"<html>")
        
        with pytest.raises(DecodeError):
            fetcher.get_json(uri)


@pytest.mark.unit
class TestFetcherLifecycle:
    """Tests for HTTP client ownership."""
    
    def test_does_not_close_injected_client(self, cache, http_client):
        """A caller-supplied client stays open."""
        with Fetcher(cache, http_client=http_client):
            pass
        
        assert http_client.is_closed is False
    
    def test_closes_own_client(self, cache):
        """A fetcher closes the client it created."""
        fetcher = Fetcher(cache, timeout=5)
        fetcher.close()
        
        assert fetcher._http_client.is_closed is True
        assert fetcher._http_client.timeout.read == 5
