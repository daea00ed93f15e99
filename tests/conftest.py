"""
TVmaze Client Test Configuration

Shared fixtures and configuration for all tests.
"""

import json
import os
from typing import Any, Dict, Generator, List, Union

import httpx
import pytest

from tests.fixtures.mock_responses import BASE_URI
from tvmaze_client import config as config_module
from tvmaze_client.cache import ResponseCache
from tvmaze_client.metadata import Fetcher


# ============ Clock Fixtures ============


class FakeClock:
    """Manually advanced replacement for time.time."""
    
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """A controllable clock starting at a fixed time."""
    return FakeClock()


# ============ Cache Fixtures ============


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    """An empty cache driven by the fake clock."""
    return ResponseCache(default_ttl=3600, cleanup_interval=600, clock=clock)


# ============ HTTP Fixtures ============


class MockTVMaze:
    """
    Routes requests to canned responses and records every request made.
    
    Routes map a full request URI to either a JSON-serializable payload
    (served with status 200) or an httpx.Response.
    """
    
    def __init__(self):
        self.routes: Dict[str, Union[Any, httpx.Response]] = {}
        self.requests: List[httpx.Request] = []
        self.error: Exception | None = None
    
    def add(self, uri: str, payload: Any = None, status_code: int = 200, content: bytes | None = None) -> None:
        if content is None:
            content = json.dumps(payload).encode()
        self.routes[uri] = httpx.Response(status_code, content=content)
    
    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        response = self.routes.get(str(request.url))
        if response is None:
            return httpx.Response(404)
        return response
    
    @property
    def request_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def mock_tvmaze() -> MockTVMaze:
    """Canned TVmaze service."""
    return MockTVMaze()


@pytest.fixture
def http_client(mock_tvmaze: MockTVMaze) -> Generator[httpx.Client, None, None]:
    """httpx client whose transport is the canned service."""
    with httpx.Client(transport=httpx.MockTransport(mock_tvmaze.handler)) as client:
        yield client


@pytest.fixture
def fetcher(cache: ResponseCache, http_client: httpx.Client) -> Fetcher:
    """Fetcher wired to the fake cache and canned service."""
    return Fetcher(cache, http_client=http_client, user_agent="tvmaze-client-tests/1.0")


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables and cached config for each test."""
    # Save current environment
    original_env = os.environ.copy()
    
    # Remove client-specific vars
    for key in list(os.environ.keys()):
        if key.startswith("TVMAZE_"):
            del os.environ[key]
    config_module._config = None
    
    yield
    
    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
    config_module._config = None


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "network: Network access required")
