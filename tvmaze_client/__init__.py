"""
TVmaze Client - cached access to the TVmaze TV metadata API

- Show search with region-aware name resolution
- Episode listings
- Persistent TTL response cache
"""

__version__ = "1.0.0"
__license__ = "MIT"

from tvmaze_client.cache import ResponseCache
from tvmaze_client.client import TVMazeClient
from tvmaze_client.config import get_config, load_config
from tvmaze_client.errors import (
    DecodeError,
    HTTPStatusError,
    NotFoundError,
    PersistenceError,
    TransportError,
    TVMazeError,
)

__all__ = [
    "__version__",
    "DecodeError",
    "HTTPStatusError",
    "NotFoundError",
    "PersistenceError",
    "ResponseCache",
    "TransportError",
    "TVMazeClient",
    "TVMazeError",
    "get_config",
    "load_config",
]
