"""
Error types raised by the TVmaze client.

Every public operation either returns a fully populated result or raises
one of the exceptions below.
"""

from typing import Optional


class TVMazeError(Exception):
    """Base class for all TVmaze client errors."""
    pass


class TransportError(TVMazeError):
    """Network-level failure (DNS, connect, timeout)."""
    
    def __init__(
        self,
        message: str,
        uri: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.uri = uri
        self.original_error = original_error


class HTTPStatusError(TVMazeError):
    """The service answered with a status other than 200."""
    
    def __init__(self, status_code: int, reason: str, uri: Optional[str] = None):
        super().__init__(f"Request failed: {reason}")
        self.status_code = status_code
        self.reason = reason
        self.uri = uri


class DecodeError(TVMazeError):
    """Response body is not valid JSON for the expected shape."""
    
    def __init__(
        self,
        message: str,
        uri: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.uri = uri
        self.original_error = original_error


class PersistenceError(TVMazeError):
    """Cache file could not be read, decoded or written."""
    
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.path = path
        self.original_error = original_error


class NotFoundError(TVMazeError):
    """No search candidate matched the requested show name."""
    
    def __init__(self, name: str, region: Optional[str] = None):
        message = f"Failed to match show in tvmaze! {name!r}"
        if region:
            message += f" (region {region})"
        super().__init__(message)
        self.name = name
        self.region = region


__all__ = [
    "TVMazeError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "PersistenceError",
    "NotFoundError",
]
