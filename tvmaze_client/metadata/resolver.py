"""
Show resolution for free-text show names.

Turns the ranked candidates of a TVmaze search into exactly one show,
biased toward the caller's region.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from tvmaze_client.errors import DecodeError, NotFoundError
from tvmaze_client.metadata.fetcher import Fetcher, build_request_uri
from tvmaze_client.metadata.models import Candidate, Show

logger = logging.getLogger(__name__)

_CANDIDATES = TypeAdapter(List[Candidate])


def _network_country(show: Show) -> Optional[str]:
    """Country code of the show's broadcast network, ignoring web channels."""
    if show.network is None or show.network.country is None:
        return None
    return show.network.country.code


def match_candidate(
    candidates: Sequence[Candidate],
    name: str,
    region: Optional[str] = None,
) -> Show:
    """
    Pick one show from search candidates.
    
    Candidates are scanned in the service's rank order and never re-sorted;
    the first acceptable candidate wins.
    
    1. With a region: first show whose network is in that region and whose
       name starts with ``name``. Web channels do not count.
    2. First show whose name equals ``name`` ignoring case, then the first
       show whose name starts with ``name``. Region is ignored here, since
       the service's country data does not always agree with the caller's
       market.
    
    Raises:
        NotFoundError: If no candidate is acceptable.
    """
    if region:
        for candidate in candidates:
            show = candidate.show
            if _network_country(show) == region and show.name.startswith(name):
                return show
    
    folded = name.casefold()
    for candidate in candidates:
        if candidate.show.name.casefold() == folded:
            return candidate.show
    
    for candidate in candidates:
        if candidate.show.name.startswith(name):
            return candidate.show
    
    raise NotFoundError(name, region)


class ShowResolver:
    """Resolves show names against the TVmaze search endpoint."""
    
    def __init__(
        self,
        fetcher: Fetcher,
        base_uri: str,
        region: Optional[str] = None,
        use_cache: bool = True,
    ):
        self.fetcher = fetcher
        self.base_uri = base_uri
        self.region = region
        self.use_cache = use_cache
    
    def search(self, name: str) -> List[Candidate]:
        """Get the ranked search candidates for ``name``."""
        uri = build_request_uri(self.base_uri, "/search/shows", {"q": name})
        data = self.fetcher.fetch(uri, use_cache=self.use_cache)
        try:
            return _CANDIDATES.validate_json(data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected search response from {uri}: {e}", uri=uri, original_error=e) from e
    
    def resolve(self, name: str, region: Optional[str] = None) -> Show:
        """
        Resolve ``name`` to a single show.
        
        Args:
            name: Show name as typed by a user
            region: Preferred two-letter country code. Defaults to the
                resolver's region; "" disables the region pass.
        
        Raises:
            NotFoundError: If no candidate matches
            TransportError, HTTPStatusError, DecodeError: From the search request
        """
        if region is None:
            region = self.region
        
        candidates = self.search(name)
        try:
            show = match_candidate(candidates, name, region)
        except NotFoundError:
            logger.info(f"No TVmaze match for {name!r} among {len(candidates)} candidates")
            raise
        
        logger.debug(f"Resolved {name!r} to TVmaze show {show.id} ({show.name})")
        return show
