"""
Episode listings for resolved shows.
"""

import logging
from typing import List

from pydantic import TypeAdapter, ValidationError

from tvmaze_client.errors import DecodeError
from tvmaze_client.metadata.fetcher import Fetcher, build_request_uri
from tvmaze_client.metadata.models import Episode

logger = logging.getLogger(__name__)

_EPISODES = TypeAdapter(List[Episode])


class EpisodeLister:
    """Fetches the episode list of a show."""
    
    def __init__(self, fetcher: Fetcher, base_uri: str, use_cache: bool = True):
        self.fetcher = fetcher
        self.base_uri = base_uri
        self.use_cache = use_cache
    
    def list_episodes(self, show_id: int, specials: bool = False) -> List[Episode]:
        """
        Get all episodes of a show in the order the service returns them.
        
        Args:
            show_id: TVmaze show ID
            specials: Include special episodes
        
        Raises:
            TransportError, HTTPStatusError: From the request
            DecodeError: If the body is not an episode list
        """
        params = {"specials": 1} if specials else None
        uri = build_request_uri(self.base_uri, f"/shows/{int(show_id)}/episodes", params)
        data = self.fetcher.fetch(uri, use_cache=self.use_cache)
        try:
            episodes = _EPISODES.validate_json(data)
        except ValidationError as e:
            raise DecodeError(f"Unexpected episode response from {uri}: {e}", uri=uri, original_error=e) from e
        
        logger.debug(f"Got {len(episodes)} episodes for TVmaze show {show_id}")
        return episodes
