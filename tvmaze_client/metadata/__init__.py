"""
TVmaze Metadata Package

Cache-backed access to the TVmaze show search and episode endpoints.
"""

from tvmaze_client.metadata.episodes import EpisodeLister
from tvmaze_client.metadata.fetcher import Fetcher, build_request_uri
from tvmaze_client.metadata.models import Candidate, Episode, Network, Show
from tvmaze_client.metadata.resolver import ShowResolver, match_candidate

__all__ = [
    "Candidate",
    "Episode",
    "EpisodeLister",
    "Fetcher",
    "Network",
    "Show",
    "ShowResolver",
    "build_request_uri",
    "match_candidate",
]
