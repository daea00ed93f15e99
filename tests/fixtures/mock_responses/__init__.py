"""
Mock API Responses

Pre-defined mock responses for TVmaze service testing.
"""

from .tvmaze_responses import (
    BASE_URI,
    FRINGE_SHOW,
    TVMAZE_EPISODES,
    TVMAZE_SHOW_SEARCH,
    TVMAZE_SPECIAL_EPISODE,
)

__all__ = [
    "BASE_URI",
    "FRINGE_SHOW",
    "TVMAZE_EPISODES",
    "TVMAZE_SHOW_SEARCH",
    "TVMAZE_SPECIAL_EPISODE",
]
