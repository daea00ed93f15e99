"""
TVmaze response records.

Decoded from the service's JSON and immutable afterwards. Fields the
models do not name are kept as extras so nothing in a response is lost.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TVMazeModel(BaseModel):
    """Base for all TVmaze records."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class Country(TVMazeModel):
    """The country a network broadcasts in."""
    name: Optional[str] = None
    code: Optional[str] = None
    timezone: Optional[str] = None


class Network(TVMazeModel):
    """A broadcast network or web channel."""
    id: Optional[int] = None
    name: Optional[str] = None
    country: Optional[Country] = None


class Schedule(TVMazeModel):
    time: Optional[str] = None
    days: tuple[str, ...] = ()


class Rating(TVMazeModel):
    average: Optional[float] = None


class Externals(TVMazeModel):
    """IDs of the show in other TV databases."""
    tvrage: Optional[int] = None
    thetvdb: Optional[int] = None
    imdb: Optional[str] = None


class Image(TVMazeModel):
    medium: Optional[str] = None
    original: Optional[str] = None


class Link(TVMazeModel):
    href: Optional[str] = None


class Links(TVMazeModel):
    self_link: Optional[Link] = Field(default=None, alias="self")
    previous_episode: Optional[Link] = Field(default=None, alias="previousepisode")
    next_episode: Optional[Link] = Field(default=None, alias="nextepisode")


class Show(TVMazeModel):
    """A TV show as returned by the search endpoint."""
    id: int
    url: Optional[str] = None
    name: str
    type: Optional[str] = None
    language: Optional[str] = None
    genres: tuple[str, ...] = ()
    status: Optional[str] = None
    runtime: Optional[int] = None
    premiered: Optional[str] = None
    official_site: Optional[str] = Field(default=None, alias="officialSite")
    schedule: Optional[Schedule] = None
    rating: Optional[Rating] = None
    weight: Optional[int] = None
    network: Optional[Network] = None
    web_channel: Optional[Network] = Field(default=None, alias="webChannel")
    externals: Optional[Externals] = None
    image: Optional[Image] = None
    summary: Optional[str] = None
    updated: Optional[int] = None
    links: Optional[Links] = Field(default=None, alias="_links")
    
    @property
    def country_code(self) -> Optional[str]:
        """Country code of the network, falling back to the web channel."""
        for channel in (self.network, self.web_channel):
            if channel is not None and channel.country is not None:
                return channel.country.code
        return None


class Candidate(TVMazeModel):
    """A ranked search result."""
    score: float = 0.0
    show: Show


class Episode(TVMazeModel):
    """A single episode of a show."""
    id: int
    url: Optional[str] = None
    name: Optional[str] = None
    season: Optional[int] = None
    number: Optional[int] = None
    type: Optional[str] = None
    airdate: Optional[str] = None
    airtime: Optional[str] = None
    airstamp: Optional[str] = None
    runtime: Optional[int] = None
    rating: Optional[Rating] = None
    image: Optional[Image] = None
    summary: Optional[str] = None
    links: Optional[Links] = Field(default=None, alias="_links")


__all__ = [
    "Candidate",
    "Country",
    "Episode",
    "Externals",
    "Image",
    "Link",
    "Links",
    "Network",
    "Rating",
    "Schedule",
    "Show",
]
