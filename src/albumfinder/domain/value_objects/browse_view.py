"""BrowseView - the tagged state the presentation layer renders.

Exactly one variant is active at any time. Every variant is frozen, so a
view handed to a listener can never change underneath it; transitions
always build a new object.

    Idle ──search──► Searching ──► ArtistResult ──select──► AlbumDetail
                         │    └──► NoResults                  │
                         └───────► Failed         ◄──back─────┘
"""

from dataclasses import dataclass
from enum import Enum

from albumfinder.domain.entities import Album, Artist, Track


class FailureReason(str, Enum):
    """Why a search ended in Failed."""

    ARTIST_NOT_FOUND = "artist_not_found"
    TRANSPORT = "transport"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class Idle:
    """Nothing searched yet."""


@dataclass(frozen=True)
class Searching:
    """Search pipeline in flight for query."""

    query: str


@dataclass(frozen=True)
class ArtistResult:
    """Artist found with at least one album."""

    artist: Artist
    albums: tuple[Album, ...]


@dataclass(frozen=True)
class AlbumDetail:
    """One album opened from an ArtistResult.

    Hey future me - artist and albums ride along so go_back() can restore the
    exact same listing object without another request. tracks stays empty
    while loading, and also when loading failed (error is set then).
    """

    artist: Artist
    albums: tuple[Album, ...]
    album: Album
    tracks: tuple[Track, ...] = ()
    loading: bool = False
    error: str | None = None


@dataclass(frozen=True)
class NoResults:
    """Artist found, but the album listing came back empty."""

    artist: Artist


@dataclass(frozen=True)
class Failed:
    """A search ended in an error. Not terminal - a new search leaves it."""

    reason: FailureReason
    message: str
    query: str | None = None


BrowseView = Idle | Searching | ArtistResult | AlbumDetail | NoResults | Failed


@dataclass(frozen=True)
class PlaybackState:
    """Which track preview is playing; None means silent."""

    track_id: str | None = None

    @property
    def is_playing(self) -> bool:
        return self.track_id is not None
