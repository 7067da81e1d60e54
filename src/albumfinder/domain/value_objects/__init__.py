"""Value objects for the browse state machine."""

from albumfinder.domain.value_objects.browse_view import (
    AlbumDetail,
    ArtistResult,
    BrowseView,
    Failed,
    FailureReason,
    Idle,
    NoResults,
    PlaybackState,
    Searching,
)

__all__ = [
    "AlbumDetail",
    "ArtistResult",
    "BrowseView",
    "Failed",
    "FailureReason",
    "Idle",
    "NoResults",
    "PlaybackState",
    "Searching",
]
