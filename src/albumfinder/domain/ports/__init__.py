"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from enum import Enum

from albumfinder.domain.entities import Album, Artist, Credential, Track
from albumfinder.domain.exceptions import AuthError


class CredentialStatus(str, Enum):
    """Where the one-time credential exchange stands."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class ICredentialProvider(ABC):
    """Port for obtaining the session's bearer credential."""

    @property
    @abstractmethod
    def status(self) -> CredentialStatus:
        """Current state of the exchange."""
        pass

    @property
    @abstractmethod
    def failure(self) -> AuthError | None:
        """The error the exchange ended with, if it failed."""
        pass

    @abstractmethod
    async def acquire(self) -> Credential:
        """
        Obtain the credential, running the exchange at most once.

        Returns:
            The session credential

        Raises:
            AuthError: If the exchange failed (now or earlier)
        """
        pass


class ICatalogClient(ABC):
    """Port for the three catalog lookups."""

    @abstractmethod
    async def search_artist(self, name: str) -> Artist:
        """
        Find the first artist matching name.

        Args:
            name: Non-blank artist name

        Returns:
            The first search hit

        Raises:
            CatalogNotFoundError: If nothing matched
            CatalogError: On any other failure
        """
        pass

    @abstractmethod
    async def list_albums(self, artist_id: str) -> tuple[Album, ...]:
        """
        List an artist's albums (album group only, first page).

        Args:
            artist_id: Catalog artist id

        Returns:
            Albums in upstream order; empty when the artist has none

        Raises:
            CatalogError: On failure
        """
        pass

    @abstractmethod
    async def list_tracks(self, album_id: str) -> tuple[Track, ...]:
        """
        List an album's tracks (first page).

        Args:
            album_id: Catalog album id

        Returns:
            Tracks in upstream (track number) order

        Raises:
            CatalogError: On failure
        """
        pass


class IAudioOutput(ABC):
    """Port for the single audio slot previews play through."""

    @abstractmethod
    def start(self, track_id: str, url: str) -> None:
        """Begin playing the preview at url."""
        pass

    @abstractmethod
    def stop(self, track_id: str) -> None:
        """Halt the preview of track_id if it is playing."""
        pass


__all__ = [
    "CredentialStatus",
    "IAudioOutput",
    "ICatalogClient",
    "ICredentialProvider",
]
