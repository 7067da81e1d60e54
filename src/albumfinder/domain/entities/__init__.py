"""Catalog entities and the process-wide credential cell."""

from dataclasses import dataclass, field

from albumfinder.domain.exceptions import InvalidStateException

# Shown whenever the catalog has no artwork for an artist or album.
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300"


@dataclass(frozen=True)
class Credential:
    """Bearer token for catalog requests.

    Hey future me - expires_in is kept only so it shows up in logs. Nothing
    refreshes the token; a long session will eventually start getting 401s.
    """

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None

    @property
    def authorization_header(self) -> str:
        """Value for the Authorization header."""
        return f"Bearer {self.access_token}"

    def __repr__(self) -> str:
        # Never leak the token into logs or tracebacks
        return f"Credential(token_type={self.token_type!r}, expires_in={self.expires_in!r})"


class CredentialCell:
    """Set-once holder for the session credential.

    The provider writes it exactly once; every reader treats the value as
    immutable. Tests build a pre-filled cell instead of running an exchange.
    """

    def __init__(self, credential: Credential | None = None) -> None:
        self._credential = credential

    @property
    def is_set(self) -> bool:
        return self._credential is not None

    def get(self) -> Credential | None:
        return self._credential

    def set(self, credential: Credential) -> None:
        """Store the credential.

        Raises:
            InvalidStateException: If a credential was already stored
        """
        if self._credential is not None:
            raise InvalidStateException("Credential has already been set")
        self._credential = credential


@dataclass(frozen=True)
class Artist:
    """First hit of an artist search."""

    id: str
    name: str
    image_url: str = PLACEHOLDER_IMAGE_URL
    genres: tuple[str, ...] = ()
    follower_count: int = 0
    catalog_url: str | None = None


@dataclass(frozen=True)
class Album:
    """One entry of an artist's album listing.

    release_date is passed through as the catalog sends it ("1997-05-21",
    "1997-05" or "1997"); formatting is the presentation layer's job.
    """

    id: str
    name: str
    cover_url: str = PLACEHOLDER_IMAGE_URL
    release_date: str | None = None
    total_tracks: int = 0
    catalog_url: str | None = None


@dataclass(frozen=True)
class Track:
    """One track of an album listing, in upstream order."""

    id: str
    name: str
    artist_names: tuple[str, ...] = field(default_factory=tuple)
    duration_ms: int = 0
    preview_url: str | None = None
    track_number: int | None = None

    @property
    def has_preview(self) -> bool:
        return bool(self.preview_url)


__all__ = [
    "PLACEHOLDER_IMAGE_URL",
    "Album",
    "Artist",
    "Credential",
    "CredentialCell",
    "Track",
]
