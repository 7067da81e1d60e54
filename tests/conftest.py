"""Shared fixtures and fakes.

Hey future me - FakeCatalog lets a test hold any lookup open with hold() and
release it later, which is how the latest-wins races are staged without
sleeps or real network.
"""

import asyncio
from typing import Any

import pytest

from albumfinder.domain.entities import Album, Artist, Credential, Track
from albumfinder.domain.exceptions import AuthError
from albumfinder.domain.ports import (
    CredentialStatus,
    ICatalogClient,
    ICredentialProvider,
)


class FakeCredentialProvider(ICredentialProvider):
    """Credential provider with a fixed outcome."""

    def __init__(
        self,
        status: CredentialStatus = CredentialStatus.READY,
        failure: AuthError | None = None,
    ) -> None:
        self._status = status
        self._failure = failure

    @property
    def status(self) -> CredentialStatus:
        return self._status

    @property
    def failure(self) -> AuthError | None:
        return self._failure

    async def acquire(self) -> Credential:
        if self._failure is not None:
            raise self._failure
        return Credential(access_token="fake-token")


class FakeCatalog(ICatalogClient):
    """In-memory catalog recording every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.artists: dict[str, Any] = {}
        self.albums: dict[str, Any] = {}
        self.tracks: dict[str, Any] = {}
        self._gates: dict[tuple[str, str], asyncio.Event] = {}

    def hold(self, operation: str, key: str) -> asyncio.Event:
        """Block operation(key) until the returned event is set."""
        gate = asyncio.Event()
        self._gates[(operation, key)] = gate
        return gate

    async def _resolve(self, operation: str, key: str, table: dict[str, Any]) -> Any:
        self.calls.append((operation, key))
        gate = self._gates.get((operation, key))
        if gate is not None:
            await gate.wait()
        result = table[key]
        if isinstance(result, Exception):
            raise result
        return result

    async def search_artist(self, name: str) -> Artist:
        return await self._resolve("search_artist", name, self.artists)

    async def list_albums(self, artist_id: str) -> tuple[Album, ...]:
        return await self._resolve("list_albums", artist_id, self.albums)

    async def list_tracks(self, album_id: str) -> tuple[Track, ...]:
        return await self._resolve("list_tracks", album_id, self.tracks)


@pytest.fixture
def radiohead() -> Artist:
    return Artist(
        id="4Z8W4fKeB5YxbusRsdQVPb",
        name="Radiohead",
        genres=("alternative rock", "art rock"),
        follower_count=9_800_000,
        catalog_url="https://open.spotify.com/artist/4Z8W4fKeB5YxbusRsdQVPb",
    )


@pytest.fixture
def radiohead_albums() -> tuple[Album, ...]:
    return (
        Album(id="ok-computer", name="OK Computer", release_date="1997-05-21", total_tracks=12),
        Album(id="kid-a", name="Kid A", release_date="2000-10-02", total_tracks=10),
        Album(id="in-rainbows", name="In Rainbows", release_date="2007-10-10", total_tracks=10),
    )


@pytest.fixture
def ok_computer_tracks() -> tuple[Track, ...]:
    return (
        Track(
            id="airbag",
            name="Airbag",
            artist_names=("Radiohead",),
            duration_ms=284_000,
            preview_url="https://p.scdn.co/mp3-preview/airbag",
            track_number=1,
        ),
        Track(
            id="paranoid-android",
            name="Paranoid Android",
            artist_names=("Radiohead",),
            duration_ms=387_000,
            preview_url="https://p.scdn.co/mp3-preview/paranoid",
            track_number=2,
        ),
        Track(
            id="subterranean",
            name="Subterranean Homesick Alien",
            artist_names=("Radiohead",),
            duration_ms=267_000,
            preview_url=None,
            track_number=3,
        ),
    )


@pytest.fixture
def fake_catalog(
    radiohead: Artist,
    radiohead_albums: tuple[Album, ...],
    ok_computer_tracks: tuple[Track, ...],
) -> FakeCatalog:
    catalog = FakeCatalog()
    catalog.artists["Radiohead"] = radiohead
    catalog.albums[radiohead.id] = radiohead_albums
    catalog.tracks["ok-computer"] = ok_computer_tracks
    catalog.tracks["kid-a"] = (
        Track(id="everything", name="Everything In Its Right Place", track_number=1),
        Track(id="kid-a-track", name="Kid A", track_number=2),
    )
    return catalog


@pytest.fixture
def ready_credentials() -> FakeCredentialProvider:
    return FakeCredentialProvider()


@pytest.fixture
def pending_credentials() -> FakeCredentialProvider:
    return FakeCredentialProvider(status=CredentialStatus.PENDING)


@pytest.fixture
def failed_credentials() -> FakeCredentialProvider:
    from albumfinder.domain.exceptions import AuthUnavailableError

    return FakeCredentialProvider(
        status=CredentialStatus.FAILED, failure=AuthUnavailableError()
    )
