"""Catalog HTTP client: artist search, album listing, track listing.

Every request goes through _get_json(), which reads the bearer token from
the injected CredentialCell and maps every failure to a CatalogError. There
is no retry and no pagination - each lookup is one request for the first page.
"""

import logging
from typing import Any, cast

import httpx

from albumfinder.config.settings import CatalogSettings
from albumfinder.domain.entities import (
    PLACEHOLDER_IMAGE_URL,
    Album,
    Artist,
    CredentialCell,
    Track,
)
from albumfinder.domain.exceptions import (
    CatalogNotFoundError,
    CatalogTransportError,
    CatalogUnauthenticatedError,
    EmptyQueryError,
)
from albumfinder.domain.ports import ICatalogClient
from albumfinder.infrastructure.integrations.http_pool import HttpClientPool
from albumfinder.infrastructure.observability.log_messages import LogMessages

logger = logging.getLogger(__name__)

# Catalog maximum for one page of albums/tracks
PAGE_LIMIT = 50

# What a wrongly shaped or wrongly typed payload raises during conversion
_MALFORMED_PAYLOAD = (KeyError, TypeError, AttributeError, ValueError)


class CatalogClient(ICatalogClient):
    """HTTP client for the three catalog lookups."""

    def __init__(
        self,
        settings: CatalogSettings,
        credentials: CredentialCell,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the catalog client.

        Args:
            settings: Catalog settings (base URL, market, timeout)
            credentials: Cell holding the session credential
            http_client: Optional client; defaults to the shared pool
        """
        self.settings = settings
        self._credentials = credentials
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return await HttpClientPool.get_client(timeout=self.settings.request_timeout)

    async def _get_json(
        self, operation: str, path: str, params: dict[str, str | int]
    ) -> tuple[dict[str, Any], int]:
        """Issue an authenticated GET and decode the JSON object body.

        Args:
            operation: Lookup name, for logs
            path: Path below the API base URL
            params: Query parameters

        Returns:
            Decoded body and the HTTP status

        Raises:
            CatalogUnauthenticatedError: No credential in the cell yet
            CatalogTransportError: No response, non-2xx, or a non-object body
        """
        credential = self._credentials.get()
        if credential is None:
            raise CatalogUnauthenticatedError()

        url = f"{self.settings.api_base_url}{path}"
        client = await self._get_client()

        try:
            response = await client.get(
                url,
                params=params,
                headers={"Authorization": credential.authorization_header},
            )
        except httpx.HTTPError as e:
            logger.warning(
                LogMessages.catalog_request_failed(operation, url, None, str(e))
            )
            raise CatalogTransportError(None) from e

        if not response.is_success:
            logger.warning(
                LogMessages.catalog_request_failed(operation, url, response.status_code)
            )
            raise CatalogTransportError(response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning(
                LogMessages.catalog_request_failed(
                    operation, url, response.status_code, "malformed JSON"
                )
            )
            raise CatalogTransportError(
                response.status_code, "Catalog returned a malformed response"
            ) from e

        if not isinstance(payload, dict):
            raise CatalogTransportError(
                response.status_code, "Catalog returned a malformed response"
            )
        return cast(dict[str, Any], payload), response.status_code

    async def search_artist(self, name: str) -> Artist:
        """
        Find the first artist whose name matches.

        Args:
            name: Non-blank artist name

        Returns:
            The first search hit

        Raises:
            EmptyQueryError: If name is blank
            CatalogNotFoundError: If the result set is empty
            CatalogTransportError: On request failure
        """
        query = name.strip()
        if not query:
            raise EmptyQueryError()

        payload, status = await self._get_json(
            "search_artist",
            "/search",
            {"q": query, "type": "artist", "limit": 1},
        )
        try:
            items = (payload.get("artists") or {}).get("items") or []
            artist = _convert_artist(items[0]) if items else None
        except _MALFORMED_PAYLOAD as e:
            raise CatalogTransportError(
                status, "Catalog returned a malformed artist"
            ) from e

        if artist is None:
            raise CatalogNotFoundError(query)

        logger.debug("Artist search %r matched %s (%s)", query, artist.name, artist.id)
        return artist

    async def list_albums(self, artist_id: str) -> tuple[Album, ...]:
        """
        List an artist's albums - the album group only, no singles,
        compilations or appears-on releases.

        Args:
            artist_id: Catalog artist id

        Returns:
            Albums in upstream order, empty if the artist has none

        Raises:
            CatalogTransportError: On request failure
        """
        payload, status = await self._get_json(
            "list_albums",
            f"/artists/{artist_id}/albums",
            {
                "include_groups": "album",
                "market": self.settings.market,
                "limit": PAGE_LIMIT,
            },
        )

        albums: list[Album] = []
        seen: set[str] = set()
        try:
            for item in payload.get("items") or []:
                album = _convert_album(item)
                # ids are unique within a listing; keep the first if not
                if album.id in seen:
                    continue
                seen.add(album.id)
                albums.append(album)
        except _MALFORMED_PAYLOAD as e:
            raise CatalogTransportError(
                status, "Catalog returned a malformed album listing"
            ) from e

        logger.debug("Artist %s has %d albums", artist_id, len(albums))
        return tuple(albums)

    async def list_tracks(self, album_id: str) -> tuple[Track, ...]:
        """
        List an album's tracks.

        Hey future me - the order here IS the track number order the UI
        prints as "1.", "2.", ... Never sort this.

        Args:
            album_id: Catalog album id

        Returns:
            Tracks in upstream order

        Raises:
            CatalogTransportError: On request failure
        """
        payload, status = await self._get_json(
            "list_tracks",
            f"/albums/{album_id}/tracks",
            {"limit": PAGE_LIMIT},
        )

        try:
            tracks = tuple(_convert_track(item) for item in payload.get("items") or [])
        except _MALFORMED_PAYLOAD as e:
            raise CatalogTransportError(
                status, "Catalog returned a malformed track listing"
            ) from e

        logger.debug("Album %s has %d tracks", album_id, len(tracks))
        return tracks


# =========================================================================
# CONVERSION HELPERS
# =========================================================================


def _first_image_url(data: dict[str, Any]) -> str:
    images = data.get("images") or []
    if images and images[0].get("url"):
        return cast(str, images[0]["url"])
    return PLACEHOLDER_IMAGE_URL


def _convert_artist(data: dict[str, Any]) -> Artist:
    followers = data.get("followers") or {}
    return Artist(
        id=data["id"],
        name=data.get("name") or "Unknown Artist",
        image_url=_first_image_url(data),
        genres=tuple(data.get("genres") or ()),
        follower_count=int(followers.get("total") or 0),
        catalog_url=(data.get("external_urls") or {}).get("spotify"),
    )


def _convert_album(data: dict[str, Any]) -> Album:
    return Album(
        id=data["id"],
        name=data.get("name") or "Unknown Album",
        cover_url=_first_image_url(data),
        release_date=data.get("release_date"),
        total_tracks=int(data.get("total_tracks") or 0),
        catalog_url=(data.get("external_urls") or {}).get("spotify"),
    )


def _convert_track(data: dict[str, Any]) -> Track:
    return Track(
        id=data["id"],
        name=data.get("name") or "Unknown Track",
        artist_names=tuple(
            artist["name"] for artist in data.get("artists") or [] if artist.get("name")
        ),
        duration_ms=int(data.get("duration_ms") or 0),
        preview_url=data.get("preview_url") or None,
        track_number=data.get("track_number"),
    )
