"""BrowseController - search pipeline and navigation state machine.

Hey future me - this is the ONLY place BrowseView changes. Flow:

    submit_search("Radiohead")
        → Searching
        → search_artist   (suspends)
        → list_albums     (suspends, needs the artist id from the step before)
        → ArtistResult | NoResults | Failed

    select_album(id) → AlbumDetail(loading) → list_tracks → AlbumDetail(tracks | error)
    go_back()        → ArtistResult with the SAME albums tuple (no re-fetch)

Overlapping calls are resolved latest-wins: each submission/selection bumps an
epoch, and a completion whose epoch is no longer current is dropped without
touching the view. Nothing here retries.
"""

import logging
from collections.abc import Callable

from albumfinder.domain.entities import Track
from albumfinder.domain.exceptions import (
    CatalogError,
    CatalogNotFoundError,
    CatalogUnauthenticatedError,
    EmptyQueryError,
    EntityNotFoundException,
    InvalidStateException,
    NotAuthenticatedError,
)
from albumfinder.domain.ports import (
    CredentialStatus,
    ICatalogClient,
    ICredentialProvider,
)
from albumfinder.domain.value_objects import (
    AlbumDetail,
    ArtistResult,
    BrowseView,
    Failed,
    FailureReason,
    Idle,
    NoResults,
    Searching,
)
from albumfinder.infrastructure.observability.log_messages import LogMessages
from albumfinder.infrastructure.observability.logging import set_correlation_id

logger = logging.getLogger(__name__)

ViewListener = Callable[[BrowseView], None]


class BrowseController:
    """Owns the current BrowseView and every transition between views.

    Usage:
        controller = BrowseController(catalog_client, credential_provider)
        controller.add_listener(render)

        await controller.submit_search("Radiohead")
        await controller.select_album(album_id)
        controller.go_back()
    """

    def __init__(
        self, catalog: ICatalogClient, credentials: ICredentialProvider
    ) -> None:
        """
        Initialize the controller in the Idle view.

        Args:
            catalog: Catalog lookups
            credentials: Provider whose status gates every search
        """
        self._catalog = catalog
        self._credentials = credentials
        self._view: BrowseView = Idle()
        self._listeners: list[ViewListener] = []
        # Latest-wins counters. Only ever incremented.
        self._search_epoch = 0
        self._selection_epoch = 0

    # =========================================================================
    # OBSERVABLE STATE
    # =========================================================================

    @property
    def view(self) -> BrowseView:
        return self._view

    @property
    def banner(self) -> str | None:
        """Persistent message when the credential exchange failed.

        No search can succeed for the rest of the session, so this is shown
        independently of the current view.
        """
        failure = self._credentials.failure
        if self._credentials.status is CredentialStatus.FAILED and failure is not None:
            return failure.message
        return None

    @property
    def visible_tracks(self) -> tuple[Track, ...]:
        """Tracks currently on screen (empty outside the album detail)."""
        if isinstance(self._view, AlbumDetail):
            return self._view.tracks
        return ()

    def add_listener(self, listener: ViewListener) -> None:
        """Call listener with every new view, right after it becomes current."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ViewListener) -> None:
        self._listeners.remove(listener)

    def _publish(self, view: BrowseView) -> None:
        self._view = view
        for listener in list(self._listeners):
            listener(view)

    # =========================================================================
    # SEARCH
    # =========================================================================

    async def submit_search(self, text: str) -> BrowseView:
        """Run the artist → albums pipeline for text.

        Args:
            text: Artist name as typed

        Returns:
            The view after the pipeline finished. If a newer search superseded
            this one, the current view is returned unchanged.

        Raises:
            EmptyQueryError: text is blank (nothing sent, view unchanged)
            NotAuthenticatedError: no credential (nothing sent, view unchanged)
        """
        query = text.strip()
        if not query:
            raise EmptyQueryError()

        status = self._credentials.status
        if status is not CredentialStatus.READY:
            raise NotAuthenticatedError(
                credential_failed=status is CredentialStatus.FAILED
            )

        self._search_epoch += 1
        epoch = self._search_epoch
        # Any album detail of the previous result is abandoned with it
        self._selection_epoch += 1

        set_correlation_id()
        logger.info("Search #%d started: %r", epoch, query)
        self._publish(Searching(query))

        try:
            artist = await self._catalog.search_artist(query)
        except CatalogError as e:
            return self._finish_search(epoch, "search_artist", _failed_view(e, query))

        if epoch != self._search_epoch:
            # Superseded already; don't spend a request on albums nobody will see
            return self._discard("search_artist", epoch, self._search_epoch)

        try:
            albums = await self._catalog.list_albums(artist.id)
        except CatalogError as e:
            return self._finish_search(epoch, "list_albums", _failed_view(e, query))

        view: BrowseView
        if albums:
            view = ArtistResult(artist=artist, albums=albums)
        else:
            view = NoResults(artist=artist)
        return self._finish_search(epoch, "list_albums", view)

    def _finish_search(self, epoch: int, stage: str, view: BrowseView) -> BrowseView:
        if epoch != self._search_epoch:
            return self._discard(stage, epoch, self._search_epoch)

        self._publish(view)
        logger.info("Search #%d finished: %s", epoch, type(view).__name__)
        return view

    def _discard(self, stage: str, epoch: int, current: int) -> BrowseView:
        logger.debug(LogMessages.stale_result_discarded(stage, epoch, current))
        return self._view

    # =========================================================================
    # ALBUM DETAIL
    # =========================================================================

    async def select_album(self, album_id: str) -> BrowseView:
        """Open one album of the listing on screen and load its tracks.

        Args:
            album_id: Id of an album in the current listing

        Returns:
            The album detail with tracks (or with error set), or the current
            view if a newer selection/navigation superseded this one

        Raises:
            InvalidStateException: No album listing is on screen
            EntityNotFoundException: album_id is not in the listing
        """
        current = self._view
        if not isinstance(current, (ArtistResult, AlbumDetail)):
            raise InvalidStateException(
                f"Cannot select an album from {type(current).__name__}"
            )

        album = next((a for a in current.albums if a.id == album_id), None)
        if album is None:
            raise EntityNotFoundException("Album", album_id)

        self._selection_epoch += 1
        epoch = self._selection_epoch
        artist, albums = current.artist, current.albums

        self._publish(
            AlbumDetail(artist=artist, albums=albums, album=album, loading=True)
        )

        tracks: tuple[Track, ...] = ()
        failure: CatalogError | None = None
        try:
            tracks = await self._catalog.list_tracks(album.id)
        except CatalogError as e:
            failure = e

        if epoch != self._selection_epoch:
            return self._discard("list_tracks", epoch, self._selection_epoch)

        detail: AlbumDetail
        if failure is not None:
            logger.warning(
                "Loading tracks of album %s failed: %s", album.id, failure.message
            )
            detail = AlbumDetail(
                artist=artist,
                albums=albums,
                album=album,
                error=_track_error_message(failure),
            )
        else:
            detail = AlbumDetail(artist=artist, albums=albums, album=album, tracks=tracks)

        self._publish(detail)
        return detail

    def go_back(self) -> BrowseView:
        """Return from the album detail to the album listing it was opened from.

        A no-op anywhere else.
        """
        current = self._view
        if not isinstance(current, AlbumDetail):
            return current

        # An in-flight track fetch must not reopen the detail
        self._selection_epoch += 1
        view = ArtistResult(artist=current.artist, albums=current.albums)
        self._publish(view)
        return view


def _failed_view(error: CatalogError, query: str) -> Failed:
    if isinstance(error, CatalogNotFoundError):
        return Failed(FailureReason.ARTIST_NOT_FOUND, error.message, query)
    if isinstance(error, CatalogUnauthenticatedError):
        return Failed(FailureReason.UNAUTHENTICATED, error.message, query)
    return Failed(
        FailureReason.TRANSPORT,
        f"{error.message}. Please try again later.",
        query,
    )


def _track_error_message(error: CatalogError) -> str:
    if isinstance(error, CatalogUnauthenticatedError):
        return error.message
    return "Could not load the album's tracks. Please try again."
