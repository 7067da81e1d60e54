"""PreviewPlayer - at most one track preview playing at a time."""

import logging

from albumfinder.application.services.browse_controller import BrowseController
from albumfinder.domain.ports import IAudioOutput
from albumfinder.domain.value_objects import AlbumDetail, BrowseView, PlaybackState

logger = logging.getLogger(__name__)


class PreviewPlayer:
    """Single-slot preview player bound to a BrowseController.

    Hey future me - the playing id must always be one of the tracks on screen.
    That's why the player listens to the controller: the moment the view
    stops showing the playing track (back, new search, another album), the
    audio is halted and the state goes back to silent.
    """

    def __init__(self, controller: BrowseController, audio: IAudioOutput) -> None:
        """
        Initialize the player and subscribe to view changes.

        Args:
            controller: Source of the visible track list
            audio: Output the previews are played through
        """
        self._controller = controller
        self._audio = audio
        self._state = PlaybackState()
        controller.add_listener(self._on_view_changed)

    @property
    def state(self) -> PlaybackState:
        return self._state

    def play(self, track_id: str) -> bool:
        """Start the preview of a visible track, stopping any other first.

        Tracks without a preview (and ids not on screen) are ignored - the
        presentation layer disables their play control instead.

        Args:
            track_id: Id of a track in the visible track list

        Returns:
            True if track_id is now playing
        """
        track = next(
            (t for t in self._controller.visible_tracks if t.id == track_id), None
        )
        if track is None:
            logger.debug("Ignoring play for track %s: not on screen", track_id)
            return False
        if not track.preview_url:
            logger.debug("Ignoring play for track %s: no preview", track_id)
            return False

        playing = self._state.track_id
        if playing == track.id:
            return True
        if playing is not None:
            self._audio.stop(playing)

        self._audio.start(track.id, track.preview_url)
        self._state = PlaybackState(track_id=track.id)
        logger.info("Playing preview of %r", track.name)
        return True

    def stop_all(self) -> None:
        """Halt any active preview and clear the playback state."""
        playing = self._state.track_id
        if playing is None:
            return
        self._audio.stop(playing)
        self._state = PlaybackState()
        logger.debug("Stopped preview of track %s", playing)

    def _on_view_changed(self, view: BrowseView) -> None:
        playing = self._state.track_id
        if playing is None:
            return
        if isinstance(view, AlbumDetail) and any(t.id == playing for t in view.tracks):
            return
        self.stop_all()
