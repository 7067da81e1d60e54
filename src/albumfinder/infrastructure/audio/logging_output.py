"""Default audio output: tracks the active preview and logs start/stop.

The presentation layer owns the real audio element; it injects its own
IAudioOutput. This adapter is what a headless session uses.
"""

import logging

from albumfinder.domain.ports import IAudioOutput

logger = logging.getLogger(__name__)


class LoggingAudioOutput(IAudioOutput):
    """Audio output without a sound device."""

    def __init__(self) -> None:
        self.active: tuple[str, str] | None = None

    def start(self, track_id: str, url: str) -> None:
        self.active = (track_id, url)
        logger.info("Preview started: %s (%s)", track_id, url)

    def stop(self, track_id: str) -> None:
        if self.active is not None and self.active[0] == track_id:
            self.active = None
            logger.info("Preview stopped: %s", track_id)
