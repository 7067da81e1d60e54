"""Audio output adapters."""

from albumfinder.infrastructure.audio.logging_output import LoggingAudioOutput

__all__ = ["LoggingAudioOutput"]
