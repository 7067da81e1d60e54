"""Observability infrastructure for structured logging."""

from albumfinder.infrastructure.observability.log_messages import LogMessages
from albumfinder.infrastructure.observability.logging import (
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    "LogMessages",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
