"""Application services."""

from albumfinder.application.services.browse_controller import (
    BrowseController,
    ViewListener,
)
from albumfinder.application.services.preview_player import PreviewPlayer

__all__ = ["BrowseController", "PreviewPlayer", "ViewListener"]
