"""Configuration module for AlbumFinder."""

from .settings import CatalogSettings, ObservabilitySettings, Settings, get_settings

__all__ = ["CatalogSettings", "ObservabilitySettings", "Settings", "get_settings"]
