"""AlbumFinder - search an artist and browse their albums, tracks and previews."""

__version__ = "0.1.0"
