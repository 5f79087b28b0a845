"""
Data Models Layer.

This package contains Pydantic models that define the records returned by the
music API and the application configuration.
"""

from .config import ClientConfig
from .music import (
    AddPlaylist,
    DeletePlaylist,
    Playlist,
    Playlists,
    QueryResponse,
    Song,
    SongUrl,
)

__all__ = [
    "AddPlaylist",
    "ClientConfig",
    "DeletePlaylist",
    "Playlist",
    "Playlists",
    "QueryResponse",
    "Song",
    "SongUrl",
]
