"""
Pydantic records for the responses returned by the music web endpoints.

Fields accept both the wire (camelCase) names and the Python names, and
unknown fields are ignored.
"""

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class Tune(Protocol):
    """Any playable record that can be resolved to a streaming URL."""

    @property
    def id(self) -> str: ...


class Song(_Record):
    id: str
    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    genre: str = ""
    duration_millis: int = 0
    track: int = 0
    year: int = 0
    play_count: int = 0

    def __str__(self) -> str:
        if self.artist:
            return f"{self.artist} - {self.title}"
        return self.title or self.id


class Playlist(_Record):
    """One playlist, or one page of the library when paging through all tracks."""

    playlist: list[Song] = Field(default_factory=list)
    playlist_id: str = ""
    title: str = ""
    continuation_token: str | None = None

    @property
    def has_more(self) -> bool:
        return bool(self.continuation_token)


class Playlists(_Record):
    playlists: list[Playlist] = Field(default_factory=list)
    magic_playlists: list[Playlist] = Field(default_factory=list)


class AddPlaylist(_Record):
    id: str
    title: str = ""
    success: bool = True


class DeletePlaylist(_Record):
    delete_id: str


class SearchResults(_Record):
    songs: list[Song] = Field(default_factory=list)
    albums: list[dict] = Field(default_factory=list)
    artists: list[dict] = Field(default_factory=list)


class QueryResponse(_Record):
    results: SearchResults = Field(default_factory=SearchResults)


class SongUrl(_Record):
    url: str
