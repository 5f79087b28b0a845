"""
Async client for the Google Music web API: playlists, library, search and downloads.
"""

import logging
from collections.abc import AsyncGenerator, Iterable
from pathlib import Path
from typing import Any

from yarl import URL

from gmusic_cli.exceptions import (
    InvalidArgumentError,
    InvalidCredentialsError,
    InvalidStateError,
    UploadNotSupportedError,
    URIFormatError,
)
from gmusic_cli.media.downloader import SongWriter
from gmusic_cli.models.music import (
    AddPlaylist,
    DeletePlaylist,
    Playlist,
    Playlists,
    QueryResponse,
    Song,
    SongUrl,
    Tune,
)

from . import endpoints
from .deserializer import Deserializer, JsonDeserializer
from .forms import FormBuilder
from .transport import AiohttpTransport, Transport

log = logging.getLogger(__name__)


class MusicAPIClient:
    """
    Client for the music web API.

    The transport, deserializer and storage directory are fixed at
    construction. Every operation is a single sequential chain of awaits and
    nothing is retried; errors reach the caller untouched.
    """

    SERVICE = "sj"
    FILE_EXTENSION = ".mp3"

    def __init__(
        self,
        transport: Transport | None = None,
        deserializer: Deserializer | None = None,
        storage_directory: Path | str = ".",
    ):
        """
        Initializes the API client.

        Args:
            transport: Performs the network exchanges. Defaults to AiohttpTransport.
            deserializer: Parses response text into records. Defaults to
                JsonDeserializer.
            storage_directory: Directory holding downloaded songs.
        """
        self._transport: Transport = transport or AiohttpTransport()
        self._deserializer: Deserializer = deserializer or JsonDeserializer()
        self._storage_directory = Path(storage_directory)
        self._writer = SongWriter()

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def deserializer(self) -> Deserializer:
        return self._deserializer

    @property
    def storage_directory(self) -> Path:
        return self._storage_directory

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "MusicAPIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _post_json(self, url: str, payload: dict[str, Any]) -> str:
        return await self._transport.dispatch_post(url, FormBuilder.json_form(payload))

    # Public API Methods
    async def login(self, email: str, password: str) -> None:
        """
        Authenticates against the login endpoint.

        Raises:
            InvalidCredentialsError: If the remote rejects the credentials.
        """
        log.info(f"Authenticating as: {email}")
        form = FormBuilder.from_fields(
            {"service": self.SERVICE, "Email": email, "Passwd": password}
        )
        try:
            await self._transport.dispatch_post(endpoints.LOGIN_URL, form)
        except InvalidStateError as e:
            raise InvalidCredentialsError(email, password) from e
        log.debug(f"Authenticated as: {email}")

    async def iter_song_pages(self) -> AsyncGenerator[Playlist, None]:
        """
        Yields each page of the song library in server order.

        The continuation token of every page is sent back verbatim to request
        the next one; an empty or missing token ends the listing.
        """
        token = ""
        page_number = 0
        while True:
            response = await self._post_json(
                endpoints.LOAD_ALL_TRACKS_URL, {"continuationToken": token}
            )
            page = self._deserializer.deserialize(response, Playlist)
            page_number += 1
            log.debug(f"Loaded library page {page_number} ({len(page.playlist)} songs)")

            yield page

            if not page.continuation_token:
                break
            token = page.continuation_token

    async def get_all_songs(self) -> list[Song]:
        songs: list[Song] = []
        async for page in self.iter_song_pages():
            songs.extend(page.playlist)
        log.info(f"Loaded {len(songs)} songs from the library")
        return songs

    async def get_all_playlists(self) -> Playlists:
        response = await self._post_json(endpoints.LOAD_PLAYLIST_URL, {})
        return self._deserializer.deserialize(response, Playlists)

    async def get_playlist(self, playlist_id: str) -> Playlist:
        response = await self._post_json(
            endpoints.LOAD_PLAYLIST_URL, {"id": playlist_id}
        )
        return self._deserializer.deserialize(response, Playlist)

    async def add_playlist(self, name: str) -> AddPlaylist:
        response = await self._post_json(endpoints.ADD_PLAYLIST_URL, {"title": name})
        result = self._deserializer.deserialize(response, AddPlaylist)
        log.info(f"Created playlist '{name}' ({result.id})")
        return result

    async def delete_playlist(self, playlist_id: str) -> DeletePlaylist:
        response = await self._post_json(
            endpoints.DELETE_PLAYLIST_URL, {"id": playlist_id}
        )
        result = self._deserializer.deserialize(response, DeletePlaylist)
        log.info(f"Deleted playlist {result.delete_id}")
        return result

    async def search(self, query: str | None) -> QueryResponse:
        """
        Searches the catalogue.

        Raises:
            InvalidArgumentError: If ``query`` is None or empty.
        """
        if not query:
            raise InvalidArgumentError("query is null or empty")
        response = await self._post_json(endpoints.SEARCH_URL, {"q": query})
        return self._deserializer.deserialize(response, QueryResponse)

    async def get_tune_url(self, tune: Tune) -> URL:
        """
        Resolves the streaming URL of any playable record.

        Raises:
            URIFormatError: If the returned value is not an absolute URL.
        """
        response = await self._transport.dispatch_get(
            endpoints.SONG_URL_TEMPLATE.format(song_id=tune.id)
        )
        raw_url = self._deserializer.deserialize(response, SongUrl).url
        try:
            url = URL(raw_url)
        except (TypeError, ValueError) as e:
            raise URIFormatError(
                f"Malformed stream URL for {tune.id}: {raw_url!r}"
            ) from e
        if not url.is_absolute() or not url.host:
            raise URIFormatError(f"Malformed stream URL for {tune.id}: {raw_url!r}")
        return url

    async def get_song_url(self, song: Song) -> URL:
        return await self.get_tune_url(song)

    def song_path(self, tune: Tune) -> Path:
        """
        The local file a tune is downloaded to.

        Raises:
            InvalidArgumentError: If the id is not a single plain file name.
        """
        song_id = tune.id
        if song_id in ("", ".", "..") or Path(song_id).name != song_id:
            raise InvalidArgumentError(
                f"Song id is not a valid file name: {song_id!r}"
            )
        return self._storage_directory / f"{song_id}{self.FILE_EXTENSION}"

    async def download_tune(self, tune: Tune) -> Path:
        """
        Downloads a tune unless its file already exists.

        An existing file is returned as-is, without any network call.

        Raises:
            InvalidArgumentError: If the song id is not a plain file name.
            StorageError: If the audio cannot be written to the storage directory.
        """
        path = self.song_path(tune)
        if await self._writer.exists(path):
            log.debug(f"Skipping {tune.id}: '{path.name}' already exists")
            return path

        url = await self.get_tune_url(tune)
        data = await self._transport.fetch_bytes(str(url))
        return await self._writer.write(path, data)

    async def download_song(self, song: Song) -> Path:
        return await self.download_tune(song)

    async def download_songs(self, songs: Iterable[Song]) -> list[Path]:
        """
        Downloads songs one after another, in order.

        The first failure stops the batch; files already written are kept.
        """
        paths = []
        for song in songs:
            paths.append(await self.download_song(song))
        log.info(f"Downloaded {len(paths)} songs to '{self._storage_directory}'")
        return paths

    async def upload_song(self, path: Path) -> None:
        raise UploadNotSupportedError("Uploading songs is not supported.")
