"""
Writes downloaded song audio to local storage.
"""

import asyncio
import logging
import os
from contextlib import suppress
from pathlib import Path

import aiofiles

from gmusic_cli.exceptions import StorageError

log = logging.getLogger(__name__)


class SongWriter:
    """
    Persists fetched audio bytes at a target path.

    Data is written to a ``.part`` sibling first and moved into place only
    once the write completes, so the target path never holds a truncated file.
    """

    PART_SUFFIX = ".part"

    def __init__(self, chunk_size: int = 262144):
        self.chunk_size = chunk_size

    async def exists(self, destination_path: Path) -> bool:
        return await asyncio.to_thread(os.path.isfile, destination_path)

    async def write(self, destination_path: Path, data: bytes) -> Path:
        """
        Writes ``data`` to ``destination_path``.

        Raises:
            StorageError: If the file cannot be written; the partial file is removed.
        """
        part_path = destination_path.with_name(destination_path.name + self.PART_SUFFIX)
        try:
            async with aiofiles.open(part_path, "wb") as f:
                view = memoryview(data)
                for offset in range(0, len(view), self.chunk_size):
                    await f.write(view[offset : offset + self.chunk_size])
            await asyncio.to_thread(os.replace, part_path, destination_path)
        except OSError as e:
            await self._discard(part_path)
            raise StorageError(f"Could not write '{destination_path}': {e}") from e
        except BaseException:
            await self._discard(part_path)
            raise

        log.debug(f"Wrote {len(data)} bytes to '{destination_path.name}'")
        return destination_path

    async def _discard(self, part_path: Path) -> None:
        with suppress(FileNotFoundError):
            await asyncio.to_thread(os.remove, part_path)
