"""Shared fixtures: a recording transport standing in for the network."""

import json
from collections import defaultdict

import pytest

from gmusic_cli.api.client import MusicAPIClient
from gmusic_cli.api.deserializer import JsonDeserializer


class FakeTransport:
    """
    Records every exchange and replays queued responses per URL.

    A queued response that is an exception instance is raised instead.
    """

    def __init__(self):
        self.calls: list[tuple[str, str, dict | None]] = []
        self._responses: dict[str, list] = defaultdict(list)
        self.closed = False

    def queue(self, url: str, *responses) -> None:
        for response in responses:
            if isinstance(response, dict):
                response = json.dumps(response)
            self._responses[url].append(response)

    def _next(self, url: str):
        if not self._responses[url]:
            raise AssertionError(f"Unexpected request to {url}")
        response = self._responses[url].pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def requests_to(self, url: str) -> list[tuple[str, str, dict | None]]:
        return [call for call in self.calls if call[1] == url]

    async def dispatch_get(self, url: str) -> str:
        self.calls.append(("GET", url, None))
        return self._next(url)

    async def dispatch_post(self, url: str, form) -> str:
        assert form.closed
        self.calls.append(("POST", url, form.fields))
        return self._next(url)

    async def fetch_bytes(self, url: str) -> bytes:
        self.calls.append(("FETCH", url, None))
        return self._next(url)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport, tmp_path):
    return MusicAPIClient(transport, JsonDeserializer(), tmp_path)
