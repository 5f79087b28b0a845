"""
Network transport for the music web API, built on aiohttp.
"""

import asyncio
import logging
from http.cookies import SimpleCookie
from typing import Protocol

import aiohttp
from yarl import URL

from gmusic_cli.exceptions import InvalidStateError, TransportError

from .endpoints import LOGIN_URL, MUSIC_ROOT_URL, SERVICES_URL
from .forms import FormBuilder

log = logging.getLogger(__name__)

# Hosts that receive the login token; stream URLs may point anywhere.
AUTHORIZED_HOSTS = frozenset({URL(SERVICES_URL).host})


class Transport(Protocol):
    """Capability that performs one network exchange per call."""

    async def dispatch_get(self, url: str) -> str: ...

    async def dispatch_post(self, url: str, form: FormBuilder) -> str: ...

    async def fetch_bytes(self, url: str) -> bytes: ...

    async def close(self) -> None: ...


def parse_auth_token(body: str) -> str | None:
    """Extracts the ``Auth=`` value from a ClientLogin response body."""
    for line in body.splitlines():
        key, _, value = line.partition("=")
        if key.strip() == "Auth" and value.strip():
            return value.strip()
    return None


class AiohttpTransport:
    """
    Default transport speaking to the Google Music web endpoints.

    A successful login stores the issued auth token and the ``xt`` session
    cookie; both are attached to every later request.
    """

    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) "
        "Gecko/20100101 Firefox/121.0"
    )

    def __init__(self, timeout: float = 60):
        """
        Initializes the transport.

        Args:
            timeout: Total timeout in seconds for a single exchange.
        """
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None
        self._auth_token: str | None = None
        self._xt_cookie: str | None = None

    @property
    def authenticated(self) -> bool:
        return self._auth_token is not None

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.USER_AGENT},
                timeout=aiohttp.ClientTimeout(total=self.timeout, connect=15),
            )
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _headers(self, url: str | URL) -> dict[str, str]:
        """The auth header, sent only to the music service's own host."""
        if self._auth_token and URL(url).host in AUTHORIZED_HOSTS:
            return {"Authorization": f"GoogleLogin auth={self._auth_token}"}
        return {}

    def _service_url(self, url: str) -> URL:
        """Appends the session parameters the /music/services/ endpoints require."""
        target = URL(url)
        if self._xt_cookie and url.startswith(SERVICES_URL):
            target = target.update_query(u="0", xt=self._xt_cookie)
        return target

    async def _exchange(
        self, method: str, url: str | URL, data: bytes | None = None, **headers: str
    ) -> tuple[int, bytes, SimpleCookie]:
        session = await self._initialize_session()
        try:
            async with session.request(
                method, url, data=data, headers={**self._headers(url), **headers}
            ) as r:
                body = await r.read()
                log.debug(f"{method} {URL(url).with_query(None)} -> {r.status}")
                return r.status, body, r.cookies
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _check_status(method: str, url: str | URL, status: int) -> None:
        if not 200 <= status < 300:
            raise TransportError(f"{method} {url} returned HTTP {status}")

    async def dispatch_get(self, url: str) -> str:
        target = self._service_url(url)
        status, body, _ = await self._exchange("GET", target)
        self._check_status("GET", target, status)
        return body.decode("utf-8")

    async def dispatch_post(self, url: str, form: FormBuilder) -> str:
        if url == LOGIN_URL:
            return await self._login(form)

        target = self._service_url(url)
        status, body, _ = await self._exchange(
            "POST", target, form.encode(), **{"Content-Type": form.content_type}
        )
        self._check_status("POST", target, status)
        return body.decode("utf-8")

    async def fetch_bytes(self, url: str) -> bytes:
        status, body, _ = await self._exchange("GET", url)
        self._check_status("GET", url, status)
        return body

    async def _login(self, form: FormBuilder) -> str:
        status, body, _ = await self._exchange(
            "POST", LOGIN_URL, form.encode(), **{"Content-Type": form.content_type}
        )
        if status in (401, 403):
            raise InvalidStateError(f"Login was rejected with HTTP {status}")
        self._check_status("POST", LOGIN_URL, status)

        text = body.decode("utf-8")
        self._auth_token = parse_auth_token(text)
        if not self._auth_token:
            raise InvalidStateError("Login response did not contain an auth token")

        status, _, cookies = await self._exchange("GET", MUSIC_ROOT_URL)
        self._check_status("GET", MUSIC_ROOT_URL, status)
        xt = cookies.get("xt")
        self._xt_cookie = xt.value if xt else None
        if not self._xt_cookie:
            log.warning("Music session cookie 'xt' was not issued after login.")
        return text
