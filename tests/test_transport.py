import asyncio
import json

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import test_utils, web
from yarl import URL

from gmusic_cli.api import endpoints
from gmusic_cli.api import transport as transport_module
from gmusic_cli.api.forms import FormBuilder
from gmusic_cli.api.transport import AiohttpTransport, parse_auth_token
from gmusic_cli.exceptions import InvalidStateError, TransportError


def test_parse_auth_token_reads_auth_line():
    body = "SID=abc\nLSID=def\nAuth=DQAAAGgA\n"

    assert parse_auth_token(body) == "DQAAAGgA"


@pytest.mark.parametrize(
    "body", ["", "SID=abc\n", "Auth=\n", "Error=BadAuthentication"]
)
def test_parse_auth_token_missing(body):
    assert parse_auth_token(body) is None


def test_other_urls_are_left_untouched():
    transport = AiohttpTransport()
    transport._xt_cookie = "xt-value"
    song_url = endpoints.SONG_URL_TEMPLATE.format(song_id="s1")

    assert transport._service_url(song_url) == URL(song_url)


async def login_handler(request: web.Request) -> web.Response:
    form = await request.post()
    request.app["seen"].append(("login", dict(request.headers)))
    if form["Passwd"] == "wrong":
        return web.Response(status=403, text="Error=BadAuthentication")
    if form["Passwd"] == "no-token":
        return web.Response(text="SID=abc\n")
    if form["Passwd"] == "broken":
        return web.Response(status=500)
    return web.Response(text="SID=abc\nAuth=token-123\n")


async def listen_handler(request: web.Request) -> web.Response:
    response = web.Response(text="<html></html>")
    response.set_cookie("xt", "xt-cookie")
    return response


async def search_handler(request: web.Request) -> web.Response:
    form = await request.post()
    request.app["seen"].append(("search", dict(request.headers)))
    return web.json_response(
        {
            "xt": request.query.get("xt"),
            "u": request.query.get("u"),
            "json": form["json"],
            "authorization": request.headers.get("Authorization"),
        }
    )


async def stream_handler(request: web.Request) -> web.Response:
    request.app["seen"].append(("stream", dict(request.headers)))
    return web.Response(body=b"ID3audio")


async def error_handler(request: web.Request) -> web.Response:
    return web.Response(status=500, text="boom")


async def slow_handler(request: web.Request) -> web.Response:
    await asyncio.sleep(2)
    return web.Response(text="late")


@pytest_asyncio.fixture
async def server(monkeypatch):
    app = web.Application()
    app["seen"] = []
    app.router.add_post("/accounts/ClientLogin", login_handler)
    app.router.add_get("/music/listen", listen_handler)
    app.router.add_post("/music/services/search", search_handler)
    app.router.add_get("/stream/s1", stream_handler)
    app.router.add_get("/error", error_handler)
    app.router.add_get("/slow", slow_handler)

    test_server = test_utils.TestServer(app)
    await test_server.start_server()
    for name, path in (
        ("LOGIN_URL", "/accounts/ClientLogin"),
        ("MUSIC_ROOT_URL", "/music/listen"),
        ("SERVICES_URL", "/music/services/"),
    ):
        monkeypatch.setattr(transport_module, name, str(test_server.make_url(path)))
    yield test_server
    await test_server.close()


@pytest_asyncio.fixture
async def transport():
    transport = AiohttpTransport(timeout=0.5)
    yield transport
    await transport.close()


def login_form(password: str) -> FormBuilder:
    return FormBuilder.from_fields(
        {"service": "sj", "Email": "user@example.com", "Passwd": password}
    )


@pytest.mark.asyncio
async def test_login_stores_token_and_session_cookie(server, transport):
    body = await transport.dispatch_post(
        transport_module.LOGIN_URL, login_form("secret")
    )

    assert "Auth=token-123" in body
    assert transport.authenticated
    assert transport._xt_cookie == "xt-cookie"


@pytest.mark.asyncio
async def test_login_rejection_raises_invalid_state(server, transport):
    with pytest.raises(InvalidStateError):
        await transport.dispatch_post(transport_module.LOGIN_URL, login_form("wrong"))

    assert not transport.authenticated


@pytest.mark.asyncio
async def test_login_without_auth_token_raises_invalid_state(server, transport):
    with pytest.raises(InvalidStateError):
        await transport.dispatch_post(
            transport_module.LOGIN_URL, login_form("no-token")
        )


@pytest.mark.asyncio
async def test_login_server_error_raises_transport_error(server, transport):
    with pytest.raises(TransportError) as exc_info:
        await transport.dispatch_post(transport_module.LOGIN_URL, login_form("broken"))

    assert not isinstance(exc_info.value, InvalidStateError)


@pytest.mark.asyncio
async def test_service_requests_carry_session_cookie_and_auth(
    server, transport, monkeypatch
):
    monkeypatch.setattr(transport_module, "AUTHORIZED_HOSTS", frozenset({server.host}))
    await transport.dispatch_post(transport_module.LOGIN_URL, login_form("secret"))

    body = await transport.dispatch_post(
        transport_module.SERVICES_URL + "search", FormBuilder.json_form({"q": "abc"})
    )

    assert json.loads(body) == {
        "xt": "xt-cookie",
        "u": "0",
        "json": '{"q":"abc"}',
        "authorization": "GoogleLogin auth=token-123",
    }


@pytest.mark.asyncio
async def test_stream_fetch_does_not_leak_auth_token(server, transport):
    await transport.dispatch_post(transport_module.LOGIN_URL, login_form("secret"))

    data = await transport.fetch_bytes(str(server.make_url("/stream/s1")))

    assert data == b"ID3audio"
    stream_headers = [h for name, h in server.app["seen"] if name == "stream"]
    assert "Authorization" not in stream_headers[0]


@pytest.mark.asyncio
async def test_non_2xx_status_raises_transport_error(server, transport):
    with pytest.raises(TransportError, match="HTTP 500"):
        await transport.dispatch_get(str(server.make_url("/error")))


@pytest.mark.asyncio
async def test_timeout_is_wrapped_in_transport_error(server, transport):
    with pytest.raises(TransportError) as exc_info:
        await transport.fetch_bytes(str(server.make_url("/slow")))

    assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)


@pytest.mark.asyncio
async def test_connection_failure_is_wrapped_in_transport_error(server, transport):
    url = str(server.make_url("/stream/s1"))
    await server.close()

    with pytest.raises(TransportError) as exc_info:
        await transport.fetch_bytes(url)

    assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)
