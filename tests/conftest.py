"""Shared fixtures: a fake Spotify Connect device served over HTTP."""

import asyncio
import socket
import threading
from typing import Any, Iterator, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from spotify_connect_pair.connect.form import decode_form

ZC_PATH = "/zc"

DEFAULT_INFO = {
    "status": 101,
    "statusString": "OK",
    "spotifyError": 0,
    "version": "2.9.0",
    "deviceID": "8f3bd2e1c4a76d05a9e0b1f2c3d4e5f6a7b8c9d0",
    "remoteName": "Kitchen",
    "publicKey": "c2VydmVyLXB1YmxpYy1rZXk=",
    "deviceType": "SPEAKER",
    "activeUser": "",
    "tokenType": "accesstoken",
    "clientId": "79ebcb219e8e4e123b2b1d1e1b9c0a0e",
    "scope": "streaming",
}


class FakeDevice:
    """Zeroconf endpoint of a Spotify Connect device."""

    def __init__(self) -> None:
        self.info: Any = dict(DEFAULT_INFO)
        self.add_user_response: Any = {"status": 101, "statusString": "OK", "spotifyError": 0}
        self.raw_body: Optional[str] = None  # Replaces the JSON body when set
        self.status = 200
        self.get_queries: list[dict[str, str]] = []
        self.posts: list[dict[str, Any]] = []

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get(ZC_PATH, self._handle_get)
        app.router.add_post(ZC_PATH, self._handle_post)
        return app

    def _respond(self, data: Any) -> web.Response:
        if self.raw_body is not None:
            return web.Response(text=self.raw_body, status=self.status)
        return web.json_response(data, status=self.status)

    async def _handle_get(self, request: web.Request) -> web.Response:
        self.get_queries.append(dict(request.query))
        if request.query.get("action") != "getInfo":
            return web.json_response({"statusString": "ERROR-INVALID-ACTION"}, status=400)
        return self._respond(self.info)

    async def _handle_post(self, request: web.Request) -> web.Response:
        body = await request.text()
        self.posts.append(
            {
                "content_type": request.headers.get("Content-Type", ""),
                "body": body,
                "pairs": decode_form(body),
            }
        )
        return self._respond(self.add_user_response)


@pytest.fixture
def fake_device() -> FakeDevice:
    """Fake device state."""
    return FakeDevice()


@pytest_asyncio.fixture
async def device_url(fake_device: FakeDevice) -> Any:
    """Serve the fake device on the test event loop and yield its URL."""
    server = TestServer(fake_device.make_app(), host="127.0.0.1")
    await server.start_server()
    try:
        yield str(server.make_url(ZC_PATH))
    finally:
        await server.close()


@pytest.fixture
def threaded_device_url(fake_device: FakeDevice) -> Iterator[str]:
    """Serve the fake device from a background thread for the blocking API."""
    loop = asyncio.new_event_loop()
    runner = web.AppRunner(fake_device.make_app())
    loop.run_until_complete(runner.setup())
    site = web.TCPSite(runner, "127.0.0.1", 0)
    loop.run_until_complete(site.start())
    port = runner.addresses[0][1]

    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{port}{ZC_PATH}"
    finally:
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.run_until_complete(runner.cleanup())
        loop.close()


@pytest.fixture
def unreachable_url() -> str:
    """URL of a local port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return f"http://127.0.0.1:{port}{ZC_PATH}"
