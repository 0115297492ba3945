"""Tests for HTTP client construction."""

import httpx
import pytest

from typedrest import __version__
from typedrest.clients import create_http_client
from typedrest.settings import Settings


@pytest.mark.asyncio
async def test_create_http_client() -> None:
    settings = Settings()
    client = await create_http_client(settings)
    assert isinstance(client, httpx.AsyncClient)
    assert client.headers["user-agent"] == f"typedrest/{__version__}"
    assert client.headers["accept"] == "application/json"
    assert client.follow_redirects is True
    await client.aclose()


@pytest.mark.asyncio
async def test_create_http_client_uses_settings() -> None:
    settings = Settings(request_timeout=12, connect_timeout=2, user_agent="music-client/1.0", http2=False)
    client = await create_http_client(settings)
    assert client.timeout.read == 12
    assert client.timeout.connect == 2
    assert client.headers["user-agent"] == "music-client/1.0"
    await client.aclose()


@pytest.mark.asyncio
async def test_create_http_client_with_transport() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))
    client = await create_http_client(Settings(http2=False), transport=transport)
    response = await client.get("https://api.music.test/ping")
    assert response.json() == {"ok": True}
    await client.aclose()
