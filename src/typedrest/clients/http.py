"""HTTP client construction."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from typedrest import __version__

if TYPE_CHECKING:
    from typedrest.settings import Settings


async def create_http_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Create shared async client with predictable defaults."""

    return httpx.AsyncClient(
        transport=transport,
        http2=settings.http2,
        timeout=httpx.Timeout(
            connect=settings.connect_timeout,
            read=settings.request_timeout,
            write=10.0,
            pool=10.0,
        ),
        limits=httpx.Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=max(1, settings.max_connections // 2),
            keepalive_expiry=30.0,
        ),
        headers={
            "User-Agent": settings.user_agent or f"typedrest/{__version__}",
            "Accept": "application/json",
        },
        follow_redirects=True,
    )
