"""In-process httpx transport that serves requests from dispatchers."""

from __future__ import annotations

from collections.abc import Iterable

import httpx
from loguru import logger

from typedrest.server.dispatcher import Dispatcher, RawRequest


class DispatchTransport(httpx.AsyncBaseTransport):
    """Route each request to the dispatcher whose verb and path template match.

    Lets a client talk to server implementations without a network, e.g. in tests
    or when composing services in one process.
    """

    def __init__(self, dispatchers: Iterable[Dispatcher], *, base_path: str = "", stage: str = "local") -> None:
        self.dispatchers = tuple(dispatchers)
        self.base_path = base_path.rstrip("/")
        self.stage = stage

    def _route(self, method: str, path: str) -> tuple[Dispatcher, dict[str, str]] | None:
        for dispatcher in self.dispatchers:
            if dispatcher.contract.http_method != method:
                continue
            parameters = dispatcher.contract.path.match(path)
            if parameters is not None:
                return dispatcher, parameters
        return None

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        # still percent-encoded; PathTemplate.match decodes each captured segment once
        path = request.url.raw_path.decode("ascii").partition("?")[0]
        if self.base_path:
            if not path.startswith(self.base_path):
                return self._not_found(request.method, path)
            path = path[len(self.base_path) :]

        routed = self._route(request.method, path)
        if routed is None:
            return self._not_found(request.method, path)
        dispatcher, parameters = routed

        content = await request.aread()
        raw = RawRequest(
            body=content.decode("utf-8", errors="replace") or None,
            path_parameters=parameters,
            query_parameters=dict(request.url.params),
            headers=dict(request.headers),
            stage=self.stage,
        )
        response = await dispatcher.dispatch(raw)
        return httpx.Response(
            response.status_code,
            content=response.body.encode("utf-8"),
            headers=response.headers,
            request=request,
        )

    def _not_found(self, method: str, path: str) -> httpx.Response:
        logger.warning("No dispatcher for {} {}", method, path)
        return httpx.Response(404, json={"error_details": f"No route for {method} {path}"})
