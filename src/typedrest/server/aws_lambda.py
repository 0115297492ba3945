"""Adapter between API Gateway proxy events and :class:`Dispatcher`."""

from __future__ import annotations

import asyncio
import base64
from collections.abc import Callable, Mapping
from typing import Any

from typedrest.server.dispatcher import Dispatcher, RawRequest, RawResponse

LambdaEntryPoint = Callable[[Mapping[str, Any], Any], dict[str, Any]]


def request_from_event(event: Mapping[str, Any]) -> RawRequest:
    """Read body, parameters, headers and stage from an API Gateway proxy event."""

    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8", errors="replace")
    request_context = event.get("requestContext") or {}
    return RawRequest(
        body=body,
        path_parameters=event.get("pathParameters") or {},
        query_parameters=event.get("queryStringParameters") or {},
        headers=event.get("headers") or {},
        stage=str(request_context.get("stage", "")),
    )


def result_from_response(response: RawResponse) -> dict[str, Any]:
    result: dict[str, Any] = {"statusCode": response.status_code, "body": response.body}
    if response.headers:
        result["headers"] = dict(response.headers)
    return result


def lambda_handler(dispatcher: Dispatcher) -> LambdaEntryPoint:
    """Wrap a dispatcher as a synchronous Lambda entry point."""

    def handle(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
        response = asyncio.run(dispatcher.dispatch(request_from_event(event)))
        return result_from_response(response)

    return handle
