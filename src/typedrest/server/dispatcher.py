"""Server-side dispatch: raw request -> typed handler call -> raw response.

Each invocation walks Received -> BodyParsed -> SchemaDecoded -> HandlerInvoked ->
ResponseEncoded. Any step may divert to a fault, which the caller-supplied classifier
turns into a typed error response. Nothing raised inside an invocation escapes
:meth:`Dispatcher.dispatch`; internal errors are logged and replaced by a generic
response so exception details never reach the network caller.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from uuid import uuid4

from loguru import logger

from typedrest.codecs import Codec, object_
from typedrest.resources.method import MethodContract, Response
from typedrest.result import Err, Ok, Result
from typedrest.server.faults import (
    Fault,
    FaultClassifier,
    InvalidRequestSchema,
    NonJsonRequestBody,
    UnexpectedRuntimeError,
)

P = TypeVar("P")
Q = TypeVar("Q")
H = TypeVar("H")
B = TypeVar("B")


@dataclass(frozen=True, slots=True)
class RawRequest:
    """Transport-level request as handed over by the hosting runtime."""

    body: str | None = None
    path_parameters: Mapping[str, str] | None = None
    query_parameters: Mapping[str, str] | None = None
    headers: Mapping[str, str] | None = None
    stage: str = ""


@dataclass(frozen=True, slots=True)
class RawResponse:
    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class HandlerCall(Generic[P, Q, H, B]):
    """Decoded inputs passed to a handler, plus the deployment stage."""

    path_parameters: P
    query_parameters: Q
    header_parameters: H
    request_body: B
    stage: str = ""


HandlerOutcome = Result[Response[Any], Response[Any]]
Handler = Callable[[HandlerCall[Any, Any, Any, Any]], Awaitable[HandlerOutcome]]


def parse_body(raw_body: str | None) -> Result[Any, NonJsonRequestBody]:
    if raw_body is None or raw_body == "":
        return Ok(None)
    try:
        return Ok(json.loads(raw_body))
    except (ValueError, RecursionError) as exc:
        return Err(NonJsonRequestBody(details=str(exc)))


def encode_response(response: Response[Any], codec: Codec[Any, Any]) -> RawResponse:
    """Encode a typed response; a ``None`` wire body becomes an empty string."""

    encoded = (response.codec or codec).encode(response.body)
    if encoded is None:
        return RawResponse(status_code=int(response.status_code), body="")
    return RawResponse(
        status_code=int(response.status_code),
        body=json.dumps(encoded),
        headers={"content-type": "application/json"},
    )


class Dispatcher:
    """Binds a method contract to a handler coroutine and a fault classifier."""

    def __init__(self, contract: MethodContract, handler: Handler, classify_fault: FaultClassifier) -> None:
        self.contract = contract
        self.handler = handler
        self.classify_fault = classify_fault
        self._inputs = object_(
            {
                "request_body": contract.request_body,
                "path_parameters": contract.path_parameters,
                "query_parameters": contract.query_parameters,
                "header_parameters": contract.header_parameters,
            },
            name=f"{contract.label} inputs",
        )

    async def __call__(self, raw: RawRequest) -> RawResponse:
        return await self.dispatch(raw)

    async def dispatch(self, raw: RawRequest) -> RawResponse:
        with logger.contextualize(invocation_id=uuid4().hex):
            try:
                return await self._dispatch(raw)
            except Exception as exc:
                self._log_unexpected(exc)
                return self._last_resort()

    async def _dispatch(self, raw: RawRequest) -> RawResponse:
        parsed = parse_body(raw.body)
        if isinstance(parsed, Err):
            logger.info("Rejected non-JSON body for {}", self.contract.label)
            return self._fault(parsed.error)

        decoded = self._inputs.decode(
            {
                "request_body": parsed.value,
                "path_parameters": dict(raw.path_parameters or {}),
                "query_parameters": dict(raw.query_parameters or {}),
                "header_parameters": dict(raw.headers or {}),
            }
        )
        if isinstance(decoded, Err):
            logger.info("Rejected request for {}: {}", self.contract.label, decoded.error.messages())
            return self._fault(InvalidRequestSchema(errors=decoded.error))

        inputs = decoded.value
        call: HandlerCall[Any, Any, Any, Any] = HandlerCall(
            path_parameters=inputs["path_parameters"],
            query_parameters=inputs["query_parameters"],
            header_parameters=inputs["header_parameters"],
            request_body=inputs["request_body"],
            stage=raw.stage,
        )
        try:
            outcome = await self.handler(call)
        except Exception as exc:
            self._log_unexpected(exc)
            return self._fault(UnexpectedRuntimeError())
        return self._encode_outcome(outcome)

    def _encode_outcome(self, outcome: object) -> RawResponse:
        if isinstance(outcome, Ok) and isinstance(outcome.value, Response):
            side, response = self.contract.success, outcome.value
        elif isinstance(outcome, Err) and isinstance(outcome.error, Response):
            side, response = self.contract.error, outcome.error
        else:
            raise TypeError(f"Handler for {self.contract.label} returned {outcome!r}, expected Ok/Err of Response")
        if not side.declares(response.status_code):
            raise ValueError(f"Handler for {self.contract.label} returned undeclared status {response.status_code}")
        return encode_response(response, side.body)

    def _fault(self, fault: Fault) -> RawResponse:
        response = self.classify_fault(fault)
        if not self.contract.error.declares(response.status_code):
            logger.warning(
                "Fault {} for {} mapped to undeclared status {}",
                fault.kind,
                self.contract.label,
                response.status_code,
            )
        return encode_response(response, self.contract.error.body)

    def _last_resort(self) -> RawResponse:
        try:
            return self._fault(UnexpectedRuntimeError())
        except Exception:
            logger.exception("Fault classifier failed for {}", self.contract.label)
            return RawResponse(status_code=500, body="")

    def _log_unexpected(self, exc: Exception) -> None:
        logger.opt(exception=exc).error(
            "[PRIVACY WARNING] Caught unexpected error in {}: {}",
            self.contract.label,
            type(exc).__name__,
        )


def implement(contract: MethodContract, handler: Handler, classify_fault: FaultClassifier) -> Dispatcher:
    """Build the server-side entry point for ``contract``."""

    return Dispatcher(contract, handler, classify_fault)
