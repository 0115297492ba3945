"""Client-side call execution: typed call -> HTTP request -> classified, decoded result."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

import httpx
from loguru import logger

from typedrest.codecs import ErrorTree
from typedrest.resources.api import ApiDefinition
from typedrest.resources.method import MethodContract
from typedrest.resources.path import PathSubstitution
from typedrest.result import Err, Ok, Result
from typedrest.settings import Settings

T = TypeVar("T")

Side = Literal["success", "error"]
ClassificationFailureKind = Literal[
    "unexpected_status_code",
    "could_not_decode_success_response",
    "could_not_decode_error_response",
]
TransportFailureKind = Literal["request_could_not_be_made", "no_response_received"]

# raised before anything could be sent
_UNSENDABLE = (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)


@dataclass(frozen=True, slots=True)
class ClientCall:
    """Typed outbound call against one of the API's servers."""

    server: str
    path_parameters: Any = field(default_factory=dict)
    query_parameters: Any = field(default_factory=dict)
    header_parameters: Any = field(default_factory=dict)
    body: Any = None
    auth: httpx.Auth | tuple[str, str] | None = None


@dataclass(frozen=True, slots=True)
class Decoded(Generic[T]):
    """Response whose status code was declared and whose body decoded."""

    outcome: Side
    status_code: int
    value: T


@dataclass(frozen=True, slots=True)
class ClassificationFailed:
    """Response arrived but did not match what the contract declares."""

    kind: ClassificationFailureKind
    status_code: int
    response: Any
    side: Side
    errors: ErrorTree | None = None


@dataclass(frozen=True, slots=True)
class TransportFailed:
    """No usable response: the request was never sent, or nothing came back."""

    kind: TransportFailureKind
    request: httpx.Request | None
    detail: str


CallFailure = Decoded[Any] | ClassificationFailed | TransportFailed
CallResult = Result[Decoded[Any], CallFailure]


def _drop_none(values: Mapping[str, Any] | None) -> dict[str, Any]:
    return {key: value for key, value in (values or {}).items() if value is not None}


def _response_payload(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (ValueError, RecursionError):
        return response.text


class RESTClient:
    """Executes method contracts of one API over a shared ``httpx.AsyncClient``.

    Every expected outcome, including transport failures and undeclared responses,
    comes back as a value. Only exceptions that are not httpx transport errors
    propagate to the caller.
    """

    def __init__(self, api: ApiDefinition, http: httpx.AsyncClient, settings: Settings | None = None) -> None:
        self.api = api
        self.http = http
        self.settings = settings or Settings()

    def build_request(self, contract: MethodContract, call: ClientCall) -> httpx.Request:
        url = self.api.base_url(call.server).rstrip("/") + contract.path.render(
            PathSubstitution(contract.path_parameters, call.path_parameters)
        )
        body = contract.request_body.encode(call.body)
        return self.http.build_request(
            str(contract.http_method),
            url,
            params=_drop_none(contract.query_parameters.encode(call.query_parameters)),
            headers=_drop_none(contract.header_parameters.encode(call.header_parameters)),
            json=body,
        )

    async def call_method(self, contract: MethodContract, call: ClientCall) -> CallResult:
        try:
            request = self.build_request(contract, call)
        except _UNSENDABLE as exc:
            logger.warning("Could not build request for {}: {}", contract.label, exc)
            return Err(TransportFailed("request_could_not_be_made", None, str(exc)))

        logger.debug("Calling {} {}", request.method, request.url)
        if self.settings.log_bodies:
            logger.debug("Request body for {}: {}", contract.label, request.content.decode("utf-8", errors="replace"))

        send_kwargs: dict[str, Any] = {}
        if call.auth is not None:
            send_kwargs["auth"] = call.auth
        try:
            response = await self.http.send(request, **send_kwargs)
        except _UNSENDABLE as exc:
            logger.warning("Request for {} could not be made: {}", contract.label, exc)
            return Err(TransportFailed("request_could_not_be_made", request, str(exc)))
        except httpx.TransportError as exc:
            logger.warning("No response received for {}: {}", contract.label, exc)
            return Err(TransportFailed("no_response_received", request, str(exc)))

        return self.classify(contract, response)

    def classify(self, contract: MethodContract, response: httpx.Response) -> CallResult:
        """Match the status code against the contract's declared sets, then decode."""

        status = response.status_code
        payload = _response_payload(response)
        if self.settings.log_bodies:
            logger.debug("Response {} for {}: {}", status, contract.label, payload)

        side = contract.classify(status)
        if side is None:
            observed: Side = "success" if response.is_success else "error"
            logger.warning("Unexpected status {} for {}", status, contract.label)
            return Err(ClassificationFailed("unexpected_status_code", status, payload, observed))

        if side == "success":
            decoded = contract.success.body.decode(payload)
            if isinstance(decoded, Err):
                logger.warning("Could not decode {} success response for {}", status, contract.label)
                return Err(
                    ClassificationFailed("could_not_decode_success_response", status, payload, "success", decoded.error)
                )
            return Ok(Decoded("success", status, decoded.value))

        decoded = contract.error.body.decode(payload)
        if isinstance(decoded, Err):
            logger.warning("Could not decode {} error response for {}", status, contract.label)
            return Err(ClassificationFailed("could_not_decode_error_response", status, payload, "error", decoded.error))
        logger.debug("Error response {} returned for {}", status, contract.label)
        return Err(Decoded("error", status, decoded.value))
