"""Faults the dispatcher hands to a fault classifier, and a ready-made classifier."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus
from typing import ClassVar, Literal

from typedrest.codecs import ErrorTree, object_, string
from typedrest.resources.method import Response
from typedrest.settings import Settings

FaultKind = Literal["non_json_request_body", "invalid_request_schema", "unexpected_runtime_error"]


@dataclass(frozen=True, slots=True)
class NonJsonRequestBody:
    """Request body was present but not JSON."""

    kind: ClassVar[FaultKind] = "non_json_request_body"
    details: str


@dataclass(frozen=True, slots=True)
class InvalidRequestSchema:
    """Body or parameters did not decode against the method contract."""

    kind: ClassVar[FaultKind] = "invalid_request_schema"
    errors: ErrorTree


@dataclass(frozen=True, slots=True)
class UnexpectedRuntimeError:
    """Anything else. Carries no detail so nothing internal can reach the caller."""

    kind: ClassVar[FaultKind] = "unexpected_runtime_error"


Fault = NonJsonRequestBody | InvalidRequestSchema | UnexpectedRuntimeError
FaultClassifier = Callable[[Fault], Response]

error_details = object_({"error_details": string}, name="ErrorDetails")


def default_fault_classifier(settings: Settings | None = None) -> FaultClassifier:
    """Map caller mistakes to 400 and internal faults to a detail-free 500."""

    expose = (settings or Settings()).expose_decode_errors

    def classify(fault: Fault) -> Response:
        if isinstance(fault, UnexpectedRuntimeError):
            return Response(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                {"error_details": "Details hidden for security"},
                error_details,
            )
        if not expose:
            message = "Malformed request"
        elif isinstance(fault, NonJsonRequestBody):
            message = f"Request body is not valid JSON: {fault.details}"
        else:
            message = "; ".join(fault.errors.messages())
        return Response(HTTPStatus.BAD_REQUEST, {"error_details": message}, error_details)

    return classify
