"""Method contracts: the full request/response description of one verb on one path."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from typedrest.codecs.base import Codec
from typedrest.codecs.excess import declared_keys
from typedrest.resources.path import PathTemplate

T = TypeVar("T")


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True, slots=True, init=False)
class ResponseSpec:
    """Declared status codes for one side of a method and the body codec they share."""

    status_codes: frozenset[int]
    body: Codec[Any, Any]

    def __init__(self, status_codes: Iterable[int], body: Codec[Any, Any]) -> None:
        object.__setattr__(self, "status_codes", frozenset(int(code) for code in status_codes))
        object.__setattr__(self, "body", body)

    def declares(self, status_code: int) -> bool:
        return status_code in self.status_codes


@dataclass(frozen=True, slots=True)
class Response(Generic[T]):
    """Typed response produced by a handler or fault classifier.

    ``codec`` overrides the contract's body codec for this one response.
    """

    status_code: int
    body: T
    codec: Codec[T, Any] | None = None


@dataclass(frozen=True, slots=True)
class Call:
    """Typed inputs of one method invocation."""

    path_parameters: Any = field(default_factory=dict)
    query_parameters: Any = field(default_factory=dict)
    header_parameters: Any = field(default_factory=dict)
    body: Any = None


@dataclass(frozen=True, eq=False)
class MethodContract:
    """Immutable description of one HTTP method on one path.

    Built once when the API definition is assembled and shared read-only by
    the dispatcher and the call executor.
    """

    path: PathTemplate
    http_method: HttpMethod
    path_parameters: Codec[Any, Any]
    query_parameters: Codec[Any, Any]
    header_parameters: Codec[Any, Any]
    request_body: Codec[Any, Any]
    success: ResponseSpec
    error: ResponseSpec

    def __post_init__(self) -> None:
        if not self.success.status_codes:
            raise ValueError(f"{self.label} declares no success status codes")
        if not self.error.status_codes:
            raise ValueError(f"{self.label} declares no error status codes")
        overlap = self.success.status_codes & self.error.status_codes
        if overlap:
            raise ValueError(f"{self.label} declares status codes as both success and error: {sorted(overlap)}")
        try:
            known = declared_keys(self.path_parameters)
        except TypeError:
            return
        missing = set(self.path.parameter_names) - known
        if missing:
            raise ValueError(f"{self.label} path parameters {sorted(missing)} are not declared by its path codec")

    @property
    def label(self) -> str:
        return f"{self.http_method} {self.path}"

    def classify(self, status_code: int) -> str | None:
        """``"success"``, ``"error"`` or ``None`` when the code is not declared."""

        if self.success.declares(status_code):
            return "success"
        if self.error.declares(status_code):
            return "error"
        return None
