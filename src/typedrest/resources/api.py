"""API definitions: named resources, their methods and the servers hosting them."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from typedrest.codecs import Codec, null, object_
from typedrest.resources.method import HttpMethod, MethodContract, ResponseSpec
from typedrest.resources.path import Component, PathTemplate

_VERBS = ("get", "post", "put", "patch", "delete")


class UnknownServerError(ValueError):
    """Raised when a server name is not one of the API's declared servers."""

    def __init__(self, server: str, known: Iterable[str]) -> None:
        self.server = server
        super().__init__(f"API server was not one of the expected values: {server!r} (expected one of {sorted(known)})")


@dataclass(frozen=True, slots=True)
class Operation:
    """Everything a method contract needs except its path and verb."""

    path_parameters: Codec[Any, Any]
    query_parameters: Codec[Any, Any]
    header_parameters: Codec[Any, Any]
    request_body: Codec[Any, Any]
    success: ResponseSpec
    error: ResponseSpec

    def bind(self, path: PathTemplate, http_method: HttpMethod) -> MethodContract:
        return MethodContract(
            path=path,
            http_method=http_method,
            path_parameters=self.path_parameters,
            query_parameters=self.query_parameters,
            header_parameters=self.header_parameters,
            request_body=self.request_body,
            success=self.success,
            error=self.error,
        )


def operation(
    *,
    success: ResponseSpec,
    error: ResponseSpec,
    path_parameters: Codec[Any, Any] | None = None,
    query_parameters: Codec[Any, Any] | None = None,
    header_parameters: Codec[Any, Any] | None = None,
    request_body: Codec[Any, Any] = null,
) -> Operation:
    """Describe a method; omitted parameter codecs accept any string record."""

    return Operation(
        path_parameters=path_parameters if path_parameters is not None else object_({}),
        query_parameters=query_parameters if query_parameters is not None else object_({}),
        header_parameters=header_parameters if header_parameters is not None else object_({}),
        request_body=request_body,
        success=success,
        error=error,
    )


@dataclass(frozen=True, slots=True)
class Resource:
    """Up to five method contracts sharing one path template."""

    path: PathTemplate
    get: MethodContract | None = None
    post: MethodContract | None = None
    put: MethodContract | None = None
    patch: MethodContract | None = None
    delete: MethodContract | None = None

    def methods(self) -> Iterator[MethodContract]:
        for verb in _VERBS:
            contract = getattr(self, verb)
            if contract is not None:
                yield contract


def resource(
    path: PathTemplate | Iterable[str | Component | None],
    *,
    get: Operation | None = None,
    post: Operation | None = None,
    put: Operation | None = None,
    patch: Operation | None = None,
    delete: Operation | None = None,
) -> Resource:
    template = path if isinstance(path, PathTemplate) else PathTemplate.of(path)
    operations = {"get": get, "post": post, "put": put, "patch": patch, "delete": delete}
    contracts = {
        verb: op.bind(template, HttpMethod(verb.upper())) if op is not None else None
        for verb, op in operations.items()
    }
    return Resource(path=template, **contracts)


MethodCallback = Callable[[MethodContract], None]


@dataclass(frozen=True, slots=True)
class ApiDefinition:
    name: str
    servers: Mapping[str, str]
    resources: Mapping[str, Resource]

    def iter_methods(self) -> Iterator[tuple[str, MethodContract]]:
        for resource_name, item in self.resources.items():
            for contract in item.methods():
                yield resource_name, contract

    def for_each_method(self, callback: MethodCallback) -> None:
        for _, contract in self.iter_methods():
            callback(contract)

    def decode_server(self, server: str) -> str:
        if server not in self.servers:
            raise UnknownServerError(server, self.servers)
        return server

    def base_url(self, server: str) -> str:
        return self.servers[self.decode_server(server)]


def api(name: str, servers: Mapping[str, str], resources: Mapping[str, Resource]) -> ApiDefinition:
    """Assemble an immutable API definition."""

    return ApiDefinition(
        name=name,
        servers=MappingProxyType(dict(servers)),
        resources=MappingProxyType(dict(resources)),
    )
