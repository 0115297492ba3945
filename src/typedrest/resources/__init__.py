"""Declarative API, resource and method contracts."""

from .api import ApiDefinition, Operation, Resource, UnknownServerError, api, operation, resource
from .method import Call, HttpMethod, MethodContract, Response, ResponseSpec
from .path import LiteralSegment, Parameter, PathSubstitution, PathTemplate

__all__ = [
    "ApiDefinition",
    "Call",
    "HttpMethod",
    "LiteralSegment",
    "MethodContract",
    "Operation",
    "Parameter",
    "PathSubstitution",
    "PathTemplate",
    "Resource",
    "Response",
    "ResponseSpec",
    "UnknownServerError",
    "api",
    "operation",
    "resource",
]
