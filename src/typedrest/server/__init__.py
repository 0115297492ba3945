"""Server-side request dispatch."""

from .aws_lambda import lambda_handler, request_from_event, result_from_response
from .dispatcher import Dispatcher, HandlerCall, RawRequest, RawResponse, implement
from .faults import (
    Fault,
    InvalidRequestSchema,
    NonJsonRequestBody,
    UnexpectedRuntimeError,
    default_fault_classifier,
)
from .transport import DispatchTransport

__all__ = [
    "DispatchTransport",
    "Dispatcher",
    "Fault",
    "HandlerCall",
    "InvalidRequestSchema",
    "NonJsonRequestBody",
    "RawRequest",
    "RawResponse",
    "UnexpectedRuntimeError",
    "default_fault_classifier",
    "implement",
    "lambda_handler",
    "request_from_event",
    "result_from_response",
]
