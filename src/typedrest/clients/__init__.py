"""Client-side call execution."""

from .executor import ClassificationFailed, ClientCall, Decoded, RESTClient, TransportFailed
from .http import create_http_client

__all__ = [
    "ClassificationFailed",
    "ClientCall",
    "Decoded",
    "RESTClient",
    "TransportFailed",
    "create_http_client",
]
