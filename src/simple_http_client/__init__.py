"""
simple_http_client - Minimal asynchronous HTTP/1.1 client

Issues GET/POST/PUT/PATCH/DELETE/HEAD requests over plain TCP or TLS,
encodes request bodies, parses JSON responses and reports failures as
RequestError.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .client import HttpClient, RequestOptions
from .config import ClientConfig
from .http_primitives import Request, Response, URLComponents
from .exceptions import (
    RequestError,
    InvalidURLError,
    InvalidRequestError,
    ConnectionError,
    ProtocolError,
    TimeoutError,
    HTTPStatusError,
    ResponseTooLargeError,
)

__all__ = [
    "HttpClient",
    "RequestOptions",
    "ClientConfig",
    "Request",
    "Response",
    "URLComponents",
    "RequestError",
    "InvalidURLError",
    "InvalidRequestError",
    "ConnectionError",
    "ProtocolError",
    "TimeoutError",
    "HTTPStatusError",
    "ResponseTooLargeError",
]
