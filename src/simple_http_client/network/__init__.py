"""
Network backend components for simple_http_client.

This module provides the low-level networking abstractions
used to open plain and TLS connections.
"""

from .backend import NetworkBackend
from .stream import NetworkStream
from .asyncio_backend import AsyncioNetworkBackend, AsyncioNetworkStream
from .mock import MockNetworkBackend, MockNetworkStream
from .utils import (
    create_ssl_context,
    parse_url,
    format_host_header,
    is_ipv6_address,
    validate_port,
)

__all__ = [
    "NetworkBackend",
    "NetworkStream",
    "AsyncioNetworkBackend",
    "AsyncioNetworkStream",
    "MockNetworkBackend",
    "MockNetworkStream",
    "create_ssl_context",
    "parse_url",
    "format_host_header",
    "is_ipv6_address",
    "validate_port",
]
