"""
Network utilities for simple_http_client.

This module provides helpers for URL parsing, Host header formatting
and SSL context setup.
"""

import socket
import ssl
from typing import List, Optional, Tuple, Union
from urllib.parse import urlsplit

from ..exceptions import InvalidURLError

DEFAULT_PORTS = {"http": 80, "https": 443}


def create_ssl_context(
    alpn_protocols: Optional[List[str]] = None,
    verify: bool = True,
    cafile: Optional[str] = None,
) -> ssl.SSLContext:
    """
    Create an SSL context for client connections.

    Args:
        alpn_protocols: ALPN protocols to offer (defaults to ``["http/1.1"]``)
        verify: Whether to verify the server certificate and hostname
        cafile: Optional path to a CA bundle used for verification

    Returns:
        Configured SSL context
    """
    context = ssl.create_default_context(cafile=cafile)
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    context.set_alpn_protocols(alpn_protocols or ["http/1.1"])
    context.options |= ssl.OP_NO_COMPRESSION
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    return context


def parse_url(url: str) -> Tuple[str, str, int, str]:
    """
    Parse URL into components.

    Any scheme other than ``https`` is treated as plain HTTP. The path
    keeps the query string and drops the fragment, which is never sent.

    Args:
        url: Absolute URL string

    Returns:
        Tuple of (scheme, host, port, path)

    Raises:
        InvalidURLError: If the URL has no scheme, no host or a bad port
    """
    if not isinstance(url, str):
        raise InvalidURLError(f"URL must be a string, got {type(url).__name__}", url)

    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL {url!r}: {e}", url) from e

    scheme = parsed.scheme.lower()
    if not scheme:
        raise InvalidURLError(f"Invalid URL {url!r}: missing scheme", url)

    host = parsed.hostname or ""
    if not host:
        raise InvalidURLError(f"Invalid URL {url!r}: missing host", url)

    if port is None:
        port = DEFAULT_PORTS["https"] if scheme == "https" else DEFAULT_PORTS["http"]
    try:
        port = validate_port(port)
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL {url!r}: {e}", url) from e

    path = parsed.path or "/"
    if parsed.query:
        path += "?" + parsed.query

    return scheme, host, port, path


def format_host_header(host: str, port: int, scheme: str) -> str:
    """
    Format host header for HTTP requests.

    Args:
        host: Hostname
        port: Port number
        scheme: URL scheme

    Returns:
        Formatted host header string
    """
    if is_ipv6_address(host):
        host = f"[{host}]"
    default_port = DEFAULT_PORTS["https"] if scheme == "https" else DEFAULT_PORTS["http"]
    if port == default_port:
        return host
    return f"{host}:{port}"


def is_ipv6_address(host: str) -> bool:
    """
    Check if a host string is an IPv6 address.

    Args:
        host: Host string to check

    Returns:
        True if the host is an IPv6 address
    """
    try:
        socket.inet_pton(socket.AF_INET6, host)
        return True
    except (OSError, ValueError):
        return False


def validate_port(port: Union[int, str]) -> int:
    """
    Validate and convert port to integer.

    Args:
        port: Port number (int or string)

    Returns:
        Port as integer

    Raises:
        ValueError: If port is invalid
    """
    try:
        port_int = int(port)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid port: {port}")

    if not (1 <= port_int <= 65535):
        raise ValueError(f"Port must be between 1 and 65535, got {port_int}")

    return port_int
