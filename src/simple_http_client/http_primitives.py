"""
HTTP primitives for simple_http_client.

This module defines the core data structures for HTTP requests and responses.
All classes are immutable to ensure safe sharing and simplify reasoning.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional, Union

from .network.utils import format_host_header, parse_url


Headers = Dict[str, str]
StatusCode = int


class URLComponents(NamedTuple):
    """Immutable representation of URL components."""
    scheme: str
    host: str
    port: int
    path: str

    @classmethod
    def from_url(cls, url: str) -> "URLComponents":
        """
        Create URLComponents from a URL string.

        Raises:
            InvalidURLError: If the URL has no scheme or host
        """
        scheme, host, port, path = parse_url(url)
        return cls(scheme=scheme, host=host, port=port, path=path)

    @property
    def is_secure(self) -> bool:
        """Whether the URL requires an encrypted transport."""
        return self.scheme == "https"

    @property
    def host_header(self) -> str:
        """Value for the Host request header."""
        return format_host_header(self.host, self.port, self.scheme)

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host_header}{self.path}"


@dataclass(frozen=True)
class Request:
    """
    Immutable HTTP request representation.

    A Request is the fully resolved outbound configuration of one call:
    the merged headers, the encoded body and the effective timeout.
    """

    method: str
    url: URLComponents
    headers: Headers = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if not isinstance(self.method, str) or not self.method:
            raise ValueError("method must be a non-empty string")

        if not isinstance(self.url, URLComponents):
            raise ValueError("url must be URLComponents")

        if not isinstance(self.headers, dict):
            raise ValueError("headers must be a dict")

        if self.body is not None and not isinstance(self.body, bytes):
            raise ValueError("body must be bytes or None")

    @classmethod
    def create(
        cls,
        method: str,
        url: Union[str, URLComponents],
        headers: Optional[Headers] = None,
        body: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> "Request":
        """
        Create a Request with proper type conversion.

        Args:
            method: HTTP method, in any case
            url: URL string or URLComponents
            headers: Optional header mapping
            body: Optional encoded request body
            timeout: Effective timeout in seconds

        Returns:
            New Request instance
        """
        if isinstance(url, str):
            url = URLComponents.from_url(url)

        return cls(
            method=method.upper(),
            url=url,
            headers=dict(headers or {}),
            body=body,
            timeout=timeout,
        )

    def get_header(self, name: str) -> Optional[str]:
        """Get a header value by name (case-insensitive)."""
        name_lower = name.lower()
        for header_name, value in self.headers.items():
            if header_name.lower() == name_lower:
                return value
        return None

    @property
    def scheme(self) -> str:
        return self.url.scheme

    @property
    def host(self) -> str:
        return self.url.host

    @property
    def port(self) -> int:
        return self.url.port

    @property
    def path(self) -> str:
        return self.url.path


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response representation.

    ``data`` holds the decoded JSON value when the body parsed as JSON
    (``json_parsed`` is then True) and the body text otherwise.
    ``config`` is the Request that was sent and ``request`` the
    connection object that carried it.
    """

    data: Any
    status: StatusCode
    status_text: str = ""
    headers: Headers = field(default_factory=dict)
    config: Optional[Request] = None
    request: Any = None
    content: bytes = b""
    json_parsed: bool = False

    def __post_init__(self) -> None:
        """Validate response data after initialization."""
        if not isinstance(self.status, int):
            raise ValueError("status must be int")

        if not isinstance(self.headers, dict):
            raise ValueError("headers must be a dict")

    @property
    def ok(self) -> bool:
        """Whether the status is in the 2xx range."""
        return 200 <= self.status < 300

    def get_header(self, name: str) -> Optional[str]:
        """Get a header value by name (case-insensitive)."""
        return self.headers.get(name.lower())

    def has_header(self, name: str) -> bool:
        """Check if a header exists (case-insensitive)."""
        return self.get_header(name) is not None
