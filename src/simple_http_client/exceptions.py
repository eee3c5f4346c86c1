"""
Custom exceptions for simple_http_client.

Every failure of a request surfaces as a RequestError. Callers tell
"server answered with a failure status" apart from "no answer obtained"
by checking whether ``error.response`` is set.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .http_primitives import Response


class RequestError(Exception):
    """Base exception for all simple_http_client errors."""

    def __init__(
        self,
        message: str,
        response: Optional["Response"] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response = response
        self.cause = cause


class InvalidURLError(RequestError, ValueError):
    """Raised when a URL cannot be split into scheme, host, port and path."""

    def __init__(self, message: str, url: object = None) -> None:
        super().__init__(message)
        self.url = url


class InvalidRequestError(RequestError, ValueError):
    """
    Raised when the method, target or headers cannot be sent as HTTP/1.1.

    This covers header values outside latin-1 and values containing
    CR or LF. It is raised before any connection is opened.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, cause=cause)


class ConnectionError(RequestError):
    """
    Raised when the transport fails (DNS, connect, TLS, socket I/O).

    The message is the transport's own message so callers see what the
    operating system reported.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, cause=cause)


class ProtocolError(RequestError):
    """Raised when the peer violates HTTP/1.1 framing."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Protocol error: {message}", cause=cause)


class TimeoutError(RequestError):
    """Raised when a request does not complete within its timeout."""

    MESSAGE = "Request timeout"

    def __init__(self, timeout: Optional[float] = None) -> None:
        super().__init__(self.MESSAGE)
        self.timeout = timeout


class HTTPStatusError(RequestError):
    """Raised when the server answers with a status outside [200, 300)."""

    def __init__(self, response: "Response") -> None:
        super().__init__(
            f"Request failed with status {response.status}", response=response
        )

    @property
    def status(self) -> int:
        return self.response.status


class ResponseTooLargeError(RequestError):
    """Raised when a response body grows past the configured size cap."""

    def __init__(self, size: int, max_size: int, url: str) -> None:
        self.size = size
        self.max_size = max_size
        self.url = url
        super().__init__(
            f"Response too large: {size} bytes (max: {max_size}) for {url}"
        )
