"""
HTTP/1.1 connection implementation for simple_http_client.

This module implements the HTTP11Connection class that runs one
HTTP/1.1 request/response exchange over a NetworkStream.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

import h11

from .http_primitives import Request
from .network.stream import NetworkStream
from .exceptions import (
    ConnectionError,
    InvalidRequestError,
    ProtocolError,
    ResponseTooLargeError,
)

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """States of an HTTP/1.1 exchange."""
    NEW = "new"                                # Connection opened, nothing sent
    SENDING = "sending"                        # Writing request head and body
    HEADERS_RECEIVED = "headers_received"      # Status line and headers parsed
    BODY_ACCUMULATING = "body_accumulating"    # Buffering body chunks
    COMPLETE = "complete"                      # Full response received
    CLOSED = "closed"                          # Stream released


class RawResponse(NamedTuple):
    """Response as read off the wire, before body decoding."""
    status_code: int
    reason: str
    headers: Dict[str, str]
    body: bytes


def to_h11_request(request: Request) -> h11.Request:
    """
    Convert a Request into an h11 request event.

    Header names are encoded as ASCII and values as latin-1, then checked
    against h11's rules for methods, targets and header fields.

    Raises:
        InvalidRequestError: If the request cannot be sent as HTTP/1.1
    """
    try:
        return h11.Request(
            method=request.method.encode("ascii"),
            target=request.path.encode("ascii"),
            headers=[
                (name.encode("ascii"), value.encode("latin-1"))
                for name, value in request.headers.items()
            ],
        )
    except UnicodeEncodeError as e:
        raise InvalidRequestError(
            f"Cannot encode {e.object!r} for HTTP/1.1: {e.reason}", cause=e
        ) from e
    except h11.LocalProtocolError as e:
        raise InvalidRequestError(f"Invalid request: {e}", cause=e) from e


class HTTP11Connection:
    """
    Single-use HTTP/1.1 connection.

    The connection sends one request and buffers the whole response. On
    any failure or cancellation the stream is aborted. After a complete
    response the caller releases it with ``close()``, which waits at most
    CLOSE_TIMEOUT seconds for a graceful shutdown before aborting.
    """

    READ_CHUNK_SIZE = 65536  # 64KB reads
    CLOSE_TIMEOUT = 1.0

    def __init__(
        self,
        stream: NetworkStream,
        max_body_size: Optional[int] = None,
    ):
        """
        Initialize HTTP/1.1 connection.

        Args:
            stream: The NetworkStream to use for communication
            max_body_size: Maximum response body size in bytes, None for
                no limit
        """
        self._stream = stream
        self._h11_connection = h11.Connection(h11.CLIENT)
        self._state = ConnectionState.NEW
        self._max_body_size = max_body_size

        # Metrics
        self._bytes_sent = 0
        self._bytes_received = 0
        self._started_at: Optional[float] = None
        self._elapsed: Optional[float] = None

    async def handle_request(self, request: Request) -> RawResponse:
        """
        Run a complete HTTP request/response cycle.

        Args:
            request: The resolved request to send

        Returns:
            The buffered response. The stream stays open until close()

        Raises:
            InvalidRequestError: If the request cannot be encoded
            ConnectionError: If the transport fails
            ProtocolError: If either side breaks HTTP/1.1 framing
            ResponseTooLargeError: If the body exceeds max_body_size
        """
        if self._state != ConnectionState.NEW:
            raise RuntimeError(f"Connection cannot be reused (state: {self._state.value})")

        self._started_at = time.monotonic()
        try:
            await self._send_request(request)
            head = await self._receive_response_head()
            body = await self._receive_body(head.headers, str(request.url))
        except asyncio.CancelledError:
            logger.debug(f"{request.method} {request.url} cancelled, aborting connection")
            self.abort()
            raise
        except h11.ProtocolError as e:
            self.abort()
            raise ProtocolError(str(e), cause=e) from e
        except OSError as e:
            self.abort()
            raise ConnectionError(str(e) or e.__class__.__name__, cause=e) from e
        except Exception:
            self.abort()
            raise

        self._set_state(ConnectionState.COMPLETE)
        self._elapsed = time.monotonic() - self._started_at

        return RawResponse(
            status_code=head.status_code,
            reason=head.reason.decode("latin-1"),
            headers=self._decode_headers(head.headers),
            body=body,
        )

    async def _send_request(self, request: Request) -> None:
        """
        Send HTTP request using h11.

        Args:
            request: The request to send
        """
        self._set_state(ConnectionState.SENDING)

        await self._send_event(to_h11_request(request))

        if request.body:
            await self._send_event(h11.Data(data=request.body))

        await self._send_event(h11.EndOfMessage())

    async def _send_event(self, event: h11.Event) -> None:
        """
        Send an h11 event to the network stream.

        Args:
            event: The h11 event to send
        """
        data = self._h11_connection.send(event)
        if data:
            await self._stream.write(data)
            self._bytes_sent += len(data)

    async def _next_event(self) -> Any:
        """Return the next h11 event, reading from the stream as needed."""
        while True:
            event = self._h11_connection.next_event()

            if event is h11.NEED_DATA:
                # An empty read tells h11 the peer closed its side.
                data = await self._stream.read(self.READ_CHUNK_SIZE)
                self._h11_connection.receive_data(data)
                self._bytes_received += len(data)
                continue

            return event

    async def _receive_response_head(self) -> h11.Response:
        """
        Receive the response status line and headers.

        Informational (1xx) responses are skipped.
        """
        while True:
            event = await self._next_event()

            if isinstance(event, h11.InformationalResponse):
                continue

            if isinstance(event, h11.Response):
                self._set_state(ConnectionState.HEADERS_RECEIVED)
                return event

            if isinstance(event, h11.ConnectionClosed):
                raise ProtocolError("Connection closed by server")

            raise ProtocolError(f"Unexpected event before response: {event!r}")

    async def _receive_body(self, headers: Iterable[Tuple[bytes, bytes]], url: str) -> bytes:
        """
        Accumulate body chunks in arrival order until end of message.

        Args:
            headers: Response headers, used for an early size check
            url: Request URL, used in error messages

        Returns:
            The complete body
        """
        self._set_state(ConnectionState.BODY_ACCUMULATING)

        declared = self._get_content_length(headers)
        if (self._max_body_size is not None and declared is not None
                and declared > self._max_body_size):
            raise ResponseTooLargeError(declared, self._max_body_size, url)

        chunks: List[bytes] = []
        size = 0
        while True:
            event = await self._next_event()

            if isinstance(event, h11.Data):
                size += len(event.data)
                if self._max_body_size is not None and size > self._max_body_size:
                    raise ResponseTooLargeError(size, self._max_body_size, url)
                chunks.append(event.data)
                continue

            if isinstance(event, h11.EndOfMessage):
                return b"".join(chunks)

            if isinstance(event, h11.ConnectionClosed):
                raise ProtocolError("Connection closed by server")

            raise ProtocolError(f"Unexpected event in response body: {event!r}")

    def _get_content_length(self, headers: Iterable[Tuple[bytes, bytes]]) -> Optional[int]:
        """
        Extract Content-Length from headers.

        Args:
            headers: List of (name, value) header tuples

        Returns:
            Content-Length value or None if not present
        """
        for name, value in headers:
            if name.lower() == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None

    @staticmethod
    def _decode_headers(headers: Iterable[Tuple[bytes, bytes]]) -> Dict[str, str]:
        """
        Convert h11 headers to a dict with lower-cased names.

        Repeated headers are joined with ", ".
        """
        decoded: Dict[str, str] = {}
        for name, value in headers:
            key = name.decode("latin-1").lower()
            text = value.decode("latin-1")
            decoded[key] = f"{decoded[key]}, {text}" if key in decoded else text
        return decoded

    def _set_state(self, state: ConnectionState) -> None:
        logger.debug(f"Connection state {self._state.value} -> {state.value}")
        self._state = state

    async def close(self, timeout: Optional[float] = None) -> None:
        """
        Close the connection and release the stream.

        Args:
            timeout: Seconds to wait for a graceful shutdown before the
                stream is aborted, CLOSE_TIMEOUT when None
        """
        if self._state == ConnectionState.CLOSED:
            return

        self._set_state(ConnectionState.CLOSED)
        if timeout is None:
            timeout = self.CLOSE_TIMEOUT

        try:
            await asyncio.wait_for(self._stream.aclose(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Graceful close took longer than {timeout}s, aborting")
            self._stream.abort()
        except asyncio.CancelledError:
            self._stream.abort()
            raise

    def abort(self) -> None:
        """
        Drop the connection immediately.
        """
        if self._state != ConnectionState.CLOSED:
            self._state = ConnectionState.CLOSED
            self._stream.abort()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        """Check if connection is closed."""
        return self._state == ConnectionState.CLOSED

    @property
    def metrics(self) -> Dict[str, Any]:
        """
        Get connection metrics.

        Returns:
            Dictionary with connection metrics
        """
        return {
            "bytes_sent": self._bytes_sent,
            "bytes_received": self._bytes_received,
            "elapsed": self._elapsed,
            "state": self._state.value,
        }
