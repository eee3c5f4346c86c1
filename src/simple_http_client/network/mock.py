"""
Mock network implementations for testing.

This module provides mock implementations of NetworkStream and NetworkBackend
that can be used for unit testing without requiring actual network connections.
"""

import asyncio
import ssl
from collections import defaultdict, deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from .backend import NetworkBackend
from .stream import NetworkStream


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.

    This implementation simulates a network stream in memory,
    allowing tests to verify network behavior without actual I/O.
    """

    def __init__(
        self,
        data: bytes = b"",
        read_delay: Optional[float] = None,
        close_delay: Optional[float] = None,
    ):
        """
        Initialize the mock stream.

        Args:
            data: Initial data to be available for reading.
            read_delay: Seconds to sleep before every read, to simulate a
                slow peer.
            close_delay: Seconds a graceful close takes to complete.
        """
        self._data = data
        self._position = 0
        self._read_delay = read_delay
        self._close_delay = close_delay
        self._closed = False
        self._aborted = False
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []

    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        """
        Read data from the mock stream.

        Returns ``b""`` once the scripted data is exhausted.

        Raises:
            RuntimeError: If the stream is closed.
        """
        if self._read_delay:
            await asyncio.sleep(self._read_delay)

        if self._closed:
            raise RuntimeError("Stream is closed")

        if self._position >= len(self._data):
            return b""

        if max_bytes is None:
            result = self._data[self._position:]
            self._position = len(self._data)
        else:
            end = min(self._position + max_bytes, len(self._data))
            result = self._data[self._position:end]
            self._position = end

        return result

    async def write(self, data: bytes) -> None:
        """
        Write data to the mock stream.

        Raises:
            RuntimeError: If the stream is closed.
        """
        if self._closed:
            raise RuntimeError("Stream is closed")

        self._write_buffer.append(data)

    async def aclose(self) -> None:
        """Close the mock stream, after close_delay when one is set."""
        if self._close_delay:
            await asyncio.sleep(self._close_delay)
        self._closed = True

    def abort(self) -> None:
        """Abort the mock stream."""
        self._closed = True
        self._aborted = True

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        """Check if the mock stream is closed."""
        return self._closed

    @property
    def was_aborted(self) -> bool:
        """Check if the stream was aborted rather than closed gracefully."""
        return self._aborted

    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)

    def set_extra_info(self, name: str, value: Any) -> None:
        self._extra_info[name] = value

    def add_data(self, data: bytes) -> None:
        """
        Add data to be available for reading.

        Args:
            data: The data to add.
        """
        self._data += data


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.

    Replies are scripted per (host, port) with ``add_response``; every
    connect pops the next scripted reply into a fresh MockNetworkStream.
    Connecting to an endpoint without a scripted reply yields a stream
    that is immediately at EOF.
    """

    def __init__(self):
        """Initialize the mock backend."""
        self._scripts: Dict[Tuple[str, int], Deque[Tuple[bytes, Optional[float], Optional[float]]]] = (
            defaultdict(deque)
        )
        self._failures: Dict[Tuple[str, int], BaseException] = {}
        self._connections: Dict[Tuple[str, int], MockNetworkStream] = {}
        self._tls_connections: Dict[Tuple[str, int], MockNetworkStream] = {}
        self._connection_count = 0

    def add_response(
        self,
        host: str,
        port: int,
        data: bytes,
        read_delay: Optional[float] = None,
        close_delay: Optional[float] = None,
    ) -> None:
        """
        Script the raw bytes the next connection to host:port will read.

        Args:
            host: The hostname.
            port: The port number.
            data: Raw HTTP response bytes.
            read_delay: Optional delay before every read on that connection.
            close_delay: Optional delay before a graceful close completes.
        """
        self._scripts[(host, port)].append((data, read_delay, close_delay))

    def fail_connect(self, host: str, port: int, error: BaseException) -> None:
        """Make every connection attempt to host:port raise ``error``."""
        self._failures[(host, port)] = error

    def _open(self, host: str, port: int) -> MockNetworkStream:
        key = (host, port)
        if key in self._failures:
            raise self._failures[key]

        script = self._scripts[key]
        data, read_delay, close_delay = script.popleft() if script else (b"", None, None)

        stream = MockNetworkStream(data, read_delay=read_delay, close_delay=close_delay)
        stream.set_extra_info("peername", (host, port))
        stream.set_extra_info("sockname", ("127.0.0.1", 12345))
        self._connection_count += 1
        return stream

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> MockNetworkStream:
        stream = self._open(host, port)
        self._connections[(host, port)] = stream
        return stream

    async def connect_tls(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> MockNetworkStream:
        stream = self._open(host, port)
        stream.set_extra_info("ssl_object", True)
        stream.set_extra_info("selected_alpn_protocol", "http/1.1")
        self._tls_connections[(host, port)] = stream
        return stream

    def get_connection(self, host: str, port: int) -> Optional[MockNetworkStream]:
        """Get the latest plain connection opened to host:port."""
        return self._connections.get((host, port))

    def get_tls_connection(self, host: str, port: int) -> Optional[MockNetworkStream]:
        """Get the latest TLS connection opened to host:port."""
        return self._tls_connections.get((host, port))

    @property
    def connection_count(self) -> int:
        return self._connection_count

    def reset(self) -> None:
        """Reset all mock connections and scripts."""
        self._scripts.clear()
        self._failures.clear()
        self._connections.clear()
        self._tls_connections.clear()
        self._connection_count = 0
