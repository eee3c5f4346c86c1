"""
Network stream interface for simple_http_client.

This module defines the NetworkStream interface that all network stream
implementations must follow for consistent behavior across the library.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class NetworkStream(ABC):
    """
    Interface for network streams with async I/O operations.

    A stream is owned by exactly one request. It is closed gracefully
    once the response has been read, or aborted when the request fails,
    times out or is cancelled.
    """

    @abstractmethod
    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        """
        Read data from the stream.

        Args:
            max_bytes: Maximum number of bytes to read.

        Returns:
            The data read from the stream, ``b""`` once the peer has
            closed its side.

        Raises:
            RuntimeError: If the stream is closed.
            OSError: If a network error occurs.
        """
        pass

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """
        Write data to the stream and wait until it has been flushed.

        Raises:
            RuntimeError: If the stream is closed.
            OSError: If a network error occurs.
        """
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Close the stream gracefully and release its resources."""
        pass

    @abstractmethod
    def abort(self) -> None:
        """Close the stream immediately, discarding any buffered data."""
        pass

    @abstractmethod
    def get_extra_info(self, name: str) -> Optional[Any]:
        """
        Get extra information about the stream.

        Args:
            name: The name of the information to retrieve. Common values include:
                 - "peername": The remote endpoint address
                 - "sockname": The local endpoint address
                 - "ssl_object": The SSL object for TLS streams

        Returns:
            The requested information or None if not available.
        """
        pass

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Check if the stream is closed."""
        pass
