"""
Network backend interface for simple_http_client.

This module defines the NetworkBackend interface that provides
abstractions for opening plain and encrypted connections.
"""

import ssl
from abc import ABC, abstractmethod
from typing import Optional

from .stream import NetworkStream


class NetworkBackend(ABC):
    """
    Interface for network backend implementations.

    The client picks ``connect_tls`` for ``https`` URLs and
    ``connect_tcp`` for everything else. Each call opens a fresh
    connection; backends do not pool.
    """

    @abstractmethod
    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        """
        Connect to a TCP endpoint.

        Args:
            host: The hostname or IP address to connect to.
            port: The port number to connect to.
            timeout: Optional timeout in seconds for the connection.

        Returns:
            A NetworkStream representing the TCP connection.

        Raises:
            OSError: If the connection fails.
        """
        pass

    @abstractmethod
    async def connect_tls(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> NetworkStream:
        """
        Connect to a TCP endpoint and complete a TLS handshake.

        Args:
            host: The hostname, also used for certificate verification.
            port: The port number to connect to.
            timeout: Optional timeout in seconds for connect and handshake.
            ssl_context: Optional SSL context overriding the backend default.

        Returns:
            A NetworkStream representing the TLS connection.

        Raises:
            OSError: If the connection or the handshake fails.
        """
        pass
