"""
asyncio based network backend.

Connections are opened with ``asyncio.open_connection`` so readiness is
multiplexed by the running event loop; no threads are involved.
"""

import asyncio
import logging
import ssl
from typing import Any, Optional

from .backend import NetworkBackend
from .stream import NetworkStream
from .utils import create_ssl_context

logger = logging.getLogger(__name__)


class AsyncioNetworkStream(NetworkStream):
    """NetworkStream over an asyncio StreamReader/StreamWriter pair."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._reader = reader
        self._writer = writer
        self._closed = False

    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._closed:
            raise RuntimeError("Stream is closed")
        return await self._reader.read(max_bytes or 65536)

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise RuntimeError("Stream is closed")
        self._writer.write(data)
        await self._writer.drain()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError as e:
            # The peer may already have reset the connection.
            logger.debug(f"Ignoring error while closing stream: {e}")

    def abort(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.transport.abort()

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._writer.get_extra_info(name)

    @property
    def is_closed(self) -> bool:
        return self._closed


class AsyncioNetworkBackend(NetworkBackend):
    """
    Network backend using the running asyncio event loop.

    Args:
        ssl_context: Default SSL context for TLS connections. A verifying
            context from ``create_ssl_context()`` is built when omitted.
    """

    def __init__(self, ssl_context: Optional[ssl.SSLContext] = None) -> None:
        self._ssl_context = ssl_context

    @property
    def ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = create_ssl_context()
        return self._ssl_context

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> AsyncioNetworkStream:
        logger.debug(f"Opening TCP connection to {host}:{port}")
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
        return AsyncioNetworkStream(reader, writer)

    async def connect_tls(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> AsyncioNetworkStream:
        logger.debug(f"Opening TLS connection to {host}:{port}")
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(
                host,
                port,
                ssl=ssl_context or self.ssl_context,
                server_hostname=host,
            ),
            timeout=timeout,
        )
        return AsyncioNetworkStream(reader, writer)
