"""
Pytest configuration for simple_http_client tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import asyncio
import os
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Awaitable, Callable, Dict, List, NamedTuple, Set, Tuple

import h11
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from simple_http_client.network.mock import MockNetworkBackend


class RecordedRequest(NamedTuple):
    """A request as seen by the local test server."""
    method: str
    target: str
    headers: Dict[str, str]
    body: bytes


Reply = Tuple[int, List[Tuple[str, str]], bytes]
Handler = Callable[[RecordedRequest], Awaitable[Reply]]


class LocalServer(NamedTuple):
    base_url: str
    requests: List[RecordedRequest]


def build_response(
    status: int,
    body: bytes = b"",
    headers: Tuple[Tuple[str, str], ...] = (),
    reason: str = "",
) -> bytes:
    """Build raw HTTP/1.1 response bytes with a Content-Length header."""
    reason = reason or HTTPStatus(status).phrase
    lines = [f"HTTP/1.1 {status} {reason}", f"Content-Length: {len(body)}"]
    lines.extend(f"{name}: {value}" for name, value in headers)
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1") + body


@asynccontextmanager
async def _serve(handler: Handler):
    """Run an HTTP/1.1 server on 127.0.0.1 that answers every request with ``handler``."""
    recorded: List[RecordedRequest] = []
    tasks: Set[asyncio.Task] = set()

    async def on_connect(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        tasks.add(task)
        conn = h11.Connection(h11.SERVER)
        head = None
        body = b""
        try:
            while True:
                event = conn.next_event()
                if event is h11.NEED_DATA:
                    conn.receive_data(await reader.read(65536))
                    continue
                if isinstance(event, h11.Request):
                    head = event
                elif isinstance(event, h11.Data):
                    body += event.data
                elif isinstance(event, h11.EndOfMessage):
                    break
                else:
                    return

            request = RecordedRequest(
                method=head.method.decode(),
                target=head.target.decode(),
                headers={name.decode().lower(): value.decode() for name, value in head.headers},
                body=body,
            )
            recorded.append(request)

            status, headers, payload = await handler(request)
            headers = list(headers) + [("Content-Length", str(len(payload)))]
            writer.write(conn.send(h11.Response(
                status_code=status, headers=headers, reason=HTTPStatus(status).phrase,
            )))
            if payload and request.method != "HEAD":
                writer.write(conn.send(h11.Data(data=payload)))
            writer.write(conn.send(h11.EndOfMessage()))
            await writer.drain()
        except (ConnectionError, h11.ProtocolError):
            pass
        finally:
            tasks.discard(task)
            writer.close()

    server = await asyncio.start_server(on_connect, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield LocalServer(base_url=f"http://127.0.0.1:{port}", requests=recorded)
    finally:
        for task in list(tasks):
            task.cancel()
        server.close()
        await server.wait_closed()


@pytest.fixture
def local_server():
    """Factory for a local HTTP server; use as ``async with local_server(handler) as server``."""
    return _serve


@pytest.fixture
def mock_backend():
    """Create a mock network backend."""
    return MockNetworkBackend()


@pytest.fixture
def response_bytes():
    """Factory for raw HTTP/1.1 response bytes."""
    return build_response


@pytest.fixture
def sample_headers():
    """Sample headers for testing."""
    return {
        "Authorization": "Bearer token123",
        "Accept": "*/*",
    }
