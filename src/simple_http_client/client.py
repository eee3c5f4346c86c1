"""
HTTP client for simple_http_client.

HttpClient runs the whole lifecycle of a request: it resolves headers,
timeout and body from the client defaults and the per-call options,
opens a plain or TLS connection, buffers the response, decodes the body
and raises for failure statuses.
"""

import asyncio
import logging
import time
from typing import Any, Mapping, Optional, Tuple

from typing_extensions import TypedDict, Unpack

from .config import ClientConfig, merge_headers
from .content import decode_body, encode_body
from .exceptions import ConnectionError, HTTPStatusError, RequestError, TimeoutError
from .http11 import HTTP11Connection, RawResponse, to_h11_request
from .http_primitives import Request, Response, URLComponents
from .network import AsyncioNetworkBackend, NetworkBackend, NetworkStream

logger = logging.getLogger(__name__)


class RequestOptions(TypedDict, total=False):
    """Per-call options accepted by HttpClient.request and the verb methods."""
    headers: Mapping[str, str]
    timeout: Optional[float]
    data: Any


_OPTION_NAMES = frozenset(RequestOptions.__annotations__)


class HttpClient:
    """
    Asynchronous HTTP/1.1 client.

    Each call opens its own connection, which is released when the call
    finishes. Calls share nothing but the client's default config, which
    they only read.

    Example:
        >>> client = HttpClient(timeout=10.0, headers={"Authorization": "Bearer t"})
        >>> response = await client.get("https://api.example.com/users/1")
        >>> response.status, response.data["name"]

    Args:
        config: A ready-made ClientConfig. Keyword options are merged on
            top of it when both are given.
        backend: Network backend used to open connections
        **options: ClientConfig options (``timeout``, ``headers``,
            ``max_body_size``); unknown keys are kept and ignored
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        backend: Optional[NetworkBackend] = None,
        **options: Any,
    ):
        if config is None:
            config = ClientConfig.create(**options)
        elif options:
            config = config.merge(**options)

        self._config = config
        self._backend = backend or AsyncioNetworkBackend()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def backend(self) -> NetworkBackend:
        return self._backend

    async def request(
        self,
        method: str,
        url: str,
        **options: Unpack[RequestOptions],
    ) -> Response:
        """
        Send a request and return its response.

        Args:
            method: HTTP method, case-insensitive
            url: Absolute URL including scheme and host
            **options: ``headers`` merged over the client defaults,
                ``timeout`` in seconds overriding the client default and
                ``data`` for the request body

        Returns:
            The response for a 2xx status

        Raises:
            InvalidURLError: If the URL is malformed (before any I/O)
            InvalidRequestError: If the method or headers cannot be sent
                as HTTP/1.1 (before any I/O)
            ConnectionError: If the transport fails
            ProtocolError: If the server breaks HTTP/1.1 framing
            TimeoutError: If the timeout elapses first
            HTTPStatusError: If the status is outside [200, 300)
            ResponseTooLargeError: If the body exceeds max_body_size
        """
        request = self._build_request(method, url, options)
        max_body_size = self._config.max_body_size

        logger.debug(f"{request.method} {request.url} (timeout: {request.timeout})")
        start_time = time.monotonic()

        try:
            try:
                connection, raw = await asyncio.wait_for(
                    self._send(request, max_body_size), timeout=request.timeout,
                )
            except asyncio.TimeoutError:
                raise TimeoutError(request.timeout) from None

            # Released outside the request timeout; close() has its own bound.
            await connection.close()
            response = self._build_response(request, connection, raw)
        except TimeoutError:
            duration = time.monotonic() - start_time
            logger.error(f"{request.method} {request.url} timed out after {duration:.3f}s")
            raise
        except HTTPStatusError as e:
            duration = time.monotonic() - start_time
            logger.warning(f"{request.method} {request.url} -> {e.status} ({duration:.3f}s)")
            raise
        except RequestError as e:
            duration = time.monotonic() - start_time
            logger.error(f"{request.method} {request.url} failed: {e} ({duration:.3f}s)")
            raise

        duration = time.monotonic() - start_time
        logger.debug(f"{request.method} {request.url} -> {response.status} ({duration:.3f}s)")
        return response

    def _build_request(self, method: str, url: str, options: Mapping[str, Any]) -> Request:
        """
        Resolve the outbound request.

        Runs synchronously before the first await so that concurrent calls
        never see a half-updated config.
        """
        unknown = set(options) - _OPTION_NAMES
        if unknown:
            logger.debug(f"Ignoring unknown request options: {sorted(unknown)}")

        config = self._config
        parsed = URLComponents.from_url(url)

        timeout = options.get("timeout")
        if timeout is None:
            timeout = config.timeout

        body = encode_body(options.get("data"))

        # Host and Connection sit below the defaults so callers can override them.
        transport_headers = {"Host": parsed.host_header, "Connection": "close"}
        headers = merge_headers(transport_headers, config.headers, options.get("headers"))
        if body is not None:
            headers = merge_headers(headers, {"Content-Length": str(len(body))})

        request = Request.create(method, parsed, headers=headers, body=body, timeout=timeout)
        # Headers h11 would reject fail here, before a connection is opened.
        to_h11_request(request)
        return request

    async def _send(
        self,
        request: Request,
        max_body_size: Optional[int],
    ) -> Tuple[HTTP11Connection, RawResponse]:
        stream = await self._connect(request)
        connection = HTTP11Connection(stream, max_body_size=max_body_size)
        raw = await connection.handle_request(request)
        return connection, raw

    async def _connect(self, request: Request) -> NetworkStream:
        """Open a TLS connection for https URLs, a plain one otherwise."""
        if request.url.is_secure:
            connect = self._backend.connect_tls
        else:
            connect = self._backend.connect_tcp

        try:
            return await connect(request.host, request.port, request.timeout)
        except OSError as e:
            # asyncio.TimeoutError is an OSError on 3.11+; only a deadline
            # expiry has no errno. A kernel ETIMEDOUT is a transport failure.
            if isinstance(e, asyncio.TimeoutError) and e.errno is None:
                raise
            raise ConnectionError(str(e) or e.__class__.__name__, cause=e) from e

    def _build_response(
        self,
        request: Request,
        connection: HTTP11Connection,
        raw: RawResponse,
    ) -> Response:
        data, json_parsed = decode_body(raw.body)
        response = Response(
            data=data,
            status=raw.status_code,
            status_text=raw.reason,
            headers=raw.headers,
            config=request,
            request=connection,
            content=raw.body,
            json_parsed=json_parsed,
        )

        if not response.ok:
            raise HTTPStatusError(response)
        return response

    async def get(self, url: str, **options: Unpack[RequestOptions]) -> Response:
        return await self.request("GET", url, **options)

    async def head(self, url: str, **options: Unpack[RequestOptions]) -> Response:
        return await self.request("HEAD", url, **options)

    async def delete(self, url: str, **options: Unpack[RequestOptions]) -> Response:
        return await self.request("DELETE", url, **options)

    async def post(self, url: str, data: Any = None, **options: Any) -> Response:
        return await self.request("POST", url, data=data, **options)

    async def put(self, url: str, data: Any = None, **options: Any) -> Response:
        return await self.request("PUT", url, data=data, **options)

    async def patch(self, url: str, data: Any = None, **options: Any) -> Response:
        return await self.request("PATCH", url, data=data, **options)

    def set_default_headers(self, headers: Mapping[str, str]) -> None:
        """Merge ``headers`` into the defaults used by future requests."""
        self._config = self._config.with_headers(headers)

    def set_timeout(self, timeout: Optional[float]) -> None:
        """Replace the default timeout (seconds) used by future requests."""
        self._config = self._config.with_timeout(timeout)

    def derive(self, **options: Any) -> "HttpClient":
        """
        Create an independent client with ``options`` merged over this
        client's current config.

        The two clients share the network backend but no configuration;
        later changes to either are not seen by the other.
        """
        return HttpClient(self._config.merge(**options), backend=self._backend)

    def __repr__(self) -> str:
        return f"HttpClient(timeout={self._config.timeout!r}, headers={self._config.headers!r})"
