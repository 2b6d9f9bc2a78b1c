"""Pooled async HTTP client driven by response-handler objects."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

import aiohttp

from httpways._internal.errors import error_for_status
from httpways._internal.logging import get_logger

logger = get_logger("clients.pooled")

T_co = TypeVar("T_co", covariant=True)


class ResponseHandler(Protocol[T_co]):
    """Turns a live response into a result.

    The handler runs while the response is still open, so it may stream
    or read the body as it sees fit.
    """

    async def handle_response(self, response: aiohttp.ClientResponse) -> T_co:
        """Produce the result for ``response``."""
        ...


class BasicResponseHandler:
    """Return the body as text; statuses >= 300 raise instead."""

    async def handle_response(self, response: aiohttp.ClientResponse) -> str:
        """Return the body text of a successful response.

        Raises:
            NotFound: If the status is 404.
            ServerError: For any other status >= 300.
        """
        if response.status >= 300:
            raise error_for_status(response.status, str(response.url))
        return await response.text()


class PooledClient:
    """A reusable client whose connections are kept in a bounded pool.

    Example::

        async with PooledClient(pool_size=4) as client:
            body = await client.get(config.make_url("helloWorld"))

    Attributes:
        pool_size: Maximum simultaneous connections.
        headers: Mutable headers dict applied to every request.
    """

    def __init__(
        self,
        pool_size: int = 10,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.pool_size = pool_size
        self.headers: dict[str, str] = dict(headers or {})
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> PooledClient:
        """Open the connection pool."""
        connector = aiohttp.TCPConnector(limit=self.pool_size)
        self._session = aiohttp.ClientSession(connector=connector, timeout=self._timeout)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close every pooled connection."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def execute(
        self,
        method: str,
        url: str,
        handler: ResponseHandler[Any] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Send a request and let ``handler`` produce the result.

        Args:
            method: HTTP method.
            url: Absolute URL.
            handler: Response handler; defaults to :class:`BasicResponseHandler`.
            **kwargs: Additional keyword arguments passed to aiohttp.

        Returns:
            The handler's result.

        Raises:
            RuntimeError: If the client is used outside of an async context
                manager.
        """
        if self._session is None:
            msg = "PooledClient must be used as an async context manager"
            raise RuntimeError(msg)

        handler = handler or BasicResponseHandler()
        logger.debug("%s %s", method, url)
        async with self._session.request(method, url, headers=self.headers, **kwargs) as response:
            return await handler.handle_response(response)

    async def get(self, url: str, handler: ResponseHandler[Any] | None = None) -> Any:
        """Send a GET request through :meth:`execute`."""
        return await self.execute("GET", url, handler)


async def execute_once(
    url: str,
    handler: ResponseHandler[Any] | None = None,
    method: str = "GET",
) -> Any:
    """Open a client, send one request and close it again, in one call."""
    async with PooledClient(pool_size=1) as client:
        return await client.execute(method, url, handler)
