"""Builder-style async HTTP client with content-type parsing and handlers."""

from __future__ import annotations

import codecs
import contextlib
import json
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import aiohttp
import lxml.html
from lxml import etree

from httpways._internal.errors import ResponseParseError, error_for_status
from httpways._internal.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    SuccessHandler = Callable[["BuilderResponse", Any], Any]
    FailureHandler = Callable[["BuilderResponse"], Any]

logger = get_logger("clients.builder")


class ContentType(Enum):
    """Content types a request can ask for or send."""

    ANY = "*/*"
    TEXT = "text/plain"
    JSON = "application/json"
    HTML = "text/html"
    XML = "application/xml"
    URLENC = "application/x-www-form-urlencoded"

    @property
    def accept(self) -> str:
        """Value of the ``Accept`` header when this type is requested."""
        if self is ContentType.JSON:
            return "application/json, application/javascript, text/javascript"
        if self is ContentType.TEXT:
            return "text/plain, */*"
        return self.value


@dataclass
class RequestRecord:
    """Record emitted for every request the builder sends.

    Attributes:
        timestamp: Monotonic timestamp when the request started.
        method: HTTP method (GET, POST, etc.).
        url: Full request URL.
        status_code: HTTP response status code (0 if the request failed).
        latency_ms: Time until the body was read, in milliseconds.
        content_length: Response body size in characters.
        error: Error message if the request failed, None otherwise.
    """

    timestamp: float
    method: str
    url: str
    status_code: int
    latency_ms: float
    content_length: int
    error: str | None = None


@dataclass
class BuilderResponse:
    """A fully-read response handed to success and failure handlers."""

    status: int
    url: str
    content_type: str
    text: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300


def _return_parsed(response: BuilderResponse, parsed: Any) -> Any:
    return parsed


def _raise_for_status(response: BuilderResponse) -> Any:
    raise error_for_status(response.status, response.url)


def _noop_record(record: RequestRecord) -> None:
    """Default no-op record callback."""


@dataclass
class ResponseHandlers:
    """Handlers used when a call does not pass its own.

    Attributes:
        success: Called as ``success(response, parsed)`` for 2xx responses.
            The default returns the parsed body.
        failure: Called as ``failure(response)`` for every other status.
            The default raises ``NotFound`` / ``ServerError``.
    """

    success: SuccessHandler = _return_parsed
    failure: FailureHandler = _raise_for_status


def parse_body(text: str, content_type: ContentType, response_type: str = "") -> Any:
    """Parse a response body according to the requested content type.

    Args:
        text: The decoded body.
        content_type: The type the caller asked for. ``ANY`` defers to
            ``response_type``.
        response_type: The MIME type the server declared.

    Returns:
        ``str`` for text, ``dict``/``list`` for JSON, an lxml
        ``HtmlElement`` for HTML (parsed leniently, like a browser) and an
        ``Element`` for XML.

    Raises:
        ResponseParseError: If the body is not valid for the chosen type.
    """
    if content_type is ContentType.ANY:
        content_type = _guess_type(response_type)

    if content_type is ContentType.JSON:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Response is not valid JSON: {exc}"
            raise ResponseParseError(msg) from exc

    if content_type is ContentType.HTML:
        try:
            return lxml.html.document_fromstring(text)
        except (etree.LxmlError, ValueError) as exc:
            msg = f"Response is not parseable HTML: {exc}"
            raise ResponseParseError(msg) from exc

    if content_type is ContentType.XML:
        try:
            return ET.fromstring(text)  # noqa: S314
        except ET.ParseError as exc:
            msg = f"Response is not well-formed markup: {exc}"
            raise ResponseParseError(msg) from exc

    return text


def decode_body(body: bytes, charset: str | None) -> str:
    """Decode a response body, replacing bytes the charset cannot map.

    An unknown or missing charset falls back to UTF-8.
    """
    try:
        codec = codecs.lookup(charset or "utf-8").name
    except LookupError:
        codec = "utf-8"
    return body.decode(codec, errors="replace")


def _guess_type(mime: str) -> ContentType:
    mime = mime.lower()
    if mime.endswith("json") or "javascript" in mime:
        return ContentType.JSON
    if mime == "text/html":
        return ContentType.HTML
    if mime.endswith("xml"):
        return ContentType.XML
    return ContentType.TEXT


class HttpBuilder:
    """Async HTTP client that parses responses and dispatches to handlers.

    Requests are relative to ``base_url``. A 2xx response is parsed by
    content type and passed to the success handler, whose return value is
    the call's result. Any other status goes to the failure handler
    instead; the success handler is never called for it.

    Example::

        async with HttpBuilder(config.base_url) as http:
            page = await http.get("indexJson", content_type=ContentType.JSON)
            status = await http.get("notThere", failure=lambda resp: resp.status)

    Attributes:
        base_url: Base URL that request paths are resolved against.
        headers: Mutable headers dict applied to every request.
        handler: Registered default handlers, see :meth:`failure_handler`.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        record_callback: Callable[[RequestRecord], None] | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.headers: dict[str, str] = dict(headers or {})
        self.handler = ResponseHandlers()
        self._record_callback = record_callback or _noop_record
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> HttpBuilder:
        """Open the underlying aiohttp session."""
        self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Close the underlying aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    @contextlib.contextmanager
    def failure_handler(self, handler: FailureHandler) -> Iterator[HttpBuilder]:
        """Register ``handler`` as the failure handler for a ``with`` block.

        The previous handler is restored on exit, so a registration never
        outlives the block that made it.
        """
        previous = self.handler.failure
        self.handler.failure = handler
        try:
            yield self
        finally:
            self.handler.failure = previous

    async def get(
        self,
        path: str = "",
        *,
        content_type: ContentType = ContentType.ANY,
        query: Mapping[str, str] | None = None,
        success: SuccessHandler | None = None,
        failure: FailureHandler | None = None,
    ) -> Any:
        """Send a GET request.

        Args:
            path: Path relative to ``base_url``.
            content_type: How to parse the response body.
            query: Query string parameters.
            success: Handler for 2xx responses, overriding the registered one.
            failure: Handler for other statuses, overriding the registered one.

        Returns:
            Whatever the invoked handler returns.
        """
        return await self.request(
            "GET",
            path,
            content_type=content_type,
            query=query,
            success=success,
            failure=failure,
        )

    async def post(
        self,
        path: str = "",
        *,
        body: Any = None,
        content_type: ContentType = ContentType.ANY,
        request_content_type: ContentType = ContentType.URLENC,
        success: SuccessHandler | None = None,
        failure: FailureHandler | None = None,
    ) -> Any:
        """Send a POST request.

        Args:
            path: Path relative to ``base_url``.
            body: Request body; a mapping is form-encoded by default.
            content_type: How to parse the response body.
            request_content_type: How to encode ``body``: ``URLENC`` (form),
                ``JSON``, or ``TEXT`` (sent as-is).
            success: Handler for 2xx responses, overriding the registered one.
            failure: Handler for other statuses, overriding the registered one.

        Returns:
            Whatever the invoked handler returns.
        """
        return await self.request(
            "POST",
            path,
            body=body,
            content_type=content_type,
            request_content_type=request_content_type,
            success=success,
            failure=failure,
        )

    async def request(
        self,
        method: str,
        path: str = "",
        *,
        body: Any = None,
        content_type: ContentType = ContentType.ANY,
        request_content_type: ContentType = ContentType.URLENC,
        query: Mapping[str, str] | None = None,
        success: SuccessHandler | None = None,
        failure: FailureHandler | None = None,
    ) -> Any:
        """Send a request, read the body and dispatch to a handler.

        Raises:
            RuntimeError: If the builder is used outside of an async context
                manager.
            ResponseParseError: If a 2xx body does not parse as requested.
        """
        if self._session is None:
            msg = "HttpBuilder must be used as an async context manager"
            raise RuntimeError(msg)

        url = f"{self.base_url}{path.lstrip('/')}"
        headers = {**self.headers, "Accept": content_type.accept}
        kwargs: dict[str, Any] = {}
        if body is not None:
            if request_content_type is ContentType.JSON:
                kwargs["json"] = body
            else:
                kwargs["data"] = body
                if request_content_type is not ContentType.URLENC:
                    headers["Content-Type"] = request_content_type.value

        start = time.monotonic()
        status_code = 0
        text = ""
        error: str | None = None

        try:
            async with self._session.request(
                method,
                url,
                headers=headers,
                params=query,
                **kwargs,
            ) as resp:
                status_code = resp.status
                text = decode_body(await resp.read(), resp.charset)
                response = BuilderResponse(
                    status=resp.status,
                    url=str(resp.url),
                    content_type=resp.content_type,
                    text=text,
                    headers=dict(resp.headers),
                )
        except Exception as exc:
            error = f"{type(exc).__name__}: {exc}"
            raise
        finally:
            latency_ms = (time.monotonic() - start) * 1000
            self._record_callback(
                RequestRecord(
                    timestamp=start,
                    method=method,
                    url=url,
                    status_code=status_code,
                    latency_ms=latency_ms,
                    content_length=len(text),
                    error=error,
                )
            )
            logger.debug(
                "%s %s -> %d",
                method,
                url,
                status_code,
                extra={"method": method, "url": url, "status": status_code, "latency_ms": latency_ms},
            )

        if not response.success:
            logger.warning("HTTP %d for %s %s", response.status, method, url)
            return (failure or self.handler.failure)(response)

        parsed = parse_body(text, content_type, response.content_type)
        return (success or self.handler.success)(response, parsed)
