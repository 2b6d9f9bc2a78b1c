"""A lazily-connected ``http.client`` connection with scoped streams."""

from __future__ import annotations

import contextlib
import http.client
import io
from typing import TYPE_CHECKING

from httpways._internal.errors import HttpWaysError, error_for_status
from httpways._internal.logging import get_logger
from httpways.clients.urlfetch import parse_url, response_charset

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger("clients.connection")

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class UrlConnection:
    """One HTTP exchange with an explicit request/response lifecycle.

    Nothing is sent until the status code or the body is asked for. With
    :attr:`do_output` set, text written through :meth:`output_stream`
    becomes a form-encoded POST body; otherwise the request is a GET.

    Example::

        with UrlConnection(url) as connection:
            connection.do_output = True
            with connection.output_stream() as writer:
                writer.write("arg=foo")
            with connection.input_stream() as reader:
                body = reader.read()
            status = connection.response_code

    Attributes:
        url: The target URL as given.
        do_output: Whether the request carries a body.
    """

    def __init__(self, url: str, *, timeout: float = 30.0) -> None:
        parsed = parse_url(url)
        self.url = url
        self.do_output = False
        self._target = parsed.raw_path_qs
        self._body = bytearray()
        self._response: http.client.HTTPResponse | None = None

        connection_cls = (
            http.client.HTTPSConnection if parsed.scheme == "https" else http.client.HTTPConnection
        )
        self._connection = connection_cls(parsed.host, parsed.port, timeout=timeout)

    def __enter__(self) -> UrlConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def response_code(self) -> int:
        """HTTP status code; sends the request on first access."""
        return self._get_response().status

    @contextlib.contextmanager
    def output_stream(self) -> Iterator[io.StringIO]:
        """Yield a writer whose contents are appended to the request body.

        Raises:
            HttpWaysError: If :attr:`do_output` is not set or the request
                was already sent.
        """
        if not self.do_output:
            msg = "output_stream() requires do_output = True"
            raise HttpWaysError(msg)
        if self._response is not None:
            msg = "request already sent; cannot write more output"
            raise HttpWaysError(msg)
        writer = io.StringIO()
        try:
            yield writer
        finally:
            self._body.extend(writer.getvalue().encode("utf-8"))
            writer.close()

    @contextlib.contextmanager
    def input_stream(self) -> Iterator[io.TextIOBase]:
        """Yield a text reader over the response body.

        The status code stays available through :attr:`response_code` even
        when this raises.

        Raises:
            NotFound: If the server answered 404.
            ServerError: For any other status >= 400.
        """
        response = self._get_response()
        if response.status >= 400:
            response.read()
            response.close()
            raise error_for_status(response.status, self.url)

        reader = io.TextIOWrapper(response, encoding=response_charset(response), errors="replace", newline="")
        try:
            yield reader
        finally:
            reader.close()

    def close(self) -> None:
        """Release the response and the socket."""
        if self._response is not None:
            self._response.close()
        self._connection.close()

    def _get_response(self) -> http.client.HTTPResponse:
        if self._response is None:
            method = "POST" if self.do_output else "GET"
            headers = {"Content-Type": _FORM_CONTENT_TYPE} if self.do_output else {}
            logger.debug("%s %s", method, self.url)
            self._connection.request(
                method,
                self._target,
                body=bytes(self._body) if self.do_output else None,
                headers=headers,
            )
            self._response = self._connection.getresponse()
            if self._response.status >= 400:
                logger.warning("HTTP %d for %s", self._response.status, self.url)
        return self._response
