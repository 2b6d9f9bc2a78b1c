"""Blocking URL fetching with ``urllib.request``.

The simplest ways to GET a page: read the whole body, read it line by line,
or hold a reader open for the duration of a ``with`` block. HTTP error
statuses surface as :class:`~httpways._internal.errors.NotFound` /
:class:`~httpways._internal.errors.ServerError`.
"""

from __future__ import annotations

import codecs
import contextlib
import io
import urllib.error
import urllib.parse
import urllib.request
from typing import TYPE_CHECKING

from yarl import URL

from httpways._internal.errors import InvalidURL, error_for_status
from httpways._internal.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from http.client import HTTPResponse

logger = get_logger("clients.urlfetch")

_SCHEMES = frozenset({"http", "https"})


def parse_url(url: str) -> URL:
    """Turn a string into an absolute HTTP(S) URL.

    Args:
        url: Candidate URL string.

    Returns:
        The parsed URL.

    Raises:
        InvalidURL: If the scheme is not http/https or the host is missing.
    """
    try:
        parsed = URL(url)
    except (TypeError, ValueError) as exc:
        raise InvalidURL(url, str(exc)) from exc

    if parsed.scheme not in _SCHEMES:
        raise InvalidURL(url, f"unknown protocol: {parsed.scheme or '(none)'}")
    if not parsed.host:
        raise InvalidURL(url, "no host")
    return parsed


@contextlib.contextmanager
def _open(url: str, data: bytes | None, timeout: float) -> Iterator[HTTPResponse]:
    target = str(parse_url(url))
    logger.debug("%s %s", "POST" if data is not None else "GET", target)
    try:
        response = urllib.request.urlopen(target, data=data, timeout=timeout)  # noqa: S310
    except urllib.error.HTTPError as exc:
        exc.close()
        logger.warning("HTTP %d for %s", exc.code, target)
        raise error_for_status(exc.code, target) from exc
    with response:
        yield response


def response_charset(response: HTTPResponse) -> str:
    """Codec name for the body of ``response``; UTF-8 unless a known charset is declared."""
    charset = response.headers.get_content_charset()
    if charset:
        try:
            return codecs.lookup(charset).name
        except LookupError:
            logger.debug("Unknown charset %r, reading as utf-8", charset)
    return "utf-8"


def _read_text(response: HTTPResponse) -> str:
    # Bytes the charset cannot map become U+FFFD.
    return response.read().decode(response_charset(response), errors="replace")


def fetch_text(url: str, *, timeout: float = 30.0) -> str:
    """GET ``url`` and return the whole body as text.

    Raises:
        InvalidURL: If ``url`` is malformed.
        NotFound: If the server answers 404.
        ServerError: For any other error status.
    """
    with _open(url, None, timeout) as response:
        return _read_text(response)


def fetch_lines(url: str, *, timeout: float = 30.0) -> str:
    """GET ``url`` reading one line at a time into a buffer.

    Every line, including the last, is terminated with ``\\n`` in the
    returned text; strip it to compare with :func:`fetch_text`.
    """
    buffer = io.StringIO()
    with open_reader(url, timeout=timeout) as reader:
        for line in reader:
            buffer.write(line.rstrip("\r\n"))
            buffer.write("\n")
    return buffer.getvalue()


@contextlib.contextmanager
def open_reader(url: str, *, timeout: float = 30.0) -> Iterator[io.TextIOBase]:
    """Open a text reader over the body of a GET to ``url``.

    The underlying response is closed when the ``with`` block exits,
    whether it exits normally or by an exception.

    Example::

        with open_reader(config.make_url("helloWorld")) as reader:
            html = reader.read()
    """
    with _open(url, None, timeout) as response:
        reader = io.TextIOWrapper(response, encoding=response_charset(response), errors="replace", newline="")
        try:
            yield reader
        finally:
            reader.close()


def post_form(url: str, data: Mapping[str, str], *, timeout: float = 30.0) -> tuple[int, str]:
    """POST ``data`` as ``application/x-www-form-urlencoded``.

    Returns:
        A ``(status, body_text)`` tuple.
    """
    payload = urllib.parse.urlencode(data).encode("ascii")
    with _open(url, payload, timeout) as response:
        return response.status, _read_text(response)
