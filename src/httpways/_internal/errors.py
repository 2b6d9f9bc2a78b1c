"""Custom exception hierarchy for httpways."""

from __future__ import annotations


class HttpWaysError(Exception):
    """Base exception for all httpways errors.

    All custom exceptions in httpways inherit from this class, making it
    easy to catch any httpways-specific error with a single except clause.
    """


class ConfigError(HttpWaysError):
    """Raised when configuration is invalid or missing.

    Examples:
        - ``HTTPWAYS_PORT`` is not an integer.
        - ``HTTPWAYS_TIMEOUT`` is zero or negative.
    """


class InvalidURL(HttpWaysError):
    """Raised when a URL string cannot be turned into a usable HTTP URL.

    Examples:
        - ``htp://foo.com`` (unknown scheme).
        - ``http://`` (no host).
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Malformed URL {url!r}: {reason}")


class ServerError(HttpWaysError):
    """Raised when the server answers with a non-successful status code."""

    def __init__(self, status: int, url: str = "") -> None:
        self.status = status
        self.url = url
        super().__init__(f"HTTP {status} for {url}" if url else f"HTTP {status}")


class NotFound(ServerError):
    """Raised when the requested resource does not exist (HTTP 404)."""

    def __init__(self, url: str = "") -> None:
        super().__init__(404, url)


class ResponseParseError(HttpWaysError):
    """Raised when a response body cannot be parsed as the expected type."""


class CheckError(HttpWaysError):
    """Raised when a check definition is invalid.

    Examples:
        - A function decorated with @check is not a coroutine function.
        - Two checks are registered under the same name.
    """


class CheckFailure(HttpWaysError):
    """Raised by a check when an expectation about a response does not hold."""


def error_for_status(status: int, url: str = "") -> ServerError:
    """Build the typed error matching an HTTP status code.

    Args:
        status: The HTTP status code of the response.
        url: The URL that produced it.

    Returns:
        ``NotFound`` for 404, ``ServerError`` otherwise.
    """
    if status == 404:
        return NotFound(url)
    return ServerError(status, url)
