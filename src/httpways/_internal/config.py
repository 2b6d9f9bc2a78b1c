"""Configuration loading for httpways."""

from __future__ import annotations

import os
from dataclasses import dataclass

from httpways._internal.errors import ConfigError


@dataclass(frozen=True)
class HttpWaysConfig:
    """Location of the demo application and client defaults.

    Attributes:
        host: Host name the demo application listens on.
        port: TCP port of the demo application.
        app_name: Application context path, the first URL path segment.
        page_suffix: Suffix appended to every page name (``.groovy`` when
            targeting a Groovlet deployment, empty for the bundled server).
        request_timeout: Default request timeout in seconds.
        connection_pool_size: Maximum connections held by a pooled client.
    """

    host: str = "localhost"
    port: int = 8080
    app_name: str = "demo"
    page_suffix: str = ""
    request_timeout: float = 30.0
    connection_pool_size: int = 10

    @property
    def base_url(self) -> str:
        """URL of the application root, always ending with a slash."""
        return f"http://{self.host}:{self.port}/{self.app_name}/"

    def page(self, name: str) -> str:
        """Return the path of a page relative to :attr:`base_url`."""
        return f"{name}{self.page_suffix}" if name else ""

    def make_url(self, page: str) -> str:
        """Compose the absolute URL of a page.

        Example::

            >>> HttpWaysConfig(port=9000).make_url("helloWorld")
            'http://localhost:9000/demo/helloWorld'
        """
        return f"{self.base_url}{self.page(page)}"


def _int_env(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got: {raw!r}"
        raise ConfigError(msg) from None


def load_config() -> HttpWaysConfig:
    """Load configuration from environment variables with defaults.

    Environment variables:
        HTTPWAYS_HOST: Demo application host (default: localhost).
        HTTPWAYS_PORT: Demo application port (default: 8080).
        HTTPWAYS_APP_NAME: Application context path (default: demo).
        HTTPWAYS_PAGE_SUFFIX: Suffix appended to page names (default: empty).
        HTTPWAYS_TIMEOUT: Request timeout in seconds (default: 30.0).
        HTTPWAYS_POOL_SIZE: Pooled client connection limit (default: 10).

    Returns:
        Populated HttpWaysConfig instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    port = _int_env("HTTPWAYS_PORT", "8080")
    if not 1 <= port <= 65535:
        msg = f"HTTPWAYS_PORT must be between 1 and 65535, got: {port}"
        raise ConfigError(msg)

    app_name = os.environ.get("HTTPWAYS_APP_NAME", "demo").strip("/")
    if not app_name:
        msg = "HTTPWAYS_APP_NAME must not be empty"
        raise ConfigError(msg)

    timeout_str = os.environ.get("HTTPWAYS_TIMEOUT", "30.0")
    try:
        timeout = float(timeout_str)
    except ValueError:
        msg = f"HTTPWAYS_TIMEOUT must be a number, got: {timeout_str!r}"
        raise ConfigError(msg) from None

    if timeout <= 0:
        msg = f"HTTPWAYS_TIMEOUT must be positive, got: {timeout}"
        raise ConfigError(msg)

    pool_size = _int_env("HTTPWAYS_POOL_SIZE", "10")
    if pool_size < 1:
        msg = f"HTTPWAYS_POOL_SIZE must be >= 1, got: {pool_size}"
        raise ConfigError(msg)

    return HttpWaysConfig(
        host=os.environ.get("HTTPWAYS_HOST", "localhost"),
        port=port,
        app_name=app_name,
        page_suffix=os.environ.get("HTTPWAYS_PAGE_SUFFIX", ""),
        request_timeout=timeout,
        connection_pool_size=pool_size,
    )
