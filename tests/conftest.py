"""Shared test fixtures for the httpways test suite."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import socket
import threading
from typing import TYPE_CHECKING

import pytest
from aiohttp import web

from httpways._internal.config import HttpWaysConfig
from httpways.clients.builder import HttpBuilder
from httpways.demo.server import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure.

    Tests marked ``network`` are skipped unless HTTPWAYS_LIVE_NETWORK=1.
    """
    live = os.environ.get("HTTPWAYS_LIVE_NETWORK") == "1"
    skip_network = pytest.mark.skip(reason="needs public internet; set HTTPWAYS_LIVE_NETWORK=1")
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)
        if not live and item.get_closest_marker("network") is not None:
            item.add_marker(skip_network)


# =============================================================================
# Demo server in a background thread
# =============================================================================


def _get_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


@contextlib.contextmanager
def _serve_in_thread(app: web.Application) -> Iterator[int]:
    """Serve ``app`` from its own event loop in a daemon thread, yielding the port.

    A thread keeps the blocking clients (urllib, http.client) usable from
    test code without deadlocking an event loop.
    """
    port = _get_free_port()
    started = threading.Event()
    loop_holder: list[asyncio.AbstractEventLoop] = []

    def _thread_target() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        runner = web.AppRunner(app)
        loop.run_until_complete(runner.setup())
        site = web.TCPSite(runner, "127.0.0.1", port)
        loop.run_until_complete(site.start())
        loop_holder.append(loop)
        started.set()
        loop.run_forever()
        loop.run_until_complete(runner.cleanup())
        loop.close()

    thread = threading.Thread(target=_thread_target, daemon=True)
    thread.start()
    started.wait(timeout=5.0)

    try:
        yield port
    finally:
        if loop_holder:
            loop_holder[0].call_soon_threadsafe(loop_holder[0].stop)
        thread.join(timeout=5.0)


@contextlib.contextmanager
def running_demo_server(app_name: str = "demo", page_suffix: str = "") -> Iterator[HttpWaysConfig]:
    """Run the demo app in a background thread and describe where it lives."""
    with _serve_in_thread(create_app(app_name, page_suffix)) as port:
        yield HttpWaysConfig(
            host="127.0.0.1",
            port=port,
            app_name=app_name,
            page_suffix=page_suffix,
            request_timeout=5.0,
        )


# Responses real servers send that the demo app never does.
TAG_SOUP_HTML = "<html><body><p>hello&nbsp;world<br></p><ul><li>one<li>two</ul></body></html>"
BINARY_BODY = b"\xff\xfe\x00broken"
LATIN1_BODY = "café".encode("latin-1")


def _create_quirks_app() -> web.Application:
    async def tag_soup(request: web.Request) -> web.Response:
        return web.Response(text=TAG_SOUP_HTML, content_type="text/html")

    async def binary_gone(request: web.Request) -> web.Response:
        return web.Response(status=404, body=BINARY_BODY, content_type="application/octet-stream")

    async def mislabelled(request: web.Request) -> web.Response:
        return web.Response(body=LATIN1_BODY, headers={"Content-Type": "text/plain; charset=utf-8"})

    async def unknown_charset(request: web.Request) -> web.Response:
        return web.Response(body=b"plain ascii", headers={"Content-Type": "text/plain; charset=x-no-such-codec"})

    app = web.Application()
    app.router.add_get("/quirks/tagSoup", tag_soup)
    app.router.add_get("/quirks/binaryGone", binary_gone)
    app.router.add_get("/quirks/mislabelled", mislabelled)
    app.router.add_get("/quirks/unknownCharset", unknown_charset)
    return app


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers installed by setup_logging (e.g. by CLI runs) after each test."""
    yield
    logger = logging.getLogger("httpways")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(scope="session")
def demo_config() -> Iterator[HttpWaysConfig]:
    """Configuration pointing at a demo server shared by the whole session."""
    with running_demo_server() as config:
        yield config


@pytest.fixture
def groovy_config() -> Iterator[HttpWaysConfig]:
    """Demo server whose pages carry a ``.groovy`` suffix under ``/groovy/``."""
    with running_demo_server(app_name="groovy", page_suffix=".groovy") as config:
        yield config


@pytest.fixture
async def builder(demo_config: HttpWaysConfig) -> AsyncIterator[HttpBuilder]:
    """Builder client opened against the shared demo server."""
    async with HttpBuilder(demo_config.base_url, timeout=demo_config.request_timeout) as http:
        yield http


@pytest.fixture(scope="session")
def quirks_url() -> Iterator[str]:
    """Base URL of a server answering with tag soup, binary errors and bad charsets."""
    with _serve_in_thread(_create_quirks_app()) as port:
        yield f"http://127.0.0.1:{port}/quirks/"
