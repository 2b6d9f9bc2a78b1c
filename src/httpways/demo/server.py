"""The demo web application every client style is exercised against."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aiohttp import web

from httpways._internal.logging import get_logger
from httpways.pages import HELLO_WORLD_HTML, HELLO_WORLD_JSON, post_receipt

if TYPE_CHECKING:
    from aiohttp.typedefs import Handler

logger = get_logger("demo.server")


async def _hello_world_handler(request: web.Request) -> web.Response:
    """Fixed HTML page."""
    return web.Response(text=HELLO_WORLD_HTML, content_type="text/html")


async def _index_json_handler(request: web.Request) -> web.Response:
    """The hello world page as JSON."""
    return web.json_response(HELLO_WORLD_JSON)


async def _post_handler(request: web.Request) -> web.Response:
    """Acknowledge the received parameters and method."""
    params: dict[str, list[str]] = {}
    for key, value in request.query.items():
        params.setdefault(key, []).append(value)
    form = await request.post()
    for key, value in form.items():
        params.setdefault(key, []).append(str(value))
    return web.Response(text=post_receipt(params, request.method))


async def _reverse_handler(request: web.Request) -> web.Response:
    """Reverse the ``string`` form field."""
    form = await request.post()
    value = form.get("string")
    if value is None:
        raise web.HTTPBadRequest(text="missing form field: string")
    return web.Response(text=str(value)[::-1])


@web.middleware
async def _access_log_middleware(
    request: web.Request,
    handler: Handler,
) -> web.StreamResponse:
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        logger.info("%s %s -> %d", request.method, request.path, exc.status)
        raise
    logger.info("%s %s -> %d", request.method, request.path, response.status)
    return response


def create_app(app_name: str = "demo", page_suffix: str = "") -> web.Application:
    """Build the demo application mounted under ``/<app_name>/``.

    Args:
        app_name: Context path segment the pages live under.
        page_suffix: Suffix each page name carries, e.g. ``.groovy``.

    Returns:
        The aiohttp application. Unknown pages answer 404.
    """
    prefix = f"/{app_name.strip('/')}"
    app = web.Application(middlewares=[_access_log_middleware])
    app.router.add_get(f"{prefix}/helloWorld{page_suffix}", _hello_world_handler)
    app.router.add_get(f"{prefix}/indexJson{page_suffix}", _index_json_handler)
    app.router.add_route("*", f"{prefix}/post{page_suffix}", _post_handler)
    app.router.add_post(f"{prefix}/reverse{page_suffix}", _reverse_handler)
    return app


def run_server(
    host: str = "localhost",
    port: int = 8080,
    app_name: str = "demo",
    page_suffix: str = "",
) -> None:
    """Serve the demo application until interrupted."""
    logger.info("Serving /%s/ on http://%s:%d", app_name, host, port)
    web.run_app(
        create_app(app_name, page_suffix),
        host=host,
        port=port,
        print=None,
        access_log=None,
    )
