"""Every way of talking to the demo application, as registered checks.

Importing this module fills :data:`httpways.checks.registry.registry`.
Blocking clients run in a worker thread so the event loop stays free.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from httpways._internal.errors import CheckFailure, InvalidURL, NotFound
from httpways.checks.registry import Mechanism, check, expect_equal, expect_raises
from httpways.clients.builder import ContentType
from httpways.clients.connection import UrlConnection
from httpways.clients.pooled import BasicResponseHandler, PooledClient, execute_once
from httpways.clients.urlfetch import fetch_lines, fetch_text, open_reader, post_form
from httpways.pages import HELLO_WORLD_HTML, POST_RESPONSE, HelloPage

if TYPE_CHECKING:
    from httpways.checks.registry import CheckContext
    from httpways.clients.builder import BuilderResponse

# Public URL expected to answer 404; reaching it needs internet access.
REMOTE_MISSING_URL = "http://google.com/notThere"


# ---------------------------------------------------------------------------
# urllib
# ---------------------------------------------------------------------------


@check(name="GET a page as text", mechanism=Mechanism.URLFETCH)
async def get_as_text(ctx: CheckContext) -> None:
    html = await asyncio.to_thread(fetch_text, ctx.config.make_url("helloWorld"))
    expect_equal(html, HELLO_WORLD_HTML, "body")


@check(name="GET with buffered line reads", mechanism=Mechanism.URLFETCH)
async def get_line_by_line(ctx: CheckContext) -> None:
    text = await asyncio.to_thread(fetch_lines, ctx.config.make_url("helloWorld"))
    expect_equal(text.strip(), HELLO_WORLD_HTML, "body")


@check(name="Malformed URL is rejected", mechanism=Mechanism.URLFETCH)
async def malformed_url(ctx: CheckContext) -> None:
    expect_raises(InvalidURL, lambda: fetch_text("htp://foo.com"), "htp://foo.com")


@check(name="Missing remote page raises NotFound", mechanism=Mechanism.URLFETCH, requires_network=True)
async def missing_remote_page(ctx: CheckContext) -> None:
    await asyncio.to_thread(
        expect_raises,
        NotFound,
        lambda: fetch_text(REMOTE_MISSING_URL),
        REMOTE_MISSING_URL,
    )


def _read_and_close(url: str) -> str:
    with open_reader(url) as reader:
        html = reader.read()
    if not reader.closed:
        msg = "reader still open after the with block"
        raise CheckFailure(msg)
    return html


@check(name="GET through a scoped reader", mechanism=Mechanism.URLFETCH)
async def get_with_reader(ctx: CheckContext) -> None:
    html = await asyncio.to_thread(_read_and_close, ctx.config.make_url("helloWorld"))
    expect_equal(html, HELLO_WORLD_HTML, "body")


@check(name="POST a form with urlopen", mechanism=Mechanism.URLFETCH)
async def post_with_urlopen(ctx: CheckContext) -> None:
    status, text = await asyncio.to_thread(post_form, ctx.config.make_url("post"), {"arg": "foo"})
    expect_equal(status, 200, "status")
    expect_equal(text, POST_RESPONSE, "body")


# ---------------------------------------------------------------------------
# http.client
# ---------------------------------------------------------------------------


def _missing_page_status(url: str) -> int:
    with UrlConnection(url) as connection:
        status = connection.response_code

        def read() -> None:
            with connection.input_stream() as reader:
                reader.read()

        expect_raises(NotFound, read, "reading the body")
    return status


@check(name="Missing page reports 404", mechanism=Mechanism.CONNECTION)
async def missing_page_status(ctx: CheckContext) -> None:
    status = await asyncio.to_thread(_missing_page_status, ctx.config.make_url("notThere"))
    expect_equal(status, 404, "status")


def _post_via_output_stream(url: str) -> tuple[int, str]:
    with UrlConnection(url) as connection:
        connection.do_output = True
        with connection.output_stream() as writer:
            writer.write("arg=foo")
        with connection.input_stream() as reader:
            text = reader.read()
        return connection.response_code, text


@check(name="POST through an output stream", mechanism=Mechanism.CONNECTION)
async def post_with_connection(ctx: CheckContext) -> None:
    status, text = await asyncio.to_thread(_post_via_output_stream, ctx.config.make_url("post"))
    expect_equal(status, 200, "status")
    expect_equal(text, POST_RESPONSE, "body")


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def _with_status(response: BuilderResponse, parsed: Any) -> tuple[Any, int]:
    return parsed, response.status


@check(name="Builder GET as plain text", mechanism=Mechanism.BUILDER)
async def builder_get_text(ctx: CheckContext) -> None:
    html, status = await ctx.builder.get(
        ctx.config.page("helloWorld"),
        content_type=ContentType.TEXT,
        success=_with_status,
    )
    expect_equal(status, 200, "status")
    expect_equal(html, HELLO_WORLD_HTML, "body")


@check(name="Builder GET with automatic parsing", mechanism=Mechanism.BUILDER)
async def builder_get_parsed(ctx: CheckContext) -> None:
    tree, status = await ctx.builder.get(ctx.config.page("helloWorld"), success=_with_status)
    expect_equal(status, 200, "status")
    expect_equal(HelloPage.from_tree(tree).paragraph, "hello world", "body > p")


@check(name="Builder GET with JSON parsing", mechanism=Mechanism.BUILDER)
async def builder_get_json(ctx: CheckContext) -> None:
    data, status = await ctx.builder.get(
        ctx.config.page("indexJson"),
        content_type=ContentType.JSON,
        success=_with_status,
    )
    expect_equal(status, 200, "status")
    expect_equal(HelloPage.from_json(data).paragraph, "hello world", "html.body.p")


def _must_not_succeed(response: BuilderResponse, parsed: Any) -> Any:
    msg = f"success handler ran for HTTP {response.status}"
    raise CheckFailure(msg)


@check(name="Builder failure handler sees 404", mechanism=Mechanism.BUILDER)
async def builder_failure_handler(ctx: CheckContext) -> None:
    seen: list[int] = []
    with ctx.builder.failure_handler(lambda resp: seen.append(resp.status)):
        await ctx.builder.get(
            ctx.config.page("notThere"),
            content_type=ContentType.TEXT,
            success=_must_not_succeed,
        )
    expect_equal(seen, [404], "statuses passed to the failure handler")


@check(name="Builder POST a form", mechanism=Mechanism.BUILDER)
async def builder_post(ctx: CheckContext) -> None:
    text, status = await ctx.builder.post(
        ctx.config.page("post"),
        body={"arg": "foo"},
        content_type=ContentType.TEXT,
        success=_with_status,
    )
    expect_equal(status, 200, "status")
    expect_equal(text, POST_RESPONSE, "body")


@check(name="Builder POST to reverse", mechanism=Mechanism.BUILDER)
async def builder_post_reverse(ctx: CheckContext) -> None:
    value = "foo bar"
    text, status = await ctx.builder.post(
        ctx.config.page("reverse"),
        body={"string": value},
        content_type=ContentType.TEXT,
        success=_with_status,
    )
    expect_equal(status, 200, "status")
    expect_equal(text, value[::-1], "body")


# ---------------------------------------------------------------------------
# Pooled client
# ---------------------------------------------------------------------------


@check(name="Pooled GET with a response handler", mechanism=Mechanism.POOLED)
async def pooled_get(ctx: CheckContext) -> None:
    async with PooledClient(
        pool_size=ctx.config.connection_pool_size,
        timeout=ctx.config.request_timeout,
    ) as client:
        body = await client.execute("GET", ctx.config.make_url("helloWorld"), BasicResponseHandler())
    expect_equal(body, HELLO_WORLD_HTML, "body")


@check(name="Pooled GET in one expression", mechanism=Mechanism.POOLED)
async def pooled_get_once(ctx: CheckContext) -> None:
    body = await execute_once(ctx.config.make_url("helloWorld"), BasicResponseHandler())
    expect_equal(body, HELLO_WORLD_HTML, "body")
