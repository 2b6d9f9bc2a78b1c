"""Fetch the hello world page four different ways.

Start the demo application first, then run this script:

    httpways serve --port 8080 &
    python examples/hello_world.py
"""

from __future__ import annotations

import asyncio

from httpways import ContentType, HttpBuilder, PooledClient, UrlConnection, fetch_text, load_config


async def main() -> None:
    config = load_config()
    url = config.make_url("helloWorld")

    print(fetch_text(url))

    with UrlConnection(url) as connection, connection.input_stream() as reader:
        print(connection.response_code, reader.read())

    async with HttpBuilder(config.base_url) as http:
        data = await http.get(config.page("indexJson"), content_type=ContentType.JSON)
        print(data["html"]["body"]["p"])

    async with PooledClient(pool_size=config.connection_pool_size) as client:
        print(await client.get(url))


if __name__ == "__main__":
    asyncio.run(main())
