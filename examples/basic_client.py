"""
Basic client example using c_http_easy.

This example demonstrates one-call GET, form POST and PUT requests,
each on its own connection.
"""

import asyncio
import json
import logging

from c_http_easy import concat_handler, get, post, post_form, put

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


async def status_handler(response, stream):
    """Return the status code and body of a response."""
    body = await stream.aread()
    return response.status_code, body


async def simple_get_request():
    """Demonstrate a simple GET request."""
    logger.info("Making simple GET request...")

    status, body = await get("http://httpbin.org/get", status_handler)
    logger.info(f"Response status: {status}")
    logger.info(f"Response body length: {len(body)} bytes")


async def post_json_request():
    """Demonstrate a POST request whose body is written in pieces."""
    logger.info("Making POST request with body...")

    async def body(sink):
        sink.write('{"message": ')
        sink.write(json.dumps("Hello, World!"))
        sink.write("}")

    status, data = await post("http://httpbin.org/post", "application/json", body, status_handler)
    logger.info(f"Response status: {status}")
    logger.info(f"Echoed body: {json.loads(data)['data']}")


async def form_request():
    """Demonstrate a form POST."""
    logger.info("Making form POST request...")

    data = await post_form(
        "http://httpbin.org/post",
        [("name", "Ada Lovelace"), ("lang", "en & fr")],
        concat_handler,
    )
    logger.info(f"Echoed form: {json.loads(data)['form']}")


async def put_request():
    """Demonstrate a PUT request."""
    logger.info("Making PUT request...")

    async def body(sink):
        sink.write(b"plain text body")

    status, _ = await put("http://httpbin.org/put", "text/plain", body, status_handler)
    logger.info(f"Response status: {status}")


async def main():
    """Run all examples."""
    await simple_get_request()
    await post_json_request()
    await form_request()
    await put_request()


if __name__ == "__main__":
    asyncio.run(main())
