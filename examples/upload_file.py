"""
File upload example using c_http_easy.

Usage: python upload_file.py PATH [URL]
"""

import asyncio
import logging
import sys

from c_http_easy import Client, HTTPCoreError, file_body

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main(path: str, url: str) -> int:
    client = Client(connect_timeout=10.0, read_timeout=60.0)

    async def handler(response, stream):
        body = await stream.aread()
        logger.info(f"{response.status_code} {response.reason.decode()}: {len(body)} bytes")
        return response.status_code

    try:
        status = await client.put(url, "application/octet-stream", file_body(path), handler)
    except (HTTPCoreError, OSError, asyncio.TimeoutError) as e:
        logger.error(f"Upload failed: {e}")
        return 1

    return 0 if 200 <= status < 300 else 1


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__.strip())
        sys.exit(2)
    target = sys.argv[2] if len(sys.argv) > 2 else "http://httpbin.org/put"
    sys.exit(asyncio.run(main(sys.argv[1], target)))
