from __future__ import annotations

import asyncio

from zendesk_mcp.core.config import create_client_from_env
from zendesk_mcp.core.logging import setup_logging

from .app import build_fastmcp
from .config import HttpConfig


async def main() -> None:
    setup_logging()
    cfg = HttpConfig.from_env()
    client = create_client_from_env()
    try:
        fastmcp = build_fastmcp(cfg, client)
        await fastmcp.run_streamable_http_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
