from __future__ import annotations

import asyncio
from typing import Tuple

from mcp.server.fastmcp import FastMCP

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.config import (
    DESTRUCTIVE_TOOLS_ENV,
    create_client_from_env,
    get_bool_env,
)
from zendesk_mcp.core.logging import setup_logging
from zendesk_mcp.core.registry import register_discovered_tools

SERVER_NAME = "zendesk-mcp"


def build_fastmcp() -> Tuple[FastMCP, ZendeskClient]:
    client = create_client_from_env()
    app = FastMCP(SERVER_NAME)
    register_discovered_tools(
        app,
        client,
        include_destructive=get_bool_env(DESTRUCTIVE_TOOLS_ENV, False),
    )
    return app, client


async def main() -> None:
    setup_logging()
    app, client = build_fastmcp()
    try:
        await app.run_stdio_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
