from __future__ import annotations

from typing import Any, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.tools._params import page_params

SUPPORT_INFO = (
    "Zendesk Support information: This MCP server provides comprehensive access "
    "to Zendesk Support APIs including tickets, users, organizations, groups, "
    "macros, views, triggers, and automations."
)


async def support_info(client: ZendeskClient) -> str:
    """Get information about Zendesk Support configuration."""
    return SUPPORT_INFO


async def get_talk_stats(client: ZendeskClient) -> Any:
    """Get Zendesk Talk statistics."""
    return await client.get_talk_stats()


async def list_chats(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List Zendesk Chat conversations."""
    return await client.list_chats(page_params(page, per_page))
