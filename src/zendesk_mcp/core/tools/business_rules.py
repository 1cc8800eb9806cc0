"""Views, triggers and automations: read-only access to ticket business rules."""

from __future__ import annotations

from typing import Any, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.tools._params import page_params


async def list_views(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List views in Zendesk."""
    return await client.list_views(page_params(page, per_page))


async def get_view(client: ZendeskClient, id: int) -> Any:
    """Get a specific view by ID."""
    return await client.get_view(id)


async def list_triggers(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List triggers in Zendesk."""
    return await client.list_triggers(page_params(page, per_page))


async def get_trigger(client: ZendeskClient, id: int) -> Any:
    """Get a specific trigger by ID."""
    return await client.get_trigger(id)


async def list_automations(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List automations in Zendesk."""
    return await client.list_automations(page_params(page, per_page))


async def get_automation(client: ZendeskClient, id: int) -> Any:
    """Get a specific automation by ID."""
    return await client.get_automation(id)
