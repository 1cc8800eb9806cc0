from __future__ import annotations

from typing import Any, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.models import GroupCreateInput
from zendesk_mcp.core.responses import ToolOutcome, created
from zendesk_mcp.core.tools._params import page_params


async def list_groups(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List agent groups in Zendesk."""
    return await client.list_groups(page_params(page, per_page))


async def get_group(client: ZendeskClient, id: int) -> Any:
    """Get a specific group by ID."""
    return await client.get_group(id)


async def create_group(
    client: ZendeskClient, name: str, description: Optional[str] = None
) -> ToolOutcome:
    """Create a new agent group."""
    data = GroupCreateInput(name=name, description=description)
    return created("Group", await client.create_group(data.to_payload()))
