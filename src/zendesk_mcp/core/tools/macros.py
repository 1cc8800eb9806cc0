from __future__ import annotations

from typing import Any, List, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.models import MacroAction, MacroCreateInput
from zendesk_mcp.core.responses import ToolOutcome, created
from zendesk_mcp.core.tools._params import page_params


async def list_macros(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List macros in Zendesk."""
    return await client.list_macros(page_params(page, per_page))


async def get_macro(client: ZendeskClient, id: int) -> Any:
    """Get a specific macro by ID."""
    return await client.get_macro(id)


async def create_macro(
    client: ZendeskClient,
    title: str,
    actions: List[MacroAction],
    description: Optional[str] = None,
) -> ToolOutcome:
    """
    Create a new macro.

    Each action is a ``{"field": ..., "value": ...}`` pair applied to the
    ticket when the macro runs, e.g. ``{"field": "status", "value": "solved"}``.
    """
    data = MacroCreateInput(title=title, description=description, actions=actions)
    return created("Macro", await client.create_macro(data.to_payload()))
