from __future__ import annotations

from typing import Any, Dict, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.models import SearchType, SortOrder
from zendesk_mcp.core.search import execute_search
from zendesk_mcp.core.tools._params import page_params


async def search(
    client: ZendeskClient,
    query: str,
    type: Optional[SearchType] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[SortOrder] = None,
    page: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Search tickets, users, organizations and other Zendesk content.

    Every result carries a ``result_type``; when ``type`` is given the query
    is restricted to that object type.
    """
    search_query = f"type:{type} {query}" if type else query
    return await execute_search(
        lambda: client.search(
            search_query, page_params(page, sort_by=sort_by, sort_order=sort_order)
        ),
        type or "mixed",
    )
