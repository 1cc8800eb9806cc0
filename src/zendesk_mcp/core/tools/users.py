from __future__ import annotations

from typing import Any, Dict, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.models import SortOrder, UserCreateInput, UserRole
from zendesk_mcp.core.responses import ToolOutcome, created
from zendesk_mcp.core.search import execute_search
from zendesk_mcp.core.tools._params import page_params


def _user_search_query(
    query: str,
    *,
    role: Optional[str] = None,
    verified: Optional[bool] = None,
    organization_id: Optional[int] = None,
    created_after: Optional[str] = None,
    created_before: Optional[str] = None,
) -> str:
    parts = [f"type:user {query}"]
    if role:
        parts.append(f"role:{role}")
    if verified is not None:
        parts.append(f"verified:{str(verified).lower()}")
    if organization_id:
        parts.append(f"organization:{organization_id}")
    if created_after:
        parts.append(f"created>{created_after}")
    if created_before:
        parts.append(f"created<{created_before}")
    return " ".join(parts)


async def list_users(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    role: Optional[str] = None,
) -> Any:
    """List users in Zendesk, optionally filtered by role."""
    return await client.list_users(page_params(page, per_page, role=role))


async def get_user(client: ZendeskClient, id: int) -> Any:
    """Get a specific user by ID."""
    return await client.get_user(id)


async def create_user(
    client: ZendeskClient,
    name: str,
    email: str,
    role: Optional[UserRole] = None,
    verified: Optional[bool] = None,
    phone: Optional[str] = None,
    organization_id: Optional[int] = None,
) -> ToolOutcome:
    """Create a new user."""
    data = UserCreateInput(
        name=name,
        email=email,
        role=role,
        verified=verified,
        phone=phone,
        organization_id=organization_id,
    )
    return created("User", await client.create_user(data.to_payload()))


async def search_users(
    client: ZendeskClient,
    query: str,
    role: Optional[UserRole] = None,
    verified: Optional[bool] = None,
    organization_id: Optional[int] = None,
    created_after: Optional[str] = None,
    created_before: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[SortOrder] = None,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Search for users with user-specific filtering.

    Filters are appended to the query using Zendesk search syntax
    (``role:``, ``verified:``, ``organization:``, ``created>``/``created<``).
    Dates are ISO formatted (``2024-01-31``).
    """
    search_query = _user_search_query(
        query,
        role=role,
        verified=verified,
        organization_id=organization_id,
        created_after=created_after,
        created_before=created_before,
    )
    return await execute_search(
        lambda: client.search(
            search_query, page_params(page, per_page, sort_by, sort_order)
        ),
        "user",
    )
