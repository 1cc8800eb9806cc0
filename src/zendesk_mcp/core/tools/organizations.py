from __future__ import annotations

from typing import Any, List, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.models import OrganizationCreateInput
from zendesk_mcp.core.responses import ToolOutcome, created
from zendesk_mcp.core.tools._params import page_params


async def list_organizations(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
) -> Any:
    """List organizations in Zendesk."""
    return await client.list_organizations(page_params(page, per_page))


async def get_organization(client: ZendeskClient, id: int) -> Any:
    """Get a specific organization by ID."""
    return await client.get_organization(id)


async def create_organization(
    client: ZendeskClient,
    name: str,
    domain_names: Optional[List[str]] = None,
    details: Optional[str] = None,
    notes: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> ToolOutcome:
    """Create a new organization."""
    data = OrganizationCreateInput(
        name=name, domain_names=domain_names, details=details, notes=notes, tags=tags
    )
    return created("Organization", await client.create_organization(data.to_payload()))
