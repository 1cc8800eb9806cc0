from __future__ import annotations

from typing import Any, List, Optional

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.models import (
    SortOrder,
    TicketComment,
    TicketCreateInput,
    TicketPriority,
    TicketStatus,
    TicketType,
    TicketUpdateInput,
)
from zendesk_mcp.core.registry import destructive
from zendesk_mcp.core.responses import ToolOutcome, created, deleted, updated
from zendesk_mcp.core.tools._params import page_params


async def list_tickets(
    client: ZendeskClient,
    page: Optional[int] = None,
    per_page: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[SortOrder] = None,
) -> Any:
    """List tickets in Zendesk."""
    return await client.list_tickets(page_params(page, per_page, sort_by, sort_order))


async def get_ticket(client: ZendeskClient, id: int) -> Any:
    """Get a specific ticket by ID."""
    return await client.get_ticket(id)


async def create_ticket(
    client: ZendeskClient,
    subject: str,
    comment: str,
    priority: Optional[TicketPriority] = None,
    status: Optional[TicketStatus] = None,
    requester_id: Optional[int] = None,
    assignee_id: Optional[int] = None,
    group_id: Optional[int] = None,
    type: Optional[TicketType] = None,
    tags: Optional[List[str]] = None,
) -> ToolOutcome:
    """
    Create a new ticket.

    ``comment`` becomes the first public comment (the ticket description).
    """
    data = TicketCreateInput(
        subject=subject,
        comment=TicketComment(body=comment),
        priority=priority,
        status=status,
        requester_id=requester_id,
        assignee_id=assignee_id,
        group_id=group_id,
        type=type,
        tags=tags,
    )
    return created("Ticket", await client.create_ticket(data.to_payload()))


@destructive
async def update_ticket(
    client: ZendeskClient,
    id: int,
    subject: Optional[str] = None,
    comment: Optional[str] = None,
    priority: Optional[TicketPriority] = None,
    status: Optional[TicketStatus] = None,
    assignee_id: Optional[int] = None,
    group_id: Optional[int] = None,
    type: Optional[TicketType] = None,
    tags: Optional[List[str]] = None,
) -> ToolOutcome:
    """Update an existing ticket. Only the fields provided are changed."""
    data = TicketUpdateInput(
        subject=subject,
        comment=TicketComment(body=comment) if comment is not None else None,
        priority=priority,
        status=status,
        assignee_id=assignee_id,
        group_id=group_id,
        type=type,
        tags=tags,
    )
    return updated("Ticket", await client.update_ticket(id, data.to_payload()))


@destructive
async def delete_ticket(client: ZendeskClient, id: int) -> str:
    """Delete a ticket."""
    await client.delete_ticket(id)
    return deleted("Ticket", id)
