import json

import pytest
import respx
from httpx import Response
from pydantic import ValidationError
from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.config import ClientCredentials
from zendesk_mcp.core.responses import ToolOutcome, format_result
from zendesk_mcp.core.tools.tickets import (
    create_ticket,
    delete_ticket,
    get_ticket,
    list_tickets,
    update_ticket,
)

BASE = "https://acme.zendesk.com/api/v2"


@pytest.fixture
def client():
    return ZendeskClient(ClientCredentials("acme", "agent@example.com", "tok"))


@pytest.mark.asyncio
@respx.mock
async def test_list_tickets_passes_paging_and_sorting(client):
    route = respx.get(f"{BASE}/tickets.json").mock(
        return_value=Response(200, json={"tickets": [], "count": 0})
    )

    async with client:
        await list_tickets(client, page=2, per_page=50, sort_order="desc")

    params = route.calls[0].request.url.params
    assert params["page"] == "2"
    assert params["per_page"] == "50"
    assert params["sort_order"] == "desc"
    assert "sort_by" not in params


@pytest.mark.asyncio
@respx.mock
async def test_get_ticket(client):
    respx.get(f"{BASE}/tickets/42.json").mock(
        return_value=Response(200, json={"ticket": {"id": 42, "subject": "Help"}})
    )

    async with client:
        data = await get_ticket(client, 42)

    assert data["ticket"]["subject"] == "Help"


@pytest.mark.asyncio
@respx.mock
async def test_create_ticket_wraps_comment_and_drops_unset_fields(client):
    route = respx.post(f"{BASE}/tickets.json").mock(
        return_value=Response(201, json={"ticket": {"id": 100}})
    )

    async with client:
        outcome = await create_ticket(
            client,
            subject="Printer on fire",
            comment="Smoke everywhere",
            priority="urgent",
            tags=["hardware"],
        )

    assert isinstance(outcome, ToolOutcome)
    assert format_result(outcome).startswith("Ticket created successfully!")
    assert json.loads(route.calls[0].request.content) == {
        "ticket": {
            "subject": "Printer on fire",
            "comment": {"body": "Smoke everywhere"},
            "priority": "urgent",
            "tags": ["hardware"],
        }
    }


@pytest.mark.asyncio
async def test_create_ticket_rejects_unknown_priority(client):
    async with client:
        with pytest.raises(ValidationError):
            await create_ticket(client, subject="s", comment="c", priority="asap")


@pytest.mark.asyncio
@respx.mock
async def test_update_ticket_sends_only_given_fields(client):
    route = respx.put(f"{BASE}/tickets/42.json").mock(
        return_value=Response(200, json={"ticket": {"id": 42, "status": "solved"}})
    )

    async with client:
        outcome = await update_ticket(client, 42, status="solved", comment="Done")

    assert outcome.message == "Ticket updated successfully!"
    assert json.loads(route.calls[0].request.content) == {
        "ticket": {"status": "solved", "comment": {"body": "Done"}}
    }


@pytest.mark.asyncio
@respx.mock
async def test_delete_ticket_returns_message(client):
    respx.delete(f"{BASE}/tickets/42.json").mock(return_value=Response(204))

    async with client:
        assert await delete_ticket(client, 42) == "Ticket 42 deleted successfully!"
