import json

import pytest
import respx
from httpx import Response
from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.config import ClientCredentials
from zendesk_mcp.core.tools.users import create_user, list_users, search_users

BASE = "https://acme.zendesk.com/api/v2"


@pytest.fixture
def client():
    return ZendeskClient(ClientCredentials("acme", "agent@example.com", "tok"))


@pytest.mark.asyncio
@respx.mock
async def test_list_users_filters_by_role(client):
    route = respx.get(f"{BASE}/users.json").mock(
        return_value=Response(200, json={"users": []})
    )

    async with client:
        await list_users(client, role="agent")

    assert route.calls[0].request.url.params["role"] == "agent"


@pytest.mark.asyncio
@respx.mock
async def test_create_user(client):
    route = respx.post(f"{BASE}/users.json").mock(
        return_value=Response(201, json={"user": {"id": 5}})
    )

    async with client:
        outcome = await create_user(
            client, name="Ada", email="ada@example.com", verified=True
        )

    assert outcome.message == "User created successfully!"
    assert json.loads(route.calls[0].request.content) == {
        "user": {"name": "Ada", "email": "ada@example.com", "verified": True}
    }


@pytest.mark.asyncio
@respx.mock
async def test_search_users_builds_filtered_query(client):
    route = respx.get(f"{BASE}/search.json").mock(
        return_value=Response(
            200,
            json={
                "results": [{"id": 5, "url": f"{BASE}/users/5.json"}, {"id": 6}],
                "count": 2,
            },
        )
    )

    async with client:
        out = await search_users(
            client,
            "ada",
            role="admin",
            verified=False,
            organization_id=9,
            created_after="2024-01-01",
        )

    query = route.calls[0].request.url.params["query"]
    assert query == (
        "type:user ada role:admin verified:false organization:9 created>2024-01-01"
    )
    assert [r["result_type"] for r in out["results"]] == ["user", "user"]
    assert out["metadata"]["total_count"] == 2


@pytest.mark.asyncio
@respx.mock
async def test_search_users_failure_returns_empty_results(client):
    respx.get(f"{BASE}/search.json").mock(return_value=Response(401))

    async with client:
        out = await search_users(client, "ada")

    assert out["results"] == []
    assert out["metadata"]["error"]["kind"] == "upstream"
