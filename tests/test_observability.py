import logging

import httpx
import pytest
import respx
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient
from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.config import ClientCredentials
from zendesk_mcp.core.errors import ZendeskRequestError
from zendesk_mcp.core.logging import LogfmtFormatter
from zendesk_mcp.core.observability import log_event
from zendesk_mcp.transports.http.request_id_middleware import RequestIdMiddleware

BASE = "https://acme.zendesk.com/api/v2"


def _app(handler):
    return Starlette(
        routes=[Route("/mcp", handler, methods=["POST"])],
        middleware=[Middleware(RequestIdMiddleware)],
    )


def test_request_id_generated_and_logged(caplog):
    async def handler(request):
        return JSONResponse({"rid": request.state.request_id})

    app = _app(handler)
    with (
        TestClient(app) as client,
        caplog.at_level(logging.INFO, logger="zendesk_mcp.observability"),
    ):
        resp = client.post("/mcp", json={"hello": "world"})

    assert resp.status_code == 200
    rid = resp.headers["X-Request-Id"]
    assert resp.json() == {"rid": rid}
    record = next(r for r in caplog.records if r.getMessage() == "http_request")
    assert record.request_id == rid
    assert record.status == 200
    assert record.method == "POST"
    assert record.path == "/mcp"
    assert record.duration_ms >= 0


def test_incoming_correlation_id_is_reused():
    async def handler(request):
        return JSONResponse({})

    with TestClient(_app(handler)) as client:
        resp = client.post("/mcp", headers={"X-Correlation-Id": "corr-1"})

    assert resp.headers["X-Request-Id"] == "corr-1"


def test_request_id_logged_on_exception(caplog):
    async def handler(request):
        raise ValueError("boom")

    app = _app(handler)
    with (
        TestClient(app, raise_server_exceptions=False) as client,
        caplog.at_level(logging.INFO, logger="zendesk_mcp.observability"),
    ):
        resp = client.post("/mcp", json={})

    assert resp.status_code == 500
    record = next(r for r in caplog.records if r.getMessage() == "http_request")
    assert record.status == "exception"
    assert record.request_id


@pytest.mark.asyncio
@respx.mock
async def test_op_call_logged_on_success(caplog):
    caplog.set_level(logging.INFO, logger="zendesk_mcp.observability")
    respx.get(f"{BASE}/tickets/1.json").mock(
        return_value=httpx.Response(200, json={"ticket": {"id": 1}})
    )
    client = ZendeskClient(ClientCredentials("acme", "agent@example.com", "tok"))

    async with client:
        await client.get_ticket(1)

    record = next(r for r in caplog.records if r.getMessage() == "op_call")
    assert record.tool == "tickets"
    assert record.method == "GET"
    assert record.status == 200
    assert record.endpoint == "/api/v2/tickets/1.json"
    assert record.error_type is None


@pytest.mark.asyncio
@respx.mock
async def test_op_call_logged_on_exception(caplog):
    caplog.set_level(logging.INFO, logger="zendesk_mcp.observability")
    respx.get(f"{BASE}/users.json").mock(side_effect=httpx.ConnectTimeout("boom"))
    client = ZendeskClient(ClientCredentials("acme", "agent@example.com", "tok"))

    async with client:
        with pytest.raises(ZendeskRequestError):
            await client.get("/users.json", retry=False, tool="users")

    record = next(r for r in caplog.records if r.getMessage() == "op_call")
    assert record.tool == "users"
    assert record.status == "exception"
    assert record.error_type == "ConnectTimeout"


def test_logfmt_formatter_renders_extras_and_hides_unknowns():
    record = logging.LogRecord(
        "zendesk_mcp.client", logging.WARNING, __file__, 1, "op.retry", None, None
    )
    record.attempt = 2
    record.endpoint = "/tickets.json"
    record.error = "Zendesk API Error: 503 - try later"
    record.api_token = "secret"

    line = LogfmtFormatter().format(record)

    assert line.startswith("level=warning logger=zendesk_mcp.client event=op.retry")
    assert "attempt=2" in line
    assert "endpoint=/tickets.json" in line
    assert 'error="Zendesk API Error: 503 - try later"' in line
    assert "secret" not in line


def test_log_event_drops_reserved_keys(caplog):
    caplog.set_level(logging.INFO, logger="zendesk_mcp.observability")

    log_event("custom", tool="t", name="clobber", message="clobber")

    record = next(r for r in caplog.records if r.getMessage() == "custom")
    assert record.tool == "t"
    assert record.name == "zendesk_mcp.observability"
