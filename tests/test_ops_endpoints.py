import pytest
from starlette.testclient import TestClient
from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.config import ClientCredentials
from zendesk_mcp.transports.http.app import build_http_app
from zendesk_mcp.transports.http.config import HttpConfig

ENV_VARS = ("ZENDESK_SUBDOMAIN", "ZENDESK_EMAIL", "ZENDESK_API_TOKEN")


def _build_app(cfg: HttpConfig | None = None):
    client = ZendeskClient(ClientCredentials("acme", "agent@example.com", "tok"))
    return build_http_app(cfg=cfg or HttpConfig(), client=client)


@pytest.fixture
def full_env(monkeypatch):
    monkeypatch.setenv("ZENDESK_SUBDOMAIN", "acme")
    monkeypatch.setenv("ZENDESK_EMAIL", "agent@example.com")
    monkeypatch.setenv("ZENDESK_API_TOKEN", "tok")


def test_healthz_ok_without_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    client = TestClient(_build_app())

    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers["Cache-Control"] == "no-store"


def test_readyz_ok_with_credentials(full_env):
    client = TestClient(_build_app())

    resp = client.get("/readyz")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["failed"] == []
    assert body["checks"] == {
        "subdomain_present": True,
        "email_present": True,
        "api_token_present": True,
    }


def test_readyz_missing_token(full_env, monkeypatch):
    monkeypatch.delenv("ZENDESK_API_TOKEN")
    client = TestClient(_build_app())

    resp = client.get("/readyz")
    assert resp.status_code == 503
    body = resp.json()
    assert body["status"] == "fail"
    assert body["failed"] == ["api_token_present"]


def test_ops_ignore_accept_header(full_env):
    client = TestClient(_build_app())

    resp = client.get("/healthz", headers={"Accept": "text/plain"})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_sse_disabled_by_default(full_env):
    client = TestClient(_build_app())

    resp = client.get("/mcp-sse/")
    assert resp.status_code == 405
    assert resp.json()["error"] == "sse_disabled"
    assert resp.headers["X-Request-Id"]
