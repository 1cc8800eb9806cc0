import inspect
from types import ModuleType

import pytest
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult
from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.config import ClientCredentials
from zendesk_mcp.core.registry import (
    discover_tool_modules,
    is_destructive,
    register_discovered_tools,
)
from zendesk_mcp.core.tools import tickets


def _make_module(name: str, code: str) -> ModuleType:
    module = ModuleType(name)
    exec(code, module.__dict__)
    return module


def _recording_app():
    app = FastMCP("test")
    registered = {}

    def record_tool(name):
        def decorator(fn):
            registered[name] = fn
            return fn

        return decorator

    app.tool = record_tool  # type: ignore[attr-defined]
    return app, registered


@pytest.fixture
def client():
    return ZendeskClient(ClientCredentials("acme", "agent@example.com", "tok"))


@pytest.mark.asyncio
async def test_register_discovered_tools_registers_valid_tools_only(client):
    code = """
async def tool_fn(client, *, foo: int = 1):
    return {"base_url": client.base_url, "foo": foo}

async def _private(client):
    return None

async def wrong_first(arg1, client):
    return None

def sync_func(client):
    return None
"""
    mod = _make_module("fake_mod", code)
    app, registered = _recording_app()

    names = register_discovered_tools(app, client, modules=[mod])

    assert names == ["tool_fn"]
    wrapped = registered["tool_fn"]

    sig = inspect.signature(wrapped)
    assert "client" not in sig.parameters
    assert sig.return_annotation is CallToolResult

    result = await wrapped(foo=5)
    assert isinstance(result, CallToolResult)
    assert result.isError is False
    assert '"foo": 5' in result.content[0].text
    assert "https://acme.zendesk.com/api/v2" in result.content[0].text


@pytest.mark.asyncio
async def test_wrapped_tool_failure_becomes_error_result(client):
    mod = _make_module(
        "boom_mod",
        "async def boom(client):\n    raise RuntimeError('kaput')\n",
    )
    app, registered = _recording_app()
    register_discovered_tools(app, client, modules=[mod])

    result = await registered["boom"]()

    assert result.isError is True
    assert result.content[0].text == "Error: kaput"


def test_register_discovered_tools_duplicate_names_raise(client):
    mod1 = _make_module("mod1", "async def tool_fn(client): return None")
    mod2 = _make_module("mod2", "async def tool_fn(client): return None")

    with pytest.raises(ValueError):
        register_discovered_tools(FastMCP("test"), client, modules=[mod1, mod2])


def test_register_requires_tool_decorator(client):
    with pytest.raises(TypeError):
        register_discovered_tools(object(), client, modules=[])


def test_client_provider_callable_is_accepted(client):
    app, registered = _recording_app()
    mod = _make_module("prov_mod", "async def ping(client): return 'pong'")

    register_discovered_tools(app, lambda: client, modules=[mod])

    assert list(registered) == ["ping"]


def test_destructive_tools_are_opt_in(client):
    assert is_destructive(tickets.update_ticket)
    assert is_destructive(tickets.delete_ticket)
    assert not is_destructive(tickets.create_ticket)

    safe = register_discovered_tools(FastMCP("safe"), client)
    assert "get_ticket" in safe
    assert "update_ticket" not in safe
    assert "delete_ticket" not in safe

    full = register_discovered_tools(FastMCP("full"), client, include_destructive=True)
    assert {"update_ticket", "delete_ticket"} <= set(full)


def test_full_catalog_is_registered(client):
    names = set(register_discovered_tools(FastMCP("catalog"), client))

    assert {
        "list_tickets",
        "get_ticket",
        "create_ticket",
        "list_users",
        "get_user",
        "create_user",
        "search_users",
        "list_organizations",
        "get_organization",
        "create_organization",
        "list_groups",
        "get_group",
        "create_group",
        "list_macros",
        "get_macro",
        "create_macro",
        "list_views",
        "get_view",
        "list_triggers",
        "get_trigger",
        "list_automations",
        "get_automation",
        "search",
        "list_articles",
        "get_article",
        "search_articles",
        "list_articles_by_section",
        "list_categories",
        "get_category",
        "search_categories",
        "list_sections",
        "get_section",
        "search_sections",
        "get_help_center_hierarchy",
        "support_info",
        "get_talk_stats",
        "list_chats",
    } <= names
    assert not any(n.startswith("_") for n in names)


@pytest.mark.asyncio
async def test_fastmcp_schema_hides_client(client):
    app = FastMCP("schema")
    register_discovered_tools(app, client)

    tools = {t.name: t for t in await app.list_tools()}

    schema = tools["get_ticket"].inputSchema
    assert "client" not in schema["properties"]
    assert schema["required"] == ["id"]
    assert "Get a specific ticket" in (tools["get_ticket"].description or "")


def test_discover_tool_modules_skips_import_failures(monkeypatch, caplog):
    import importlib
    import pkgutil

    class Info:
        def __init__(self, name):
            self.name = name

    def fake_iter_modules(path, prefix):
        return [Info(prefix + "good"), Info(prefix + "bad"), Info(prefix + "_hidden")]

    good_mod = _make_module(
        "zendesk_mcp.core.tools.good", "async def tool_fn(client): return None"
    )

    real_import_module = importlib.import_module

    def fake_import_module(name, *args, **kwargs):
        if name == "zendesk_mcp.core.tools.bad":
            raise ImportError("boom")
        if name == "zendesk_mcp.core.tools.good":
            return good_mod
        if name == "zendesk_mcp.core.tools._hidden":
            raise AssertionError("private modules must not be imported")
        return real_import_module(name, *args, **kwargs)

    monkeypatch.setattr(pkgutil, "iter_modules", fake_iter_modules)
    monkeypatch.setattr(importlib, "import_module", fake_import_module)

    with caplog.at_level("ERROR"):
        modules = discover_tool_modules()

    assert [m.__name__ for m in modules] == ["zendesk_mcp.core.tools.good"]
    assert any("Failed importing tool module" in rec.message for rec in caplog.records)
