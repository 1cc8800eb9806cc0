from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Iterable, List, Set, TypeVar, get_type_hints

from mcp.types import CallToolResult, TextContent

from .client import ZendeskClient
from .models import ToolResponse
from .responses import run_tool

log = logging.getLogger("zendesk_mcp.core.registry")

DESTRUCTIVE_ATTR = "__zendesk_destructive__"

F = TypeVar("F", bound=Callable)


def destructive(func: F) -> F:
    """Mark a tool that mutates or deletes existing data; opt-in at registration."""
    setattr(func, DESTRUCTIVE_ATTR, True)
    return func


def is_destructive(func: Callable) -> bool:
    return bool(getattr(func, DESTRUCTIVE_ATTR, False))


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "zendesk_mcp.core.tools",
) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        if name.rsplit(".", 1)[-1].startswith("_"):
            continue
        try:
            modules.append(importlib.import_module(name))
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield public coroutine functions defined in module whose first arg is 'client'."""
    for _, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if func.__name__.startswith("_"):
            continue
        if func.__module__ != module.__name__:
            continue

        params = list(inspect.signature(func).parameters.values())
        if not params or params[0].name != "client":
            log.debug(
                "Skipping %s.%s: first parameter must be 'client'",
                module.__name__,
                func.__name__,
            )
            continue

        yield func


# --- Wrapping / registration ---------------------------------------------- #


def to_call_tool_result(response: ToolResponse) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=c.text) for c in response.content],
        isError=response.is_error,
    )


def _wrap_tool(func: Callable, client_provider: Callable[[], ZendeskClient]) -> Callable:
    """
    Return a wrapper that injects the client, hides it from the signature and
    normalizes the outcome into a CallToolResult.
    """
    original_sig = inspect.signature(func)
    type_hints = get_type_hints(func)

    new_params = []
    for i, (name, param) in enumerate(original_sig.parameters.items()):
        if i == 0 and name == "client":
            continue
        ann = type_hints.get(name, param.annotation)
        new_params.append(param.replace(annotation=ann))

    new_sig = inspect.Signature(
        parameters=new_params, return_annotation=CallToolResult
    )

    async def wrapped(*args, **kwargs) -> CallToolResult:
        client = client_provider()
        response = await run_tool(
            lambda: func(client, *args, **kwargs), tool=func.__name__
        )
        return to_call_tool_result(response)

    wrapped.__name__ = func.__name__
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = new_sig  # type: ignore[attr-defined]
    wrapped.__wrapped_tool__ = func  # type: ignore[attr-defined]
    return wrapped


def register_discovered_tools(
    app,
    client_provider: Callable[[], ZendeskClient] | ZendeskClient,
    modules: List[ModuleType] | None = None,
    *,
    include_destructive: bool = False,
) -> List[str]:
    """Register discovered tools on an app that exposes a .tool decorator."""
    if isinstance(client_provider, ZendeskClient):
        _client = client_provider

        def client_provider():
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    modules = modules if modules is not None else discover_tool_modules()
    seen_names: Set[str] = set()

    for module in modules:
        for func in iter_tool_functions(module):
            name = func.__name__
            if is_destructive(func) and not include_destructive:
                log.info("Skipping destructive tool: %s", name)
                continue
            if name in seen_names:
                raise ValueError(f"Duplicate tool name detected: {name}")

            wrapped = _wrap_tool(func, client_provider)
            app.tool(name=name)(wrapped)
            seen_names.add(name)
            log.info("Registered tool: %s (%s)", name, module.__name__)

    return sorted(seen_names)


__all__ = [
    "destructive",
    "is_destructive",
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
    "to_call_tool_result",
]
