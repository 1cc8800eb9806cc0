from __future__ import annotations

import json
import logging
from typing import Dict, List

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response

from zendesk_mcp.core.client import ZendeskClient
from zendesk_mcp.core.config import create_client_from_env
from zendesk_mcp.core.registry import register_discovered_tools
from zendesk_mcp.transports.http.config import HttpConfig
from zendesk_mcp.transports.http.ops import (
    build_readiness_status,
    compute_readiness_state,
    is_ops_path,
)
from zendesk_mcp.transports.http.request_id_middleware import RequestIdMiddleware

log = logging.getLogger(__name__)

SERVER_NAME = "zendesk-mcp"


def _allowed_hosts(cfg: HttpConfig) -> List[str]:
    hosts = [cfg.host, f"{cfg.host}:*", "testserver"]
    if cfg.host in {"127.0.0.1", "localhost", "0.0.0.0"}:
        hosts.extend(["localhost", "localhost:*", "127.0.0.1", "127.0.0.1:*"])
    for h in cfg.allowed_hosts:
        if h not in hosts:
            hosts.append(h)
    return hosts


def build_fastmcp(
    cfg: HttpConfig | None = None, client: ZendeskClient | None = None
) -> FastMCP:
    """Create and configure a FastMCP instance with registered tools."""
    cfg = cfg or HttpConfig.from_env()
    client = client or create_client_from_env()

    transport_security = TransportSecuritySettings(
        enable_dns_rebinding_protection=True,
        allowed_hosts=_allowed_hosts(cfg),
        allowed_origins=list(cfg.allowed_origins),
    )

    fastmcp = FastMCP(
        SERVER_NAME,
        json_response=cfg.json_response,
        stateless_http=cfg.stateless_http,
        streamable_http_path=cfg.path,
        host=cfg.host,
        port=cfg.port,
        transport_security=transport_security,
    )

    register_discovered_tools(
        fastmcp, client, include_destructive=cfg.include_destructive
    )

    log.info(
        "Built FastMCP (json_response=%s, stateless_http=%s, path=%s, host=%s, port=%s)",  # noqa: E501
        cfg.json_response,
        cfg.stateless_http,
        cfg.path,
        cfg.host,
        cfg.port,
    )
    return fastmcp


def _build_ops_app(readiness_state: Dict[str, bool]) -> Starlette:
    async def healthz(_request):
        return JSONResponse({"status": "ok"}, headers={"Cache-Control": "no-store"})

    async def readyz(_request):
        payload = build_readiness_status(readiness_state)
        status_code = 200 if payload["status"] == "ok" else 503
        return JSONResponse(
            payload,
            status_code=status_code,
            headers={"Cache-Control": "no-store"},
        )

    ops_app = Starlette()
    ops_app.add_route("/healthz", healthz, methods=["GET"])
    ops_app.add_route("/readyz", readyz, methods=["GET"])
    return ops_app


class OpsDispatcher:
    """
    ASGI wrapper that routes ops endpoints to a minimal app and everything
    else to the main app. Exposes router/state so lifespan handling still works.
    """

    def __init__(self, ops_app, main_app):
        self.ops_app = ops_app
        self.main_app = main_app
        self.router = main_app.router
        self.state = main_app.state

    async def __call__(self, scope, receive, send):
        if is_ops_path(scope.get("path", "")):
            await self.ops_app(scope, receive, send)
            return
        await self.main_app(scope, receive, send)


def _build_sse_app(fastmcp: FastMCP, cfg: HttpConfig):
    if not cfg.enable_sse:

        async def disabled_app(scope, receive, send):
            resp = Response(
                json.dumps({"error": "sse_disabled", "message": "SSE not enabled"}),
                status_code=405,
                media_type="application/json",
            )
            await resp(scope, receive, send)

        return disabled_app

    sse_starlette = fastmcp.sse_app(mount_path=cfg.sse_path)
    sse_starlette.add_middleware(RequestIdMiddleware)
    return sse_starlette


def build_http_app(
    cfg: HttpConfig | None = None, client: ZendeskClient | None = None
):
    """Return an ASGI app that dispatches ops endpoints before the main FastMCP app."""
    cfg = cfg or HttpConfig.from_env()
    fastmcp = build_fastmcp(cfg, client)
    main_app = fastmcp.streamable_http_app()
    main_app.add_middleware(RequestIdMiddleware)
    main_app.mount(cfg.sse_path, _build_sse_app(fastmcp, cfg), name="mcp-sse")

    readiness_state = compute_readiness_state()
    main_app.state.readiness = readiness_state

    return OpsDispatcher(_build_ops_app(readiness_state), main_app)


__all__ = ["HttpConfig", "build_http_app", "build_fastmcp", "SERVER_NAME"]
