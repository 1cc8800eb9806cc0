from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Tuple

from zendesk_mcp.core.config import DESTRUCTIVE_TOOLS_ENV, get_bool_env


def _split_csv_env(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [part.strip() for part in raw.split(",") if part.strip()]


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw.replace("_", ""))


@dataclass(frozen=True)
class HttpConfig:
    """Configuration for the HTTP transport runner."""

    host: str = "127.0.0.1"
    port: int = 8000
    path: str = "/mcp"
    json_response: bool = True
    stateless_http: bool = True
    enable_sse: bool = False
    sse_path: str = "/mcp-sse"
    allowed_hosts: Tuple[str, ...] = ()
    allowed_origins: Tuple[str, ...] = ()
    include_destructive: bool = False

    @classmethod
    def from_env(cls) -> "HttpConfig":
        port = _read_int_env("FASTMCP_PORT", cls.port)
        if not 0 < port < 65536:
            raise ValueError("FASTMCP_PORT must be between 1 and 65535")

        path = os.getenv("FASTMCP_STREAMABLE_HTTP_PATH", cls.path).strip() or cls.path
        if not path.startswith("/"):
            raise ValueError("FASTMCP_STREAMABLE_HTTP_PATH must start with '/'")

        return cls(
            host=os.getenv("FASTMCP_HOST", cls.host),
            port=port,
            path=path,
            json_response=get_bool_env("FASTMCP_JSON_RESPONSE", cls.json_response),
            stateless_http=get_bool_env("FASTMCP_STATELESS_HTTP", cls.stateless_http),
            enable_sse=get_bool_env("MCP_ENABLE_SSE", cls.enable_sse),
            allowed_hosts=tuple(_split_csv_env("MCP_ALLOWED_HOSTS")),
            allowed_origins=tuple(_split_csv_env("MCP_ALLOWED_ORIGINS")),
            include_destructive=get_bool_env(DESTRUCTIVE_TOOLS_ENV, False),
        )


__all__ = ["HttpConfig"]
