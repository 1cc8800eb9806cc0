from __future__ import annotations

from typing import Dict

from zendesk_mcp.core.config import load_env_config

OPS_PATHS = {"/healthz", "/readyz"}


def is_ops_path(path: str | None) -> bool:
    return bool(path) and path in OPS_PATHS


def compute_readiness_state() -> Dict[str, bool]:
    """Readiness reflects whether default credentials are configured."""
    creds = load_env_config(use_dotenv=False)
    return {
        "subdomain_present": bool(creds.subdomain),
        "email_present": bool(creds.email),
        "api_token_present": bool(creds.api_token),
    }


def build_readiness_status(readiness_state: Dict[str, bool]) -> Dict[str, object]:
    failed = [k for k, v in readiness_state.items() if not v]
    return {
        "status": "ok" if not failed else "fail",
        "checks": readiness_state,
        "failed": failed,
    }


__all__ = [
    "OPS_PATHS",
    "is_ops_path",
    "compute_readiness_state",
    "build_readiness_status",
]
