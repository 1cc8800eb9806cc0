from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:  # pragma: no cover
    from .client import ZendeskClient

SUBDOMAIN_ENV = "ZENDESK_SUBDOMAIN"
EMAIL_ENV = "ZENDESK_EMAIL"
API_TOKEN_ENV = "ZENDESK_API_TOKEN"
DESTRUCTIVE_TOOLS_ENV = "ZENDESK_ENABLE_DESTRUCTIVE_TOOLS"
LOG_LEVEL_ENV = "ZENDESK_LOG_LEVEL"


@dataclass(frozen=True)
class ClientCredentials:
    subdomain: str = ""
    email: str = ""
    api_token: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.subdomain and self.email and self.api_token)

    def __repr__(self) -> str:
        # Never leak the token into logs or tracebacks.
        return (
            f"ClientCredentials(subdomain={self.subdomain!r}, "
            f"email={self.email!r}, api_token={'***' if self.api_token else ''!r})"
        )


def get_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable with a safe default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if val in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def load_env_config(*, use_dotenv: bool = True) -> ClientCredentials:
    """Load Zendesk credentials from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    return ClientCredentials(
        subdomain=os.getenv(SUBDOMAIN_ENV, "").strip(),
        email=os.getenv(EMAIL_ENV, "").strip(),
        api_token=os.getenv(API_TOKEN_ENV, "").strip(),
    )


def create_client_from_env(**kwargs) -> "ZendeskClient":
    """
    Create a ZendeskClient from environment variables.
    Missing credentials are tolerated here; every call on the client fails fast.
    """
    from .client import ZendeskClient

    return ZendeskClient.from_env(**kwargs)


__all__ = [
    "ClientCredentials",
    "load_env_config",
    "create_client_from_env",
    "get_bool_env",
    "SUBDOMAIN_ENV",
    "EMAIL_ENV",
    "API_TOKEN_ENV",
    "DESTRUCTIVE_TOOLS_ENV",
    "LOG_LEVEL_ENV",
]
