"""zendesk_mcp package exports."""

from .core import (
    ClientCredentials,
    RetryConfig,
    ToolResponse,
    ZendeskClient,
    ZendeskClientError,
    ZendeskConfigurationError,
    ZendeskHTTPError,
    ZendeskRequestError,
    ZendeskTimeoutError,
    ZendeskTransportError,
    ZendeskValidationError,
    create_client_from_env,
    register_discovered_tools,
)

__version__ = "0.1.0"

__all__ = [
    "ZendeskClient",
    "RetryConfig",
    "ClientCredentials",
    "ToolResponse",
    "ZendeskClientError",
    "ZendeskConfigurationError",
    "ZendeskValidationError",
    "ZendeskTimeoutError",
    "ZendeskTransportError",
    "ZendeskHTTPError",
    "ZendeskRequestError",
    "create_client_from_env",
    "register_discovered_tools",
]
