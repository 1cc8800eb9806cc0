"""Core domain surface for zendesk-mcp (transport-agnostic)."""

from .client import (
    RetryConfig,
    ZendeskClient,
    sanitize_path,
    sanitize_subdomain,
    validate_id,
)
from .config import ClientCredentials, create_client_from_env, load_env_config
from .errors import (
    ZendeskClientError,
    ZendeskConfigurationError,
    ZendeskHTTPError,
    ZendeskRequestError,
    ZendeskTimeoutError,
    ZendeskTransportError,
    ZendeskValidationError,
    classify_error,
    is_retryable,
)
from .models import ToolResponse
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
)
from .responses import run_tool
from .search import execute_search, standardize_search_response

__all__ = [
    # Client
    "ZendeskClient",
    "RetryConfig",
    "ClientCredentials",
    "sanitize_path",
    "sanitize_subdomain",
    "validate_id",
    # Exceptions
    "ZendeskClientError",
    "ZendeskConfigurationError",
    "ZendeskValidationError",
    "ZendeskTimeoutError",
    "ZendeskTransportError",
    "ZendeskHTTPError",
    "ZendeskRequestError",
    "classify_error",
    "is_retryable",
    # Config helpers
    "create_client_from_env",
    "load_env_config",
    # Normalizer
    "ToolResponse",
    "run_tool",
    "execute_search",
    "standardize_search_response",
    # Registry helpers
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
