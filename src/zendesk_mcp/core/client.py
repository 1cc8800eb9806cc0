from __future__ import annotations

import asyncio
import base64
import dataclasses
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import anyio
import httpx

from .config import ClientCredentials, load_env_config
from .errors import (
    RETRYABLE_STATUSES,
    ZendeskConfigurationError,
    ZendeskHTTPError,
    ZendeskRequestError,
    ZendeskTimeoutError,
    ZendeskTransportError,
    ZendeskValidationError,
    is_retryable,
)
from .observability import log_event

DEFAULT_DOMAIN = "zendesk.com"
DEFAULT_TIMEOUT_SECONDS = 30.0

_SUBDOMAIN_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9_-]")
_REPEATED_SLASH_RE = re.compile(r"/{2,}")

log = logging.getLogger("zendesk_mcp.client")


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3  # total attempts, first one included
    base_delay_seconds: float = 1.0  # 1, 2, 4...
    max_delay_seconds: float = 5.0
    retry_statuses: frozenset[int] = RETRYABLE_STATUSES

    def delay_for(self, attempt: int) -> float:
        """Backoff before the retry that follows 0-indexed ``attempt``."""
        return min(self.base_delay_seconds * (2**attempt), self.max_delay_seconds)


def sanitize_subdomain(subdomain: str) -> str:
    """Drop everything but [A-Za-z0-9_-]; the value ends up inside a hostname."""
    sanitized = _SUBDOMAIN_DISALLOWED_RE.sub("", subdomain or "")
    if sanitized != subdomain:
        log.warning(
            'Subdomain was sanitized from "%s" to "%s"', subdomain, sanitized
        )
    return sanitized


def sanitize_path(path: str) -> str:
    """Strip traversal sequences and duplicate slashes; always returns '/...'."""
    sanitized = (path or "").replace("..", "")
    sanitized = _REPEATED_SLASH_RE.sub("/", sanitized)
    return sanitized if sanitized.startswith("/") else f"/{sanitized}"


def validate_id(value: Any) -> int:
    """Reject anything but a positive integer before it is put into a URL path."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ZendeskValidationError(
            f"Invalid ID: {value}. ID must be a positive integer."
        )
    return value


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ZendeskClient:
    """
    Shared HTTP client for the Zendesk REST API v2.
    - Holds immutable credentials; missing credentials fail each call, not construction
    - Builds sanitized requests, sends them with a hard timeout
    - Retries transient failures on reads only
    - No envelope formatting; the normalizer owns that
    """

    def __init__(
        self,
        credentials: Optional[ClientCredentials] = None,
        *,
        domain: str = DEFAULT_DOMAIN,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        retry: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        credentials = credentials or ClientCredentials()
        self.log = logger or log

        if credentials.subdomain:
            credentials = dataclasses.replace(
                credentials, subdomain=sanitize_subdomain(credentials.subdomain)
            )
        if not credentials.is_complete:
            self.log.warning(
                "Zendesk credentials not found. Please set ZENDESK_SUBDOMAIN, "
                "ZENDESK_EMAIL, and ZENDESK_API_TOKEN."
            )

        self.credentials = credentials
        self.domain = domain
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self._sleep = sleep or asyncio.sleep

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout_seconds)

    @classmethod
    def from_env(
        cls,
        *,
        subdomain: Optional[str] = None,
        email: Optional[str] = None,
        api_token: Optional[str] = None,
        **kwargs: Any,
    ) -> "ZendeskClient":
        """Explicit values win; the rest comes from the environment (and .env)."""
        env = load_env_config()
        credentials = ClientCredentials(
            subdomain=subdomain or env.subdomain,
            email=email or env.email,
            api_token=api_token or env.api_token,
        )
        return cls(credentials, **kwargs)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "ZendeskClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def base_url(self) -> str:
        return f"https://{self.credentials.subdomain}.{self.domain}/api/v2"

    def _auth_header(self) -> str:
        raw = f"{self.credentials.email}/token:{self.credentials.api_token}"
        return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")

    # --- Request building -------------------------------------------------- #

    def build_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        """Prepare a request without sending it."""
        method = method.upper()
        query = {
            key: _query_value(value)
            for key, value in (params or {}).items()
            if value is not None
        }
        headers = {
            "Authorization": self._auth_header(),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        payload = body if method != "GET" and body is not None else None

        return self.http.build_request(
            method,
            self.base_url + sanitize_path(path),
            params=query or None,
            headers=headers,
            json=payload,
        )

    # --- Transport --------------------------------------------------------- #

    async def send(self, request: httpx.Request, *, tool: Optional[str] = None) -> Any:
        """
        Single attempt, no retry.
        - Hard deadline of ``timeout_seconds`` for the whole exchange
        - Raises ZendeskHTTPError on non-2xx with the raw body text
        - Returns parsed JSON, or {"success": True} when the body is not JSON
        """
        start = time.perf_counter()
        endpoint = request.url.path

        try:
            with anyio.fail_after(self.timeout_seconds):
                resp = await self.http.send(request)
        except (TimeoutError, httpx.TimeoutException) as exc:
            self._log_call(request, tool, start, status="exception", exc=exc)
            raise ZendeskTimeoutError(
                f"Request to {request.method} {endpoint} timed out after "
                f"{self.timeout_seconds:g}s"
            ) from exc
        except httpx.TransportError as exc:
            self._log_call(request, tool, start, status="exception", exc=exc)
            raise ZendeskTransportError(
                f"Connection error calling {request.method} {endpoint}: {exc}"
            ) from exc

        self._log_call(request, tool, start, status=resp.status_code)

        if not resp.is_success:
            raise ZendeskHTTPError(
                status_code=resp.status_code,
                method=request.method,
                url=str(request.url),
                body=resp.text,
            )

        content_type = resp.headers.get("content-type", "")
        if "application/json" in content_type and resp.content:
            return resp.json()
        return {"success": True}

    def _log_call(
        self,
        request: httpx.Request,
        tool: Optional[str],
        start: float,
        *,
        status: Any,
        exc: Optional[BaseException] = None,
    ) -> None:
        log_event(
            "op_call",
            tool=tool,
            method=request.method,
            endpoint=request.url.path,
            status=status,
            duration_ms=int((time.perf_counter() - start) * 1000),
            error_type=type(exc).__name__ if exc is not None else None,
        )

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        *,
        tool: Optional[str] = None,
    ) -> Any:
        """
        Core request method.
        - Raises ZendeskRequestError for every failure, with the root failure
          (configuration, timeout, transport, HTTP status...) as __cause__
        """
        try:
            if not self.credentials.is_complete:
                raise ZendeskConfigurationError(
                    "Zendesk credentials not configured. "
                    "Please set environment variables."
                )
            request = self.build_request(method, path, body=body, params=params)
            return await self.send(request, tool=tool)
        except Exception as exc:
            raise ZendeskRequestError(f"Zendesk request failed: {exc}") from exc

    async def request_with_retry(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        *,
        max_attempts: Optional[int] = None,
        tool: Optional[str] = None,
    ) -> Any:
        """
        Issue ``request`` up to ``max_attempts`` times.
        Only idempotent calls should come through here; terminal failures are
        raised on the first attempt, the last failure after the budget is spent.
        """
        attempts = max_attempts if max_attempts is not None else self.retry.max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        attempt = 0
        while True:
            try:
                return await self.request(method, path, body, params, tool=tool)
            except Exception as exc:
                attempt += 1
                if attempt >= attempts or not is_retryable(
                    exc, self.retry.retry_statuses
                ):
                    raise

                delay = self.retry.delay_for(attempt - 1)
                self.log.warning(
                    "op.retry",
                    extra={
                        "tool": tool,
                        "method": method.upper(),
                        "endpoint": path,
                        "attempt": attempt,
                        "max_attempts": attempts,
                        "delay_ms": int(delay * 1000),
                        "error": str(exc),
                    },
                )
                await self._sleep(delay)

    async def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        retry: bool = True,
        tool: Optional[str] = None,
    ) -> Any:
        if retry:
            return await self.request_with_retry("GET", path, params=params, tool=tool)
        return await self.request("GET", path, params=params, tool=tool)

    async def post(self, path: str, *, json: Any, tool: Optional[str] = None) -> Any:
        return await self.request("POST", path, json, tool=tool)

    async def put(self, path: str, *, json: Any, tool: Optional[str] = None) -> Any:
        return await self.request("PUT", path, json, tool=tool)

    async def delete(self, path: str, *, tool: Optional[str] = None) -> Any:
        return await self.request("DELETE", path, tool=tool)

    # --- Generic resource helpers ------------------------------------------ #

    async def _list(self, resource: str, params: Optional[Mapping[str, Any]]) -> Any:
        return await self.get(f"/{resource}.json", params=params, tool=resource)

    async def _show(self, resource: str, id: int) -> Any:
        validate_id(id)
        return await self.get(f"/{resource}/{id}.json", tool=resource)

    async def _create(self, resource: str, key: str, data: Dict[str, Any]) -> Any:
        return await self.post(f"/{resource}.json", json={key: data}, tool=resource)

    async def _update(
        self, resource: str, key: str, id: int, data: Dict[str, Any]
    ) -> Any:
        validate_id(id)
        return await self.put(
            f"/{resource}/{id}.json", json={key: data}, tool=resource
        )

    async def _destroy(self, resource: str, id: int) -> Any:
        validate_id(id)
        return await self.delete(f"/{resource}/{id}.json", tool=resource)

    # --- Tickets ------------------------------------------------------------ #

    async def list_tickets(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("tickets", params)

    async def get_ticket(self, id: int) -> Any:
        return await self._show("tickets", id)

    async def create_ticket(self, data: Dict[str, Any]) -> Any:
        return await self._create("tickets", "ticket", data)

    async def update_ticket(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("tickets", "ticket", id, data)

    async def delete_ticket(self, id: int) -> Any:
        return await self._destroy("tickets", id)

    # --- Users -------------------------------------------------------------- #

    async def list_users(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("users", params)

    async def get_user(self, id: int) -> Any:
        return await self._show("users", id)

    async def create_user(self, data: Dict[str, Any]) -> Any:
        return await self._create("users", "user", data)

    async def update_user(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("users", "user", id, data)

    async def delete_user(self, id: int) -> Any:
        return await self._destroy("users", id)

    # --- Organizations ------------------------------------------------------ #

    async def list_organizations(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        return await self._list("organizations", params)

    async def get_organization(self, id: int) -> Any:
        return await self._show("organizations", id)

    async def create_organization(self, data: Dict[str, Any]) -> Any:
        return await self._create("organizations", "organization", data)

    async def update_organization(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("organizations", "organization", id, data)

    async def delete_organization(self, id: int) -> Any:
        return await self._destroy("organizations", id)

    # --- Groups ------------------------------------------------------------- #

    async def list_groups(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("groups", params)

    async def get_group(self, id: int) -> Any:
        return await self._show("groups", id)

    async def create_group(self, data: Dict[str, Any]) -> Any:
        return await self._create("groups", "group", data)

    async def update_group(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("groups", "group", id, data)

    async def delete_group(self, id: int) -> Any:
        return await self._destroy("groups", id)

    # --- Macros ------------------------------------------------------------- #

    async def list_macros(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("macros", params)

    async def get_macro(self, id: int) -> Any:
        return await self._show("macros", id)

    async def create_macro(self, data: Dict[str, Any]) -> Any:
        return await self._create("macros", "macro", data)

    async def update_macro(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("macros", "macro", id, data)

    async def delete_macro(self, id: int) -> Any:
        return await self._destroy("macros", id)

    # --- Views -------------------------------------------------------------- #

    async def list_views(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("views", params)

    async def get_view(self, id: int) -> Any:
        return await self._show("views", id)

    async def create_view(self, data: Dict[str, Any]) -> Any:
        return await self._create("views", "view", data)

    async def update_view(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("views", "view", id, data)

    async def delete_view(self, id: int) -> Any:
        return await self._destroy("views", id)

    # --- Triggers ----------------------------------------------------------- #

    async def list_triggers(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("triggers", params)

    async def get_trigger(self, id: int) -> Any:
        return await self._show("triggers", id)

    async def create_trigger(self, data: Dict[str, Any]) -> Any:
        return await self._create("triggers", "trigger", data)

    async def update_trigger(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("triggers", "trigger", id, data)

    async def delete_trigger(self, id: int) -> Any:
        return await self._destroy("triggers", id)

    # --- Automations -------------------------------------------------------- #

    async def list_automations(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        return await self._list("automations", params)

    async def get_automation(self, id: int) -> Any:
        return await self._show("automations", id)

    async def create_automation(self, data: Dict[str, Any]) -> Any:
        return await self._create("automations", "automation", data)

    async def update_automation(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("automations", "automation", id, data)

    async def delete_automation(self, id: int) -> Any:
        return await self._destroy("automations", id)

    # --- Search ------------------------------------------------------------- #

    async def search(
        self, query: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        return await self.get(
            "/search.json", params={"query": query, **(params or {})}, tool="search"
        )

    # --- Help Center -------------------------------------------------------- #

    async def list_articles(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("help_center/articles", params)

    async def get_article(self, id: int) -> Any:
        return await self._show("help_center/articles", id)

    async def create_article(self, data: Dict[str, Any], section_id: int) -> Any:
        validate_id(section_id)
        return await self.post(
            f"/help_center/sections/{section_id}/articles.json",
            json={"article": data},
            tool="help_center/articles",
        )

    async def update_article(self, id: int, data: Dict[str, Any]) -> Any:
        return await self._update("help_center/articles", "article", id, data)

    async def delete_article(self, id: int) -> Any:
        return await self._destroy("help_center/articles", id)

    async def search_articles(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        return await self.get(
            "/help_center/articles/search.json",
            params=params,
            tool="help_center/articles/search",
        )

    async def list_categories(
        self, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        return await self._list("help_center/categories", params)

    async def get_category(self, id: int) -> Any:
        return await self._show("help_center/categories", id)

    async def list_sections(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._list("help_center/sections", params)

    async def get_section(self, id: int) -> Any:
        return await self._show("help_center/sections", id)

    async def list_sections_by_category(
        self, category_id: int, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        validate_id(category_id)
        return await self.get(
            f"/help_center/categories/{category_id}/sections.json",
            params=params,
            tool="help_center/sections",
        )

    async def list_articles_by_section(
        self, section_id: int, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        validate_id(section_id)
        return await self.get(
            f"/help_center/sections/{section_id}/articles.json",
            params=params,
            tool="help_center/articles",
        )

    # --- Talk / Chat -------------------------------------------------------- #

    async def get_talk_stats(self) -> Any:
        return await self.get("/channels/voice/stats.json", tool="talk")

    async def list_chats(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.get("/chats.json", params=params, tool="chat")


__all__ = [
    "ZendeskClient",
    "RetryConfig",
    "DEFAULT_DOMAIN",
    "DEFAULT_TIMEOUT_SECONDS",
    "sanitize_subdomain",
    "sanitize_path",
    "validate_id",
]
