from __future__ import annotations

import asyncio
from typing import Iterator, List, Optional

import httpx

RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})

# Fallback markers for failures that carry no structured status.
RETRYABLE_MESSAGE_MARKERS = (
    "429",
    "502",
    "503",
    "504",
    "timeout",
    "econnreset",
    "etimedout",
)


class ZendeskClientError(Exception):
    """Base error for client failures."""

    kind = "unknown"


class ZendeskConfigurationError(ZendeskClientError):
    """Credentials are missing at call time."""

    kind = "configuration"


class ZendeskValidationError(ZendeskClientError, ValueError):
    """A malformed identifier or parameter was rejected before any I/O."""

    kind = "validation"


class ZendeskTimeoutError(ZendeskClientError):
    kind = "timeout"


class ZendeskTransportError(ZendeskClientError):
    """Connection-level failure (reset, DNS, refused...)."""

    kind = "transport"


class ZendeskHTTPError(ZendeskClientError):
    kind = "upstream"

    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        body: str = "",
    ):
        super().__init__(f"Zendesk API Error: {status_code} - {body}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.body = body


class ZendeskRequestError(ZendeskClientError):
    """
    Context wrapper raised by the transport for every failed request.
    The root failure is kept as ``__cause__``; kind and status are read from the
    first recognised error along the chain.
    """

    @property
    def kind(self) -> str:  # type: ignore[override]
        return classify_error(self)

    @property
    def status_code(self) -> Optional[int]:
        for exc in iter_causes(self):
            if isinstance(exc, ZendeskHTTPError):
                return exc.status_code
        return None


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield exc followed by its explicit causes (cycle-safe)."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def error_chain(exc: BaseException) -> List[str]:
    """Messages along the cause chain, outermost first."""
    return [str(e) or type(e).__name__ for e in iter_causes(exc)]


def classify_error(exc: BaseException) -> str:
    for current in iter_causes(exc):
        if isinstance(current, ZendeskRequestError):
            continue
        if isinstance(current, ZendeskClientError):
            return current.kind
        if isinstance(current, (asyncio.TimeoutError, httpx.TimeoutException)):
            return "timeout"
        if isinstance(current, httpx.TransportError):
            return "transport"
    return "unknown"


def is_retryable(
    exc: BaseException, retry_statuses: frozenset[int] = RETRYABLE_STATUSES
) -> bool:
    """
    Decide whether a failed attempt may be re-issued.
    - Structured failures are classified by type and status code.
    - Anything unrecognised falls back to markers in the message text.
    """
    for current in iter_causes(exc):
        if isinstance(current, ZendeskHTTPError):
            return current.status_code in retry_statuses
        if isinstance(current, (ZendeskTimeoutError, ZendeskTransportError)):
            return True
        if isinstance(current, (ZendeskConfigurationError, ZendeskValidationError)):
            return False
        if isinstance(current, (asyncio.TimeoutError, httpx.TimeoutException)):
            return True

    message = str(exc).lower()
    return any(marker in message for marker in RETRYABLE_MESSAGE_MARKERS)


__all__ = [
    "RETRYABLE_STATUSES",
    "ZendeskClientError",
    "ZendeskConfigurationError",
    "ZendeskValidationError",
    "ZendeskTimeoutError",
    "ZendeskTransportError",
    "ZendeskHTTPError",
    "ZendeskRequestError",
    "iter_causes",
    "error_chain",
    "classify_error",
    "is_retryable",
]
