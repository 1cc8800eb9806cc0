"""
Uniform shape for every search tool.

Zendesk search endpoints disagree on what a result looks like, so each result
is tagged with a ``result_type``. When the backend does not send one it is
guessed from the result URL; this is a heuristic, not a contract.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from .errors import classify_error, error_chain

log = logging.getLogger("zendesk_mcp.search")

UNKNOWN_RESULT_TYPE = "unknown"

# Evaluated top to bottom, first match wins.
RESULT_TYPE_RULES: Tuple[Tuple[str, str], ...] = (
    ("/tickets/", "ticket"),
    ("/users/", "user"),
    ("/organizations/", "organization"),
    ("/help_center/articles/", "article"),
    ("/groups/", "group"),
)


def infer_result_type(url: Any) -> Optional[str]:
    if not isinstance(url, str):
        return None
    for needle, tag in RESULT_TYPE_RULES:
        if needle in url:
            return tag
    return None


def _tag_result(result: Any, default_result_type: Optional[str]) -> Dict[str, Any]:
    fallback = default_result_type or UNKNOWN_RESULT_TYPE
    if not isinstance(result, dict):
        return {"result_type": fallback}
    if result.get("result_type"):
        return result
    return {**result, "result_type": infer_result_type(result.get("url")) or fallback}


def standardize_search_response(
    raw: Any, default_result_type: Optional[str] = None
) -> Dict[str, Any]:
    """Tag every result and rebuild metadata; safe to apply more than once."""
    if not isinstance(raw, dict):
        return {"results": [], "metadata": {}}

    results = raw.get("results")
    if not isinstance(results, list):
        results = []

    metadata: Dict[str, Any] = {"total_count": raw.get("count") or len(results)}
    next_page = raw.get("next_page") or None
    previous_page = raw.get("previous_page") or None
    if next_page or previous_page:
        metadata["page_info"] = {
            "has_next_page": bool(next_page),
            "has_previous_page": bool(previous_page),
        }

    return {
        "results": [_tag_result(r, default_result_type) for r in results],
        "metadata": metadata,
        "count": raw.get("count"),
        "next_page": next_page,
        "previous_page": previous_page,
    }


def failed_search_response(exc: BaseException, duration_ms: int) -> Dict[str, Any]:
    causes: List[str] = error_chain(exc)
    return {
        "results": [],
        "metadata": {
            "total_count": 0,
            "error": {
                "message": str(exc),
                "kind": classify_error(exc),
                "duration_ms": duration_ms,
                "causes": causes,
            },
        },
        "count": 0,
        "next_page": None,
        "previous_page": None,
    }


async def execute_search(
    operation: Callable[[], Awaitable[Any]],
    default_result_type: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Run a search and standardize its response.
    Failures come back as an empty result set with diagnostics in metadata,
    so a failed search still has the search shape.
    """
    start = time.perf_counter()
    try:
        raw = await operation()
    except Exception as exc:
        duration_ms = int((time.perf_counter() - start) * 1000)
        log.warning(
            "search.failed",
            extra={
                "kind": classify_error(exc),
                "duration_ms": duration_ms,
                "error": str(exc),
            },
        )
        return failed_search_response(exc, duration_ms)
    return standardize_search_response(raw, default_result_type)


__all__ = [
    "RESULT_TYPE_RULES",
    "UNKNOWN_RESULT_TYPE",
    "infer_result_type",
    "standardize_search_response",
    "failed_search_response",
    "execute_search",
]
