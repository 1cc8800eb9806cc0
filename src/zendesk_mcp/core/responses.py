"""
Error/response normalization for tool calls.

Every tool result goes through ``run_tool``: strings are returned verbatim,
anything else is rendered as indented JSON, and any exception becomes an
``isError`` envelope instead of propagating.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel

from .errors import classify_error
from .models import ToolResponse

log = logging.getLogger("zendesk_mcp.responses")


@dataclass(frozen=True)
class ToolOutcome:
    """A result that should be shown after a fixed success message."""

    payload: Any
    message: str


def created(item_type: str, payload: Any) -> ToolOutcome:
    return ToolOutcome(payload, f"{item_type} created successfully!")


def updated(item_type: str, payload: Any) -> ToolOutcome:
    return ToolOutcome(payload, f"{item_type} updated successfully!")


def deleted(item_type: str, item_id: Any) -> str:
    # The backend body of a delete is not shown.
    return f"{item_type} {item_id} deleted successfully!"


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return str(value)


def to_json_text(value: Any) -> str:
    return json.dumps(value, indent=2, default=_json_default, ensure_ascii=False)


def format_result(result: Any) -> str:
    if isinstance(result, str):
        return result
    if isinstance(result, ToolOutcome):
        return f"{result.message}\n\n{to_json_text(result.payload)}"
    return to_json_text(result)


def error_response(exc: BaseException) -> ToolResponse:
    message = str(exc) or "Unknown error"
    return ToolResponse.text(f"Error: {message}", is_error=True)


async def run_tool(
    operation: Callable[[], Awaitable[Any]], *, tool: Optional[str] = None
) -> ToolResponse:
    """Await one tool operation and normalize its outcome into a ToolResponse."""
    try:
        text = format_result(await operation())
    except Exception as exc:
        log.warning(
            "tool.failed",
            exc_info=exc,
            extra={"tool": tool, "kind": classify_error(exc), "error": str(exc)},
        )
        return error_response(exc)
    return ToolResponse.text(text)


__all__ = [
    "ToolOutcome",
    "created",
    "updated",
    "deleted",
    "format_result",
    "to_json_text",
    "error_response",
    "run_tool",
]
