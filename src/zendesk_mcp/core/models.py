from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TicketPriority = Literal["urgent", "high", "normal", "low"]
TicketStatus = Literal["new", "open", "pending", "hold", "solved", "closed"]
TicketType = Literal["problem", "incident", "question", "task"]
UserRole = Literal["end-user", "agent", "admin"]
SortOrder = Literal["asc", "desc"]
SearchType = Literal["ticket", "user", "organization", "group", "topic", "forum"]


# --- Envelope ---


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResponse(BaseModel):
    """The single response shape of every tool call, success or failure."""

    content: List[TextContent]
    isError: Optional[bool] = None

    @classmethod
    def text(cls, text: str, *, is_error: bool = False) -> "ToolResponse":
        return cls(
            content=[TextContent(text=text)], isError=True if is_error else None
        )

    @property
    def is_error(self) -> bool:
        return bool(self.isError)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# --- Input Models (Tool Payloads) ---


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TicketComment(_Payload):
    body: str


class TicketCreateInput(_Payload):
    subject: str
    comment: TicketComment
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    requester_id: Optional[int] = None
    assignee_id: Optional[int] = None
    group_id: Optional[int] = None
    type: Optional[TicketType] = None
    tags: Optional[List[str]] = None


class TicketUpdateInput(_Payload):
    subject: Optional[str] = None
    comment: Optional[TicketComment] = None
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    assignee_id: Optional[int] = None
    group_id: Optional[int] = None
    type: Optional[TicketType] = None
    tags: Optional[List[str]] = None


class UserCreateInput(_Payload):
    name: str
    email: str
    role: Optional[UserRole] = None
    verified: Optional[bool] = None
    phone: Optional[str] = None
    organization_id: Optional[int] = None


class OrganizationCreateInput(_Payload):
    name: str
    domain_names: Optional[List[str]] = None
    details: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None


class GroupCreateInput(_Payload):
    name: str
    description: Optional[str] = None


class MacroAction(BaseModel):
    field: str = Field(description="Field to modify")
    value: Any = Field(default=None, description="Value to set")

    model_config = ConfigDict(extra="forbid")


class MacroCreateInput(_Payload):
    title: str
    description: Optional[str] = None
    actions: List[MacroAction]


__all__ = [
    "TicketPriority",
    "TicketStatus",
    "TicketType",
    "UserRole",
    "SortOrder",
    "SearchType",
    "TextContent",
    "ToolResponse",
    "TicketComment",
    "TicketCreateInput",
    "TicketUpdateInput",
    "UserCreateInput",
    "OrganizationCreateInput",
    "GroupCreateInput",
    "MacroAction",
    "MacroCreateInput",
]
