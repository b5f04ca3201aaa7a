"""
Chat transcript models.

ChatMessage is what callers see and send back as history. ToolCall,
ToolRequest and ToolResponse only live inside the orchestrator's working
transcript and are never returned to callers.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

Role = Literal["user", "model"]


@dataclass(frozen=True)
class ChatMessage:
    """A single user or model message in a conversation."""
    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ToolCall:
    """A single function call requested by the model."""
    name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolRequest:
    """Model turn asking for one or more tool calls, executed in order.

    `raw` keeps the vendor payload of the turn (e.g. a Gemini Content) so an
    adapter can echo it back unchanged; it is ignored by the orchestrator.
    """
    calls: tuple[ToolCall, ...]
    raw: Optional[Any] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FinalText:
    """Model turn with the final textual answer."""
    text: str


@dataclass(frozen=True)
class ToolResponse:
    """Result of one tool call, fed back to the model."""
    name: str
    response: dict[str, Any]


ModelTurn = Union[ToolRequest, FinalText]
TranscriptEntry = Union[ChatMessage, ToolRequest, ToolResponse]
