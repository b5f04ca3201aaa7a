"""
Tool-call adapter exposing the search engine to a chat model.

The adapter declares the `search_accounting_law` function (name, description,
JSON parameter schema) and runs it on behalf of the orchestrator. Results fed
back to the model are capped to keep the conversation context bounded, while
`count` still reports the full number of matches.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..models import SearchResult
from .search import SearchEngine


logger = logging.getLogger(__name__)

SEARCH_TOOL_NAME = "search_accounting_law"
DEFAULT_RESULT_LIMIT = 10


@dataclass(frozen=True)
class ToolDescriptor:
    """Declaration of a callable tool for LLM function calling."""
    name: str
    description: str
    parameters: dict[str, Any]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


SEARCH_TOOL_DESCRIPTOR = ToolDescriptor(
    name=SEARCH_TOOL_NAME,
    description=(
        "企業会計原則などの会計法令を検索します。"
        "キーワードを指定して関連する条文を検索できます。"
    ),
    parameters={
        "type": "object",
        "properties": {
            "q": {
                "type": "string",
                "description": "検索キーワード（必須）",
            },
            "lawId": {
                "type": "string",
                "description": "特定の法令IDでフィルタリング（オプション）",
            },
        },
        "required": ["q"],
    },
)


class SearchToolArgs(BaseModel):
    """Arguments of `search_accounting_law`, parsed leniently.

    Models occasionally omit `q` or send numbers; these degrade to a string
    query instead of failing the turn.
    """

    model_config = ConfigDict(extra="ignore")

    q: str = ""
    lawId: Optional[str] = None

    @field_validator("q", mode="before")
    @classmethod
    def _coerce_query(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, dict)):
            return ""
        return str(value)

    @field_validator("lawId", mode="before")
    @classmethod
    def _coerce_law_id(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, (list, dict)):
            return None
        value = str(value).strip()
        return value or None


@dataclass(frozen=True)
class ToolResult:
    """Search tool output: capped results plus the untruncated count."""
    query: str
    count: int
    results: list[SearchResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "count": self.count,
            "results": [r.to_dict() for r in self.results],
        }


class SearchTool:
    """Callable-tool wrapper around the search engine."""

    def __init__(self, engine: SearchEngine, result_limit: int = DEFAULT_RESULT_LIMIT):
        self.engine = engine
        self.result_limit = result_limit
        self.descriptor = SEARCH_TOOL_DESCRIPTOR

    @property
    def name(self) -> str:
        return self.descriptor.name

    @staticmethod
    def parse_args(args: Optional[dict]) -> SearchToolArgs:
        if not isinstance(args, dict):
            return SearchToolArgs()
        return SearchToolArgs.model_validate(args)

    def invoke(self, args: Optional[dict]) -> ToolResult:
        """Run the search for a model-issued function call."""
        parsed = self.parse_args(args)
        logger.info(f"[TOOL] {self.name} q={parsed.q!r} lawId={parsed.lawId!r}")

        matches = self.engine.search(parsed.q, parsed.lawId)
        return ToolResult(
            query=parsed.q,
            count=len(matches),
            results=matches[: self.result_limit],
        )
