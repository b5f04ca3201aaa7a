"""
Retrieval components for the accounting law search service.

This package contains:
- search: Case-insensitive substring search over the corpus
- tools: The `search_accounting_law` tool declaration and adapter
- orchestrator: Tool-calling chat loop with bounded iterations and history
- gemini: Google Gemini backend for the orchestrator
"""

from .search import SearchEngine, is_blank, match_article

from .tools import (
    SEARCH_TOOL_NAME,
    SEARCH_TOOL_DESCRIPTOR,
    SearchTool,
    SearchToolArgs,
    ToolDescriptor,
    ToolResult,
)

from .orchestrator import (
    ChatModel,
    ChatOrchestrator,
    ChatTurnResult,
    ToolLoopLimitError,
    TurnState,
    truncate_history,
)

from .gemini import GeminiChatModel

__all__ = [
    # Search
    "SearchEngine",
    "is_blank",
    "match_article",
    # Tools
    "SEARCH_TOOL_NAME",
    "SEARCH_TOOL_DESCRIPTOR",
    "SearchTool",
    "SearchToolArgs",
    "ToolDescriptor",
    "ToolResult",
    # Orchestrator
    "ChatModel",
    "ChatOrchestrator",
    "ChatTurnResult",
    "ToolLoopLimitError",
    "TurnState",
    "truncate_history",
    # Backends
    "GeminiChatModel",
]
