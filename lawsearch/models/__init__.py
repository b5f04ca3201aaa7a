"""
Data models for the accounting law search service.

This package contains all data models organized by domain:
- law: Corpus models (Law, Section, Article, LawSummary)
- search: Search result models
- chat: Chat messages and tool-call transcript entries
"""

from .law import (
    Article,
    Section,
    Law,
    LawSummary,
)

from .search import Highlights, SearchResult

from .chat import (
    ChatMessage,
    ToolCall,
    ToolRequest,
    ToolResponse,
    FinalText,
    ModelTurn,
    TranscriptEntry,
)

__all__ = [
    # Corpus models
    "Article",
    "Section",
    "Law",
    "LawSummary",
    # Search models
    "Highlights",
    "SearchResult",
    # Chat models
    "ChatMessage",
    "ToolCall",
    "ToolRequest",
    "ToolResponse",
    "FinalText",
    "ModelTurn",
    "TranscriptEntry",
]
