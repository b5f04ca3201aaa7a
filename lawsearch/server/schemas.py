"""
Request and response schemas for the Accounting Law Search API.

Field names are snake_case in Python and camelCase on the wire (lawId,
articleNumber, databaseOnly, ...), matching the frontend contract.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import ChatMessage


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Corpus Schemas
# ============================================================================

class LawSummaryModel(CamelModel):
    """A law as listed by GET /laws."""

    id: str = Field(..., description="Law identifier (e.g., 'acct-principles')")
    name: str = Field(..., description="Law name (e.g., '企業会計原則')")
    category: str = Field(..., description="Law category")


class ArticleModel(CamelModel):
    """A single article."""

    id: str
    number: Union[str, int] = Field(..., description="Article number as stored in the corpus")
    title: str
    content: str


class SectionModel(CamelModel):
    """A section with its articles."""

    id: str
    title: str
    articles: list[ArticleModel] = Field(default_factory=list)


class LawModel(CamelModel):
    """A full law including nested sections and articles."""

    id: str
    name: str
    category: str
    sections: list[SectionModel] = Field(default_factory=list)


# ============================================================================
# Search Schemas
# ============================================================================

class HighlightsModel(CamelModel):
    """Which article fields matched the query."""

    title: bool = Field(..., description="Query found in the article title")
    content: bool = Field(..., description="Query found in the article content")


class SearchResultModel(CamelModel):
    """A matching article with its law and section context."""

    law_id: str
    law_name: str
    section_id: str
    section_title: str
    article_id: str
    article_number: Union[str, int]
    article_title: str
    article_content: str
    highlights: HighlightsModel


class SearchResponse(CamelModel):
    """Response schema for GET /search."""

    query: str = Field(default="", description="The query as submitted")
    count: int = Field(default=0, description="Number of matching articles")
    results: list[SearchResultModel] = Field(default_factory=list)


# ============================================================================
# Chat Schemas
# ============================================================================

class ChatMessageModel(CamelModel):
    """A single message of the conversation history."""

    role: Literal["user", "model"] = Field(..., description="Message author")
    content: str = Field(..., description="Message text")

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)

    @classmethod
    def from_message(cls, message: ChatMessage) -> "ChatMessageModel":
        return cls.model_validate(message.to_dict())


class ChatRequest(CamelModel):
    """Request schema for POST /chat."""

    message: str = Field(
        default="",
        description="The user's question",
        examples=["減価償却の方法を教えてください"],
    )
    history: list[ChatMessageModel] = Field(
        default_factory=list,
        description="Previous messages, oldest first",
    )
    database_only: bool = Field(
        default=False,
        description="Answer strictly from the law database and refuse when nothing matches",
    )


class ChatResponse(CamelModel):
    """Response schema for a successful chat turn."""

    message: str = Field(..., description="The model's final answer")
    history: list[ChatMessageModel] = Field(..., description="Updated, bounded history")


class ChatErrorResponse(CamelModel):
    """Response schema for a failed chat turn (user message is kept in history)."""

    error: str = Field(..., description="Generic failure message")
    details: Optional[str] = Field(None, description="Underlying error")
    history: list[ChatMessageModel] = Field(default_factory=list)


# ============================================================================
# Health, Stats & Error Schemas
# ============================================================================

class HealthResponse(CamelModel):
    """Response schema for health check endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    laws_loaded: int = Field(..., description="Number of laws in the corpus")
    chat_available: bool = Field(..., description="Whether a chat model is configured")


class StatsResponse(CamelModel):
    """Response schema for stats endpoint."""

    laws: int = Field(..., description="Total laws")
    sections: int = Field(..., description="Total sections")
    articles: int = Field(..., description="Total articles")


class ErrorResponse(CamelModel):
    """Response schema for error responses."""

    error: str = Field(..., description="Error message")
