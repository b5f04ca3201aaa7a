"""
Accounting Law Search - full-text search and AI consultation over accounting laws.

Packages:
    - models: Corpus, search result and chat transcript models
    - corpus: Read-only corpus store loaded from JSON
    - retrieval: Substring search, search tool adapter, chat orchestrator
    - server: FastAPI application exposing search and chat
"""

__version__ = "1.0.0"

from .errors import (
    LawSearchError,
    CorpusLoadError,
    NotFoundError,
    ValidationError,
    UpstreamError,
)

from .models import (
    Law,
    Section,
    Article,
    LawSummary,
    SearchResult,
    ChatMessage,
)

from .corpus import CorpusStore

__all__ = [
    "__version__",
    # Errors
    "LawSearchError",
    "CorpusLoadError",
    "NotFoundError",
    "ValidationError",
    "UpstreamError",
    # Models
    "Law",
    "Section",
    "Article",
    "LawSummary",
    "SearchResult",
    "ChatMessage",
    # Store
    "CorpusStore",
]
