"""
Dependency injection for FastAPI.

Services (corpus store, search engine, search tool, chat orchestrator) are
built once at startup by `build_services` and kept on `app.state`; endpoints
receive them through the getters below.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from ..corpus import CorpusStore
from ..retrieval import ChatModel, ChatOrchestrator, SearchEngine, SearchTool
from .config import Settings

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the endpoints need, built once per process."""
    store: CorpusStore
    engine: SearchEngine
    search_tool: SearchTool
    orchestrator: Optional[ChatOrchestrator] = None


def _init_chat_model(settings: Settings) -> Optional[ChatModel]:
    """Initialize the Google Gemini chat backend."""
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set - chat mode disabled")
        return None

    from ..retrieval import GeminiChatModel

    model = GeminiChatModel(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.model_timeout_seconds,
    )
    logger.info(f"Gemini chat model initialized ({settings.gemini_model})")
    return model


def build_services(
    settings: Settings,
    store: Optional[CorpusStore] = None,
    chat_model: Optional[ChatModel] = None,
) -> Services:
    """Load the corpus and wire the search and chat components.

    Raises:
        CorpusLoadError: If the corpus file is missing or malformed
    """
    if store is None:
        logger.info(f"Loading corpus from {settings.corpus_path}")
        store = CorpusStore.load(settings.corpus_path)

    engine = SearchEngine(store)
    search_tool = SearchTool(engine, result_limit=settings.tool_result_limit)

    if chat_model is None:
        chat_model = _init_chat_model(settings)

    orchestrator = None
    if chat_model is not None:
        orchestrator = ChatOrchestrator(
            model=chat_model,
            search_tool=search_tool,
            max_tool_iterations=settings.max_tool_iterations,
            max_history_messages=settings.max_history_messages,
            model_timeout_seconds=settings.model_timeout_seconds,
        )

    return Services(store=store, engine=engine, search_tool=search_tool, orchestrator=orchestrator)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_store(request: Request) -> CorpusStore:
    return get_services(request).store


def get_engine(request: Request) -> SearchEngine:
    return get_services(request).engine


def get_orchestrator(request: Request) -> Optional[ChatOrchestrator]:
    """Get the chat orchestrator (None if no chat model is configured)."""
    return get_services(request).orchestrator
