"""
API route definitions for the Accounting Law Search server.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..corpus import CorpusStore
from ..errors import ValidationError
from ..retrieval import ChatOrchestrator, SearchEngine, is_blank, truncate_history
from .dependencies import get_engine, get_orchestrator, get_services, get_store
from .schemas import (
    ChatErrorResponse,
    ChatMessageModel,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    LawModel,
    LawSummaryModel,
    SearchResponse,
    SearchResultModel,
    StatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# CORPUS & SEARCH ENDPOINTS
# ============================================================================

@router.get(
    "/laws",
    response_model=list[LawSummaryModel],
    summary="List Laws",
    description="List every law in the corpus (id, name, category) in corpus order.",
)
async def list_laws(store: CorpusStore = Depends(get_store)) -> list[LawSummaryModel]:
    return [LawSummaryModel(**law.to_dict()) for law in store.list_laws()]


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search Articles",
    description="""
Case-insensitive substring search over article titles and contents.

- Results are returned in corpus order (law, section, article), unranked
- `highlights.title` / `highlights.content` tell which field matched
- A blank `q` returns an empty result set
- `lawId` restricts the search to a single law
""",
)
async def search(
    q: Optional[str] = Query(None, description="Search keyword"),
    law_id: Optional[str] = Query(None, alias="lawId", description="Restrict to this law"),
    engine: SearchEngine = Depends(get_engine),
) -> SearchResponse:
    if is_blank(q):
        return SearchResponse()

    results = engine.search(q, law_id or None)
    logger.info(f"Search q={q!r} lawId={law_id!r}: {len(results)} results")

    return SearchResponse(
        query=q,
        count=len(results),
        results=[SearchResultModel.model_validate(r.to_dict()) for r in results],
    )


@router.get(
    "/laws/{law_id}",
    response_model=LawModel,
    responses={
        404: {"model": ErrorResponse, "description": "Law not found"}
    },
    summary="Get Law",
    description="Get a full law including its sections and articles.",
)
async def get_law(law_id: str, store: CorpusStore = Depends(get_store)) -> LawModel:
    law = store.get_law(law_id)
    return LawModel.model_validate(law.to_dict())


# ============================================================================
# CHAT ENDPOINT
# ============================================================================

@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Blank or malformed message"},
        500: {"model": ChatErrorResponse, "description": "Chat model failure"},
        503: {"model": ErrorResponse, "description": "Chat model not configured"},
    },
    summary="Chat with the Law Assistant",
    description="""
Ask a question in natural language. The model searches the law database
through the `search_accounting_law` tool, possibly several times, and
answers with citations.

- `databaseOnly=true`: answer strictly from the database, refuse otherwise
- `databaseOnly=false`: database first, general knowledge as a marked fallback

`history` is bounded to the most recent messages before and after the turn.
""",
)
def chat(
    request: ChatRequest,
    orchestrator: Optional[ChatOrchestrator] = Depends(get_orchestrator),
):
    # Sync handler: runs in the threadpool while the model loop blocks
    if is_blank(request.message):
        raise ValidationError("Message is required")

    if orchestrator is None:
        return JSONResponse(
            status_code=503,
            content={"error": "Chat model is not configured (set GEMINI_API_KEY)"},
        )

    history = truncate_history(
        [m.to_message() for m in request.history],
        orchestrator.max_history_messages,
    )
    result = orchestrator.run_turn(
        request.message,
        history=history,
        database_only=request.database_only,
    )

    updated = [ChatMessageModel.from_message(m) for m in result.history]
    if not result.ok:
        logger.error(f"Chat turn failed: {result.error}")
        body = ChatErrorResponse(error=result.message, details=result.error, history=updated)
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))

    return ChatResponse(message=result.message, history=updated)


# ============================================================================
# HEALTH & STATS ENDPOINTS
# ============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check that the corpus is loaded and whether chat is available.",
)
async def health_check(request: Request) -> HealthResponse:
    services = get_services(request)
    return HealthResponse(
        status="healthy",
        version=request.app.version,
        laws_loaded=len(services.store),
        chat_available=services.orchestrator is not None,
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Corpus Statistics",
    description="Get law, section and article counts.",
)
async def get_stats(store: CorpusStore = Depends(get_store)) -> StatsResponse:
    return StatsResponse(**store.stats())
