"""
FastAPI Application Entry Point.

Accounting Law Search API - substring search and tool-calling chat

Run with:
    uvicorn lawsearch.server.main:app --host 0.0.0.0 --port 8000

Or for development:
    uvicorn lawsearch.server.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import NotFoundError, UpstreamError, ValidationError
from .config import Settings, get_settings
from .api import router
from .dependencies import Services, build_services

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"Invalid request: {location} {first.get('msg', '')}".strip()


def register_exception_handlers(app: FastAPI) -> None:
    """Map service errors to the `{error}` response shape."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _first_error_message(exc)})

    @app.exception_handler(UpstreamError)
    async def upstream_handler(request: Request, exc: UpstreamError):
        logger.error(f"Upstream failure: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process chat request", "details": str(exc)},
        )


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to environment settings)
        services: Pre-built services; when omitted they are built at startup
    """

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Loads the corpus once before serving; a missing or malformed corpus
        raises CorpusLoadError and the server does not start.
        """
        logger.info("Starting Accounting Law Search API Server...")

        if getattr(app.state, "services", None) is None:
            app.state.services = build_services(settings)

        yield

        logger.info("Shutting down Accounting Law Search API Server...")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
## Accounting Law Search API

Full-text search over Japanese accounting laws (laws → sections → articles),
with an AI consultation mode that searches the database as a tool.

### Features

- **Substring Search**: Case-insensitive match on article titles and contents,
  returned in corpus order with highlight flags
- **Law Browser**: List laws and fetch a full law with all its articles
- **AI Chat**: Google Gemini answers questions by calling
  `search_accounting_law`, with database-only and supplemented modes
""",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.services = services

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(router, prefix=settings.api_prefix, tags=["Laws"])

    # Root endpoint
    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": f"{settings.api_prefix}/health",
            "laws": f"{settings.api_prefix}/laws",
            "search": f"{settings.api_prefix}/search",
            "chat": f"{settings.api_prefix}/chat",
        }

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "lawsearch.server.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
