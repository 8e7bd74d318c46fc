"""
FastAPI Application Module

Serves the advanced planning conversation: users talk to an AI business
consultant that scores how much of their business has been described and
signals when a document suite (BRD, PRD, business plan, feasibility study,
investor pitch) can be generated.

Key Features:
- Async request handling with FastAPI
- Collaborators (store, LLM client) injected through `create_app`
- Rate limiting, structured logging and Prometheus metrics
- CORS and OpenTelemetry support
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from ..config import Settings, get_settings
from ..observability import CUSTOM_REGISTRY, ERRORS, REQUESTS, path_label
from ..repositories.base import Repository
from ..repositories.memory import InMemoryRepository
from ..services.llm import GeminiClient, LLMClient
from .rate_limiter import RateLimiter, RateLimitExceeded, rate_limit_middleware
from .routes import router

logger = get_logger()


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
    llm_client: Optional[LLMClient] = None
) -> FastAPI:
    """Build the application. A missing llm_client is created at start-up."""
    settings = settings or get_settings()
    rate_limiter = RateLimiter(
        rate_limit=settings.rate_limit,
        time_window=settings.rate_limit_window
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handles app startup/shutdown and resource management"""
        if app.state.llm_client is None:
            app.state.llm_client = GeminiClient(settings.gemini_api_key, settings.gemini_model)
        await rate_limiter.start()
        logger.info("application_startup_complete")

        yield

        await rate_limiter.stop()
        logger.info("application_shutdown_complete")

    app = FastAPI(
        title="Smart Business Docs AI",
        description="Conversational business planning with confidence scoring",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.repository = repository or InMemoryRepository()
    app.state.llm_client = llm_client
    app.state.rate_limiter = rate_limiter

    # Enable cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Set up request tracing
    FastAPIInstrumentor.instrument_app(app)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Tracks requests and enforces rate limits"""
        path = path_label(request.url.path)
        logger.info("request_started", method=request.method, path=request.url.path)
        REQUESTS.labels(path=path).inc()
        try:
            remaining = await rate_limit_middleware(request, rate_limiter)
        except RateLimitExceeded as e:
            ERRORS.labels(path=path).inc()
            return JSONResponse(status_code=429, content={"error": str(e)})

        try:
            response = await call_next(request)
        except Exception as e:
            ERRORS.labels(path=path).inc()
            logger.error("request_failed", path=request.url.path, error=str(e))
            raise

        if response.status_code >= 500:
            ERRORS.labels(path=path).inc()
        if remaining is not None:
            response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None)
        )

    app.include_router(router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/metrics")
    async def metrics():
        """Provides Prometheus metrics for system monitoring"""
        return Response(generate_latest(CUSTOM_REGISTRY), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
