"""
Task Manager API - Main Application
===================================

FastAPI application entry point with middleware configuration
and route registration.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import newrelic.agent

# Configure logging for the application (root logger defaults to WARNING)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.errors import setup_exception_handlers
from app.core.session_gate import SessionGateMiddleware
from app.db.session import close_db, init_db
from app.schemas.common import HealthResponse
from app.services.auth_service import TokenSessionResolver
from app.services.cache import close_redis, init_redis

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# New Relic Transaction Enrichment Middleware (Raw ASGI)
# =============================================================================

class NewRelicTransactionMiddleware:
    """
    Raw ASGI middleware that enriches every New Relic transaction with
    custom attributes for filtering and dashboarding.

    Captures: response status, latency, HTTP method, route pattern, and
    the session user id when the session gate resolved one. Does nothing
    beyond timing when no agent transaction is active.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500  # default until we capture the real one

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ms = (time.perf_counter() - start) * 1000

            txn = newrelic.agent.current_transaction()
            if txn:
                # Route pattern (e.g. "/api/tasks/{task_id}") for grouping
                route = scope.get("route")
                route_path = route.path if route else scope.get("path", "unknown")

                newrelic.agent.add_custom_attributes([
                    ("http.method", scope.get("method", "")),
                    ("http.route", route_path),
                    ("http.status_code", status_code),
                    ("http.duration_ms", round(duration_ms, 2)),
                    ("environment", settings.ENVIRONMENT),
                ])

                # Set by the session gate
                state = scope.get("state") or {}
                user_id = state.get("user_id")
                if user_id:
                    newrelic.agent.add_custom_attribute("enduser.id", str(user_id))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events for:
    - Database connection
    - Redis connection (session revocation list)
    """
    logger.info("Starting Task Manager API (%s)", settings.ENVIRONMENT)

    # Initialize database
    try:
        await init_db()
    except Exception as e:
        logger.warning("Database connection failed: %s", e)
        # Continue startup even if DB fails (for health checks)

    # Initialize Redis
    try:
        await init_redis()
    except Exception as e:
        logger.warning("Redis connection failed, sign-out revocation disabled: %s", e)

    yield

    # Shutdown
    logger.info("Shutting down Task Manager API")
    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Build the application with middleware, handlers and routes."""
    app = FastAPI(
        title="Task Manager API",
        description="""
## Personal Task Manager Backend

Authenticated users create, edit, filter, search and delete their own tasks.

### Errors
All errors share one body shape: `{"error": "...", "details": "..."}`.
A task that doesn't exist and a task that belongs to someone else both
answer **404**.
        """,
        version=API_VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
        responses={
            400: {"description": "Validation error"},
            401: {"description": "Not authenticated"},
            404: {"description": "Resource not found"},
            500: {"description": "Internal server error"},
        },
    )

    # Session provider consulted by the gate and the auth routes
    app.state.session_resolver = TokenSessionResolver()

    # Middleware added last runs first: CORS, then New Relic, then the gate
    app.add_middleware(SessionGateMiddleware)
    app.add_middleware(NewRelicTransactionMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # =========================================================================
    # Health Check Endpoints
    # =========================================================================

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> dict:
        """
        Health check endpoint.

        Returns the current status of the API.
        """
        return {
            "status": "healthy",
            "version": API_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/", tags=["Health"])
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": "Task Manager API",
            "version": API_VERSION,
            "docs": "/docs" if settings.is_development else "Disabled in production",
        }

    # =========================================================================
    # API Routes
    # =========================================================================

    from app.api import auth, tasks

    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.is_development)
