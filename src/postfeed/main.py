from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .context import AppContext
from .errors import AuthFailure
from .logging_config import configure_logging
from .routers import auth as auth_router
from .routers import favorites as favorites_router
from .routers import posts as posts_router
from .routers import profile as profile_router
from .routers import search as search_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "auth", "description": "Local username/password accounts and the current session."},
    {"name": "posts", "description": "Paginated posts feed, comments and comment counts."},
    {"name": "search", "description": "Free-text post search."},
    {"name": "favorites", "description": "Posts the user marked as favorites."},
    {"name": "profile", "description": "Profile of the logged in user."},
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        transport: Optional httpx transport for the remote posts API (tests pass
            an httpx.MockTransport).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        context = AppContext(settings, transport=transport)
        context.startup()
        app.state.context = context
        logger.info("Postfeed started against %s", settings.api_base_url)
        try:
            yield
        finally:
            await context.aclose()

    app = FastAPI(
        title="Postfeed",
        description="Posts feed, comments, search, favorites and local accounts for the postfeed app.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(AuthFailure)
    async def auth_failure_handler(request: Request, exc: AuthFailure) -> JSONResponse:
        """
        Rejected login/registration. The message never says which check failed.
        """
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "AuthFailure", "message": exc.message, "detail": None},
        )

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "api": settings.api_base_url}

    app.include_router(auth_router.router)
    app.include_router(posts_router.router)
    app.include_router(search_router.router)
    app.include_router(favorites_router.router)
    app.include_router(profile_router.router)
    return app


app = create_app()
