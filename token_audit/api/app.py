"""FastAPI application factory for the audit API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from config.settings import settings
from token_audit.api.limiter import limiter
from token_audit.api.middleware import SecurityHeadersMiddleware
from token_audit.parsers.auditor import TokenAuditor, create_auditor


def create_app(auditor: TokenAuditor | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    When ``auditor`` is omitted one is built from settings on startup and
    closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if auditor is not None:
            app.state.auditor = auditor
            yield
            return

        app.state.auditor = await create_auditor()
        logger.info(f"[API] Auditor ready (rpc={settings.rpc_url})")
        try:
            yield
        finally:
            await app.state.auditor.close()

    app = FastAPI(
        title="Token Audit API",
        version="0.1.0",
        docs_url="/api/docs" if settings.api_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
    )
    if auditor is not None:
        app.state.auditor = auditor

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    from token_audit.api.routers.audit import router as audit_router
    from token_audit.api.routers.health import router as health_router

    app.include_router(audit_router)
    app.include_router(health_router)

    return app
