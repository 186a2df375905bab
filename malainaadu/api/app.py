"""
MalaiNaadu news pipeline - FastAPI application.

Every endpoint returns JSON; failures come back as {"error": message}.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..db import close_connection_pool
from ..errors import (
    ArticleNotFoundError,
    ConfigurationError,
    InvalidPayloadError,
    InvalidTransitionError,
    MalaiNaaduError,
    UnauthorizedError,
)
from ..utils import setup_logging
from .routers import health, ingestion, moderation, publishing, webhooks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup, release the pool on shutdown."""
    setup_logging()
    logger.info("Starting MalaiNaadu API %s", __version__)
    yield
    close_connection_pool()
    logger.info("MalaiNaadu API stopped")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError):
        logger.error("Configuration error on %s: %s", request.url.path, exc)
        return _error(500, str(exc))

    @app.exception_handler(ArticleNotFoundError)
    async def article_not_found(request: Request, exc: ArticleNotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition(request: Request, exc: InvalidTransitionError):
        return _error(409, str(exc))

    @app.exception_handler(InvalidPayloadError)
    async def invalid_payload(request: Request, exc: InvalidPayloadError):
        return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})

    @app.exception_handler(UnauthorizedError)
    async def unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(status_code=401, content={"success": False, "error": str(exc)})

    @app.exception_handler(MalaiNaaduError)
    async def pipeline_error(request: Request, exc: MalaiNaaduError):
        logger.error("Unhandled pipeline error on %s: %s", request.url.path, exc)
        return _error(500, str(exc))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s", request.url.path)
        return _error(500, str(exc) or "Unknown error")


def create_app() -> FastAPI:
    app = FastAPI(
        title="MalaiNaadu News Pipeline",
        description="RSS ingestion, rewriting, moderation and Facebook publishing",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(ingestion.router, tags=["Ingestion"])
    app.include_router(publishing.router, tags=["Publishing"])
    app.include_router(moderation.router, prefix="/articles", tags=["Moderation"])
    app.include_router(webhooks.router, tags=["Webhooks"])
    return app


app = create_app()
