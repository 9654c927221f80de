"""FastAPI application entry point.

Travel Deal Validator API - flight and cruise deals with authenticity checks.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.routes import api_router
from app.schemas.common import ErrorCode, ErrorDetail, ErrorResponse
from app.services.errors import DealPipelineError
from app.settings import get_settings

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    logger.info(
        f"{settings.app_name} {settings.app_version} starting "
        f"(display_timezone={settings.display_timezone})"
    )

    yield

    logger.info(f"{settings.app_name} shutting down")


def _error_response(code: ErrorCode, message: str, detail: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail))
    return JSONResponse(status_code=500, content=body.model_dump())


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Flight and cruise deals with authenticity checks",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(DealPipelineError)
    async def deal_pipeline_exception_handler(
        request: Request, exc: DealPipelineError
    ) -> JSONResponse:
        """A seed could not be materialized; the whole snapshot is rejected."""
        logger.warning(f"Snapshot failed on {request.url.path}: {exc}")
        return _error_response(
            "SNAPSHOT_FAILED",
            str(exc) if settings.debug else "Could not build the deals snapshot",
            {"dealId": exc.deal_id} if exc.deal_id else None,
        )

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception(f"Unhandled error on {request.url.path}")
        return _error_response(
            "INTERNAL_ERROR",
            str(exc) if settings.debug else "Internal server error",
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
