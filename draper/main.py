"""
FastAPI application entry point.

This module creates and configures the FastAPI application using an
application factory (create_app) so tests can build instances with
their own settings and provider client.

For local development:
    uvicorn draper.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.middleware import BodySizeLimitMiddleware
from .api.routes import analysis, health
from .config.settings import Settings, get_settings
from .core.analysis.analyst import ProviderClient
from .core.errors import DraperError
from .infrastructure.openai.client import OpenAIConfig, OpenAIProviderClient

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def build_provider_client(settings: Settings) -> OpenAIProviderClient:
    """Construct the shared provider client from settings."""
    config = OpenAIConfig(
        api_key=settings.openai_api_key,
        chat_model=settings.openai_chat_model,
        transcription_model=settings.openai_transcription_model,
        transcription_prompt=settings.transcription_prompt,
        timeout_seconds=settings.openai_timeout_seconds,
    )
    return OpenAIProviderClient(config)


def create_app(
    settings: Optional[Settings] = None,
    provider_client: Optional[ProviderClient] = None,
) -> FastAPI:
    """
    Application factory.

    ``provider_client`` overrides the OpenAI client built at startup;
    tests pass a fake here.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Draper API starting", extra={"version": settings.api_version})

        if provider_client is not None:
            app.state.provider_client = provider_client
        else:
            missing_fields = settings.validate_required_fields()
            if missing_fields:
                logger.error(
                    "Missing required configuration",
                    extra={"missing_fields": missing_fields},
                )
                raise RuntimeError(
                    f"Missing required configuration: {', '.join(missing_fields)}"
                )
            app.state.provider_client = build_provider_client(settings)

        yield

        logger.info("Draper API shutting down")

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Creative analysis of video advertisements.

        ## Workflow

        1. Extract keyframes and audio from the video (see the `draper` CLI)
        2. `POST /api/visuals` and `POST /api/audio` concurrently
        3. Merge the two partial reports

        `POST /api/analyze` does both in one call.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Handlers see the same settings the app was built with
    app.dependency_overrides[get_settings] = lambda: settings

    if provider_client is not None:
        app.state.provider_client = provider_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Payloads carry base64 media, so the ceiling is explicit
    app.add_middleware(
        BodySizeLimitMiddleware,
        max_bytes=settings.max_request_body_bytes,
        max_mb=settings.max_request_body_mb,
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        analysis.router,
        prefix="/api",
        tags=["Analysis"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Draper Ad Analysis API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(DraperError)
    async def draper_error_handler(request: Request, exc: DraperError):
        logger.error(
            "Request failed",
            extra={
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "error": exc.message,
            },
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    logger.info(
        "FastAPI application created",
        extra={"title": settings.api_title, "version": settings.api_version},
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


def run(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "draper.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run(reload=True)
