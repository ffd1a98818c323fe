from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bistro.core.config import Settings, get_settings
from bistro.core.errors import APIError
from bistro.core.observability import setup_logging
from bistro.core.openapi_docs import DocumentPublisher, create_docs_router
from bistro.routers.auth import router as auth_router
from bistro.routers.health import router as health_router
from bistro.routers.items import router as items_router
from bistro.routers.sales import router as sales_router

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Typed errors raised by handlers and dependencies."""
        logger.info(
            f"{exc.status_code} on {request.url.path}: {exc.detail}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Schema mismatches are client errors."""
        logger.info(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors()), "code": "validation_error"},
        )

    # Global exception handler for unhandled errors
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected server errors with structured response."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True, extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": request.headers.get("X-Request-ID"),
            }
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    ``settings.ENVIRONMENT`` decides how the OpenAPI document is published:
    written to disk in production, kept in memory (with the Swagger UI) in
    development.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, fmt="json" if settings.precompute_docs else "text")

    publisher = DocumentPublisher(precompute=settings.precompute_docs, output_dir=settings.OPENAPI_DIR)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        publisher.publish(app)
        yield

    app = FastAPI(
        title=settings.APP_NAME,
        description="Restaurant management API - menu items and sales statistics.",
        version="0.1.0",
        debug=settings.DEBUG,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.publisher = publisher

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(create_docs_router(publisher))
    app.include_router(auth_router)
    app.include_router(items_router)
    app.include_router(sales_router)

    return app


app = create_app()
