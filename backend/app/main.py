"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.database import check_db_connection, close_db
from app.core.exceptions import AppException
from app.core.logging import get_logger, setup_logging
from app.middleware.request_logging import RequestLoggingMiddleware

setup_logging()
logger = get_logger(__name__)

PROBLEM_JSON = "application/problem+json"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )
    if await check_db_connection():
        logger.info("database_connected")
    else:
        logger.error("database_connection_failed")

    yield

    await close_db()
    logger.info("application_stopped")


# ============================================================================
# Error responses
# ============================================================================


def problem_response(request: Request, status_code: int, body: dict[str, Any]) -> JSONResponse:
    """RFC 7807 response with ``instance`` set to the request path."""
    return JSONResponse(
        status_code=status_code,
        content={**body, "instance": request.url.path},
        media_type=PROBLEM_JSON,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_error", error_code=exc.error_code, error=exc.message)
    return problem_response(request, exc.status_code, exc.detail)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Schema validation failures keep FastAPI's 422 with a problem body."""
    errors = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return problem_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {
            "type": "https://api.marketplace.local/errors/request_validation",
            "title": "Request Validation",
            "status": status.HTTP_422_UNPROCESSABLE_ENTITY,
            "detail": "Request validation failed",
            "error": "Request validation failed",
            "errors": errors,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", error=str(exc))
    message = "An unexpected error occurred" if settings.is_production else str(exc)
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {
            "type": "https://api.marketplace.local/errors/internal_error",
            "title": "Internal Server Error",
            "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "detail": message,
            "error": "Internal server error",
            "message": message,
        },
    )


# ============================================================================
# Application factory
# ============================================================================


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    docs_enabled = not settings.is_production
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Marketplace API: catalogue, auctions, orders and moderation",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    _include_routers(app)
    return app


def _include_routers(app: FastAPI) -> None:
    from app.modules.auctions.router import router as auctions_router
    from app.modules.auth.router import router as auth_router
    from app.modules.categories.router import router as categories_router
    from app.modules.health.router import router as health_router
    from app.modules.orders.router import router as orders_router
    from app.modules.products.router import router as products_router
    from app.modules.reviews.router import router as reviews_router
    from app.modules.shops.router import router as shops_router

    # Probes live outside the versioned prefix
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth", tags=["Authentication"])

    for router, tag in [
        (categories_router, "Categories"),
        (shops_router, "Shops"),
        (products_router, "Products"),
        (auctions_router, "Auctions"),
        (orders_router, "Orders"),
        (reviews_router, "Reviews"),
    ]:
        app.include_router(router, prefix=settings.api_prefix, tags=[tag])


app = create_app()
