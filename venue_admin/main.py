"""
Main FastAPI application
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
from prometheus_client import make_asgi_app
import logging
import time
import uuid

from venue_admin.config import settings
from venue_admin.core.database import Database
from venue_admin.core.exceptions import VenueAdminException
from venue_admin.core.logging import request_id_var, setup_logging
from venue_admin.core.metrics import REQUEST_COUNT, REQUEST_DURATION
from venue_admin.core.seeding import seed_reference_data
from venue_admin.api.v1.api import api_router
from venue_admin.services.identity_service import FirebaseIdentityProvider
from venue_admin.services.payment_service import PaymentAccountProvisioner
from venue_admin.services.storage_service import MediaStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    database = Database()
    await database.connect()
    app.state.database = database
    logger.info("Database connection established")

    app.state.storage = MediaStorage.from_settings()
    app.state.payments = PaymentAccountProvisioner()
    app.state.identity = FirebaseIdentityProvider.from_settings()

    if settings.SEED_REFERENCE_DATA:
        await seed_reference_data(database)

    yield

    # Shutdown
    logger.info("Shutting down application")
    await database.dispose()


def format_validation_errors(exc: RequestValidationError) -> list:
    """
    Flatten pydantic errors into "field: message" strings
    """
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        cause = (error.get("ctx") or {}).get("error")
        message = str(cause) if isinstance(cause, ValueError) else error.get("msg", "Invalid value")
        details.append(f"{'.'.join(location)}: {message}" if location else message)
    return details


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(VenueAdminException)
    async def venue_admin_exception_handler(request: Request, exc: VenueAdminException):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": format_validation_errors(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = "The requested resource was not found"
        else:
            message = str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"Internal server error: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "An internal server error occurred"})


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Admin portal API for venue onboarding and moderation",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracking middleware
    @app.middleware("http")
    async def track_requests(request: Request, call_next):
        """
        Track request metrics and add request ID
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        start_time = time.time()
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        duration = time.time() - start_time

        # Label by route template so venue ids do not explode cardinality
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint
        ).observe(duration)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration)
        return response

    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
            "api_docs": "/docs" if settings.DEBUG else None
        }

    app.include_router(api_router, prefix=settings.API_PREFIX)

    # Mount Prometheus metrics endpoint
    if settings.PROMETHEUS_ENABLED:
        app.mount("/metrics", make_asgi_app())

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "venue_admin.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
