"""
Main FastAPI application with logging, routing, and lifecycle management.
"""

from contextlib import asynccontextmanager
import logging
import sys
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from scanlens.api.v1.router import api_router
from scanlens.core.config import get_settings
from scanlens.services.barcode import ProductResolver, ProviderFailure

settings = get_settings()

logging.basicConfig(format="%(message)s", stream=sys.stdout, level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


def _count_provider_failure(failure: ProviderFailure):
    """Keep a per-provider failure tally on the app for the detailed health check."""
    counts = app.state.provider_failures
    counts[failure.provider] = counts.get(failure.provider, 0) + 1


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Starting ScanLens Product Lookup API")

    app.state.provider_failures = {}
    app.state.product_resolver = ProductResolver.from_settings(
        settings,
        failure_hook=_count_provider_failure
    )
    logger.info("Application startup complete", providers=app.state.product_resolver.api_status())

    yield

    logger.info("Shutting down ScanLens Product Lookup API")
    await app.state.product_resolver.close()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Barcode scanning backend resolving product codes across several product databases",
    version=settings.version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing."""
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "Request failed",
            method=request.method,
            url=str(request.url),
            error=str(e),
            process_time=round(time.time() - start_time, 4),
        )
        raise

    process_time = time.time() - start_time
    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        process_time=round(process_time, 4),
    )
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "Unhandled exception",
        method=request.method,
        url=str(request.url),
        error=str(exc),
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later.",
        }
    )


@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "scanlens-api",
        "version": settings.version,
        "environment": settings.environment,
    }


@app.get("/health/detailed")
async def detailed_health_check():
    """Provider configuration and failure counts since startup."""
    resolver = getattr(app.state, "product_resolver", None)
    return {
        "status": "healthy" if resolver is not None else "starting",
        "service": "scanlens-api",
        "version": settings.version,
        "timestamp": time.time(),
        "providers": resolver.api_status() if resolver is not None else {},
        "provider_failures": dict(getattr(app.state, "provider_failures", {})),
    }


app.include_router(api_router, prefix="/api/v1")
