"""
FastAPI dependencies shared by the API routers.
"""

from fastapi import HTTPException, Request, status
import structlog

from scanlens.services.barcode import ProductResolver

logger = structlog.get_logger(__name__)


def get_product_resolver(request: Request) -> ProductResolver:
    """Resolver created by the application lifespan."""
    resolver = getattr(request.app.state, "product_resolver", None)
    if resolver is None:
        logger.error("Product resolver requested before startup")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Product lookup is not available"
        )
    return resolver
