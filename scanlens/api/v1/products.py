"""
Product lookup API endpoints.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
import structlog

from scanlens.core.dependencies import get_product_resolver
from scanlens.services.barcode import BarcodeValidationError, ProductResolver

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/status")
async def get_provider_status(
    resolver: ProductResolver = Depends(get_product_resolver)
) -> Dict[str, bool]:
    """Which providers are usable with the current credentials."""
    return resolver.api_status()


@router.get("/search")
async def search_products(
    q: str = Query(..., min_length=1, description="Product name or brand"),
    limit: int = Query(10, ge=1, le=50),
    resolver: ProductResolver = Depends(get_product_resolver)
) -> List[Dict[str, Any]]:
    """Free text product search."""
    results = await resolver.search_products(q, limit)
    return [
        {
            "name": r.name,
            "brand": r.brand,
            "barcode": r.barcode,
            "image": r.image,
            "category": r.category,
            "nutrition_grade": r.nutrition_grade,
        }
        for r in results
    ]


@router.get("/{raw_barcode}")
async def lookup_product(
    raw_barcode: str,
    include_raw: bool = Query(False, description="Attach the provider payload"),
    resolver: ProductResolver = Depends(get_product_resolver)
) -> Dict[str, Any]:
    """
    Resolve a barcode to a product.

    Always answers with a product for a well formed barcode; unknown
    products come back with is_unknown set.
    """
    try:
        record = await resolver.lookup_product(raw_barcode)
    except BarcodeValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Not a recognized product code: {e.barcode or raw_barcode}"
        )
    return record.to_dict(include_raw=include_raw)
