"""
Scan classification API endpoints.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
import structlog

from scanlens.core.dependencies import get_product_resolver
from scanlens.services.barcode import BarcodeValidationError, ProductResolver
from scanlens.services.scan import (
    ScannedCode, classify, display_name, is_product_code, lookup_scan
)

logger = structlog.get_logger(__name__)

router = APIRouter()


class ScanRequest(BaseModel):
    """Decoded scan sent by the camera layer."""
    raw_payload: str = Field(..., min_length=1)
    symbology: Optional[str] = None


def _describe(scan: ScannedCode) -> Dict[str, Any]:
    return {
        "content_type": classify(scan).value,
        "symbology": display_name(scan.symbology),
        "is_product_code": is_product_code(scan.raw_payload, scan.symbology),
    }


@router.post("/classify")
async def classify_scan(request: ScanRequest) -> Dict[str, Any]:
    """Tell what a scanned payload looks like."""
    return _describe(ScannedCode(request.raw_payload, request.symbology))


@router.post("/lookup")
async def lookup_scanned_product(
    request: ScanRequest,
    resolver: ProductResolver = Depends(get_product_resolver)
) -> Dict[str, Any]:
    """Classify a scan and resolve it when it is a product code."""
    scan = ScannedCode(request.raw_payload, request.symbology)
    response = _describe(scan)

    try:
        record = await lookup_scan(resolver, scan)
    except BarcodeValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Not a recognized product code: {e.barcode or scan.raw_payload}"
        )

    response["product"] = record.to_dict() if record is not None else None
    return response
