"""
UPCDatabase.org provider (credentialed).
The API key travels as a path segment after the barcode.
"""

from typing import Any, Optional

import structlog

from .base import HttpProductProvider, LenientStr, ProviderPayload
from .interfaces import ProductRecord, ProductSource

logger = structlog.get_logger(__name__)


class UPCDatabaseResponse(ProviderPayload):
    valid: LenientStr = None
    title: LenientStr = None
    brand: LenientStr = None
    category: LenientStr = None
    description: LenientStr = None
    size: LenientStr = None
    weight: LenientStr = None
    color: LenientStr = None


class UPCDatabaseService(HttpProductProvider):
    """Barcode lookup against api.upcdatabase.org."""

    BASE_URL = "https://api.upcdatabase.org/product"

    requires_credential = True

    @property
    def source(self) -> ProductSource:
        return ProductSource.UPC_DATABASE

    async def lookup(self, barcode: str) -> Optional[ProductRecord]:
        key = self._require_credential(barcode)
        url = f"{self.BASE_URL}/{barcode}/{key}"

        logger.info("Looking up product on UPCDatabase", barcode=barcode)
        _, data = await self._get_json(url, barcode=barcode)
        if data is None:
            return None

        response = self._parse_payload(UPCDatabaseResponse, data, barcode)
        # The flag is the string "true", not a JSON boolean
        if response.valid != "true":
            return None

        return ProductRecord(
            barcode=barcode,
            source=self.source,
            name=response.title or "Unknown Product",
            brand=response.brand or "Unknown Brand",
            category=response.category or "Unknown Category",
            image=None,
            description=response.description or "",
            additional_info={
                "size": response.size or "",
                "weight": response.weight or "",
                "color": response.color or "",
            },
            url=None,
            raw_data=data,
        )
