"""
Barcode Lookup provider (commercial, comprehensive general merchandise database).

API Documentation : https://www.barcodelookup.com/api
"""

from decimal import Decimal
from typing import Any, List, Optional

import structlog
from pydantic import Field

from .base import (
    HttpProductProvider, LenientList, LenientStr, LenientStrList, ProviderPayload, parse_decimal
)
from .interfaces import ProductRecord, ProductSource

logger = structlog.get_logger(__name__)


class BarcodeLookupProduct(ProviderPayload):
    barcode_number: LenientStr = None
    title: LenientStr = None
    product_name: LenientStr = None
    brand: LenientStr = None
    manufacturer: LenientStr = None
    category: LenientStr = None
    images: LenientStrList = Field(default_factory=list)
    image: LenientStr = None
    description: LenientStr = None
    msrp: Any = None
    price: Any = None
    currency: LenientStr = None
    model: LenientStr = None
    size: LenientStr = None
    color: LenientStr = None
    weight: LenientStr = None
    dimension: LenientStr = None
    features: LenientList = Field(default_factory=list)
    reviews: LenientList = Field(default_factory=list)
    stores: LenientList = Field(default_factory=list)


class BarcodeLookupResponse(ProviderPayload):
    products: Optional[List[BarcodeLookupProduct]] = None


class BarcodeLookupService(HttpProductProvider):
    """Credentialed lookup against api.barcodelookup.com."""

    BASE_URL = "https://api.barcodelookup.com/v3/products"
    PRODUCT_PAGE_URL = "https://www.barcodelookup.com/{barcode}"

    requires_credential = True

    @property
    def source(self) -> ProductSource:
        return ProductSource.BARCODE_LOOKUP

    async def lookup(self, barcode: str) -> Optional[ProductRecord]:
        key = self._require_credential(barcode)
        params = {"barcode": barcode, "formatted": "y", "key": key}

        logger.info("Looking up product on Barcode Lookup", barcode=barcode)
        _, data = await self._get_json(self.BASE_URL, barcode=barcode, params=params)
        if data is None:
            return None

        response = self._parse_payload(BarcodeLookupResponse, data, barcode)
        if not response.products:
            return None

        return self._to_record(barcode, response.products[0], data["products"][0])

    @staticmethod
    def _price(product: BarcodeLookupProduct) -> Optional[Decimal]:
        """MSRP when present, zero included, else the listed price."""
        msrp = parse_decimal(product.msrp)
        return msrp if msrp is not None else parse_decimal(product.price)

    def _to_record(self, barcode: str, product: BarcodeLookupProduct, raw: Any) -> ProductRecord:
        first_image = product.images[0] if product.images else None
        return ProductRecord(
            barcode=barcode,
            source=self.source,
            name=product.title or product.product_name or "Unknown Product",
            brand=product.brand or product.manufacturer or "Unknown Brand",
            category=product.category or "Unknown Category",
            image=first_image or product.image or None,
            description=product.description or product.title or "",
            price=self._price(product),
            currency=product.currency or "USD",
            additional_info={
                "upc": product.barcode_number,
                "manufacturer": product.manufacturer or "",
                "model": product.model or "",
                "size": product.size or "",
                "color": product.color or "",
                "weight": product.weight or "",
                "dimensions": product.dimension or "",
                "features": product.features,
                "reviews": product.reviews,
                "stores": product.stores,
            },
            url=self.PRODUCT_PAGE_URL.format(barcode=barcode),
            raw_data=raw,
        )
