"""
BarcodeSpider provider (credentialed).
"""

from typing import Any, Optional

import structlog

from .base import HttpProductProvider, LenientStr, ProviderPayload, parse_decimal
from .interfaces import ProductRecord, ProductSource, ProviderTransportError

logger = structlog.get_logger(__name__)


class BarcodeSpiderAttributes(ProviderPayload):
    title: LenientStr = None
    brand: LenientStr = None
    category: LenientStr = None
    image: LenientStr = None
    description: LenientStr = None
    lowest_recorded_price: Any = None
    size: LenientStr = None
    weight: LenientStr = None
    color: LenientStr = None
    model: LenientStr = None


class BarcodeSpiderItemResponse(ProviderPayload):
    code: Optional[int] = None
    status: LenientStr = None
    message: LenientStr = None
    item_attributes: Optional[BarcodeSpiderAttributes] = None


class BarcodeSpiderResponse(ProviderPayload):
    item_response: Optional[BarcodeSpiderItemResponse] = None


class BarcodeSpiderService(HttpProductProvider):
    """UPC lookup against api.barcodespider.com."""

    BASE_URL = "https://api.barcodespider.com/v1/lookup"

    requires_credential = True

    @property
    def source(self) -> ProductSource:
        return ProductSource.BARCODE_SPIDER

    async def lookup(self, barcode: str) -> Optional[ProductRecord]:
        token = self._require_credential(barcode)
        params = {"token": token, "upc": barcode}

        logger.info("Looking up product on BarcodeSpider", barcode=barcode)
        _, data = await self._get_json(self.BASE_URL, barcode=barcode, params=params)
        if data is None:
            return None

        response = self._parse_payload(BarcodeSpiderResponse, data, barcode)
        item_response = response.item_response
        if item_response is None or item_response.code != 200:
            return None

        if item_response.item_attributes is None:
            raise ProviderTransportError(
                "Found response without item attributes",
                provider=self.provider_name,
                barcode=barcode
            )

        raw = data["item_response"]["item_attributes"]
        return self._to_record(barcode, item_response.item_attributes, raw)

    def _to_record(self, barcode: str, item: BarcodeSpiderAttributes, raw: Any) -> ProductRecord:
        return ProductRecord(
            barcode=barcode,
            source=self.source,
            name=item.title or "Unknown Product",
            brand=item.brand or "Unknown Brand",
            category=item.category or "Unknown Category",
            image=item.image or None,
            description=item.description or "",
            price=parse_decimal(item.lowest_recorded_price),
            additional_info={
                "size": item.size or "",
                "weight": item.weight or "",
                "color": item.color or "",
                "model": item.model or "",
            },
            url=None,
            raw_data=raw,
        )
