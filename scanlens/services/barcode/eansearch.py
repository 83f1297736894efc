"""
EAN-Search.org provider.
Token "0" selects the free, rate-limited tier, so the provider is always attempted.
"""

from typing import Any, List, Optional

import structlog
from pydantic import AliasChoices, Field, RootModel

from .base import HttpProductProvider, LenientStr, ProviderPayload
from .interfaces import ProductRecord, ProductSource, ProviderTransportError

logger = structlog.get_logger(__name__)


class EANSearchItem(ProviderPayload):
    ean: LenientStr = None
    name: LenientStr = None
    vendor: LenientStr = None
    category: LenientStr = None
    issuing_country: LenientStr = Field(
        default=None, validation_alias=AliasChoices("issuing_country", "issuingCountry")
    )


class EANSearchResponse(RootModel[List[EANSearchItem]]):
    pass


class EANSearchService(HttpProductProvider):
    """Barcode lookup against api.ean-search.org."""

    BASE_URL = "https://api.ean-search.org/api"
    PRODUCT_PAGE_URL = "https://www.ean-search.org/?q={barcode}"

    def __init__(self, token: str = "0", timeout: float = 8.0, user_agent: str = "ScanLens/1.0"):
        super().__init__(credential=token, timeout=timeout, user_agent=user_agent)

    @property
    def source(self) -> ProductSource:
        return ProductSource.EAN_SEARCH

    async def lookup(self, barcode: str) -> Optional[ProductRecord]:
        params = {
            "token": self.credential or "0",
            "op": "barcode-lookup",
            "format": "json",
            "ean": barcode,
        }

        logger.info("Looking up product on EAN-Search", barcode=barcode)
        _, data = await self._get_json(self.BASE_URL, barcode=barcode, params=params)
        if data is None:
            return None

        # Errors come back as an object, e.g. {"error": "Invalid token"}
        if isinstance(data, dict):
            raise ProviderTransportError(
                f"Provider error: {data.get('error', 'unexpected object response')}",
                provider=self.provider_name,
                barcode=barcode
            )

        items = self._parse_payload(EANSearchResponse, data, barcode).root
        if not items or not items[0].name:
            return None

        return self._to_record(barcode, items[0], data[0])

    def _to_record(self, barcode: str, item: EANSearchItem, raw: Any) -> ProductRecord:
        return ProductRecord(
            barcode=barcode,
            source=self.source,
            name=item.name or "Unknown Product",
            brand=item.vendor or "Unknown Brand",
            category=item.category or "Unknown Category",
            image=None,
            description=item.name or "",
            additional_info={
                "issuing_country": item.issuing_country or "",
            },
            url=self.PRODUCT_PAGE_URL.format(barcode=barcode),
            raw_data=raw,
        )
