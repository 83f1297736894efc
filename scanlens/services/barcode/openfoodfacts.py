"""
OpenFoodFacts provider.
Free and open database, strongest on food products; no credential required.

Architecture Pattern : Strategy Pattern + Async/Await
API Documentation : https://openfoodfacts.github.io/openfoodfacts-server/api/
"""

from typing import Any, List, Optional

import structlog
from pydantic import Field

from .base import HttpProductProvider, LenientFloat, LenientStr, ProviderPayload
from .interfaces import (
    NUTRITION_GRADES, NutritionFacts, ProductRecord, ProductSource,
    ProductSummary, ProviderTransportError
)

logger = structlog.get_logger(__name__)


class OpenFoodFactsNutriments(ProviderPayload):
    energy_kcal_100g: LenientFloat = Field(default=None, alias="energy-kcal_100g")
    energy_100g: LenientFloat = None
    fat_100g: LenientFloat = None
    saturated_fat_100g: LenientFloat = Field(default=None, alias="saturated-fat_100g")
    carbohydrates_100g: LenientFloat = None
    sugars_100g: LenientFloat = None
    proteins_100g: LenientFloat = None
    fiber_100g: LenientFloat = None
    salt_100g: LenientFloat = None
    sodium_100g: LenientFloat = None


class OpenFoodFactsProduct(ProviderPayload):
    code: LenientStr = None
    product_name: LenientStr = None
    product_name_en: LenientStr = None
    generic_name: LenientStr = None
    brands: LenientStr = None
    categories: LenientStr = None
    image_url: LenientStr = None
    image_front_url: LenientStr = None
    ingredients_text: LenientStr = None
    nutriments: Optional[OpenFoodFactsNutriments] = None
    nutrition_grade_fr: LenientStr = None
    nutriscore_grade: LenientStr = None
    nova_group: LenientFloat = None
    countries: LenientStr = None
    stores: LenientStr = None
    packaging: LenientStr = None
    labels: LenientStr = None
    allergens: LenientStr = None
    traces: LenientStr = None
    quantity: LenientStr = None
    serving_size: LenientStr = None


class OpenFoodFactsResponse(ProviderPayload):
    status: Optional[int] = None
    product: Optional[OpenFoodFactsProduct] = None


class OpenFoodFactsSearchResponse(ProviderPayload):
    products: List[OpenFoodFactsProduct] = Field(default_factory=list)


def extract_nutrition(nutriments: Optional[OpenFoodFactsNutriments]) -> Optional[NutritionFacts]:
    """
    Map the OpenFoodFacts per-100g nutriments onto NutritionFacts.

    Energy prefers the kcal field and falls back to the generic energy field.
    Returns None when no nutrient is known.
    """
    if nutriments is None:
        return None

    energy = nutriments.energy_kcal_100g
    if energy is None:
        energy = nutriments.energy_100g

    nutrition = NutritionFacts(
        energy=energy,
        fat=nutriments.fat_100g,
        saturated_fat=nutriments.saturated_fat_100g,
        carbohydrates=nutriments.carbohydrates_100g,
        sugars=nutriments.sugars_100g,
        protein=nutriments.proteins_100g,
        fiber=nutriments.fiber_100g,
        salt=nutriments.salt_100g,
        sodium=nutriments.sodium_100g,
    )
    return None if nutrition.is_empty() else nutrition


def normalize_grade(value: Optional[str]) -> Optional[str]:
    """Nutri-Score letter in upper case; "unknown", "not-applicable" and friends become None."""
    if not value:
        return None
    grade = value.strip().upper()
    return grade if grade in NUTRITION_GRADES else None


class OpenFoodFactsService(HttpProductProvider):
    """
    Product lookup via the OpenFoodFacts API.

    Features:
    - Lookup by barcode (EAN-13, UPC-A, ...)
    - Free text product search
    - Per-100g nutrition facts and Nutri-Score
    """

    BASE_URL = "https://world.openfoodfacts.org/api/v0/product"
    SEARCH_URL = "https://world.openfoodfacts.org/cgi/search.pl"
    PRODUCT_PAGE_URL = "https://world.openfoodfacts.org/product/{barcode}"

    def __init__(self, timeout: float = 8.0, user_agent: str = "ScanLens/1.0", max_page_size: int = 50):
        super().__init__(credential=None, timeout=timeout, user_agent=user_agent)
        self.max_page_size = max_page_size

    @property
    def source(self) -> ProductSource:
        return ProductSource.OPENFOODFACTS

    @property
    def supports_search(self) -> bool:
        return True

    async def lookup(self, barcode: str) -> Optional[ProductRecord]:
        """
        API Endpoint: /api/v0/product/{barcode}.json
        """
        url = f"{self.BASE_URL}/{barcode}.json"
        logger.info("Looking up product on OpenFoodFacts", barcode=barcode, url=url)

        _, data = await self._get_json(url, barcode=barcode)
        if data is None:
            return None

        response = self._parse_payload(OpenFoodFactsResponse, data, barcode)
        if response.status != 1 or response.product is None:
            logger.info("Product not found", barcode=barcode, provider=self.provider_name)
            return None

        return self._to_record(barcode, response.product, data["product"])

    def _to_record(self, barcode: str, product: OpenFoodFactsProduct, raw: Any) -> ProductRecord:
        return ProductRecord(
            barcode=barcode,
            source=self.source,
            name=product.product_name or product.product_name_en or "Unknown Product",
            brand=product.brands or "Unknown Brand",
            category=product.categories or "Food & Beverages",
            image=product.image_url or product.image_front_url or None,
            description=product.generic_name or product.product_name or "",
            ingredients=product.ingredients_text or None,
            nutrition=extract_nutrition(product.nutriments),
            nutrition_grade=normalize_grade(product.nutrition_grade_fr or product.nutriscore_grade),
            nova_group=int(product.nova_group) if product.nova_group is not None else None,
            additional_info={
                "countries": product.countries or "",
                "stores": product.stores or "",
                "packaging": product.packaging or "",
                "labels": product.labels or "",
                "allergens": product.allergens or "",
                "traces": product.traces or "",
                "quantity": product.quantity or "",
                "serving_size": product.serving_size or "",
            },
            url=self.PRODUCT_PAGE_URL.format(barcode=barcode),
            raw_data=raw,
        )

    async def search_products(self, query: str, limit: int = 10) -> List[ProductSummary]:
        """
        Search products by name or brand.

        API Endpoint: /cgi/search.pl
        """
        if not query or not query.strip():
            return []

        params = {
            "search_terms": query.strip(),
            "search_simple": 1,
            "action": "process",
            "json": 1,
            "page_size": min(limit, self.max_page_size),
        }

        logger.info("Searching products on OpenFoodFacts", query=query, limit=limit)

        try:
            _, data = await self._get_json(self.SEARCH_URL, params=params)
            if data is None:
                return []
            response = self._parse_payload(OpenFoodFactsSearchResponse, data, "")
        except ProviderTransportError as e:
            logger.warning("Product search failed", query=query, error=str(e))
            return []

        results = [
            ProductSummary(
                name=product.product_name or product.product_name_en or "Unknown Product",
                brand=product.brands or "Unknown Brand",
                barcode=product.code or "",
                image=product.image_url or product.image_front_url or None,
                category=product.categories or "Unknown Category",
                nutrition_grade=normalize_grade(product.nutrition_grade_fr),
            )
            for product in response.products[:limit]
        ]

        logger.info("Product search completed", query=query, found_products=len(results))
        return results
