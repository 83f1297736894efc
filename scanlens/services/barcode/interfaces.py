"""
Interfaces for the product lookup services.
Defines the unified product schema, the provider contract and the error taxonomy.

Architecture Pattern : Interface Segregation Principle (ISP)
Inspiration : Repository Pattern, Strategy Pattern
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)


class ProductSource(str, Enum):
    """Data sources a ProductRecord can come from."""
    BARCODE_LOOKUP = "Barcode Lookup"
    OPENFOODFACTS = "OpenFoodFacts"
    EAN_SEARCH = "EAN-Search"
    BARCODE_SPIDER = "BarcodeSpider"
    UPC_DATABASE = "UPCDatabase"
    FALLBACK = "Fallback"


NUTRITION_GRADES = ("A", "B", "C", "D", "E")


@dataclass
class NutritionFacts:
    """
    Nutrient amounts per 100g.
    A field left as None is unknown; it is never zero-filled.
    """
    energy: Optional[float] = None
    fat: Optional[float] = None
    saturated_fat: Optional[float] = None
    carbohydrates: Optional[float] = None
    sugars: Optional[float] = None
    protein: Optional[float] = None
    fiber: Optional[float] = None
    salt: Optional[float] = None
    sodium: Optional[float] = None
    energy_unit: str = "kcal"

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self) if f.name != "energy_unit")

    def to_dict(self) -> Dict[str, Any]:
        """Known nutrients only, plus the energy unit."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class ProductRecord:
    """
    Unified result of a product lookup.
    Built either by a provider adapter or by the fallback synthesizer.
    """
    barcode: str
    source: ProductSource
    name: str = "Unknown Product"
    brand: str = "Unknown Brand"
    category: str = "Unknown Category"
    found: bool = True
    image: Optional[str] = None
    description: str = ""
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    ingredients: Optional[str] = None
    nutrition: Optional[NutritionFacts] = None
    nutrition_grade: Optional[str] = None
    nova_group: Optional[int] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)
    url: Optional[str] = None
    is_unknown: Optional[bool] = None
    raw_data: Any = None

    def __post_init__(self):
        if self.nutrition_grade is not None and self.nutrition_grade not in NUTRITION_GRADES:
            raise ValueError(f"Invalid nutrition grade: {self.nutrition_grade}")

    def to_dict(self, include_raw: bool = False) -> Dict[str, Any]:
        """JSON friendly representation."""
        data = {
            "found": self.found,
            "source": self.source.value,
            "barcode": self.barcode,
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "image": self.image,
            "description": self.description,
            "price": str(self.price) if self.price is not None else None,
            "currency": self.currency,
            "ingredients": self.ingredients,
            "nutrition": self.nutrition.to_dict() if self.nutrition else None,
            "nutrition_grade": self.nutrition_grade,
            "nova_group": self.nova_group,
            "additional_info": self.additional_info,
            "url": self.url,
            "is_unknown": self.is_unknown,
        }
        if include_raw:
            data["raw_data"] = self.raw_data
        return data


@dataclass
class ProductSummary:
    """Lightweight search hit."""
    name: str
    brand: str
    barcode: str
    image: Optional[str] = None
    category: str = "Unknown Category"
    nutrition_grade: Optional[str] = None


@dataclass
class ProviderFailure:
    """Diagnostic event emitted when a provider step fails."""
    provider: str
    barcode: str
    error: str
    error_type: str


class IProductProvider(ABC):
    """
    Contract shared by every product data provider.

    Responsibilities:
    - Build the provider request for a normalized barcode
    - Map the provider payload into a ProductRecord
    - Raise ProviderTransportError on any transport or payload problem
    """

    @abstractmethod
    async def lookup(self, barcode: str) -> Optional[ProductRecord]:
        """
        Look a product up by its normalized barcode.

        Args:
            barcode: Digits only barcode (already validated)

        Returns:
            ProductRecord when found, None when the provider has no data

        Raises:
            ProviderTransportError: network, timeout, malformed payload or
                missing credential
        """

    @property
    @abstractmethod
    def source(self) -> ProductSource:
        """Source tag stamped on records from this provider."""

    @property
    def provider_name(self) -> str:
        return self.source.value

    @property
    def is_configured(self) -> bool:
        """Whether the provider has everything it needs to be queried."""
        return True

    @property
    def supports_search(self) -> bool:
        return False

    async def search_products(self, query: str, limit: int = 10) -> List[ProductSummary]:
        """Free text search; providers without search return nothing."""
        return []

    async def close(self):
        """Release transport resources."""


class BarcodeServiceError(Exception):
    """Base exception for the product lookup services."""

    def __init__(self, message: str, provider: str = "", barcode: str = "", original_error: Exception = None):
        super().__init__(message)
        self.provider = provider
        self.barcode = barcode
        self.original_error = original_error


class BarcodeValidationError(BarcodeServiceError):
    """Raised when a scanned string is not a recognized product code."""


class ProviderTransportError(BarcodeServiceError):
    """Raised when a provider cannot answer (network, timeout, bad payload)."""


class MissingCredentialError(ProviderTransportError):
    """Raised before any request when a provider credential is not configured."""


class BarcodeRateLimitError(ProviderTransportError):
    """Raised when a provider reports rate limiting."""
