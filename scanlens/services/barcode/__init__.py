"""
Product lookup service for ScanLens.
Resolves scanned barcodes through several product databases.

Architecture : Factory Pattern + Strategy Pattern + Chain of Responsibility
Usage : one resolver per application, built from settings

Example:
    from scanlens.services.barcode import ProductResolver

    resolver = ProductResolver.from_settings()
    record = await resolver.lookup_product("3017620422003")
    results = await resolver.search_products("nutella")
    await resolver.close()
"""

from .interfaces import (
    IProductProvider,
    ProductRecord,
    ProductSummary,
    ProductSource,
    NutritionFacts,
    ProviderFailure,
    BarcodeServiceError,
    BarcodeValidationError,
    ProviderTransportError,
    MissingCredentialError,
    BarcodeRateLimitError
)

from .validator import normalize, is_valid_product_barcode, detect_format
from .barcodelookup import BarcodeLookupService
from .openfoodfacts import OpenFoodFactsService
from .eansearch import EANSearchService
from .barcodespider import BarcodeSpiderService
from .upcdatabase import UPCDatabaseService
from .fallback import FallbackSynthesizer, guess_category
from .resolver import ProviderFactory, ProductResolver

# Public exports
__all__ = [
    # Interfaces and models
    "IProductProvider",
    "ProductRecord",
    "ProductSummary",
    "ProductSource",
    "NutritionFacts",
    "ProviderFailure",

    # Exceptions
    "BarcodeServiceError",
    "BarcodeValidationError",
    "ProviderTransportError",
    "MissingCredentialError",
    "BarcodeRateLimitError",

    # Validation
    "normalize",
    "is_valid_product_barcode",
    "detect_format",

    # Providers
    "BarcodeLookupService",
    "OpenFoodFactsService",
    "EANSearchService",
    "BarcodeSpiderService",
    "UPCDatabaseService",
    "FallbackSynthesizer",
    "guess_category",

    # Factory and resolver
    "ProviderFactory",
    "ProductResolver"
]
