"""
Provider factory and product resolver.

Architecture Pattern : Factory + Chain of Responsibility
The resolver is an explicit value created once by the caller; there is no
module level instance.
"""

import asyncio
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

import structlog

from .barcodelookup import BarcodeLookupService
from .barcodespider import BarcodeSpiderService
from .eansearch import EANSearchService
from .fallback import FallbackSynthesizer
from .interfaces import (
    IProductProvider, ProductRecord, ProductSource, ProductSummary,
    ProviderFailure, BarcodeValidationError
)
from .openfoodfacts import OpenFoodFactsService
from .upcdatabase import UPCDatabaseService
from .validator import is_valid_product_barcode, normalize

if TYPE_CHECKING:
    from scanlens.core.config import Settings

logger = structlog.get_logger(__name__)

FailureHook = Callable[[ProviderFailure], None]


class ProviderFactory:
    """
    Creates provider adapters from settings.

    Pattern : Factory Method + Strategy
    """

    @staticmethod
    def create_provider(source: ProductSource, settings: "Settings") -> IProductProvider:
        """
        Args:
            source: Which provider to build
            settings: Credentials and transport tuning

        Raises:
            ValueError: for the fallback source or an unknown one
        """
        common = {"timeout": settings.provider_timeout, "user_agent": settings.user_agent}

        if source == ProductSource.BARCODE_LOOKUP:
            return BarcodeLookupService(credential=settings.barcode_lookup_api_key, **common)

        elif source == ProductSource.OPENFOODFACTS:
            return OpenFoodFactsService(max_page_size=settings.search_page_size_limit, **common)

        elif source == ProductSource.EAN_SEARCH:
            return EANSearchService(token=settings.ean_search_token, **common)

        elif source == ProductSource.BARCODE_SPIDER:
            return BarcodeSpiderService(credential=settings.barcode_spider_api_key, **common)

        elif source == ProductSource.UPC_DATABASE:
            return UPCDatabaseService(credential=settings.upc_database_api_key, **common)

        else:
            raise ValueError(f"Unsupported product provider: {source}")

    @classmethod
    def create_chain(cls, settings: "Settings") -> List[IProductProvider]:
        """Providers in the configured priority order."""
        return [cls.create_provider(source, settings) for source in settings.provider_order]


class ProductResolver:
    """
    Resolves a scanned string to a ProductRecord.

    Responsibilities:
    - Gate input through the barcode validator
    - Try providers sequentially in priority order, stopping at the first hit
    - Isolate provider failures (log, report, move on)
    - Always return a record for a valid barcode, synthesizing one if needed
    """

    def __init__(self,
                 providers: Sequence[IProductProvider],
                 fallback: Optional[FallbackSynthesizer] = None,
                 timeout: float = 8.0,
                 failure_hook: Optional[FailureHook] = None):
        """
        Args:
            providers: Adapters in priority order
            fallback: Synthesizer used once every provider came up empty
            timeout: Per-provider budget in seconds
            failure_hook: Receives a ProviderFailure for every failed step
        """
        self.providers = list(providers)
        self.fallback = fallback or FallbackSynthesizer()
        self.timeout = timeout
        self.failure_hook = failure_hook

        logger.info(
            "Product resolver initialized",
            providers=[p.provider_name for p in self.providers],
            timeout=timeout
        )

    @classmethod
    def from_settings(cls,
                      settings: Optional["Settings"] = None,
                      failure_hook: Optional[FailureHook] = None) -> "ProductResolver":
        """Build the default provider chain from settings."""
        if settings is None:
            from scanlens.core.config import get_settings
            settings = get_settings()

        return cls(
            ProviderFactory.create_chain(settings),
            timeout=settings.provider_timeout,
            failure_hook=failure_hook
        )

    async def lookup_product(self, raw: str) -> ProductRecord:
        """
        Look a scanned string up across the provider chain.

        Returns:
            The first provider hit, or a fallback record with is_unknown=True

        Raises:
            BarcodeValidationError: when the string is not a product barcode;
                no provider is contacted in that case
        """
        barcode = normalize(raw)
        if not is_valid_product_barcode(barcode):
            logger.info("Rejected non product barcode", raw=raw, normalized=barcode)
            raise BarcodeValidationError(
                "Invalid product barcode format",
                barcode=barcode
            )

        for provider in self.providers:
            record = await self._try_provider(provider, barcode)
            if record is not None and record.found:
                logger.info(
                    "Product found",
                    barcode=barcode,
                    provider=provider.provider_name,
                    name=record.name
                )
                return record

        logger.info("Product not found in any provider", barcode=barcode)
        return self.fallback.synthesize(barcode)

    async def _try_provider(self, provider: IProductProvider, barcode: str) -> Optional[ProductRecord]:
        try:
            return await asyncio.wait_for(provider.lookup(barcode), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            self._report_failure(provider, barcode, e, "Provider timed out")
        except Exception as e:
            self._report_failure(provider, barcode, e, "Provider failed")
        return None

    def _report_failure(self, provider: IProductProvider, barcode: str, error: Exception, event: str):
        failure = ProviderFailure(
            provider=provider.provider_name,
            barcode=barcode,
            error=str(error) or type(error).__name__,
            error_type=type(error).__name__,
        )
        logger.warning(
            event,
            barcode=barcode,
            provider=failure.provider,
            error=failure.error,
            error_type=failure.error_type
        )
        if self.failure_hook is not None:
            try:
                self.failure_hook(failure)
            except Exception as hook_error:
                logger.error("Failure hook raised", error=str(hook_error))

    async def search_products(self, query: str, limit: int = 10) -> List[ProductSummary]:
        """Text search through the first provider that supports it."""
        for provider in self.providers:
            if not provider.supports_search:
                continue
            try:
                return await asyncio.wait_for(
                    provider.search_products(query, limit),
                    timeout=self.timeout
                )
            except Exception as e:
                logger.warning(
                    "Product search failed",
                    query=query,
                    provider=provider.provider_name,
                    error=str(e)
                )
                return []
        return []

    def api_status(self) -> Dict[str, bool]:
        """Whether each provider in the chain is usable with the current configuration."""
        return {p.provider_name: p.is_configured for p in self.providers}

    async def close(self):
        """Close every provider transport."""
        for provider in self.providers:
            try:
                await provider.close()
            except Exception as e:
                logger.warning("Failed to close provider", provider=provider.provider_name, error=str(e))

        logger.info("All product providers closed")
