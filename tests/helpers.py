"""
Test doubles shared across the unit tests.
"""

from typing import Optional
from unittest.mock import AsyncMock, Mock

from scanlens.services.barcode import (
    IProductProvider,
    ProductRecord,
    ProductSource,
)


def make_provider(source: ProductSource,
                  result: Optional[ProductRecord] = None,
                  error: Optional[BaseException] = None,
                  configured: bool = True) -> Mock:
    """Mock adapter whose lookup returns `result` or raises `error`."""
    provider = Mock(spec=IProductProvider)
    provider.source = source
    provider.provider_name = source.value
    provider.is_configured = configured
    provider.supports_search = False
    provider.lookup = AsyncMock(return_value=result, side_effect=error)
    provider.search_products = AsyncMock(return_value=[])
    provider.close = AsyncMock()
    return provider


def make_record(source: ProductSource, barcode: str = "012345678905", **overrides) -> ProductRecord:
    data = {
        "barcode": barcode,
        "source": source,
        "name": "Test Product",
        "brand": "Test Brand",
        "category": "Test Category",
    }
    data.update(overrides)
    return ProductRecord(**data)
