"""
Test configuration and fixtures for the product lookup services.
No fixture touches the network.
"""

import pytest

from scanlens.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        barcode_lookup_api_key="bl-key",
        barcode_spider_api_key="spider-token",
        upc_database_api_key="upc-key",
        provider_timeout=2.0,
    )


@pytest.fixture
def off_product_payload() -> dict:
    """OpenFoodFacts v0 product response for a breakfast cereal."""
    return {
        "status": 1,
        "status_verbose": "product found",
        "code": "012345678905",
        "product": {
            "code": "012345678905",
            "product_name": "Test Cereal",
            "brands": "Acme Foods",
            "categories": "Breakfasts, Cereals",
            "image_url": "https://images.openfoodfacts.org/012345678905.jpg",
            "ingredients_text": "Whole grain oats, sugar, salt",
            "nutrition_grade_fr": "b",
            "nova_group": 3,
            "quantity": "500 g",
            "nutriments": {
                "energy-kcal_100g": 380,
                "energy_100g": 1590,
                "fat_100g": 6.5,
                "saturated-fat_100g": 1.2,
                "carbohydrates_100g": 67,
                "sugars_100g": 12,
                "proteins_100g": 11,
                "fiber_100g": 9.8,
                "salt_100g": 0.7,
            },
        },
    }
