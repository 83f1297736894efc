"""
Fallback record synthesis for barcodes no provider knows about.
Never touches the network and never fails.
"""

from typing import Dict

import structlog

from .interfaces import ProductRecord, ProductSource

logger = structlog.get_logger(__name__)


# Heuristic, not a GS1 prefix registry. Kept literal, including the
# overlap between the 9xx "Books & Media" bucket and 978/979 "Books".
CATEGORY_BY_PREFIX: Dict[str, str] = {
    # Food & Beverages
    "300": "Food & Beverages", "400": "Food & Beverages", "500": "Food & Beverages",
    "600": "Food & Beverages", "700": "Food & Beverages",

    # Books & Media
    "800": "Books & Media", "900": "Books & Media",
    "978": "Books", "979": "Books",

    # Health & Beauty
    "012": "Pharmaceuticals", "013": "Pharmaceuticals",
    "030": "Health & Beauty", "031": "Health & Beauty",

    # General categories by country codes
    "000": "General Merchandise", "001": "General Merchandise",
    "020": "General Merchandise", "021": "General Merchandise",
}

DEFAULT_CATEGORY = "General Merchandise"

SUGGESTED_ACTIONS = [
    "Search online manually",
    "Check manufacturer website",
    "Add to OpenFoodFacts database",
]

CONTRIBUTION_NOTE = (
    "Product information not found in database. You can help by adding this "
    "product to OpenFoodFacts or other product databases."
)

CONTRIBUTE_URL = "https://world.openfoodfacts.org/cgi/product_jqm2.pl?code={barcode}&action=display"


def guess_category(barcode: str) -> str:
    """Category guess from the first three digits of the barcode."""
    return CATEGORY_BY_PREFIX.get(barcode[:3], DEFAULT_CATEGORY)


class FallbackSynthesizer:
    """Builds the placeholder record returned when every provider comes up empty."""

    @property
    def source(self) -> ProductSource:
        return ProductSource.FALLBACK

    def synthesize(self, barcode: str) -> ProductRecord:
        category = guess_category(barcode)
        logger.info("Synthesizing fallback product", barcode=barcode, category=category)

        return ProductRecord(
            barcode=barcode,
            source=self.source,
            found=True,
            name="Unknown Product",
            brand="Unknown Brand",
            category=category,
            image=None,
            description=f"Product with barcode {barcode}",
            additional_info={
                "note": CONTRIBUTION_NOTE,
                "suggested_actions": list(SUGGESTED_ACTIONS),
            },
            url=CONTRIBUTE_URL.format(barcode=barcode),
            is_unknown=True,
            raw_data=None,
        )
