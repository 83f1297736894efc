"""
Unit tests for the fallback synthesizer and the prefix category heuristic.
"""

import pytest

from scanlens.services.barcode import FallbackSynthesizer, ProductSource, guess_category
from scanlens.services.barcode.fallback import CATEGORY_BY_PREFIX, SUGGESTED_ACTIONS


class TestGuessCategory:
    """Every prefix of the table, pinned literally."""

    @pytest.mark.parametrize("barcode,expected", [
        ("30012345", "Food & Beverages"),
        ("4001234567890", "Food & Beverages"),
        ("5001234567890", "Food & Beverages"),
        ("6001234567890", "Food & Beverages"),
        ("7001234567890", "Food & Beverages"),
        ("8001234567890", "Books & Media"),
        ("9001234567890", "Books & Media"),
        ("97812345", "Books"),
        ("9790000000001", "Books"),
        ("012345678905", "Pharmaceuticals"),
        ("013000000000", "Pharmaceuticals"),
        ("030000000000", "Health & Beauty"),
        ("031000000000", "Health & Beauty"),
        ("000000000000", "General Merchandise"),
        ("001000000000", "General Merchandise"),
        ("020000000000", "General Merchandise"),
        ("021000000000", "General Merchandise"),
    ])
    def test_known_prefixes(self, barcode, expected):
        """Test category guesses for every mapped prefix."""
        assert guess_category(barcode) == expected

    @pytest.mark.parametrize("barcode", ["3017620422003", "4006381333931", "99912345", "12345678"])
    def test_unmapped_prefix_defaults_to_general_merchandise(self, barcode):
        """Test the default category for unmapped prefixes."""
        assert guess_category(barcode) == "General Merchandise"

    def test_table_size_is_pinned(self):
        assert len(CATEGORY_BY_PREFIX) == 17


class TestFallbackSynthesizer:
    """Guaranteed placeholder records."""

    def test_synthesized_record(self):
        """Test the synthesized unknown product record."""
        record = FallbackSynthesizer().synthesize("30012345")

        assert record.found is True
        assert record.is_unknown is True
        assert record.source == ProductSource.FALLBACK
        assert record.barcode == "30012345"
        assert record.name == "Unknown Product"
        assert record.brand == "Unknown Brand"
        assert record.category == "Food & Beverages"
        assert record.description == "Product with barcode 30012345"
        assert record.image is None
        assert record.raw_data is None

    def test_suggested_actions_and_contribution_link(self):
        """Test suggested actions and the contribution link."""
        record = FallbackSynthesizer().synthesize("012345678905")

        assert record.additional_info["suggested_actions"] == SUGGESTED_ACTIONS
        assert "OpenFoodFacts" in record.additional_info["note"]
        assert record.url == (
            "https://world.openfoodfacts.org/cgi/product_jqm2.pl"
            "?code=012345678905&action=display"
        )

    def test_records_do_not_share_mutable_state(self):
        """Test that synthesized records do not share lists."""
        synthesizer = FallbackSynthesizer()
        first = synthesizer.synthesize("30012345")
        first.additional_info["suggested_actions"].append("Ask a friend")

        second = synthesizer.synthesize("30012345")
        assert second.additional_info["suggested_actions"] == SUGGESTED_ACTIONS
