"""
Unit tests for scan classification and scan-driven lookups.
"""

import pytest

from scanlens.services.barcode import BarcodeValidationError, ProductResolver, ProductSource
from scanlens.services.scan import (
    ContentType,
    ScannedCode,
    Symbology,
    classify,
    display_name,
    is_email,
    is_phone,
    is_product_code,
    is_url,
    lookup_scan,
)
from tests.helpers import make_provider, make_record


class TestSymbology:
    """Decoder codes and display names."""

    def test_codes_are_parsed_case_insensitively(self):
        """Test symbology parsing ignores case."""
        assert ScannedCode("123", "EAN13").symbology is Symbology.EAN13

    def test_unknown_codes_are_kept(self):
        assert ScannedCode("123", "maxicode").symbology == "maxicode"

    @pytest.mark.parametrize("symbology,expected", [
        (Symbology.QR, "QR Code"),
        ("ean13", "EAN-13"),
        ("UPC_A", "UPC-A"),
        (Symbology.INTERLEAVED_2_OF_5, "Interleaved 2 of 5"),
        (Symbology.OTHER, "other"),
        ("maxicode", "maxicode"),
        (None, "Unknown"),
        ("", "Unknown"),
    ])
    def test_display_name(self, symbology, expected):
        """Test human readable symbology names."""
        assert display_name(symbology) == expected


class TestContentChecks:
    """Individual payload shape checks."""

    @pytest.mark.parametrize("payload", [
        "https://example.com", "http://example.com/path?q=1", "example.com", "www.example.org/x",
        "http://localhost:8000",
    ])
    def test_urls(self, payload):
        """Test payloads recognized as URLs."""
        assert is_url(payload) is True

    @pytest.mark.parametrize("payload", [
        "", "hello world", "hello", "user@example.com", "ftp://example.com", "012345678905",
    ])
    def test_not_urls(self, payload):
        """Test payloads not recognized as URLs."""
        assert is_url(payload) is False

    @pytest.mark.parametrize("payload,expected", [
        ("user@example.com", True),
        ("first.last@sub.example.co.uk", True),
        ("user@example", False),
        ("user example@x.com", False),
        ("user@example.com\n", False),
        ("", False),
    ])
    def test_emails(self, payload, expected):
        """Test email recognition."""
        assert is_email(payload) is expected

    @pytest.mark.parametrize("payload,expected", [
        ("+1 (415) 555-2671", True),
        ("4155552671", True),
        ("+33612345678", True),
        ("0612345678", False),
        ("123", False),
        ("+1234567890123456", False),
        ("\uff14\uff11\uff15" + "5552671", False),
    ])
    def test_phones(self, payload, expected):
        """Test phone number recognition."""
        assert is_phone(payload) is expected


class TestIsProductCode:
    """Shape or symbology qualifies a scan for lookup."""

    @pytest.mark.parametrize("payload", ["012345678905", " 978-0-13-468599-1 ", "96385074", "0134685997"])
    def test_product_shapes_qualify_regardless_of_symbology(self, payload):
        """Test that barcode shaped payloads qualify under any symbology."""
        assert is_product_code(payload, Symbology.QR) is True

    @pytest.mark.parametrize("symbology", ["ean13", "ean8", "upc_a", "upc_e", "code128", "code39"])
    def test_product_symbologies_qualify(self, symbology):
        """Test that product symbologies qualify any payload."""
        assert is_product_code("ABC-123", symbology) is True

    @pytest.mark.parametrize("symbology", [Symbology.QR, Symbology.CODE93, "maxicode", None])
    def test_other_symbologies_do_not(self, symbology):
        """Test that other symbologies need a barcode shaped payload."""
        assert is_product_code("ABC-123", symbology) is False

    def test_empty_payload(self):
        assert is_product_code("", Symbology.EAN13) is False


class TestClassify:
    """First matching content type wins."""

    @pytest.mark.parametrize("payload,symbology,expected", [
        ("https://example.com", Symbology.QR, ContentType.URL),
        ("user@example.com", Symbology.QR, ContentType.EMAIL),
        ("3017620422003", Symbology.EAN13, ContentType.PRODUCT_CODE),
        ("3017620422003", Symbology.QR, ContentType.PRODUCT_CODE),
        ("+1 (415) 555-2671", Symbology.QR, ContentType.PHONE),
        ("LOT-42-A", Symbology.CODE128, ContentType.PRODUCT_CODE),
        ("0123", Symbology.QR, ContentType.NUMERIC),
        ("00123456789", None, ContentType.NUMERIC),
        ("name,qty\nMilk,2", Symbology.QR, ContentType.STRUCTURED),
        ("red, green, blue", Symbology.QR, ContentType.STRUCTURED),
        ("\u0661" * 13, Symbology.QR, ContentType.TEXT),
        ("just some text", Symbology.QR, ContentType.TEXT),
    ])
    def test_classify(self, payload, symbology, expected):
        """Test content type priority order."""
        assert classify(ScannedCode(payload, symbology)) == expected


class TestLookupScan:
    """Only product codes reach the resolver."""

    @pytest.mark.asyncio
    async def test_product_scan_is_resolved(self):
        """Test that a product scan reaches the resolver."""
        hit = make_record(ProductSource.OPENFOODFACTS, barcode="3017620422003")
        provider = make_provider(ProductSource.OPENFOODFACTS, result=hit)

        record = await lookup_scan(ProductResolver([provider]), ScannedCode("3017620422003", "ean13"))

        assert record is hit
        provider.lookup.assert_awaited_once_with("3017620422003")

    @pytest.mark.asyncio
    async def test_non_product_scan_is_skipped(self):
        """Test that a non product scan is not looked up."""
        provider = make_provider(ProductSource.OPENFOODFACTS)

        record = await lookup_scan(ProductResolver([provider]), ScannedCode("https://example.com", "qr"))

        assert record is None
        provider.lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_product_symbology_with_bad_payload_raises(self):
        """Test that a product symbology with an unusable payload raises."""
        provider = make_provider(ProductSource.OPENFOODFACTS)

        with pytest.raises(BarcodeValidationError):
            await lookup_scan(ProductResolver([provider]), ScannedCode("LOT-42-A", "code128"))

        provider.lookup.assert_not_called()
