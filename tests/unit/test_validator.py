"""
Unit tests for barcode normalization and product-code validation.
"""

import pytest

from scanlens.services.barcode.validator import (
    describe,
    detect_format,
    gs1_checksum_ok,
    is_valid_product_barcode,
    normalize,
)


class TestNormalize:
    """Whitespace and hyphen stripping."""

    @pytest.mark.parametrize("raw,expected", [
        (" 012345678905 ", "012345678905"),
        ("978-0-13-468599-1", "9780134685991"),
        ("3017 6204 2200 3", "3017620422003"),
        ("\t4006381333931\n", "4006381333931"),
        ("hello world", "helloworld"),
        ("", ""),
    ])
    def test_normalize(self, raw, expected):
        """Test whitespace and hyphen removal."""
        assert normalize(raw) == expected

    @pytest.mark.parametrize("raw", ["012345678905", " 97-80 ", "a b-c", ""])
    def test_normalize_is_idempotent(self, raw):
        """Test that normalizing twice changes nothing."""
        once = normalize(raw)
        assert normalize(once) == once

    def test_normalize_none(self):
        assert normalize(None) == ""


class TestIsValidProductBarcode:
    """Accepted shapes: 8, 10, 12, 13, 14 digits and 978/979 + 10 digits."""

    @pytest.mark.parametrize("barcode", [
        "96385074",          # EAN-8
        "0134685997",        # ISBN-10
        "012345678905",      # UPC-A
        "3017620422003",     # EAN-13
        "9780134685991",     # ISBN-13
        "9791032305690",     # ISBN-13, 979 range
        "10012345678902",    # GTIN-14
    ])
    def test_accepts_product_shapes(self, barcode):
        """Test accepted product code shapes."""
        assert is_valid_product_barcode(barcode) is True

    @pytest.mark.parametrize("barcode", [
        "",
        "helloworld",
        "1234567",           # 7 digits
        "123456789",         # 9 digits
        "12345678901",       # 11 digits
        "123456789012345",   # 15 digits
        "01234567890X",
        "013468599X",        # ISBN-10 with X check digit is not accepted
        "\u0660\u0661\u0662\u0663\u0664\u0665\u0666\u0667",  # Arabic-Indic digits
        "\uff10" * 12,  # fullwidth digits
        "12345678\n",
        "https://example.com",
    ])
    def test_rejects_everything_else(self, barcode):
        """Test rejection of other shapes, non-ASCII digits and trailing newlines."""
        assert is_valid_product_barcode(barcode) is False

    def test_hyphenated_isbn(self):
        """Test a hyphenated ISBN-13 after normalization."""
        assert is_valid_product_barcode(normalize("978-0-13-468599-1")) is True

    def test_does_not_normalize_itself(self):
        """Test that validation expects already normalized input."""
        assert is_valid_product_barcode(" 012345678905 ") is False


class TestFormatDetection:
    """Informational format labels and GS1 check digits."""

    @pytest.mark.parametrize("barcode,expected", [
        ("96385074", "EAN-8"),
        ("0134685997", "ISBN-10"),
        ("012345678905", "UPC-A"),
        ("3017620422003", "EAN-13"),
        ("9780134685991", "ISBN-13"),
        ("10012345678902", "GTIN-14"),
        ("hello", None),
    ])
    def test_detect_format(self, barcode, expected):
        """Test informational format labels."""
        assert detect_format(barcode) == expected

    @pytest.mark.parametrize("barcode", [
        "96385074", "012345678905", "3017620422003", "9780134685991", "4006381333931",
    ])
    def test_valid_check_digits(self, barcode):
        """Test GS1 check digit verification on valid codes."""
        assert gs1_checksum_ok(barcode) is True

    @pytest.mark.parametrize("barcode", ["012345678906", "3017620422004", "0134685997", "abc", "\u0660" * 13])
    def test_invalid_check_digits(self, barcode):
        """Test GS1 check digit verification on invalid codes."""
        assert gs1_checksum_ok(barcode) is False

    def test_describe_reports_checksum_warning_without_rejecting(self):
        """Test that a bad check digit is a warning, not a rejection."""
        report = describe("3017620422004")
        assert report["is_valid"] is True
        assert report["format_type"] == "EAN-13"
        assert report["warnings"] == ["Check digit mismatch"]

    def test_describe_invalid(self):
        """Test the validation report for a non barcode."""
        report = describe("hello world")
        assert report["is_valid"] is False
        assert report["format_type"] == "unknown"
        assert report["cleaned_barcode"] == "helloworld"
        assert report["original_length"] == 11
        assert report["cleaned_length"] == 10
