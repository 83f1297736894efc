"""
Barcode normalization and product-code validation.
Pure functions, no I/O.
"""

import re
from typing import Dict, Optional

_STRIP_RE = re.compile(r"[\s\-]")

PRODUCT_BARCODE_PATTERNS = (
    re.compile(r"[0-9]{8}"),         # EAN-8
    re.compile(r"[0-9]{12}"),        # UPC-A
    re.compile(r"[0-9]{13}"),        # EAN-13
    re.compile(r"[0-9]{14}"),        # GTIN-14
    re.compile(r"[0-9]{10}"),        # ISBN-10
    re.compile(r"97[89][0-9]{10}"),  # ISBN-13
)

_DIGITS_RE = re.compile(r"[0-9]+")

_FORMATS_BY_LENGTH = {
    8: "EAN-8",
    10: "ISBN-10",
    12: "UPC-A",
    13: "EAN-13",
    14: "GTIN-14",
}


def normalize(raw: str) -> str:
    """Strip whitespace and hyphens from a scanned string."""
    return _STRIP_RE.sub("", raw or "").strip()


def is_valid_product_barcode(normalized: str) -> bool:
    """True when the string matches one of the accepted product code shapes (ASCII digits only)."""
    if not normalized:
        return False
    return any(pattern.fullmatch(normalized) for pattern in PRODUCT_BARCODE_PATTERNS)


def detect_format(normalized: str) -> Optional[str]:
    """Best guess at the code family, None for anything that is not a product code."""
    if not is_valid_product_barcode(normalized):
        return None
    if len(normalized) == 13 and normalized[:3] in ("978", "979"):
        return "ISBN-13"
    return _FORMATS_BY_LENGTH.get(len(normalized))


def gs1_checksum_ok(normalized: str) -> bool:
    """
    Verify the GS1 mod-10 check digit (EAN-8, UPC-A, EAN-13, GTIN-14).

    Weights alternate 3/1 starting from the digit nearest the check digit.
    Not used to reject lookups; providers are queried regardless.
    """
    if len(normalized) not in (8, 12, 13, 14) or not _DIGITS_RE.fullmatch(normalized):
        return False

    body, check = normalized[:-1], int(normalized[-1])
    total = 0
    for i, digit in enumerate(reversed(body)):
        weight = 3 if i % 2 == 0 else 1
        total += int(digit) * weight

    return (10 - (total % 10)) % 10 == check


def describe(raw: str) -> Dict[str, object]:
    """Validation report for a raw scanned string."""
    cleaned = normalize(raw)
    is_valid = is_valid_product_barcode(cleaned)
    warnings = []

    if not is_valid:
        warnings.append(f"Unsupported barcode shape: {len(cleaned)} characters")
    elif len(cleaned) in (8, 12, 13, 14) and not gs1_checksum_ok(cleaned):
        warnings.append("Check digit mismatch")

    return {
        "is_valid": is_valid,
        "format_type": detect_format(cleaned) or "unknown",
        "cleaned_barcode": cleaned,
        "original_length": len(raw or ""),
        "cleaned_length": len(cleaned),
        "warnings": warnings,
    }
