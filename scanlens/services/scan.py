"""
Classification of decoded scans before any product lookup.

The camera layer hands over a symbology code and the decoded payload;
this module decides what the payload looks like and whether it is worth
sending to the product resolver.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from urllib.parse import urlsplit

import structlog

from scanlens.services.barcode.interfaces import ProductRecord
from scanlens.services.barcode.resolver import ProductResolver
from scanlens.services.barcode.validator import is_valid_product_barcode, normalize

logger = structlog.get_logger(__name__)


class Symbology(str, Enum):
    """Decoder symbology codes."""
    QR = "qr"
    PDF417 = "pdf417"
    AZTEC = "aztec"
    EAN13 = "ean13"
    EAN8 = "ean8"
    UPC_E = "upc_e"
    UPC_A = "upc_a"
    DATAMATRIX = "datamatrix"
    CODE128 = "code128"
    CODE39 = "code39"
    CODE93 = "code93"
    CODABAR = "codabar"
    ITF14 = "itf14"
    INTERLEAVED_2_OF_5 = "interleaved2of5"
    MSI = "msi"
    RSS14 = "rss14"
    RSS_EXPANDED = "rssexpanded"
    OTHER = "other"


DISPLAY_NAMES = {
    Symbology.QR: "QR Code",
    Symbology.PDF417: "PDF417",
    Symbology.AZTEC: "Aztec",
    Symbology.EAN13: "EAN-13",
    Symbology.EAN8: "EAN-8",
    Symbology.UPC_E: "UPC-E",
    Symbology.UPC_A: "UPC-A",
    Symbology.DATAMATRIX: "Data Matrix",
    Symbology.CODE128: "Code 128",
    Symbology.CODE39: "Code 39",
    Symbology.CODE93: "Code 93",
    Symbology.CODABAR: "Codabar",
    Symbology.ITF14: "ITF-14",
    Symbology.INTERLEAVED_2_OF_5: "Interleaved 2 of 5",
    Symbology.MSI: "MSI",
    Symbology.RSS14: "RSS-14",
    Symbology.RSS_EXPANDED: "RSS Expanded",
}

PRODUCT_SYMBOLOGIES = frozenset({
    Symbology.EAN13, Symbology.EAN8, Symbology.UPC_A,
    Symbology.UPC_E, Symbology.CODE128, Symbology.CODE39,
})


class ContentType(str, Enum):
    URL = "URL"
    EMAIL = "Email"
    PHONE = "Phone"
    PRODUCT_CODE = "Product Code"
    NUMERIC = "Numeric"
    STRUCTURED = "Structured"
    TEXT = "Text"


_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_PHONE_RE = re.compile(r"\+?[1-9][0-9]{3,14}")
_NUMERIC_RE = re.compile(r"[0-9]+")
_PHONE_STRIP_RE = re.compile(r"[\s\-()]")


def parse_symbology(code: Optional[str]) -> Union[Symbology, str, None]:
    """Known codes become Symbology members; anything else is returned as given."""
    if not code:
        return None
    try:
        return Symbology(code.lower())
    except ValueError:
        return code


@dataclass
class ScannedCode:
    """Decoded scan as delivered by the camera layer."""
    raw_payload: str
    symbology: Union[Symbology, str, None] = None

    def __post_init__(self):
        if isinstance(self.symbology, str) and not isinstance(self.symbology, Symbology):
            self.symbology = parse_symbology(self.symbology)


def display_name(symbology: Union[Symbology, str, None]) -> str:
    """Human label for a symbology; unknown codes are shown as given."""
    if isinstance(symbology, Symbology):
        return DISPLAY_NAMES.get(symbology, symbology.value)
    if not symbology:
        return "Unknown"
    parsed = parse_symbology(symbology)
    if isinstance(parsed, Symbology):
        return display_name(parsed)
    return symbology


def is_url(payload: str) -> bool:
    if not payload or any(ch.isspace() for ch in payload.strip()):
        return False
    candidate = payload.strip()
    if not candidate.lower().startswith(("http://", "https://")):
        candidate = "https://" + candidate
    try:
        parts = urlsplit(candidate)
        host = parts.hostname
    except ValueError:
        return False
    if parts.scheme not in ("http", "https") or not host or "@" in parts.netloc:
        return False
    return host == "localhost" or ("." in host and not host.startswith(".") and not host.endswith("."))


def is_email(payload: str) -> bool:
    return bool(payload) and bool(_EMAIL_RE.fullmatch(payload))


def is_phone(payload: str) -> bool:
    if not payload:
        return False
    return bool(_PHONE_RE.fullmatch(_PHONE_STRIP_RE.sub("", payload)))


def is_product_code(payload: str, symbology: Union[Symbology, str, None] = None) -> bool:
    """
    Whether a scan is worth a product lookup.

    True when the payload has a product barcode shape, or when the
    symbology is one that normally carries product codes.
    """
    if not payload:
        return False
    if is_valid_product_barcode(normalize(payload)):
        return True
    return parse_symbology(symbology) in PRODUCT_SYMBOLOGIES if isinstance(symbology, str) else False


def classify(scan: ScannedCode) -> ContentType:
    """
    Content type of a scan, first match wins.

    Order: URL, email, product code, phone, numeric, structured
    (multi-line or comma separated), text.
    """
    payload = scan.raw_payload or ""
    if is_url(payload):
        return ContentType.URL
    if is_email(payload):
        return ContentType.EMAIL
    if is_product_code(payload, scan.symbology):
        return ContentType.PRODUCT_CODE
    if is_phone(payload):
        return ContentType.PHONE
    if _NUMERIC_RE.fullmatch(payload):
        return ContentType.NUMERIC
    if "\n" in payload or "," in payload:
        return ContentType.STRUCTURED
    return ContentType.TEXT


async def lookup_scan(resolver: ProductResolver, scan: ScannedCode) -> Optional[ProductRecord]:
    """
    Resolve a scan when it looks like a product code, None otherwise.

    Raises:
        BarcodeValidationError: when the symbology suggests a product but the
            payload is not a usable barcode
    """
    if not is_product_code(scan.raw_payload, scan.symbology):
        logger.info("Scan is not a product code", symbology=display_name(scan.symbology))
        return None
    return await resolver.lookup_product(scan.raw_payload)
